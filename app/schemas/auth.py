from pydantic import BaseModel, EmailStr, Field


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RefreshRequest(BaseModel):
    """Request body for token refresh in Bearer mode."""
    refresh_token: str = Field(
        ...,
        min_length=1,
        max_length=2048,
        description="Valid refresh token obtained from login or previous refresh",
    )


class UserResponse(BaseModel):
    email: str
    name: str | None = None


class LocalLoginResponse(BaseModel):
    user: UserResponse
    token: str = "authenticated"
