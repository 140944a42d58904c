from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, Field


class TokenData(BaseModel):
    """
    Token payload returned by the identity backend under "data".
    `expires` is the access token lifetime in milliseconds.
    """
    access_token: str = Field(..., min_length=1)
    refresh_token: str = Field(..., min_length=1)
    expires: int = Field(..., ge=0)


@dataclass(frozen=True)
class TokenPair:
    """
    Stored session tokens. `expiry_timestamp` is an absolute instant
    in epoch milliseconds.
    """
    access_token: str
    refresh_token: str
    expiry_timestamp: int

    @classmethod
    def from_token_data(cls, data: TokenData, now_ms: int) -> "TokenPair":
        return cls(
            access_token=data.access_token,
            refresh_token=data.refresh_token,
            expiry_timestamp=now_ms + data.expires,
        )

    def is_fresh(self, now_ms: int, buffer_ms: int) -> bool:
        return self.expiry_timestamp > now_ms + buffer_ms


@dataclass(frozen=True)
class LoginSuccess:
    tokens: TokenData
    body: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class LoginFailure:
    message: str
    status_code: int
    body: Any = None


LoginResult = LoginSuccess | LoginFailure
