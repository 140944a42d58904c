from typing import Any


class AuthError(Exception):
    """
    Base error for authentication and backend failures.
    Carries the HTTP status the API layer should answer with.
    """

    status_code: int = 401
    default_message: str = "Authentication failed"

    def __init__(
        self,
        message: str | None = None,
        *,
        status_code: int | None = None,
        details: Any = None,
    ):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict:
        content = {"error": self.message}
        if self.details is not None:
            content["details"] = self.details
        return content


class InvalidCredentials(AuthError):
    default_message = "Invalid credentials"


class DomainNotAllowed(InvalidCredentials):
    status_code = 403
    default_message = "Email domain not allowed"


class MissingToken(AuthError):
    default_message = "Refresh token not found. User may need to log in again."


class RefreshRejected(AuthError):
    default_message = "Refresh token is invalid or expired"


class TransientFailure(AuthError):
    status_code = 500
    default_message = "Identity service temporarily unavailable"


class Unauthorized(AuthError):
    default_message = "Unauthorized: No access token found"


class BackendError(AuthError):
    status_code = 502
    default_message = "Request to CMS backend failed"
