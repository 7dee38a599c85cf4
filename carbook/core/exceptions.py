"""
Authentication error taxonomy.

Auth failures are HTTP exceptions that carry their own status code and a
generic message. Messages never say which credential check failed.
"""
from fastapi import HTTPException, status


class AuthError(HTTPException):
    """Base class for authentication failures surfaced to API callers."""

    status_code: int = status.HTTP_401_UNAUTHORIZED
    message: str = "Unauthorized"

    def __init__(self, message: str | None = None) -> None:
        headers = None
        if self.status_code == status.HTTP_401_UNAUTHORIZED:
            headers = {"WWW-Authenticate": "Bearer"}
        super().__init__(
            status_code=type(self).status_code,
            detail=message or type(self).message,
            headers=headers,
        )


class InvalidCredentials(AuthError):
    """Unknown email or wrong password at login."""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Unauthorized"


class TokenMissing(AuthError):
    """No credential was presented (no bearer header, no refresh cookie)."""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Unauthorized: No token provided"


class TokenInvalid(AuthError):
    """Signature, claim or expiry check failed. Tampering and expiry look the same."""

    status_code = status.HTTP_403_FORBIDDEN
    message = "Forbidden: Invalid token"


class UserNotFound(AuthError):
    """The identity referenced by a valid token no longer exists."""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Unauthorized: User not found"


class ConfigError(RuntimeError):
    """Server misconfiguration, e.g. a missing signing secret. Always a 500."""
