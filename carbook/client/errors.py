"""Errors raised by the client session layer."""


class ClientError(Exception):
    """Base class for client-side session errors."""


class LoginFailed(ClientError):
    """Credentials were rejected or the login call could not complete."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class SessionExpired(ClientError):
    """
    The refresh call failed, so the session cannot be recovered silently.
    Callers should send the user back to the login screen.
    """

    def __init__(self, reason: str = "Session expired") -> None:
        super().__init__(reason)
        self.reason = reason


class ProfileUnavailable(ClientError):
    """The /users/me request did not return a profile."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"Profile request failed with status {status_code}")
        self.status_code = status_code
