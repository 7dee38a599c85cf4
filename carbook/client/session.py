"""
Client session manager.

Gives the rest of a client application one call, ``authorized_request``, that
works against protected endpoints while hiding the token lifecycle:

* the access token lives in ``SessionState`` (authoritative) and in a durable
  ``TokenStorage`` (read only on a cold start);
* the refresh token is never read by this code: it rides in the HTTP client's
  cookie jar, set by the login response and dropped on logout;
* on 401/403 a request refreshes once and retries once.

Concurrent requests do not share a refresh: each one that sees 401/403 makes
its own refresh call. Cache updates are last-writer-wins.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

import httpx

from carbook.client.errors import LoginFailed, ProfileUnavailable, SessionExpired
from carbook.client.storage import MemoryTokenStorage, TokenStorage
from carbook.schemas.token import AccessTokenResponse
from carbook.schemas.user import UserResponse

logger = logging.getLogger(__name__)

ACCESS_TOKEN_KEY = "accessToken"
REFRESH_COOKIE_NAME = "jwt"
REFRESH_STATUSES = frozenset({401, 403})
DEFAULT_TIMEOUT = httpx.Timeout(10.0)


class SessionStatus(str, Enum):
    LOADING = "loading"
    READY = "ready"
    UNAUTHENTICATED = "unauthenticated"


class RequestState(str, Enum):
    PENDING = "pending"
    UNAUTHORIZED = "unauthorized"
    REFRESHING = "refreshing"
    RETRIED = "retried"
    DONE = "done"
    SESSION_EXPIRED = "session_expired"


@dataclass
class SessionState:
    """In-process session data owned by one SessionManager."""

    access_token: Optional[str] = None
    profile: Optional[UserResponse] = None
    status: SessionStatus = SessionStatus.LOADING

    def clear(self) -> None:
        self.access_token = None
        self.profile = None
        self.status = SessionStatus.UNAUTHENTICATED


@dataclass
class AuthorizedRequest:
    """
    One outgoing protected request and its retry state machine:

        PENDING -> DONE
        PENDING -> UNAUTHORIZED -> REFRESHING -> RETRIED -> DONE
        PENDING -> UNAUTHORIZED -> REFRESHING -> SESSION_EXPIRED

    ``run`` may be called only once; the history records every state entered.
    """

    session: "SessionManager"
    method: str
    path: str
    options: dict[str, Any] = field(default_factory=dict)
    state: RequestState = RequestState.PENDING
    history: list[RequestState] = field(default_factory=lambda: [RequestState.PENDING])
    sends: int = 0
    refreshes: int = 0

    def _enter(self, state: RequestState) -> None:
        self.state = state
        self.history.append(state)

    async def _send(self, token: Optional[str]) -> httpx.Response:
        options = dict(self.options)
        headers = dict(options.pop("headers", None) or {})
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self.sends += 1
        return await self.session.client.request(
            self.method, self.path, headers=headers, **options
        )

    async def run(self) -> httpx.Response:
        if self.state is not RequestState.PENDING or self.sends:
            raise RuntimeError("AuthorizedRequest.run() can only be called once")

        response = await self._send(await self.session.current_access_token())
        if response.status_code not in REFRESH_STATUSES:
            self._enter(RequestState.DONE)
            return response

        self._enter(RequestState.UNAUTHORIZED)
        logger.info(
            "%s %s returned %s; refreshing access token",
            self.method,
            self.path,
            response.status_code,
        )
        await response.aclose()

        self._enter(RequestState.REFRESHING)
        self.refreshes += 1
        try:
            token = await self.session.refresh()
        except SessionExpired:
            self._enter(RequestState.SESSION_EXPIRED)
            raise

        self._enter(RequestState.RETRIED)
        response = await self._send(token)
        self._enter(RequestState.DONE)
        return response


class SessionManager:
    """Login/logout/refresh orchestration plus the authorized request wrapper."""

    def __init__(
        self,
        base_url: str,
        storage: Optional[TokenStorage] = None,
        *,
        timeout: httpx.Timeout = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.client = httpx.AsyncClient(
            base_url=base_url, timeout=timeout, transport=transport
        )
        self.storage = storage or MemoryTokenStorage()
        self.state = SessionState()

    async def __aenter__(self) -> "SessionManager":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    # ------------------------------------------------------------------
    # Token cache
    # ------------------------------------------------------------------

    async def current_access_token(self) -> Optional[str]:
        """Return the in-process token, falling back to storage when it is empty."""
        if self.state.access_token is None:
            self.state.access_token = await self.storage.get_item(ACCESS_TOKEN_KEY)
            if self.state.access_token:
                logger.debug("Access token restored from storage")
        return self.state.access_token

    async def _store_access_token(self, token: str) -> None:
        self.state.access_token = token
        await self.storage.set_item(ACCESS_TOKEN_KEY, token)

    async def _drop_access_token(self) -> None:
        self.state.clear()
        await self.storage.remove_item(ACCESS_TOKEN_KEY)

    # ------------------------------------------------------------------
    # Session operations
    # ------------------------------------------------------------------

    async def login(self, email: str, password: str) -> UserResponse:
        """Authenticate, cache the access token, then load and cache the profile."""
        try:
            response = await self.client.post(
                "/auth", json={"email": email, "password": password}
            )
        except httpx.HTTPError as exc:
            logger.warning("Login request failed: %s", exc)
            raise LoginFailed("Login failed: server unreachable") from exc

        if not response.is_success:
            raise LoginFailed(_error_message(response, "Login failed"))
        try:
            payload = AccessTokenResponse.model_validate(response.json())
        except ValueError as exc:
            raise LoginFailed("Login failed: malformed response") from exc

        await self._store_access_token(payload.access_token)
        try:
            profile = await self.fetch_profile()
        except (SessionExpired, ProfileUnavailable, httpx.HTTPError, ValueError) as exc:
            logger.warning("Profile fetch after login failed: %s", exc)
            await self._drop_access_token()
            raise LoginFailed("Login failed: profile unavailable") from exc
        self.state.status = SessionStatus.READY
        logger.info("Logged in as %s", email)
        return profile

    async def logout(self) -> None:
        """
        Best-effort server logout. The access token and the refresh cookie in
        this client's jar are always dropped, so nothing can refresh afterwards.
        """
        try:
            response = await self.client.post("/auth/logout")
            await response.aclose()
        except httpx.HTTPError as exc:
            logger.warning("Logout request failed, clearing local session anyway: %s", exc)
        self.client.cookies.delete(REFRESH_COOKIE_NAME)
        await self._drop_access_token()
        logger.info("Logged out")

    async def refresh(self) -> str:
        """
        Exchange the refresh cookie for a new access token.
        Any failure, including transport errors, is SessionExpired.
        """
        try:
            response = await self.client.get("/auth/refresh")
        except httpx.HTTPError as exc:
            logger.warning("Refresh request failed: %s", exc)
            raise SessionExpired() from exc

        if response.status_code != 200:
            logger.info("Refresh rejected with status %s", response.status_code)
            raise SessionExpired()
        try:
            payload = AccessTokenResponse.model_validate(response.json())
        except ValueError as exc:
            raise SessionExpired() from exc

        await self._store_access_token(payload.access_token)
        return payload.access_token

    async def authorized_request(self, method: str, path: str, **options: Any) -> httpx.Response:
        """
        Send *method* *path* with the bearer token attached.

        401/403 trigger exactly one refresh and one retry. Other statuses are
        returned as-is. Raises SessionExpired when the refresh fails.
        """
        request = AuthorizedRequest(self, method.upper(), path, options)
        return await request.run()

    async def fetch_profile(self) -> UserResponse:
        response = await self.authorized_request("GET", "/users/me")
        if response.status_code != 200:
            raise ProfileUnavailable(response.status_code)
        profile = UserResponse.model_validate(response.json())
        self.state.profile = profile
        return profile

    async def bootstrap(self) -> SessionStatus:
        """
        Silent refresh at application start. Failure is the normal state of a
        fresh or logged-out install, so nothing is raised.
        """
        self.state.status = SessionStatus.LOADING
        try:
            await self.refresh()
            await self.fetch_profile()
        except (SessionExpired, ProfileUnavailable, httpx.HTTPError, ValueError):
            self.state.profile = None
            self.state.status = SessionStatus.UNAUTHENTICATED
            logger.info("No session to restore")
        else:
            self.state.status = SessionStatus.READY
            logger.info("Session restored for user id=%s", self.state.profile.id)
        return self.state.status


def _error_message(response: httpx.Response, default: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return default
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return default
