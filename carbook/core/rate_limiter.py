"""
Login throttling by client IP.

Every attempt counts, successful or not, so the throttling response is the
same regardless of credential correctness.
"""
import logging
import time
from threading import Lock
from typing import Callable

from fastapi import HTTPException, Request, status

from carbook.core.config import settings

logger = logging.getLogger(__name__)

THROTTLED_MESSAGE = "Too many login attempts, please try again after one minute"


class LoginRateLimiter:
    """Fixed-window counter keyed by client IP, kept in process memory."""

    def __init__(
        self,
        *,
        max_attempts: int,
        window_seconds: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._max_attempts = max(1, int(max_attempts))
        self._window_seconds = max(1, int(window_seconds))
        self._clock = clock
        self._lock = Lock()
        self._windows: dict[str, tuple[float, int]] = {}

    def hit(self, client_ip: str) -> None:
        """Count one attempt; raise 429 once the window is exhausted."""
        key = client_ip.strip() or "unknown"
        now = self._clock()
        with self._lock:
            self._evict_expired(now)
            started_at, attempts = self._windows.get(key, (now, 0))
            if now - started_at >= self._window_seconds:
                started_at, attempts = now, 0
            attempts += 1
            self._windows[key] = (started_at, attempts)
            retry_after = int(started_at + self._window_seconds - now) + 1

        if attempts > self._max_attempts:
            logger.warning("Login throttled for ip=%s attempts=%s", key, attempts)
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail=THROTTLED_MESSAGE,
                headers={"Retry-After": str(retry_after)},
            )

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()

    def __len__(self) -> int:
        """Number of client IPs with a live window."""
        with self._lock:
            return len(self._windows)

    def _evict_expired(self, now: float) -> None:
        """Drop windows that have closed. Caller holds the lock."""
        expired = [
            key
            for key, (started_at, _) in self._windows.items()
            if now - started_at >= self._window_seconds
        ]
        for key in expired:
            del self._windows[key]
        if expired:
            logger.debug("Evicted %s expired login windows", len(expired))

    def __call__(self, request: Request) -> None:
        """FastAPI dependency form."""
        client_ip = (request.client.host if request.client else "") or "unknown"
        self.hit(client_ip)


login_rate_limiter = LoginRateLimiter(
    max_attempts=settings.LOGIN_RATE_LIMIT_MAX_ATTEMPTS,
    window_seconds=settings.LOGIN_RATE_LIMIT_WINDOW_SECONDS,
)
