"""Refresh-token cookie transport."""
import logging

from fastapi import Response

from carbook.core.config import settings

logger = logging.getLogger(__name__)


def _cookie_policy() -> dict:
    """Attributes shared by set and clear so browsers match the same cookie."""
    production = settings.is_production
    return {
        "httponly": True,
        "secure": production,
        "samesite": "none" if production else "lax",
        "path": "/",
    }


def set_refresh_cookie(response: Response, refresh_token: str) -> None:
    """Attach the refresh token as an HTTP-only cookie."""
    response.set_cookie(
        key=settings.REFRESH_COOKIE_NAME,
        value=refresh_token,
        max_age=settings.refresh_cookie_max_age,
        **_cookie_policy(),
    )
    logger.debug("Refresh cookie set")


def clear_refresh_cookie(response: Response) -> None:
    """Instruct the client to drop the refresh cookie."""
    response.delete_cookie(key=settings.REFRESH_COOKIE_NAME, **_cookie_policy())
    logger.debug("Refresh cookie cleared")
