"""
FastAPI dependency injection helpers for authentication and authorisation.

``get_current_identity`` is the gate placed in front of every protected
route: it reads the bearer header, verifies the access token, does one
credential-store lookup and attaches the caller's identity to the request.
"""
from typing import Generator, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
import logging

from carbook.core.exceptions import AuthError
from carbook.db.database import get_db
from carbook.models.user import Identity
from carbook.services.auth_service import AuthService

logger = logging.getLogger(__name__)

# auto_error=False so a missing header reaches the gate and becomes TokenMissing
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth", auto_error=False)


# ---------------------------------------------------------------------------
# DB dependency
# ---------------------------------------------------------------------------

def db_dependency() -> Generator:
    """Yield a database connection for the duration of a request."""
    logger.trace("Creating database dependency connection")
    with get_db() as conn:
        yield conn


# ---------------------------------------------------------------------------
# Auth dependencies
# ---------------------------------------------------------------------------

def get_current_identity(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    conn=Depends(db_dependency),
) -> Identity:
    """
    Decode the Bearer access token and return the caller's identity.
    401 when no token or the user is gone, 403 when the token is invalid or expired.
    """
    identity = AuthService(conn).authenticate(token)
    request.state.identity = identity
    return identity


def get_optional_identity(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    conn=Depends(db_dependency),
) -> Optional[Identity]:
    """
    Like get_current_identity, but anonymous callers get None. A stale or
    invalid token is treated as anonymous; routes that need a privileged
    caller reject the None themselves.
    """
    if not token:
        return None
    try:
        return get_current_identity(request, token, conn)
    except AuthError as exc:
        logger.info("Ignoring unusable bearer token on optional route: %s", exc.detail)
        return None


# ---------------------------------------------------------------------------
# Role-based access control
# ---------------------------------------------------------------------------

def require_admin(identity: Identity = Depends(get_current_identity)) -> Identity:
    """Raise HTTP 403 unless the caller is an admin."""
    if not identity.is_admin:
        logger.warning("User id=%s lacks admin role", identity.id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied",
        )
    return identity


def require_self_or_admin(target_user_id: int, identity: Identity) -> None:
    """Raise HTTP 403 unless the caller is the target user or an admin."""
    if not identity.can_access(target_user_id):
        logger.warning(
            "User id=%s forbidden from acting on user id=%s",
            identity.id,
            target_user_id,
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied",
        )
