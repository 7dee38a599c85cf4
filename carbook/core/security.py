"""
Security utilities: password hashing and JWT creation/verification.

Access and refresh tokens are signed with separate secrets so a leaked access
secret cannot be used to forge refresh tokens and vice versa.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional, Any
import logging

from jose import jwt
from passlib.context import CryptContext

from carbook.core import logging_config  # noqa: F401  (registers Logger.trace)
from carbook.core.config import settings
from carbook.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

ACCESS = "access"
REFRESH = "refresh"

# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


def hash_password(plain_password: str) -> str:
    """Return the bcrypt hash of *plain_password*."""
    logger.trace("Hashing user password")
    return pwd_context.hash(plain_password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Return True if *plain_password* matches *hashed_password*."""
    logger.trace("Verifying password hash")
    return pwd_context.verify(plain_password, hashed_password)


# ---------------------------------------------------------------------------
# JWT helpers
# ---------------------------------------------------------------------------

def _signing_secret(token_kind: str) -> str:
    """Return the configured secret for *token_kind* or raise ConfigError."""
    if token_kind == ACCESS:
        name, secret = "ACCESS_TOKEN_SECRET", settings.ACCESS_TOKEN_SECRET
    else:
        name, secret = "REFRESH_TOKEN_SECRET", settings.REFRESH_TOKEN_SECRET
    if not secret:
        logger.error("%s is not defined in the environment", name)
        raise ConfigError(f"{name} is not configured")
    return secret


def _create_token(
    token_kind: str,
    claims: dict[str, Any],
    expires_delta: timedelta,
) -> str:
    """Internal helper that builds and signs a JWT."""
    now = datetime.now(tz=timezone.utc)
    payload: dict[str, Any] = dict(claims)
    payload["iat"] = now
    payload["exp"] = now + expires_delta
    token = jwt.encode(payload, _signing_secret(token_kind), algorithm=settings.ALGORITHM)
    logger.info("Issued %s token for user id=%s", token_kind, claims.get("id"))
    return token


def create_access_token(
    user_id: int,
    email: str,
    role: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a short-lived access token carrying id, email and role."""
    logger.trace("Creating access token for user id=%s", user_id)
    return _create_token(
        ACCESS,
        {"id": user_id, "email": email, "role": role},
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def create_refresh_token(
    user_id: int,
    email: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a long-lived refresh token carrying id and email only."""
    logger.trace("Creating refresh token for user id=%s", user_id)
    return _create_token(
        REFRESH,
        {"id": user_id, "email": email},
        expires_delta or timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
    )


def decode_token(token: str, token_kind: str) -> dict:
    """
    Decode and verify a JWT of the given kind.

    Raises:
        ConfigError: if the signing secret for *token_kind* is missing.
        jose.JWTError: if the token is malformed, forged or expired.
    """
    logger.trace("Decoding %s token", token_kind)
    secret = _signing_secret(token_kind)
    return jwt.decode(token, secret, algorithms=[settings.ALGORITHM])
