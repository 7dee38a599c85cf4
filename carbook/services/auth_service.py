"""
Authentication service: orchestrates login, token verification, refresh, and
logout logic.

Both token kinds are stateless. The server keeps no record of issued tokens,
so logout only clears the refresh cookie; a captured refresh token stays
valid until it expires.
"""
import sqlite3
from typing import Optional
import logging

from jose import JWTError
from pydantic import ValidationError

from carbook.core.exceptions import (
    InvalidCredentials,
    TokenInvalid,
    TokenMissing,
    UserNotFound,
)
from carbook.core.security import (
    ACCESS,
    REFRESH,
    create_access_token,
    create_refresh_token,
    decode_token,
    verify_password,
)
from carbook.models.user import Identity, User
from carbook.repositories.user_repository import UserRepository
from carbook.schemas.token import AccessClaims, RefreshClaims, TokenPair

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing AuthService")
        self._user_repo = UserRepository(conn)

    # ------------------------------------------------------------------
    # Login
    # ------------------------------------------------------------------

    def issue_tokens(self, email: str, password: str) -> TokenPair:
        """
        Validate credentials and mint an access + refresh token pair.

        Unknown email and wrong password raise the same InvalidCredentials.
        """
        logger.info("Authenticating user '%s'", email)
        user = self._user_repo.get_by_email(email)
        if user is None or not verify_password(password, user.hashed_password):
            logger.warning("Invalid login attempt for '%s'", email)
            raise InvalidCredentials()

        logger.info("Login successful for user id=%s", user.id)
        return TokenPair(
            access_token=self._mint_access_token(user),
            refresh_token=create_refresh_token(user.id, user.email),
        )

    # ------------------------------------------------------------------
    # Access token verification
    # ------------------------------------------------------------------

    def verify_access_token(self, token: Optional[str]) -> AccessClaims:
        """Decode an access token. Expired and forged tokens are both TokenInvalid."""
        if not token:
            logger.warning("Access token missing")
            raise TokenMissing()
        try:
            return AccessClaims.model_validate(decode_token(token, ACCESS))
        except (JWTError, ValidationError):
            logger.warning("Access token verification failed")
            raise TokenInvalid()

    def authenticate(self, token: Optional[str]) -> Identity:
        """Verify *token* and confirm its user still exists."""
        claims = self.verify_access_token(token)
        user = self._user_repo.get_by_id(claims.id)
        if user is None:
            logger.warning("Access token references missing user id=%s", claims.id)
            raise UserNotFound()
        logger.info("Authenticated user id=%s", user.id)
        return Identity(id=user.id, role=user.role)

    # ------------------------------------------------------------------
    # Token refresh
    # ------------------------------------------------------------------

    def refresh_access_token(self, refresh_token: Optional[str]) -> str:
        """
        Exchange a valid refresh token for a new access token.
        The refresh token is neither rotated nor extended.
        """
        if not refresh_token:
            logger.warning("Refresh requested without cookie")
            raise TokenMissing("Unauthorized")
        try:
            claims = RefreshClaims.model_validate(decode_token(refresh_token, REFRESH))
        except (JWTError, ValidationError):
            logger.warning("Refresh token verification failed")
            raise TokenInvalid("Forbidden")

        user = self._user_repo.get_by_id(claims.id)
        if user is None:
            logger.warning("Refresh token references missing user id=%s", claims.id)
            raise UserNotFound("Unauthorized")

        logger.info("Refresh token validated for user id=%s", user.id)
        return self._mint_access_token(user)

    # ------------------------------------------------------------------
    # Logout
    # ------------------------------------------------------------------

    def revoke(self, refresh_token: Optional[str]) -> bool:
        """
        Return True when a refresh cookie was presented and must be cleared.
        Calling it with no cookie is a no-op.
        """
        if not refresh_token:
            logger.info("Logout without refresh cookie")
            return False
        logger.info("Logout clears refresh cookie")
        return True

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _mint_access_token(user: User) -> str:
        return create_access_token(user.id, user.email, user.role.value)
