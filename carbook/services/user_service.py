"""
User management service: registration, retrieval, update, and deletion.

Business rules enforced here:
- Anyone may register a `user` account; only an admin may create an `admin`.
- A user may read, update or delete only their own account; admins may act on any.
- Only admins may change roles. Password changes are re-hashed.
- Deletion is a hard delete and cascades to the user's vehicles.
"""
import sqlite3
from typing import Optional
import logging

from fastapi import HTTPException, status

from carbook.core.dependencies import require_self_or_admin
from carbook.core.security import hash_password
from carbook.models.user import Identity, User, UserRole
from carbook.repositories.user_repository import UserRepository
from carbook.schemas.user import UserCreate, UserUpdate

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing UserService")
        self._repo = UserRepository(conn)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_user(self, user_id: int) -> User:
        """Return a user or raise 404."""
        logger.info("Fetching user id=%s", user_id)
        user = self._repo.get_by_id(user_id)
        if not user:
            logger.warning("User id=%s not found", user_id)
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found",
            )
        return user

    def get_visible_user(self, user_id: int, requested_by: Identity) -> User:
        require_self_or_admin(user_id, requested_by)
        return self.get_user(user_id)

    def list_users(self) -> list[User]:
        logger.info("Listing users")
        return self._repo.list_all()

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def register_user(self, data: UserCreate, created_by: Optional[Identity]) -> User:
        logger.info("Registering user %s", data.email)
        role = data.role or UserRole.USER
        if role == UserRole.ADMIN and not (created_by and created_by.is_admin):
            logger.warning("Non-admin attempted to register an admin account")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Only admin users can assign admin role",
            )

        if self._repo.get_by_email(data.email):
            logger.warning("Duplicate email registration attempt: %s", data.email)
            raise self._email_taken()

        try:
            user = self._repo.create(
                email=data.email,
                hashed_password=hash_password(data.password),
                role=role,
            )
        except sqlite3.IntegrityError:
            logger.warning("Email uniqueness enforced by store: %s", data.email)
            raise self._email_taken()
        logger.info("User registered id=%s", user.id)
        return user

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def update_user(self, user_id: int, data: UserUpdate, updated_by: Identity) -> User:
        logger.info("Updating user id=%s", user_id)
        require_self_or_admin(user_id, updated_by)
        self.get_user(user_id)

        if data.role is not None and not updated_by.is_admin:
            logger.warning("User id=%s attempted to change a role", updated_by.id)
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Only admin can change role",
            )

        updates: dict = {}
        if data.email is not None:
            existing = self._repo.get_by_email(data.email)
            if existing and existing.id != user_id:
                logger.warning("Duplicate email update attempt: %s", data.email)
                raise self._email_taken()
            updates["email"] = data.email

        if data.password is not None:
            updates["hashed_password"] = hash_password(data.password)

        if data.role is not None:
            updates["role"] = data.role.value

        try:
            updated = self._repo.update(user_id, **updates)
        except sqlite3.IntegrityError:
            raise self._email_taken()
        logger.info("User updated id=%s", user_id)
        return updated  # type: ignore[return-value]

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def delete_user(self, user_id: int, deleted_by: Identity) -> None:
        """
        Remove the account. Tokens already issued to it stop working at the
        next gate check or refresh (UserNotFound).
        """
        logger.info("Deleting user id=%s", user_id)
        require_self_or_admin(user_id, deleted_by)
        if not self._repo.delete(user_id):
            logger.warning("User id=%s not found for deletion", user_id)
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found",
            )
        logger.info("User deleted id=%s", user_id)

    @staticmethod
    def _email_taken() -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email is already taken",
        )
