"""
User endpoints:
  POST   /users        – Register an account (admin role requires an admin caller)
  GET    /users/me     – Profile of the authenticated caller
  GET    /users        – List all users (Admin only)
  GET    /users/{id}   – Get a user (Admin or self)
  PUT    /users/{id}   – Update email/password/role (Admin or self; role: Admin only)
  DELETE /users/{id}   – Delete an account and its vehicles (Admin or self)
"""
from typing import Optional

from fastapi import APIRouter, Depends, status

from carbook.core.dependencies import (
    db_dependency,
    get_current_identity,
    get_optional_identity,
    require_admin,
)
from carbook.models.user import Identity
from carbook.schemas.token import MessageResponse
from carbook.schemas.user import (
    UserCreate,
    UserCreatedResponse,
    UserResponse,
    UserUpdate,
)
from carbook.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])


@router.post(
    "",
    response_model=UserCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new account",
)
def register_user(
    data: UserCreate,
    conn=Depends(db_dependency),
    identity: Optional[Identity] = Depends(get_optional_identity),
):
    """Password must be at least 6 characters. Role defaults to `user`."""
    user = UserService(conn).register_user(data, created_by=identity)
    return UserCreatedResponse(user_id=user.id)


@router.get("/me", response_model=UserResponse, summary="Current user's profile")
def get_me(
    conn=Depends(db_dependency),
    identity: Identity = Depends(get_current_identity),
):
    return UserService(conn).get_user(identity.id)


@router.get("", response_model=list[UserResponse], summary="List all users (Admin only)")
def list_users(conn=Depends(db_dependency), _: Identity = Depends(require_admin)):
    return UserService(conn).list_users()


@router.get("/{user_id}", response_model=UserResponse, summary="Get a user (Admin or self)")
def get_user(
    user_id: int,
    conn=Depends(db_dependency),
    identity: Identity = Depends(get_current_identity),
):
    return UserService(conn).get_visible_user(user_id, requested_by=identity)


@router.put("/{user_id}", response_model=MessageResponse, summary="Update a user (Admin or self)")
def update_user(
    user_id: int,
    data: UserUpdate,
    conn=Depends(db_dependency),
    identity: Identity = Depends(get_current_identity),
):
    UserService(conn).update_user(user_id, data, updated_by=identity)
    return MessageResponse(message="User updated successfully")


@router.delete("/{user_id}", response_model=MessageResponse, summary="Delete a user (Admin or self)")
def delete_user(
    user_id: int,
    conn=Depends(db_dependency),
    identity: Identity = Depends(get_current_identity),
):
    UserService(conn).delete_user(user_id, deleted_by=identity)
    return MessageResponse(message="User deleted successfully")
