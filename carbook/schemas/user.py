"""
Pydantic schemas for User request/response validation.
"""
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional

from carbook.models.user import UserRole

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class UserCreate(BaseModel):
    email: str = Field(..., pattern=EMAIL_PATTERN, max_length=254)
    password: str = Field(..., min_length=6, max_length=72)
    role: Optional[UserRole] = None


class UserUpdate(BaseModel):
    email: Optional[str] = Field(None, pattern=EMAIL_PATTERN, max_length=254)
    password: Optional[str] = Field(None, min_length=6, max_length=72)
    role: Optional[UserRole] = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class UserResponse(BaseModel):
    """Public profile. The password hash is never part of a response."""

    id: int
    email: str
    role: UserRole
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class UserCreatedResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str = "User created successfully"
    user_id: int = Field(..., alias="userId")
