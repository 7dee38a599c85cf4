"""
Pydantic schemas for the auth endpoints and decoded token claims.

Wire names follow the mobile client (``accessToken``); Python attributes stay
snake_case.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from carbook.models.user import UserRole


class LoginRequest(BaseModel):
    """Request body for POST /auth."""

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AccessTokenResponse(BaseModel):
    """Body returned by login and refresh."""

    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(..., alias="accessToken", min_length=1)


class MessageResponse(BaseModel):
    message: str


class TokenPair(BaseModel):
    """Both tokens minted at login. Only the access token leaves in the body."""

    access_token: str
    refresh_token: str


class AccessClaims(BaseModel):
    """Claims carried by an access token."""

    id: int
    email: str
    role: UserRole
    iat: Optional[int] = None
    exp: int


class RefreshClaims(BaseModel):
    """Claims carried by a refresh token."""

    id: int
    email: str
    iat: Optional[int] = None
    exp: int
