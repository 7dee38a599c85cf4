"""
Authentication endpoints:
  POST /auth          – Login with email/password; returns the access token and
                        sets the refresh token as an HTTP-only `jwt` cookie
  GET  /auth/refresh  – Exchange the refresh cookie for a new access token
  POST /auth/logout   – Clear the refresh cookie
"""
from fastapi import APIRouter, Depends, Request, Response, status
import logging

from carbook.core.config import settings
from carbook.core.cookies import clear_refresh_cookie, set_refresh_cookie
from carbook.core.dependencies import db_dependency
from carbook.core.rate_limiter import login_rate_limiter
from carbook.schemas.token import AccessTokenResponse, LoginRequest, MessageResponse
from carbook.services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "",
    response_model=AccessTokenResponse,
    dependencies=[Depends(login_rate_limiter)],
    summary="Login with email and password",
)
def login(
    credentials: LoginRequest,
    response: Response,
    conn=Depends(db_dependency),
):
    """
    Returns a short-lived **access token** in the body. The long-lived
    **refresh token** is only ever sent as the `jwt` cookie.
    """
    service = AuthService(conn)
    tokens = service.issue_tokens(credentials.email, credentials.password)
    set_refresh_cookie(response, tokens.refresh_token)
    return AccessTokenResponse(access_token=tokens.access_token)


@router.get(
    "/refresh",
    response_model=AccessTokenResponse,
    summary="Obtain a new access token using the refresh cookie",
)
def refresh_token(request: Request, conn=Depends(db_dependency)):
    logger.info("Refreshing access token")
    service = AuthService(conn)
    access_token = service.refresh_access_token(
        request.cookies.get(settings.REFRESH_COOKIE_NAME)
    )
    return AccessTokenResponse(access_token=access_token)


@router.post(
    "/logout",
    response_model=MessageResponse,
    responses={204: {"description": "No refresh cookie was present"}},
    summary="Clear the refresh cookie",
)
def logout(request: Request, response: Response, conn=Depends(db_dependency)):
    """
    Clears the cookie only. The refresh token itself stays valid until it
    expires; there is no server-side revocation list.
    """
    service = AuthService(conn)
    if not service.revoke(request.cookies.get(settings.REFRESH_COOKIE_NAME)):
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    clear_refresh_cookie(response)
    return MessageResponse(message="Cookie cleared")
