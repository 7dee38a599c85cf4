"""
Central API router – registers all endpoint sub-routers under /api.
"""
from fastapi import APIRouter
from fastapi.responses import PlainTextResponse
import logging

from carbook.api.endpoints import auth, users, vehicles

logger = logging.getLogger(__name__)

api_router = APIRouter(prefix="/api")


@api_router.get("/health-check", response_class=PlainTextResponse, tags=["Health"])
def health_check() -> str:
    """Check service health."""
    return "OK"


logger.info("Registering API routers")
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(vehicles.router)
