"""
Application entry point.
Run with:  uvicorn carbook.main:app --reload

⚠️  DEVELOPMENT NOTE:
    Set SEED_ADMIN=true to create a default admin user on startup
    (see carbook/db/seeder.py). Never enable it in production.
"""
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from carbook.core.logging_config import configure_logging
from carbook.core.config import settings
from carbook.api.errors import register_exception_handlers
from carbook.api.router import api_router
from carbook.db.database import init_db
from carbook.db.seeder import seed_admin

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize the database and optional development seed data."""
    logger.info("Initializing database")
    init_db()
    if settings.SEED_ADMIN:
        seed_admin()
    yield


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance."""
    logger.info("Starting FastAPI application setup")
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Backend API for the Car Book vehicle tracking app.",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # ── Middleware ──────────────────────────────────────────────────────────
    # credentials=True so browsers send the refresh cookie cross-origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Errors and routers ──────────────────────────────────────────────────
    register_exception_handlers(app)
    app.include_router(api_router)

    return app


configure_logging()
app = create_app()
