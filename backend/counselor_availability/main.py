# backend/counselor_availability/main.py
from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI

from . import __version__
from .core.config import settings
from .database import Base, engine
from .errors import register_error_handlers
from .routes import weekly_availability

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)

API_TITLE = "Counselor Availability API"
API_DESCRIPTION = "Weekly availability templates and slot generation for counselors"


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup/shutdown without deprecated events."""
    logger.info(f"{API_TITLE} starting up...")
    logger.info(f"Environment: {settings.environment} (SITE_MODE={settings.site_mode})")

    if settings.is_sqlite:
        # Local/dev convenience; Postgres schemas are managed by Alembic.
        from . import models  # noqa: F401

        Base.metadata.create_all(bind=engine)
        logger.info("SQLite schema ensured")

    yield

    logger.info(f"{API_TITLE} shutting down...")
    engine.dispose()


def create_app() -> FastAPI:
    app = FastAPI(
        title=API_TITLE,
        description=API_DESCRIPTION,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=app_lifespan,
    )
    # Register unified error envelope handlers
    register_error_handlers(app)

    api_v1 = APIRouter(prefix="/api/v1")
    api_v1.include_router(weekly_availability.router, prefix="/counselors")
    app.include_router(api_v1)

    @app.get("/health", tags=["health"])
    async def health() -> dict:
        return {"status": "ok", "version": __version__}

    return app


app = create_app()
