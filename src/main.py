"""FastAPI application entry point for Flexio Core."""

import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.middleware.error_handler import global_exception_handler
from src.api.middleware.logging import StructuredLoggingMiddleware
from src.api.routes.billing import router as billing_router
from src.api.routes.health import router as health_router
from src.api.routes.presence import router as presence_router
from src.api.routes.rewards import router as rewards_router
from src.config import settings
from src.shared.errors import CollaboratorError
from src.shared.logging import setup_logging

logger = structlog.get_logger()

# Track app start time for uptime calculation
APP_START_TIME: float = 0.0


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: startup and shutdown logic."""
    global APP_START_TIME
    APP_START_TIME = time.time()
    setup_logging(settings.log_level)

    logger.info(
        "flexio_starting",
        app_name=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
    )

    try:
        from src.db.database import init_db

        await init_db()
    except Exception:
        logger.warning("database_init_failed", exc_info=True)

    yield

    from src.db.database import engine

    await engine.dispose()
    logger.info("flexio_shutting_down")


app = FastAPI(
    title="Flexio Core",
    description="Gym wallet billing, streak rewards and geofence presence for Flexio",
    version=settings.app_version,
    lifespan=lifespan,
)

# CORS for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.debug else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Structured logging middleware
app.add_middleware(StructuredLoggingMiddleware)

# Global exception handlers; Exception is the catch-all
for exc_type in (CollaboratorError, ValueError, LookupError, Exception):
    app.add_exception_handler(exc_type, global_exception_handler)

# Register routers
app.include_router(health_router)
app.include_router(billing_router)
app.include_router(rewards_router)
app.include_router(presence_router)


def get_uptime() -> int:
    """Get application uptime in seconds."""
    if APP_START_TIME == 0.0:
        return 0
    return int(time.time() - APP_START_TIME)
