"""FastAPI application entry point.

Builds the app around the response/error contract: request IDs for
correlation, the centralized error reporter for every exception path, and
the health router as the single public endpoint.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from juno import __version__
from juno.config.settings import JunoSettings
from juno.logging_config import configure_logging
from juno.middleware.error_handler import register_error_handlers
from juno.middleware.request_id import RequestIdMiddleware
from juno.routers.health import create_health_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: configure logging on startup."""
    settings: JunoSettings = app.state.settings
    configure_logging(settings.log_level)
    logger.info(
        "Juno backend starting on port %d (%s)", settings.port, settings.environment
    )

    yield

    logger.info("Juno backend shut down")


def create_app(settings: JunoSettings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or JunoSettings()

    app = FastAPI(
        title="Juno Backend API",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    register_error_handlers(app)
    app.add_middleware(RequestIdMiddleware)

    app.include_router(create_health_router(), prefix=f"{settings.api_prefix}/health")

    return app
