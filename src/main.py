"""
Main FastAPI application entry point.

Builds the application: trace middleware, RFC 9457 exception handlers, the
system router and the versioned API. The lifespan starts the cleanup
scheduler singleton and disposes of the database engine on shutdown.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI

from src.core.config import settings
from src.core.container import get_cleanup_scheduler, get_database, get_logger
from src.presentation.routers import system_router
from src.presentation.api.middleware.trace_middleware import TraceMiddleware
from src.presentation.routers.api.v1 import v1_router
from src.presentation.routers.api.v1.errors import register_exception_handlers


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan context manager.

    Handles startup and shutdown events:
    - Startup: start the cleanup scheduler (first sweep runs immediately)
    - Shutdown: stop the scheduler, close database connections

    Args:
        app: FastAPI application instance.

    Yields:
        None during application lifetime.
    """
    logger = get_logger()
    scheduler = get_cleanup_scheduler()
    scheduler.start(timedelta(minutes=settings.cleanup_interval_minutes))
    logger.info(
        "Application started",
        app_name=settings.app_name,
        environment=settings.environment.value,
    )

    yield

    await scheduler.stop()
    await get_database().close()
    logger.info("Application stopped")


def create_app() -> FastAPI:
    """Build a configured FastAPI application."""
    application = FastAPI(
        title=settings.app_name,
        description="Credential and session lifecycle service",
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        debug=settings.debug,
        lifespan=lifespan,
    )

    # Wire trace middleware (request correlation)
    application.add_middleware(TraceMiddleware)

    # Register global exception handlers (RFC 9457 error responses)
    register_exception_handlers(application)

    application.include_router(system_router)
    application.include_router(v1_router)
    return application


app = create_app()
