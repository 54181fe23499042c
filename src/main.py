"""
Main FastAPI application entry point.

``create_app()`` builds the application: middleware (trace recording and
rate limiting), RFC 7807 exception handlers and the observability routers.
The lifespan creates the tables, attaches the SSE event stream to the event
bus and runs the periodic maintenance scheduler.

Run:
    uvicorn src.main:app --reload
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.core.config import get_settings
from src.core.container import (
    get_database,
    get_event_stream,
    get_logger,
    get_scheduler,
)
from src.domain.events import AlertTriggered, TraceCreated
from src.presentation.api.middleware.rate_limit_middleware import RateLimitMiddleware
from src.presentation.api.middleware.trace_middleware import TraceMiddleware
from src.presentation.routers import api_router, system_router
from src.presentation.routers.api.errors import register_exception_handlers


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan context manager.

    Handles startup and shutdown events:
    - Startup: create tables, attach the event stream, start the scheduler
    - Shutdown: stop the scheduler, detach the stream, dispose the engine

    Args:
        app: FastAPI application instance.

    Yields:
        None during application lifetime.
    """
    settings = get_settings()
    logger = get_logger()
    database = get_database()
    await database.create_all()

    stream = get_event_stream()
    stream.attach(TraceCreated, AlertTriggered)
    scheduler = get_scheduler()
    if settings.scheduler_enabled:
        await scheduler.start()

    logger.info(
        "Application started",
        environment=settings.environment.value,
        version=settings.app_version,
        scheduler_enabled=settings.scheduler_enabled,
    )

    try:
        yield
    finally:
        await scheduler.stop()
        stream.detach()
        await database.close()
        logger.info("Application stopped")


def create_app() -> FastAPI:
    """Build the FastAPI application from current settings."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Request tracing, rate limiting and alerting",
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Last added runs first: TraceMiddleware wraps RateLimitMiddleware
    app.add_middleware(RateLimitMiddleware)
    app.add_middleware(TraceMiddleware)

    register_exception_handlers(app)

    app.include_router(system_router)
    app.include_router(api_router)

    return app


app = create_app()
