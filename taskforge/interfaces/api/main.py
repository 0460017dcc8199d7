"""
FastAPI application for the orchestration core.

Run with: uvicorn taskforge.interfaces.api:create_app --factory
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from taskforge import __version__
from taskforge.config import get_settings

from .deps import cleanup_services, init_services
from .middleware import (
    ErrorHandlerMiddleware,
    LatencyMiddleware,
    RequestIDMiddleware,
)
from .routes import health, models, tasks

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the orchestrator on startup and drain it on shutdown."""
    settings = get_settings()
    await init_services(app)
    logger.info(
        "TaskForge API ready (queue concurrency=%d, cache size=%d, ollama=%s)",
        settings.queue_max_concurrent,
        settings.cache_max_size,
        settings.ollama_model if settings.ollama_enabled else "off",
    )
    try:
        yield
    finally:
        await cleanup_services(app)
        logger.info("TaskForge API stopped")


def create_app() -> FastAPI:
    """Create the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="TaskForge API",
        description="AI task orchestration: model selection, queuing and semantic caching",
        version=__version__,
        lifespan=lifespan,
        debug=settings.api_debug,
    )

    # First added is innermost: errors are converted before latency and request ID see them
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(LatencyMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api_cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID", "X-Response-Time-Ms"],
    )

    app.include_router(health.router, tags=["Health"])
    app.include_router(tasks.router, prefix="/api/tasks", tags=["Tasks"])
    app.include_router(models.router, prefix="/api/models", tags=["Models"])

    return app
