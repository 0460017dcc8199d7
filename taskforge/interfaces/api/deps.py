"""
API Dependencies - Dependency injection for FastAPI routes.

The orchestrator is built once per application in the lifespan handler
and stored on ``app.state``.
"""

from __future__ import annotations

from fastapi import FastAPI, Request

from taskforge.config import ErrorCode, TaskForgeError, get_settings
from taskforge.domains.orchestration import Orchestrator, create_orchestrator


async def init_services(app: FastAPI) -> None:
    """
    Initialize services on startup.

    This should be called from the FastAPI lifespan handler.
    """
    orchestrator = await create_orchestrator(get_settings())
    await orchestrator.context.start()
    app.state.orchestrator = orchestrator


async def cleanup_services(app: FastAPI) -> None:
    """Cleanup services on shutdown."""
    orchestrator: Orchestrator | None = getattr(app.state, "orchestrator", None)
    if orchestrator is not None:
        await orchestrator.context.aclose()
        app.state.orchestrator = None


def get_orchestrator(request: Request) -> Orchestrator:
    """Get the application's orchestrator."""
    orchestrator: Orchestrator | None = getattr(request.app.state, "orchestrator", None)
    if orchestrator is None:
        raise TaskForgeError(ErrorCode.INTERNAL_ERROR, "Orchestrator not initialized")
    return orchestrator
