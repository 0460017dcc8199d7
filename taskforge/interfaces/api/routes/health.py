"""
Health Routes - Liveness and service description.
"""

from typing import Any

from fastapi import APIRouter, Request

from taskforge import __version__

router = APIRouter()


@router.get("/health")
async def health_check(request: Request) -> dict[str, Any]:
    """Liveness plus whether the task queue is accepting work."""
    orchestrator = getattr(request.app.state, "orchestrator", None)
    ready = orchestrator is not None and orchestrator.context.queue.is_running
    return {
        "status": "healthy" if ready else "starting",
        "service": "taskforge",
        "version": __version__,
    }


@router.get("/api")
async def api_info() -> dict[str, Any]:
    return {
        "name": "TaskForge API",
        "version": __version__,
        "endpoints": {
            "tasks": "/api/tasks",
            "task_health": "/api/tasks/health",
            "metrics": "/api/tasks/metrics",
            "models": "/api/models",
        },
        "docs": "/docs",
    }
