"""
Task Routes - Task processing, health and metrics endpoints.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Query

from taskforge.domains.monitoring import PerformanceReport
from taskforge.domains.orchestration import Orchestrator, ResultEnvelope, SystemHealth
from taskforge.interfaces.api.deps import get_orchestrator

router = APIRouter()


@router.post("", response_model=ResultEnvelope)
async def process_task(
    task: dict[str, Any] = Body(..., description="Task submission"),
    user_id: str | None = Query(default=None, description="Requesting user for context enrichment"),
    orchestrator: Orchestrator = Depends(get_orchestrator),
):
    """
    Process a task through the orchestrator.

    - **type**: Task type (analysis, summarization, ...)
    - **input**: Task input text
    - **priority**: low, normal, high or urgent
    - **max_latency_ms**: Deadline for queueing plus execution
    - **min_quality**: Minimum model quality score
    - **cost_constraint**: low, medium or high
    """
    return await orchestrator.process(task, user_id=user_id)


@router.get("/health", response_model=SystemHealth)
async def task_health(orchestrator: Orchestrator = Depends(get_orchestrator)):
    """Registry, queue and cache health."""
    return orchestrator.get_health()


@router.get("/metrics", response_model=PerformanceReport)
async def task_metrics(orchestrator: Orchestrator = Depends(get_orchestrator)):
    """Rolling performance statistics with recommendations."""
    return orchestrator.get_performance_report()
