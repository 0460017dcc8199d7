"""
Model Routes - Registered model catalog and ranking.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends
from pydantic import ValidationError

from taskforge.config import ErrorCode, TaskForgeError, TaskValidationError
from taskforge.domains.orchestration import Orchestrator, analyze_complexity
from taskforge.domains.registry import ModelSpec, ScoredModel, SelectionCriteria
from taskforge.domains.tasks import Task
from taskforge.interfaces.api.deps import get_orchestrator

router = APIRouter()


@router.get("", response_model=list[ModelSpec])
async def list_models(orchestrator: Orchestrator = Depends(get_orchestrator)):
    """List available models."""
    return [model.spec for model in orchestrator.context.registry.get_available()]


@router.post("/rank", response_model=list[ScoredModel])
async def rank_models(
    task: dict[str, Any] = Body(..., description="Task to rank models for"),
    orchestrator: Orchestrator = Depends(get_orchestrator),
):
    """Score every model that meets the task's hard constraints, best first."""
    try:
        parsed = Task.model_validate(task)
    except ValidationError as e:
        raise TaskValidationError(
            "Invalid task",
            {"errors": e.errors(include_url=False, include_context=False, include_input=False)},
        ) from e

    criteria = SelectionCriteria.from_task(parsed, analyze_complexity(parsed))
    return orchestrator.context.registry.rank(criteria)


@router.get("/{name}", response_model=ModelSpec)
async def get_model(name: str, orchestrator: Orchestrator = Depends(get_orchestrator)):
    """Get one model's specification."""
    model = orchestrator.context.registry.get(name)
    if model is None:
        raise TaskForgeError(ErrorCode.NOT_FOUND, f"Model not found: {name}", {"name": name})
    return model.spec
