"""
Registry Models - Data types for model registration and selection.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from taskforge.domains.tasks import Complexity, CostConstraint, Task, TaskType


class ModelType(str, Enum):
    """Model category tags."""

    GENERAL = "general"
    BUSINESS = "business"
    CREATIVE = "creative"
    TECHNICAL = "technical"
    ANALYTICAL = "analytical"
    QUICK = "quick"


class DuplicatePolicy(str, Enum):
    """What to do when a model name is registered twice."""

    REPLACE = "replace"  # Last write wins, logged as a warning
    REJECT = "reject"  # Raise RegistrationError


class ModelSpec(BaseModel):
    """Static description of a processing implementation."""

    name: str = Field(..., min_length=1)
    type: ModelType = ModelType.GENERAL
    capabilities: list[str] = Field(..., min_length=1)
    max_tokens: int = Field(default=4096, gt=0)
    cost_per_token: float = Field(default=0.0, ge=0.0)
    avg_latency_ms: float = Field(default=1000.0, ge=0.0)
    quality_score: float = Field(default=0.8, ge=0.0, le=1.0)
    is_available: bool = True

    model_config = {"frozen": True}


class SelectionCriteria(BaseModel):
    """Constraints derived from a task, used to filter and score models."""

    task_type: TaskType
    complexity: Complexity = Complexity.LOW
    latency_requirement_ms: float = Field(default=5000.0, gt=0)
    quality_requirement: float = Field(default=0.8, ge=0.0, le=1.0)
    cost_constraint: CostConstraint = CostConstraint.MEDIUM

    @classmethod
    def from_task(cls, task: Task, complexity: Complexity) -> SelectionCriteria:
        """Build criteria from a task's constraints."""
        return cls(
            task_type=task.type,
            complexity=complexity,
            latency_requirement_ms=task.max_latency_ms,
            quality_requirement=task.min_quality,
            cost_constraint=task.cost_constraint,
        )


class ScoredModel(BaseModel):
    """A candidate model with its composite score breakdown."""

    name: str
    score: float
    quality: float
    latency: float
    cost: float
    specialization: float
