"""
Tests for the built-in simulated models.
"""

from __future__ import annotations

import pytest

from taskforge.domains.registry import ModelRegistry, SelectionCriteria
from taskforge.domains.tasks import Complexity, Task, TaskType

from .models import BUILTIN_SPECS, builtin_models, register_builtin_models


@pytest.fixture
async def registry() -> ModelRegistry:
    registry = ModelRegistry()
    await register_builtin_models(registry)
    return registry


def criteria(task_type: TaskType) -> SelectionCriteria:
    return SelectionCriteria.from_task(Task(type=task_type, input="q"), Complexity.LOW)


async def test_register_all(registry: ModelRegistry) -> None:
    """Test every built-in model is registered and available."""
    assert len(registry) == 3
    assert {m.name for m in registry.get_available()} == set(BUILTIN_SPECS)


async def test_simulated_output() -> None:
    """Test simulated models echo the input with their prefix."""
    model = next(m for m in builtin_models() if m.name == "business-analyzer")

    result = await model.process(Task(type=TaskType.PREDICTION, input="Q3 revenue"))

    assert result["success"] is True
    assert result["data"] == "Business Analysis: Q3 revenue"
    assert result["model"] == "business-analyzer"


@pytest.mark.parametrize(
    ("task_type", "expected"),
    [
        (TaskType.SUMMARIZATION, "quick-responder"),
        (TaskType.CLASSIFICATION, "quick-responder"),
        (TaskType.PREDICTION, "business-analyzer"),
        (TaskType.ANALYSIS, "gemini-pro"),
        (TaskType.GENERATION, "gemini-pro"),
        (TaskType.TRANSLATION, "gemini-pro"),
    ],
)
async def test_default_routing(registry: ModelRegistry, task_type: TaskType, expected: str) -> None:
    """Test which built-in model each task type lands on with default constraints."""
    model = await registry.select_best(criteria(task_type))
    assert model.name == expected
