"""
Registry Contracts - Interfaces for the registry domain.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from taskforge.domains.tasks import Task

from .models import ModelSpec, SelectionCriteria


@runtime_checkable
class ModelPlugin(Protocol):
    """Contract every registered model implementation satisfies."""

    @property
    def name(self) -> str:
        """Unique model name."""
        ...

    @property
    def spec(self) -> ModelSpec:
        """Cost, latency and quality metadata."""
        ...

    async def process(self, task: Task) -> Any:
        """
        Process a task.

        Args:
            task: The enriched task

        Returns:
            Implementation-defined raw result
        """
        ...


@runtime_checkable
class ModelSelector(Protocol):
    """Contract for model catalog lookup and selection."""

    async def register(self, model: ModelPlugin) -> None:
        """Add a model to the catalog."""
        ...

    async def select_best(self, criteria: SelectionCriteria) -> ModelPlugin:
        """
        Pick the best model for the criteria.

        Args:
            criteria: Constraints derived from a task

        Returns:
            Highest scoring model meeting the hard constraints

        Raises:
            NoCandidateError: No model meets the hard constraints
        """
        ...
