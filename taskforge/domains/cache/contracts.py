"""
Cache Contracts - Interfaces for the cache domain.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from taskforge.domains.tasks import Task

from .models import CacheEntry


@runtime_checkable
class SimilarityFunction(Protocol):
    """Scores how interchangeable two tasks are, in [0, 1]."""

    def __call__(self, query: Task, candidate: Task) -> float:
        ...


@runtime_checkable
class TaskCache(Protocol):
    """Contract for result memoization."""

    async def search(self, task: Task) -> CacheEntry | None:
        """
        Find a reusable result.

        Args:
            task: The incoming task

        Returns:
            Best live entry above the acceptance threshold, or None
        """
        ...

    async def store(self, task: Task, result: Any, model_used: str = "unknown") -> None:
        """Memoize a result."""
        ...

    def clear(self) -> None:
        """Drop every entry."""
        ...
