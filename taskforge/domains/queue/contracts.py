"""
Queue Contracts - Interfaces for the queue domain.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from taskforge.domains.tasks import Priority

from .models import Executor, QueueStats


@runtime_checkable
class TaskScheduler(Protocol):
    """Contract for bounded, prioritized execution."""

    async def process(
        self,
        executor: Executor,
        priority: Priority = Priority.NORMAL,
        *,
        timeout_ms: float | None = None,
    ) -> Any:
        """
        Run an executor under the queue's concurrency and retry policy.

        Args:
            executor: Zero-argument coroutine factory
            priority: Queue tier
            timeout_ms: Deadline covering both the wait and the execution

        Returns:
            The executor's result

        Raises:
            QueueExhaustedError: Every attempt failed
            TaskTimeoutError: Deadline passed
        """
        ...

    def get_stats(self) -> QueueStats:
        """Current queue counters."""
        ...
