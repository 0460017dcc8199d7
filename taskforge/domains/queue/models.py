"""
Queue Models - Data types for the task queue.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

from taskforge.domains.tasks import Priority

Executor = Callable[[], Awaitable[Any]]


@dataclass(slots=True, eq=False)
class QueueItem:
    """One submitted execution, owned by the queue while in flight."""

    id: str
    priority: Priority
    executor: Executor
    future: asyncio.Future[Any]
    enqueued_at: float
    max_retries: int
    retries: int = 0
    deadline: float | None = None  # event loop time
    runner: asyncio.Task[None] | None = None


class QueueStats(BaseModel):
    """Queue counters for health reporting."""

    queue_length: int
    processing: int
    max_concurrent: int
    is_running: bool
    completed: int
    failed: int
    retried: int
