"""
Queue Domain - Prioritized, bounded-concurrency execution.

This domain handles:
- Priority ordering with FIFO tiers
- Concurrency limiting
- Automatic retry of failed executions
- Deadline propagation
"""

from .contracts import TaskScheduler
from .models import Executor, QueueItem, QueueStats
from .task_queue import TaskQueue

__all__ = [
    # Contracts
    "TaskScheduler",
    # Models
    "Executor",
    "QueueItem",
    "QueueStats",
    # Implementations
    "TaskQueue",
]
