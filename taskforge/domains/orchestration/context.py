"""
Orchestrator Context - The shared components one orchestrator coordinates.

Replaces process-wide singletons: everything the orchestrator touches is
built here and handed to it explicitly.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from taskforge.config import CacheError, Settings, get_settings
from taskforge.domains.cache import SemanticCache
from taskforge.domains.monitoring import PerformanceMonitor
from taskforge.domains.queue import TaskQueue
from taskforge.domains.registry import ModelRegistry
from taskforge.domains.tasks import Task

logger = logging.getLogger(__name__)

__all__ = ["OrchestratorContext"]

Closer = Callable[[], Awaitable[Any]]


@dataclass
class OrchestratorContext:
    """Registry, cache, queue and monitor shared by one orchestrator."""

    registry: ModelRegistry = field(default_factory=ModelRegistry)
    cache: SemanticCache = field(default_factory=SemanticCache)
    queue: TaskQueue = field(default_factory=TaskQueue)
    monitor: PerformanceMonitor = field(default_factory=PerformanceMonitor)
    closers: list[Closer] = field(default_factory=list)

    def __post_init__(self) -> None:
        # Absorbed cache failures still count as errors
        if self.cache.on_error is None:
            self.cache.on_error = self._record_cache_error

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> OrchestratorContext:
        """Build every component from application settings."""
        settings = settings or get_settings()
        return cls(
            registry=ModelRegistry(),
            cache=SemanticCache(
                max_size=settings.cache_max_size,
                ttl_seconds=settings.cache_ttl_seconds,
                similarity_threshold=settings.cache_similarity_threshold,
                match_task_type=settings.cache_match_task_type,
            ),
            queue=TaskQueue(
                max_concurrent=settings.queue_max_concurrent,
                max_retries=settings.queue_max_retries,
            ),
            monitor=PerformanceMonitor(
                max_metrics=settings.monitor_max_metrics,
                window_seconds=settings.monitor_window_seconds,
                retention_seconds=settings.monitor_retention_seconds,
                sweep_interval_seconds=settings.monitor_sweep_interval_seconds,
                response_time_threshold_ms=settings.alert_response_time_ms,
                error_rate_threshold=settings.alert_error_rate,
                cache_hit_rate_threshold=settings.alert_cache_hit_rate,
            ),
        )

    def add_closer(self, closer: Closer) -> None:
        """Register a coroutine to await on shutdown (e.g. an HTTP client's aclose)."""
        self.closers.append(closer)

    def _record_cache_error(self, task: Task, error: CacheError) -> None:
        self.monitor.record_error(task.type, error)

    async def start(self) -> None:
        """Start background work on the running loop."""
        self.queue.start()
        self.monitor.start()
        logger.info("Orchestrator context started (%d models)", len(self.registry))

    async def aclose(self) -> None:
        """Stop background work and release adapter resources."""
        await self.queue.stop()
        await self.monitor.stop()
        for closer in reversed(self.closers):
            await closer()
        self.closers.clear()
        logger.info("Orchestrator context closed")
