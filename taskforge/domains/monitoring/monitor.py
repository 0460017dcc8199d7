"""
Performance Monitor - Rolling metrics for the orchestration loop.

Keeps an append-only, count-capped metric log. Statistics are recomputed
over the rolling window after every record; a background sweep drops
metrics older than the retention period.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import time
from collections import deque
from collections.abc import Callable
from enum import Enum
from typing import Any

from taskforge.config import TaskForgeError

from .models import Metric, MetricKind, PerformanceReport, PerformanceStats

logger = logging.getLogger(__name__)

__all__ = ["PerformanceMonitor"]


def _type_name(task_type: Any) -> str:
    return task_type.value if isinstance(task_type, Enum) else str(task_type)


class PerformanceMonitor:
    """
    In-memory performance monitor.

    Features:
    - Ring-buffer metric log capped at ``max_metrics``
    - Rolling stats over ``window_seconds`` (default 1 hour)
    - Lifetime model usage counts
    - Hourly sweep of metrics older than ``retention_seconds``
    """

    def __init__(
        self,
        max_metrics: int = 10_000,
        window_seconds: float = 3600,
        retention_seconds: float = 86_400,
        sweep_interval_seconds: float = 3600,
        response_time_threshold_ms: float = 5000,
        error_rate_threshold: float = 0.1,
        cache_hit_rate_threshold: float = 0.3,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize monitor.

        Args:
            max_metrics: Metric log capacity; oldest metrics are dropped
            window_seconds: Rolling window for statistics
            retention_seconds: Age after which the sweep drops a metric
            sweep_interval_seconds: Delay between background sweeps
            response_time_threshold_ms: Recommend above this average latency
            error_rate_threshold: Recommend above this error rate
            cache_hit_rate_threshold: Recommend below this hit rate
            clock: Wall clock in epoch seconds
        """
        self._metrics: deque[Metric] = deque(maxlen=max_metrics)
        self._window = window_seconds
        self._retention = retention_seconds
        self._sweep_interval = sweep_interval_seconds
        self._response_time_threshold = response_time_threshold_ms
        self._error_rate_threshold = error_rate_threshold
        self._cache_hit_rate_threshold = cache_hit_rate_threshold
        self._clock = clock

        self._model_usage: dict[str, int] = {}
        self._stats = PerformanceStats()
        self._sweeper: asyncio.Task[None] | None = None

    def __len__(self) -> int:
        return len(self._metrics)

    # ---------------------------------------------------------------
    # Recording
    # ---------------------------------------------------------------

    def record_processing(self, task_type: str, duration_ms: float, model_name: str) -> None:
        self._add(
            MetricKind.PROCESSING_TIME,
            duration_ms,
            {"task_type": _type_name(task_type), "model": model_name},
        )

    def record_cache_hit(self, task_type: str) -> None:
        self._add(MetricKind.CACHE_HIT, 1, {"task_type": _type_name(task_type)})

    def record_error(self, task_type: str, error: BaseException) -> None:
        metadata: dict[str, Any] = {
            "task_type": _type_name(task_type),
            "error_type": type(error).__name__,
            "error_message": str(error),
        }
        if isinstance(error, TaskForgeError):
            metadata["error_code"] = error.code.value
            metadata["error_message"] = error.message
        self._add(MetricKind.ERROR, 1, metadata)

    def record_model_usage(self, model_name: str) -> None:
        """Count a selection. Usage counts are lifetime, not windowed."""
        self._model_usage[model_name] = self._model_usage.get(model_name, 0) + 1
        self._add(MetricKind.MODEL_USAGE, 1, {"model": model_name})

    # ---------------------------------------------------------------
    # Queries
    # ---------------------------------------------------------------

    def get_stats(self) -> PerformanceStats:
        return self._stats.model_copy(deep=True)

    def get_recent_metrics(self, duration_seconds: float = 3600) -> list[Metric]:
        """Metrics recorded within the last ``duration_seconds``."""
        cutoff = self._clock() - duration_seconds
        return [m for m in self._metrics if m.timestamp > cutoff]

    def get_metrics_by_type(
        self,
        kind: MetricKind | str,
        duration_seconds: float = 3600,
    ) -> list[Metric]:
        """Recent metrics of one kind."""
        kind = MetricKind(kind)
        return [m for m in self.get_recent_metrics(duration_seconds) if m.kind == kind]

    def get_performance_report(self) -> PerformanceReport:
        """
        Build a performance report.

        Returns:
            Current stats, metrics from the rolling window, and
            recommendations for any threshold that is crossed
        """
        stats = self.get_stats()
        recommendations: list[str] = []

        if stats.average_response_time > self._response_time_threshold:
            recommendations.append(
                "High average response time detected. Consider optimizing or "
                "adding faster models."
            )
        if stats.error_rate > self._error_rate_threshold:
            recommendations.append(
                "High error rate detected. Check model availability and stability."
            )
        # An idle monitor has a 0.0 hit rate that says nothing about the cache
        if stats.total_requests > 0 and stats.cache_hit_rate < self._cache_hit_rate_threshold:
            recommendations.append(
                "Low cache hit rate. Consider tuning the cache similarity strategy."
            )

        return PerformanceReport(
            stats=stats,
            recent_metrics=self.get_recent_metrics(self._window),
            recommendations=recommendations,
        )

    def export_metrics(self) -> str:
        """Serialize stats and the full metric log as JSON."""
        payload = {
            "stats": self._stats.model_dump(mode="json"),
            "metrics": [m.model_dump(mode="json") for m in self._metrics],
            "timestamp": self._clock(),
        }
        return json.dumps(payload, indent=2)

    # ---------------------------------------------------------------
    # Maintenance
    # ---------------------------------------------------------------

    def reset(self) -> None:
        """Drop every metric and usage count."""
        self._metrics.clear()
        self._model_usage.clear()
        self._stats = PerformanceStats()
        logger.info("Performance metrics reset")

    def prune(self) -> int:
        """Drop metrics older than the retention period."""
        cutoff = self._clock() - self._retention
        before = len(self._metrics)
        kept = [m for m in self._metrics if m.timestamp > cutoff]
        self._metrics.clear()
        self._metrics.extend(kept)
        self._update_stats()

        removed = before - len(kept)
        if removed:
            logger.debug("Pruned %d metrics older than %.0fs", removed, self._retention)
        return removed

    def start(self) -> None:
        """Start the periodic sweep on the running event loop."""
        if self._sweeper is not None and not self._sweeper.done():
            return
        self._sweeper = asyncio.get_running_loop().create_task(
            self._sweep_loop(), name="taskforge-metrics-sweep"
        )

    async def stop(self) -> None:
        if self._sweeper is None:
            return
        self._sweeper.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._sweeper
        self._sweeper = None

    async def _sweep_loop(self) -> None:
        while True:
            await asyncio.sleep(self._sweep_interval)
            self.prune()

    # ---------------------------------------------------------------
    # Internals
    # ---------------------------------------------------------------

    def _add(self, kind: MetricKind, value: float, metadata: dict[str, Any]) -> None:
        self._metrics.append(
            Metric(kind=kind, value=value, timestamp=self._clock(), metadata=metadata)
        )
        self._update_stats()

    def _update_stats(self) -> None:
        cutoff = self._clock() - self._window

        durations: list[float] = []
        errors = 0
        cache_hits = 0
        for metric in self._metrics:
            if metric.timestamp <= cutoff:
                continue
            if metric.kind is MetricKind.PROCESSING_TIME:
                durations.append(metric.value)
            elif metric.kind is MetricKind.ERROR:
                errors += 1
            elif metric.kind is MetricKind.CACHE_HIT:
                cache_hits += 1

        total = len(durations) + cache_hits
        self._stats = PerformanceStats(
            total_requests=total,
            average_response_time=sum(durations) / len(durations) if durations else 0.0,
            error_rate=errors / total if total else 0.0,
            cache_hit_rate=cache_hits / total if total else 0.0,
            model_usage=dict(self._model_usage),
        )
