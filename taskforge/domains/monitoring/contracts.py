"""
Monitoring Contracts - Interfaces for the monitoring domain.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .models import PerformanceReport, PerformanceStats


@runtime_checkable
class MetricsRecorder(Protocol):
    """Contract for recording orchestration metrics."""

    def record_processing(self, task_type: str, duration_ms: float, model_name: str) -> None:
        """Record one completed model execution."""
        ...

    def record_cache_hit(self, task_type: str) -> None:
        """Record a request served from cache."""
        ...

    def record_error(self, task_type: str, error: BaseException) -> None:
        """Record a failed request."""
        ...

    def record_model_usage(self, model_name: str) -> None:
        """Count a model selection."""
        ...

    def get_stats(self) -> PerformanceStats:
        """Current rolling statistics."""
        ...

    def get_performance_report(self) -> PerformanceReport:
        """Statistics with recent metrics and recommendations."""
        ...
