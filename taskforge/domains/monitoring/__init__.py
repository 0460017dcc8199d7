"""
Monitoring Domain - Rolling performance metrics.

This domain handles:
- Processing time, cache hit, error and model usage metrics
- Rolling window statistics
- Performance recommendations
"""

from .contracts import MetricsRecorder
from .models import Metric, MetricKind, PerformanceReport, PerformanceStats
from .monitor import PerformanceMonitor

__all__ = [
    # Contracts
    "MetricsRecorder",
    # Models
    "Metric",
    "MetricKind",
    "PerformanceReport",
    "PerformanceStats",
    # Implementations
    "PerformanceMonitor",
]
