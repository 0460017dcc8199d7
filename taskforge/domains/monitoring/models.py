"""
Monitoring Models - Metric records and aggregated statistics.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class MetricKind(str, Enum):
    """Kinds of metric recorded by the monitor."""

    PROCESSING_TIME = "processing_time"
    CACHE_HIT = "cache_hit"
    ERROR = "error"
    MODEL_USAGE = "model_usage"


class Metric(BaseModel):
    """A single append-only measurement."""

    model_config = ConfigDict(frozen=True)

    kind: MetricKind
    value: float
    timestamp: float  # epoch seconds
    metadata: dict[str, Any] = Field(default_factory=dict)


class PerformanceStats(BaseModel):
    """Rolling statistics over the monitor window."""

    total_requests: int = 0
    average_response_time: float = 0.0  # ms
    error_rate: float = 0.0
    cache_hit_rate: float = 0.0
    model_usage: dict[str, int] = Field(default_factory=dict)  # lifetime counts


class PerformanceReport(BaseModel):
    """Statistics plus recent metrics and tuning recommendations."""

    stats: PerformanceStats
    recent_metrics: list[Metric] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
