"""
Tests for the performance monitor.
"""

from __future__ import annotations

import asyncio
import json

import pytest

from taskforge.config import NoCandidateError
from taskforge.domains.tasks import TaskType

from .models import MetricKind
from .monitor import PerformanceMonitor

HOUR = 3600


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, start: float = 1_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def monitor(clock: FakeClock) -> PerformanceMonitor:
    return PerformanceMonitor(clock=clock)


def test_empty_stats(monitor: PerformanceMonitor) -> None:
    """Test an idle monitor reports zeros."""
    stats = monitor.get_stats()

    assert stats.total_requests == 0
    assert stats.average_response_time == 0.0
    assert stats.error_rate == 0.0
    assert stats.cache_hit_rate == 0.0
    assert stats.model_usage == {}


def test_rolling_stats(monitor: PerformanceMonitor) -> None:
    """Test requests, averages and rates over the window."""
    monitor.record_processing(TaskType.ANALYSIS, 100, "gemini-pro")
    monitor.record_processing(TaskType.ANALYSIS, 300, "gemini-pro")
    monitor.record_cache_hit(TaskType.ANALYSIS)
    monitor.record_cache_hit(TaskType.SUMMARIZATION)
    monitor.record_error(TaskType.PLANNING, RuntimeError("boom"))

    stats = monitor.get_stats()

    assert stats.total_requests == 4
    assert stats.average_response_time == pytest.approx(200)
    assert stats.cache_hit_rate == pytest.approx(0.5)
    assert stats.error_rate == pytest.approx(0.25)


def test_window_excludes_old_metrics(monitor: PerformanceMonitor, clock: FakeClock) -> None:
    """Test metrics older than one hour drop out of the stats."""
    monitor.record_processing(TaskType.ANALYSIS, 1000, "gemini-pro")
    clock.advance(HOUR + 1)
    monitor.record_processing(TaskType.ANALYSIS, 50, "gemini-pro")

    stats = monitor.get_stats()

    assert stats.total_requests == 1
    assert stats.average_response_time == pytest.approx(50)
    assert len(monitor) == 2


def test_model_usage_is_lifetime(monitor: PerformanceMonitor, clock: FakeClock) -> None:
    """Test usage counts survive the rolling window."""
    monitor.record_model_usage("gemini-pro")
    clock.advance(2 * HOUR)
    monitor.record_model_usage("gemini-pro")
    monitor.record_model_usage("quick-responder")

    assert monitor.get_stats().model_usage == {"gemini-pro": 2, "quick-responder": 1}


def test_error_metadata(monitor: PerformanceMonitor) -> None:
    """Test errors keep their type and taxonomy code."""
    monitor.record_error(TaskType.ANALYSIS, NoCandidateError("No suitable model"))

    [metric] = monitor.get_metrics_by_type(MetricKind.ERROR)
    assert metric.metadata["task_type"] == "analysis"
    assert metric.metadata["error_type"] == "NoCandidateError"
    assert metric.metadata["error_code"] == "NO_CANDIDATE"
    assert metric.metadata["error_message"] == "No suitable model"


def test_metric_cap() -> None:
    """Test the log keeps only the newest max_metrics entries."""
    monitor = PerformanceMonitor(max_metrics=3)
    for duration in (1, 2, 3, 4, 5):
        monitor.record_processing("analysis", duration, "m")

    values = [m.value for m in monitor.get_recent_metrics()]
    assert values == [3, 4, 5]


def test_recent_metrics_duration(monitor: PerformanceMonitor, clock: FakeClock) -> None:
    """Test recent metrics honour the requested duration."""
    monitor.record_cache_hit("analysis")
    clock.advance(600)
    monitor.record_cache_hit("analysis")

    assert len(monitor.get_recent_metrics(300)) == 1
    assert len(monitor.get_recent_metrics()) == 2
    assert monitor.get_metrics_by_type("cache_hit", 300)[0].timestamp == clock.now


def test_prune_drops_expired(monitor: PerformanceMonitor, clock: FakeClock) -> None:
    """Test the sweep removes metrics older than a day."""
    monitor.record_processing("analysis", 10, "m")
    clock.advance(25 * HOUR)
    monitor.record_processing("analysis", 20, "m")

    assert monitor.prune() == 1
    assert len(monitor) == 1


def test_report_recommendations(monitor: PerformanceMonitor) -> None:
    """Test each crossed threshold yields a recommendation."""
    monitor.record_processing("analysis", 8000, "slow-model")
    monitor.record_error("analysis", RuntimeError("boom"))

    report = monitor.get_performance_report()

    assert len(report.recommendations) == 3
    assert any("response time" in r for r in report.recommendations)
    assert any("error rate" in r for r in report.recommendations)
    assert any("cache hit rate" in r for r in report.recommendations)
    assert len(report.recent_metrics) == 2


def test_report_idle_has_no_recommendations(monitor: PerformanceMonitor) -> None:
    """Test an idle monitor does not flag the cache."""
    assert monitor.get_performance_report().recommendations == []


def test_report_healthy(monitor: PerformanceMonitor) -> None:
    """Test a fast, cache-friendly workload yields no recommendations."""
    monitor.record_processing("analysis", 200, "m")
    monitor.record_cache_hit("analysis")

    assert monitor.get_performance_report().recommendations == []


def test_export_and_reset(monitor: PerformanceMonitor) -> None:
    """Test export is JSON and reset clears everything."""
    monitor.record_processing(TaskType.SUMMARIZATION, 120, "gemini-pro")
    monitor.record_model_usage("gemini-pro")

    exported = json.loads(monitor.export_metrics())
    assert exported["stats"]["total_requests"] == 1
    assert exported["metrics"][0]["kind"] == "processing_time"
    assert exported["metrics"][0]["metadata"]["task_type"] == "summarization"

    monitor.reset()
    assert len(monitor) == 0
    assert monitor.get_stats().model_usage == {}


async def test_background_sweep(clock: FakeClock) -> None:
    """Test the periodic sweep prunes without manual calls."""
    monitor = PerformanceMonitor(clock=clock, sweep_interval_seconds=0.01)
    monitor.record_processing("analysis", 10, "m")
    clock.advance(25 * HOUR)

    monitor.start()
    await asyncio.sleep(0.05)
    await monitor.stop()

    assert len(monitor) == 0
