"""
Tests for the task queue.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncGenerator

import pytest

from taskforge.config import ProcessingError, QueueExhaustedError, TaskTimeoutError
from taskforge.domains.tasks import Priority

from .task_queue import TaskQueue


@pytest.fixture
async def queue() -> AsyncGenerator[TaskQueue, None]:
    """Create a queue and stop it after the test."""
    q = TaskQueue(max_concurrent=2, max_retries=3)
    yield q
    await q.stop()


async def test_process_returns_result(queue: TaskQueue) -> None:
    """Test a successful executor's result reaches the caller."""

    async def executor() -> str:
        return "done"

    assert await queue.process(executor) == "done"
    assert queue.get_stats().completed == 1


async def test_retry_bound() -> None:
    """Test an always-failing executor runs max_retries + 1 times."""
    queue = TaskQueue(max_concurrent=1, max_retries=3)
    calls = 0

    async def failing() -> None:
        nonlocal calls
        calls += 1
        raise RuntimeError("model crashed")

    with pytest.raises(QueueExhaustedError) as exc_info:
        await queue.process(failing)

    assert calls == 4
    assert isinstance(exc_info.value, ProcessingError)
    assert isinstance(exc_info.value.__cause__, RuntimeError)
    assert exc_info.value.details["attempts"] == 4

    stats = queue.get_stats()
    assert stats.retried == 3
    assert stats.failed == 1
    await queue.stop()


async def test_retry_then_success(queue: TaskQueue) -> None:
    """Test a transient failure is retried transparently."""
    attempts = 0

    async def flaky() -> str:
        nonlocal attempts
        attempts += 1
        if attempts < 3:
            raise ConnectionError("transient")
        return "recovered"

    assert await queue.process(flaky) == "recovered"
    assert attempts == 3


async def test_priority_ordering() -> None:
    """Test urgent work waiting for the slot runs before earlier low work."""
    queue = TaskQueue(max_concurrent=1)
    events: list[str] = []
    release = asyncio.Event()

    async def blocker() -> None:
        await release.wait()

    def job(name: str):
        async def run() -> str:
            events.append(f"start:{name}")
            await asyncio.sleep(0)
            events.append(f"end:{name}")
            return name

        return run

    blocking = asyncio.create_task(queue.process(blocker))
    await asyncio.sleep(0.01)
    assert queue.in_flight == 1

    low = asyncio.create_task(queue.process(job("B"), Priority.LOW))
    await asyncio.sleep(0)
    urgent = asyncio.create_task(queue.process(job("A"), Priority.URGENT))
    await asyncio.sleep(0.01)

    release.set()
    await asyncio.gather(blocking, low, urgent)

    assert events == ["start:A", "end:A", "start:B", "end:B"]
    await queue.stop()


async def test_simultaneous_submission_respects_priority() -> None:
    """Test submission order never reverses priority order."""
    queue = TaskQueue(max_concurrent=1)
    order: list[str] = []

    def job(name: str):
        async def run() -> None:
            order.append(name)

        return run

    await asyncio.gather(
        queue.process(job("low"), Priority.LOW),
        queue.process(job("normal"), Priority.NORMAL),
        queue.process(job("urgent"), Priority.URGENT),
        queue.process(job("high"), Priority.HIGH),
    )

    assert order == ["urgent", "high", "normal", "low"]
    await queue.stop()


async def test_fifo_within_tier() -> None:
    """Test equal priorities run in submission order."""
    queue = TaskQueue(max_concurrent=1)
    order: list[int] = []

    def job(n: int):
        async def run() -> None:
            order.append(n)

        return run

    await asyncio.gather(*(queue.process(job(n), Priority.HIGH) for n in range(5)))

    assert order == [0, 1, 2, 3, 4]
    await queue.stop()


async def test_concurrency_bound() -> None:
    """Test the processing set never exceeds max_concurrent under 2x load."""
    max_concurrent = 3
    samples: list[int] = []
    queue = TaskQueue(max_concurrent=max_concurrent, on_dispatch=samples.append)

    async def work() -> None:
        samples.append(queue.in_flight)
        await asyncio.sleep(0.01)
        samples.append(queue.in_flight)

    await asyncio.gather(*(queue.process(work) for _ in range(2 * max_concurrent)))

    assert max(samples) <= max_concurrent
    assert max(samples) == max_concurrent
    assert queue.in_flight == 0
    await queue.stop()


async def test_failing_dispatch_observer_does_not_stall_queue() -> None:
    """Test an observer error is logged while items keep running and slots are freed."""

    def observer(size: int) -> None:
        raise RuntimeError("observer broke")

    queue = TaskQueue(max_concurrent=1, on_dispatch=observer)

    async def work(value: int) -> int:
        return value

    results = await asyncio.wait_for(
        asyncio.gather(*(queue.process(lambda v=v: work(v)) for v in range(3))),
        timeout=1,
    )

    assert results == [0, 1, 2]
    assert queue.in_flight == 0
    assert queue.get_stats().completed == 3
    await queue.stop()


async def test_timeout_while_running() -> None:
    """Test a slow executor is cancelled at its deadline."""
    queue = TaskQueue(max_concurrent=1)
    cancelled = asyncio.Event()

    async def slow() -> None:
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            cancelled.set()
            raise

    with pytest.raises(TaskTimeoutError):
        await queue.process(slow, timeout_ms=50)

    await asyncio.wait_for(cancelled.wait(), timeout=1)
    await asyncio.sleep(0)
    assert queue.in_flight == 0
    await queue.stop()


async def test_timeout_while_queued_skips_execution() -> None:
    """Test an item whose caller gave up never runs."""
    queue = TaskQueue(max_concurrent=1)
    release = asyncio.Event()
    ran = False

    async def blocker() -> None:
        await release.wait()

    async def late() -> None:
        nonlocal ran
        ran = True

    blocking = asyncio.create_task(queue.process(blocker))
    await asyncio.sleep(0.01)

    with pytest.raises(TaskTimeoutError):
        await queue.process(late, timeout_ms=20)

    release.set()
    await blocking
    await asyncio.sleep(0.01)

    assert ran is False
    await queue.stop()


async def test_stats_shape(queue: TaskQueue) -> None:
    """Test stats report configuration and running state."""

    async def executor() -> None:
        return None

    await queue.process(executor)
    stats = queue.get_stats()

    assert stats.max_concurrent == 2
    assert stats.queue_length == 0
    assert stats.processing == 0
    assert stats.is_running is True


async def test_stop_fails_pending_callers() -> None:
    """Test stopping the queue releases waiting callers."""
    queue = TaskQueue(max_concurrent=1)
    release = asyncio.Event()

    async def blocker() -> None:
        await release.wait()

    async def pending() -> None:
        return None

    running = asyncio.create_task(queue.process(blocker))
    waiting = asyncio.create_task(queue.process(pending))
    await asyncio.sleep(0.01)

    await queue.stop()

    with pytest.raises(ProcessingError):
        await waiting
    with pytest.raises(asyncio.CancelledError):
        await running


def test_invalid_concurrency() -> None:
    """Test max_concurrent must be positive."""
    with pytest.raises(ValueError):
        TaskQueue(max_concurrent=0)
