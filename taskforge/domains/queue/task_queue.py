"""
Task Queue - Priority ordered, bounded concurrency executor with retry.

A dispatcher coroutine takes a concurrency slot, then pops the head of the
priority queue and starts it. Each caller awaits its own future, so nothing
polls.
"""

from __future__ import annotations

import asyncio
import contextlib
import itertools
import logging
import time
import uuid
from collections.abc import Callable
from typing import Any

from taskforge.config import ProcessingError, QueueExhaustedError, TaskTimeoutError
from taskforge.domains.tasks import Priority

from .models import Executor, QueueItem, QueueStats

logger = logging.getLogger(__name__)

__all__ = ["TaskQueue"]

DispatchObserver = Callable[[int], None]


class TaskQueue:
    """
    Bounded priority executor.

    Guarantees:
    - Strict priority across tiers (urgent > high > normal > low)
    - FIFO within a tier, retries re-enter at the tail of their tier
    - At most ``max_concurrent`` executors in flight
    - An always-failing executor runs exactly ``max_retries + 1`` times
    """

    def __init__(
        self,
        max_concurrent: int = 5,
        max_retries: int = 3,
        on_dispatch: DispatchObserver | None = None,
    ) -> None:
        """
        Initialize queue.

        Args:
            max_concurrent: Size of the processing set
            max_retries: Re-attempts after the first failure
            on_dispatch: Called with the processing set size after each dispatch
        """
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1")

        self._max_concurrent = max_concurrent
        self._max_retries = max_retries
        self._on_dispatch = on_dispatch

        self._queue: asyncio.PriorityQueue[tuple[int, int, QueueItem]] = asyncio.PriorityQueue()
        self._slots = asyncio.Semaphore(max_concurrent)
        self._sequence = itertools.count()
        self._processing: dict[str, QueueItem] = {}
        self._runners: set[asyncio.Task[None]] = set()
        self._dispatcher: asyncio.Task[None] | None = None

        self._completed = 0
        self._failed = 0
        self._retried = 0

    @property
    def max_concurrent(self) -> int:
        return self._max_concurrent

    @property
    def in_flight(self) -> int:
        """Current size of the processing set."""
        return len(self._processing)

    @property
    def is_running(self) -> bool:
        return self._dispatcher is not None and not self._dispatcher.done()

    def start(self) -> None:
        """Start the dispatcher on the running event loop."""
        if self.is_running:
            return
        self._dispatcher = asyncio.get_running_loop().create_task(
            self._dispatch_loop(), name="taskforge-queue-dispatcher"
        )
        logger.debug("Queue dispatcher started (max_concurrent=%d)", self._max_concurrent)

    async def stop(self) -> None:
        """Stop dispatching and cancel in-flight executors."""
        if self._dispatcher is not None:
            self._dispatcher.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._dispatcher
            self._dispatcher = None

        runners = list(self._runners)
        for runner in runners:
            runner.cancel()
        if runners:
            await asyncio.gather(*runners, return_exceptions=True)

        self.clear()
        logger.debug("Queue dispatcher stopped")

    def clear(self) -> None:
        """Drop pending items; their callers fail with ProcessingError."""
        dropped = 0
        while not self._queue.empty():
            _, _, item = self._queue.get_nowait()
            if not item.future.done():
                item.future.set_exception(ProcessingError("Task dropped: queue cleared"))
            dropped += 1
        if dropped:
            logger.info("Cleared %d pending queue items", dropped)

    async def process(
        self,
        executor: Executor,
        priority: Priority | str = Priority.NORMAL,
        *,
        timeout_ms: float | None = None,
    ) -> Any:
        """Enqueue an executor and wait for its terminal result."""
        self.start()
        loop = asyncio.get_running_loop()

        item = QueueItem(
            id=f"task_{uuid.uuid4().hex[:12]}",
            priority=Priority(priority),
            executor=executor,
            future=loop.create_future(),
            enqueued_at=time.time(),
            max_retries=self._max_retries,
        )
        if timeout_ms is not None:
            item.deadline = loop.time() + timeout_ms / 1000

        self._enqueue(item)

        try:
            if timeout_ms is None:
                return await item.future
            return await asyncio.wait_for(asyncio.shield(item.future), timeout=timeout_ms / 1000)
        except asyncio.TimeoutError:
            self._abandon(item)
            raise TaskTimeoutError(
                f"Task {item.id} exceeded its {timeout_ms:.0f}ms deadline",
                {"task_id": item.id, "timeout_ms": timeout_ms, "retries": item.retries},
            ) from None
        except asyncio.CancelledError:
            self._abandon(item)
            raise

    def get_stats(self) -> QueueStats:
        """Get queue statistics."""
        return QueueStats(
            queue_length=self._queue.qsize(),
            processing=len(self._processing),
            max_concurrent=self._max_concurrent,
            is_running=self.is_running,
            completed=self._completed,
            failed=self._failed,
            retried=self._retried,
        )

    def _enqueue(self, item: QueueItem) -> None:
        # The sequence number keeps FIFO order within a tier
        self._queue.put_nowait((item.priority.rank, next(self._sequence), item))

    def _abandon(self, item: QueueItem) -> None:
        """Caller stopped waiting: skip the item if queued, cancel it if running."""
        item.future.cancel()
        if item.runner is not None and not item.runner.done():
            item.runner.cancel()

    async def _dispatch_loop(self) -> None:
        loop = asyncio.get_running_loop()
        while True:
            await self._slots.acquire()
            try:
                _, _, item = await self._queue.get()
            except asyncio.CancelledError:
                self._slots.release()
                raise

            if item.future.done():
                # Caller timed out or was cancelled while the item waited
                self._slots.release()
                continue

            if item.deadline is not None and loop.time() >= item.deadline:
                self._failed += 1
                item.future.set_exception(
                    TaskTimeoutError(
                        f"Task {item.id} deadline passed before execution",
                        {"task_id": item.id, "retries": item.retries},
                    )
                )
                self._slots.release()
                continue

            self._processing[item.id] = item
            if self._on_dispatch is not None:
                try:
                    self._on_dispatch(len(self._processing))
                except Exception:
                    logger.exception("Dispatch observer failed for queue item %s", item.id)

            runner = loop.create_task(self._run(item), name=f"taskforge-{item.id}")
            item.runner = runner
            self._runners.add(runner)
            runner.add_done_callback(self._runners.discard)

    async def _run(self, item: QueueItem) -> None:
        try:
            result = await item.executor()
        except asyncio.CancelledError:
            logger.debug("Queue item %s cancelled", item.id)
            if not item.future.done():
                item.future.cancel()
            raise
        except Exception as e:
            if item.future.done():
                return
            if item.retries < item.max_retries:
                item.retries += 1
                self._retried += 1
                logger.warning(
                    "Queue item %s failed (%s), retry %d/%d",
                    item.id,
                    e,
                    item.retries,
                    item.max_retries,
                )
                self._enqueue(item)
                return

            self._failed += 1
            logger.error("Queue item %s failed after %d attempts: %s", item.id, item.retries + 1, e)
            error = QueueExhaustedError(
                f"Processing failed after {item.retries + 1} attempts: {e}",
                {"task_id": item.id, "attempts": item.retries + 1},
            )
            error.__cause__ = e
            item.future.set_exception(error)
        else:
            if not item.future.done():
                self._completed += 1
                item.future.set_result(result)
        finally:
            item.runner = None
            self._processing.pop(item.id, None)
            self._slots.release()
