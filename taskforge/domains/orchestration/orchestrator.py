"""
Orchestrator - Coordinates enrichment, caching, selection and execution.

Pipeline per task:
1. Enrich a copy of the task with user context
2. Reuse a cached result when it is near-identical
3. Select the best model for the task's constraints
4. Execute through the priority queue under the task's deadline
5. Cache the result and record metrics
"""

from __future__ import annotations

import logging
import time
from collections import OrderedDict, deque
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ValidationError

from taskforge.config import (
    OutputValidationError,
    ProcessingError,
    TaskForgeError,
    TaskValidationError,
)
from taskforge.domains.cache import CacheEntry
from taskforge.domains.monitoring import PerformanceReport, PerformanceStats
from taskforge.domains.registry import ModelPlugin, SelectionCriteria
from taskforge.domains.tasks import (
    BusinessContext,
    Task,
    TaskContext,
    TaskType,
    UserPreferences,
)

from .complexity import analyze_complexity
from .context import OrchestratorContext
from .contracts import BusinessContextProvider, PreferenceStore
from .models import DEFAULT_CONFIDENCE, ResultEnvelope, ResultMetadata, SystemHealth

logger = logging.getLogger(__name__)

__all__ = ["Orchestrator"]


class Orchestrator:
    """
    Task orchestration facade.

    Coordinates:
    - Context enrichment from pluggable providers
    - Semantic cache reuse above ``reuse_threshold``
    - Constraint-based model selection
    - Queued execution with retry and deadlines
    - Metrics for every outcome
    """

    def __init__(
        self,
        context: OrchestratorContext | None = None,
        *,
        business_context: BusinessContextProvider | None = None,
        preferences: PreferenceStore | None = None,
        output_schemas: Mapping[TaskType, type[BaseModel]] | None = None,
        reuse_threshold: float = 0.95,
        enforce_deadlines: bool = True,
        recent_task_history: int = 10,
        max_tracked_users: int = 1000,
    ) -> None:
        """
        Initialize orchestrator.

        Args:
            context: Shared registry, cache, queue and monitor
            business_context: Organisational context provider
            preferences: User preference store
            output_schemas: Per task type schema that model output must satisfy
            reuse_threshold: Similarity a cached result must exceed to be reused
            enforce_deadlines: Pass each task's max latency to the queue as a deadline
            recent_task_history: Tasks remembered per user for enrichment
            max_tracked_users: Users whose context and history are kept, least recent dropped first
        """
        self._context = context or OrchestratorContext()
        self._business_context = business_context
        self._preferences = preferences
        self._output_schemas: dict[TaskType, type[BaseModel]] = dict(output_schemas or {})
        self._reuse_threshold = reuse_threshold
        self._enforce_deadlines = enforce_deadlines
        self._history_size = recent_task_history
        self._max_users = max_tracked_users

        self._user_contexts: OrderedDict[str, TaskContext] = OrderedDict()
        self._recent_tasks: dict[str, deque[Task]] = {}
        self._started_at = time.monotonic()

    @property
    def context(self) -> OrchestratorContext:
        return self._context

    async def __aenter__(self) -> Orchestrator:
        await self._context.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self._context.aclose()

    def register_output_schema(self, task_type: TaskType, schema: type[BaseModel]) -> None:
        """Require model output for ``task_type`` to validate against ``schema``."""
        self._output_schemas[TaskType(task_type)] = schema

    async def process(
        self,
        task: Task | Mapping[str, Any],
        user_id: str | None = None,
    ) -> ResultEnvelope:
        """
        Process a task end to end.

        Args:
            task: Task, or a mapping validated into one
            user_id: Requesting user, used for context enrichment

        Returns:
            Result envelope with provenance metadata

        Raises:
            TaskValidationError: Malformed task mapping
            NoCandidateError: No model satisfies the constraints
            TaskTimeoutError: Deadline passed
            QueueExhaustedError: Every retry failed
            ProcessingError: Any other failure
        """
        try:
            task = self._coerce(task)
        except TaskValidationError as e:
            self._record("error", self._context.monitor.record_error, _raw_type(task), e)
            raise

        start = time.perf_counter()
        enriched = await self._enrich(task, user_id)

        cache = self._context.cache
        monitor = self._context.monitor

        try:
            cached = await cache.search(enriched)
            if cached is not None and cached.similarity > self._reuse_threshold:
                self._record("cache hit", monitor.record_cache_hit, task.type)
                logger.info(
                    "Task %s served from cache (similarity=%.3f)", task.id[:8], cached.similarity
                )
                return self._from_cache(cached, start)

            criteria = SelectionCriteria.from_task(enriched, analyze_complexity(enriched))
            model = await self._context.registry.select_best(criteria)
            self._record("model usage", monitor.record_model_usage, model.name)

            result = await self._execute(model, enriched)
            self._validate_output(enriched.type, result)

            await cache.store(enriched, result, model.name)

            elapsed_ms = (time.perf_counter() - start) * 1000
            self._record("processing", monitor.record_processing, task.type, elapsed_ms, model.name)
            logger.info(
                "Task %s (%s) processed by %s in %.1fms",
                task.id[:8],
                task.type.value,
                model.name,
                elapsed_ms,
            )
        except TaskForgeError as e:
            self._record("error", monitor.record_error, task.type, e)
            logger.warning("Task %s failed: %s", task.id[:8], e)
            raise
        except Exception as e:
            self._record("error", monitor.record_error, task.type, e)
            logger.error("Task %s failed: %s", task.id[:8], e)
            raise ProcessingError(
                f"AI processing failed: {e}",
                {"task_id": task.id, "task_type": task.type.value},
            ) from e

        return ResultEnvelope(
            data=result,
            metadata=ResultMetadata(
                from_cache=False,
                confidence=_confidence(result),
                processing_time_ms=elapsed_ms,
                model_used=model.name,
            ),
        )

    def get_user_context(self, user_id: str) -> TaskContext | None:
        """Most recent context resolved for a user."""
        return self._user_contexts.get(user_id)

    def get_metrics(self) -> PerformanceStats:
        return self._context.monitor.get_stats()

    def get_performance_report(self) -> PerformanceReport:
        return self._context.monitor.get_performance_report()

    def get_health(self) -> SystemHealth:
        """Get health of every component."""
        return SystemHealth(
            models=self._context.registry.get_health(),
            queue=self._context.queue.get_stats(),
            cache=self._context.cache.get_stats(),
            uptime_seconds=time.monotonic() - self._started_at,
        )

    # ---------------------------------------------------------------
    # Pipeline steps
    # ---------------------------------------------------------------

    @staticmethod
    def _coerce(task: Task | Mapping[str, Any]) -> Task:
        if isinstance(task, Task):
            return task
        try:
            return Task.model_validate(task)
        except ValidationError as e:
            raise TaskValidationError(
                "Invalid task",
                {"errors": e.errors(include_url=False, include_context=False, include_input=False)},
            ) from e

    async def _enrich(self, task: Task, user_id: str | None) -> Task:
        """Attach a resolved context to a copy of the task."""
        context = TaskContext(
            user_id=user_id,
            session_id=task.session_id,
            previous_tasks=self._previous_tasks(user_id),
            business_context=await self._lookup_business_context(user_id),
            preferences=await self._lookup_preferences(user_id),
        )

        if user_id is not None:
            self._remember(user_id, context, task)

        return task.with_context(context)

    def _remember(self, user_id: str, context: TaskContext, task: Task) -> None:
        self._user_contexts[user_id] = context
        self._user_contexts.move_to_end(user_id)
        history = self._recent_tasks.setdefault(user_id, deque(maxlen=self._history_size))
        history.append(task)

        while len(self._user_contexts) > self._max_users:
            evicted, _ = self._user_contexts.popitem(last=False)
            self._recent_tasks.pop(evicted, None)

    def _previous_tasks(self, user_id: str | None) -> list[Task]:
        if user_id is None:
            return []
        return list(self._recent_tasks.get(user_id, ()))

    async def _lookup_business_context(self, user_id: str | None) -> BusinessContext:
        if user_id is None or self._business_context is None:
            return BusinessContext()
        try:
            found = await self._business_context.get_business_context(user_id)
            return BusinessContext.model_validate(found)
        except Exception as e:
            logger.warning("Business context lookup failed for %s: %s", user_id, e)
            return BusinessContext()

    async def _lookup_preferences(self, user_id: str | None) -> UserPreferences:
        if user_id is None or self._preferences is None:
            return UserPreferences()
        try:
            found = await self._preferences.get_preferences(user_id)
            return UserPreferences.model_validate(found)
        except Exception as e:
            logger.warning("Preference lookup failed for %s: %s", user_id, e)
            return UserPreferences()

    async def _execute(self, model: ModelPlugin, task: Task) -> Any:
        timeout_ms = task.max_latency_ms if self._enforce_deadlines else None
        return await self._context.queue.process(
            lambda: model.process(task),
            task.priority,
            timeout_ms=timeout_ms,
        )

    def _validate_output(self, task_type: TaskType, result: Any) -> None:
        schema = self._output_schemas.get(task_type)
        if schema is None:
            return
        try:
            schema.model_validate(result)
        except ValidationError as e:
            raise OutputValidationError(
                f"Model output does not match {schema.__name__}",
                {
                    "task_type": task_type.value,
                    "errors": e.errors(include_url=False, include_context=False, include_input=False),
                },
            ) from e

    def _from_cache(self, entry: CacheEntry, start: float) -> ResultEnvelope:
        return ResultEnvelope(
            data=entry.result,
            metadata=ResultMetadata(
                from_cache=True,
                confidence=_confidence(entry.result),
                processing_time_ms=(time.perf_counter() - start) * 1000,
                model_used=entry.model_used,
            ),
        )

    @staticmethod
    def _record(metric: str, record: Any, *args: Any) -> None:
        """Record a metric; a failing monitor never fails the task."""
        try:
            record(*args)
        except Exception as e:
            logger.warning("Failed to record %s metric: %s", metric, e)


def _confidence(result: Any) -> float:
    if isinstance(result, Mapping):
        value = result.get("confidence")
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
    return DEFAULT_CONFIDENCE


def _raw_type(task: Any) -> str:
    """Task type of a rejected mapping, for error metrics."""
    if isinstance(task, Mapping):
        value = task.get("type")
        if value is not None:
            return str(getattr(value, "value", value))
    return "unknown"
