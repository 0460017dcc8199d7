"""
Semantic Cache - Fingerprint and similarity based memoization of task results.

Provides exact reuse for repeated tasks and near-duplicate reuse for
similar inputs, to avoid redundant model calls.
"""

from __future__ import annotations

import hashlib
import logging
import time
from collections.abc import Callable
from typing import Any

from taskforge.config import CacheError
from taskforge.domains.tasks import Task

from .contracts import SimilarityFunction
from .models import CacheEntry, CacheStats
from .similarity import JaccardSimilarity

logger = logging.getLogger(__name__)

__all__ = ["SemanticCache"]

ErrorHook = Callable[[Task, CacheError], None]


class SemanticCache:
    """
    In-memory semantic cache with TTL.

    Features:
    - Exact lookup by task fingerprint
    - Linear similarity scan with an acceptance threshold
    - Lazy TTL expiration on every search
    - Oldest-first eviction at capacity
    - Failures degrade to a miss, never to an exception
    """

    def __init__(
        self,
        max_size: int = 1000,
        ttl_seconds: float = 24 * 60 * 60,
        similarity_threshold: float = 0.9,
        similarity: SimilarityFunction | None = None,
        match_task_type: bool = False,
        on_error: ErrorHook | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize cache.

        Args:
            max_size: Maximum number of cached entries
            ttl_seconds: Entry lifetime
            similarity_threshold: Similarity a scanned match must exceed
            similarity: Similarity function, Jaccard token overlap by default
            match_task_type: Only compare entries of the same task type
            on_error: Called with every absorbed CacheError
            clock: Time source in epoch seconds
        """
        self._cache: dict[str, CacheEntry] = {}
        self._max_size = max_size
        self._ttl = ttl_seconds
        self._threshold = similarity_threshold
        self._similarity: SimilarityFunction = similarity or JaccardSimilarity()
        self._match_task_type = match_task_type
        self._on_error = on_error
        self._clock = clock

        self._hits = 0
        self._misses = 0
        self._similarity_sum = 0.0
        self._evictions = 0
        self._expired = 0

    @property
    def similarity_threshold(self) -> float:
        return self._threshold

    @property
    def on_error(self) -> ErrorHook | None:
        """Hook called with every absorbed CacheError."""
        return self._on_error

    @on_error.setter
    def on_error(self, hook: ErrorHook | None) -> None:
        self._on_error = hook

    async def search(self, task: Task) -> CacheEntry | None:
        """Return the best live entry for the task, or None."""
        try:
            self._cleanup()

            exact = self._cache.get(self.fingerprint(task))
            if exact is not None:
                return self._hit(exact, 1.0)

            best = self._find_similar(task)
            if best is not None and best[1] > self._threshold:
                return self._hit(*best)
        except Exception as e:
            self._absorb(task, "search", e)

        self._misses += 1
        return None

    async def store(self, task: Task, result: Any, model_used: str = "unknown") -> None:
        """Cache a result."""
        try:
            key = self.fingerprint(task)
            if key not in self._cache and len(self._cache) >= self._max_size:
                self._evict_oldest()

            self._cache[key] = CacheEntry(
                fingerprint=key,
                task=task,
                result=result,
                stored_at=self._clock(),
                model_used=model_used,
            )
            logger.debug("Cached result: %s (model: %s)", key[:16], model_used)
        except Exception as e:
            self._absorb(task, "store", e)

    def clear(self) -> None:
        """Clear all cache entries."""
        count = len(self._cache)
        self._cache.clear()
        logger.info("Cleared %d cache entries", count)

    def get_stats(self) -> CacheStats:
        """Get cache statistics."""
        lookups = self._hits + self._misses
        return CacheStats(
            size=len(self._cache),
            max_size=self._max_size,
            hits=self._hits,
            misses=self._misses,
            hit_rate=self._hits / lookups if lookups else 0.0,
            avg_similarity=self._similarity_sum / self._hits if self._hits else 0.0,
            evictions=self._evictions,
            expired=self._expired,
        )

    def __len__(self) -> int:
        return len(self._cache)

    @staticmethod
    def fingerprint(task: Task) -> str:
        """Exact-match key derived from task type and input."""
        type_value = getattr(task.type, "value", task.type)
        key_string = f"{type_value}\x00{task.input}"
        return hashlib.sha256(key_string.encode()).hexdigest()[:32]

    def _find_similar(self, task: Task) -> tuple[CacheEntry, float] | None:
        """Linear scan for the most similar live entry."""
        best: tuple[CacheEntry, float] | None = None
        for entry in self._cache.values():
            if self._match_task_type and entry.task.type != task.type:
                continue
            score = self._similarity(task, entry.task)
            if best is None or score > best[1]:
                best = (entry, score)
        return best

    def _hit(self, entry: CacheEntry, similarity: float) -> CacheEntry:
        self._hits += 1
        self._similarity_sum += similarity
        logger.debug("Cache hit: %s (similarity: %.3f)", entry.fingerprint[:16], similarity)
        return entry.model_copy(update={"similarity": similarity})

    def _is_expired(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.stored_at > self._ttl

    def _cleanup(self) -> None:
        """Drop expired entries."""
        now = self._clock()
        expired = [k for k, e in self._cache.items() if self._is_expired(e, now)]
        for key in expired:
            del self._cache[key]
        if expired:
            self._expired += len(expired)
            logger.debug("Expired %d cache entries", len(expired))

    def _evict_oldest(self) -> None:
        """Evict the single oldest entry to make room."""
        if not self._cache:
            return

        oldest = min(self._cache, key=lambda k: self._cache[k].stored_at)
        del self._cache[oldest]
        self._evictions += 1
        logger.debug("Evicted oldest cache entry: %s", oldest[:16])

    def _absorb(self, task: Task, operation: str, error: Exception) -> None:
        cache_error = CacheError(
            f"Cache {operation} failed: {error}",
            {"operation": operation, "error_type": type(error).__name__},
        )
        logger.warning("%s", cache_error.message)
        if self._on_error is not None:
            try:
                self._on_error(task, cache_error)
            except Exception:
                logger.exception("Cache error hook failed")
