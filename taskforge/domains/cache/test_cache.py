"""
Tests for the semantic cache and similarity functions.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import numpy as np
import pytest

from taskforge.config import CacheError
from taskforge.domains.tasks import Task, TaskType

from .semantic_cache import SemanticCache
from .similarity import EmbeddingSimilarity, JaccardSimilarity

DAY = 24 * 60 * 60


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
def cache(clock: FakeClock) -> SemanticCache:
    """Create a cache driven by the fake clock."""
    return SemanticCache(clock=clock)


def words(count: int, prefix: str = "w") -> list[str]:
    return [f"{prefix}{i}" for i in range(count)]


def task(text: str, task_type: TaskType = TaskType.SUMMARIZATION) -> Task:
    return Task(type=task_type, input=text)


# --- Similarity Tests ---


def test_jaccard_identical_inputs() -> None:
    """Test identical inputs score 1.0, case-insensitively."""
    similarity = JaccardSimilarity()
    assert similarity(task("Quarterly Sales Report"), task("quarterly sales report")) == 1.0


def test_jaccard_partial_overlap() -> None:
    """Test overlap is intersection over union of word sets."""
    similarity = JaccardSimilarity()
    # {a, b, c} vs {b, c, d}: 2 / 4
    assert similarity(task("a b c"), task("b c d")) == pytest.approx(0.5)


def test_jaccard_ignores_duplicate_words() -> None:
    """Test repeated words count once."""
    similarity = JaccardSimilarity()
    assert similarity(task("go go go"), task("go")) == 1.0


def test_embedding_similarity_cosine() -> None:
    """Test cosine similarity over supplied embeddings."""
    vectors = {
        "north": [1.0, 0.0],
        "north east": [1.0, 1.0],
        "south": [-1.0, 0.0],
    }
    similarity = EmbeddingSimilarity(lambda text: vectors[text])

    assert similarity(task("north"), task("north")) == pytest.approx(1.0)
    assert similarity(task("north"), task("north east")) == pytest.approx(1 / np.sqrt(2))
    assert similarity(task("north"), task("south")) == 0.0


def test_embedding_similarity_reuses_vectors() -> None:
    """Test each distinct text is embedded once."""
    embed = MagicMock(return_value=np.array([0.5, 0.5]))
    similarity = EmbeddingSimilarity(embed)

    similarity(task("alpha"), task("beta"))
    similarity(task("alpha"), task("beta"))

    assert embed.call_count == 2


# --- Cache Tests ---


async def test_round_trip(cache: SemanticCache) -> None:
    """Test store then search returns the same result with similarity 1.0."""
    t = task("summarize the meeting notes")
    result = {"summary": "short"}
    await cache.store(t, result, model_used="quick-responder")

    entry = await cache.search(t)

    assert entry is not None
    assert entry.similarity == 1.0
    assert entry.result == result
    assert entry.model_used == "quick-responder"


async def test_exact_lookup_ignores_task_identity(cache: SemanticCache) -> None:
    """Test fingerprint depends only on type and input."""
    await cache.store(task("same words"), "cached")

    entry = await cache.search(task("same words"))
    assert entry is not None
    assert entry.result == "cached"


async def test_miss_on_empty_cache(cache: SemanticCache) -> None:
    """Test an empty cache misses."""
    assert await cache.search(task("anything")) is None
    assert cache.get_stats().misses == 1


async def test_similar_match_above_threshold(cache: SemanticCache) -> None:
    """Test a 0.92 match passes the cache's own 0.9 gate."""
    base = words(24)
    await cache.store(task(" ".join(base)), "stored")

    # 23 shared words, 25 in the union
    query = task(" ".join(base[:23] + ["different"]))
    entry = await cache.search(query)

    assert entry is not None
    assert entry.similarity == pytest.approx(0.92)
    assert entry.result == "stored"


async def test_similar_match_below_threshold(cache: SemanticCache) -> None:
    """Test weak matches are not returned."""
    await cache.store(task("the cat sat on the mat"), "stored")
    assert await cache.search(task("the dog sat on the rug")) is None


async def test_similarity_scan_across_types_by_default(cache: SemanticCache) -> None:
    """Test the scan compares every live entry regardless of task type."""
    await cache.store(task("one two three", TaskType.TRANSLATION), "translated")

    entry = await cache.search(task("one two three", TaskType.SUMMARIZATION))
    assert entry is not None
    assert entry.similarity == 1.0
    assert entry.result == "translated"


async def test_similarity_scan_restricted_to_task_type(clock: FakeClock) -> None:
    """Test a different task type never matches once type matching is on."""
    cache = SemanticCache(clock=clock, match_task_type=True)
    base = words(24)
    await cache.store(task(" ".join(base), TaskType.TRANSLATION), "translated")

    query = task(" ".join(base[:23] + ["different"]), TaskType.SUMMARIZATION)
    assert await cache.search(query) is None


async def test_ttl_expiry(cache: SemanticCache, clock: FakeClock) -> None:
    """Test entries vanish once older than the TTL."""
    t = task("expiring entry")
    await cache.store(t, "value")

    clock.advance(DAY)
    assert await cache.search(t) is not None

    clock.advance(1)
    assert await cache.search(t) is None
    assert len(cache) == 0
    assert cache.get_stats().expired == 1


async def test_evicts_oldest_at_capacity(clock: FakeClock) -> None:
    """Test the single oldest entry is evicted when full."""
    cache = SemanticCache(max_size=2, clock=clock)

    await cache.store(task("first entry"), 1)
    clock.advance(1)
    await cache.store(task("second entry"), 2)
    clock.advance(1)
    await cache.store(task("third entry"), 3)

    assert len(cache) == 2
    assert await cache.search(task("first entry")) is None
    assert (await cache.search(task("second entry"))).result == 2
    assert (await cache.search(task("third entry"))).result == 3
    assert cache.get_stats().evictions == 1


async def test_overwrite_does_not_evict(clock: FakeClock) -> None:
    """Test re-storing an existing fingerprint keeps other entries."""
    cache = SemanticCache(max_size=2, clock=clock)
    await cache.store(task("first entry"), 1)
    await cache.store(task("second entry"), 2)
    await cache.store(task("second entry"), 22)

    assert len(cache) == 2
    assert (await cache.search(task("first entry"))).result == 1
    assert (await cache.search(task("second entry"))).result == 22


async def test_similarity_failure_degrades_to_miss(clock: FakeClock) -> None:
    """Test similarity errors are absorbed and reported."""

    def broken(query: Task, candidate: Task) -> float:
        raise RuntimeError("embedding backend down")

    on_error = MagicMock()
    cache = SemanticCache(similarity=broken, on_error=on_error, clock=clock)
    await cache.store(task("stored input"), "value")

    assert await cache.search(task("another input")) is None
    on_error.assert_called_once()
    error = on_error.call_args.args[1]
    assert isinstance(error, CacheError)
    assert error.details["operation"] == "search"


async def test_store_failure_is_absorbed(cache: SemanticCache) -> None:
    """Test a malformed task does not raise from store."""
    malformed = MagicMock(spec=[])  # no type / input attributes
    await cache.store(malformed, "value")  # type: ignore[arg-type]
    assert len(cache) == 0


async def test_stats(cache: SemanticCache) -> None:
    """Test hit and miss counters."""
    t = task("count me")
    await cache.store(t, "value")
    await cache.search(t)
    await cache.search(task("unrelated words entirely"))

    stats = cache.get_stats()
    assert stats.size == 1
    assert stats.hits == 1
    assert stats.misses == 1
    assert stats.hit_rate == pytest.approx(0.5)
    assert stats.avg_similarity == pytest.approx(1.0)


async def test_clear(cache: SemanticCache) -> None:
    """Test clear empties the cache."""
    await cache.store(task("something"), "value")
    cache.clear()
    assert len(cache) == 0
