"""
Cache Models - Data types for the semantic cache.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from taskforge.domains.tasks import Task


class CacheEntry(BaseModel):
    """Memoized result of a prior task."""

    fingerprint: str
    task: Task
    result: Any
    stored_at: float  # epoch seconds
    model_used: str = "unknown"
    similarity: float = 1.0  # filled in on the copy returned by a lookup


class CacheStats(BaseModel):
    """Cache counters for health reporting."""

    size: int
    max_size: int
    hits: int
    misses: int
    hit_rate: float
    avg_similarity: float
    evictions: int
    expired: int
