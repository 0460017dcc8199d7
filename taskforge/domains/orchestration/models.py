"""
Orchestration Models - Data types returned by the orchestrator.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field

from taskforge.domains.cache import CacheStats
from taskforge.domains.queue import QueueStats

DEFAULT_CONFIDENCE = 0.9


class ResultMetadata(BaseModel):
    """Provenance of a result."""

    from_cache: bool
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    confidence: float = DEFAULT_CONFIDENCE
    processing_time_ms: float = 0.0
    model_used: str = "unknown"


class ResultEnvelope(BaseModel):
    """The only object handed back to callers of the orchestrator."""

    data: Any
    metadata: ResultMetadata


class SystemHealth(BaseModel):
    """Combined component health."""

    models: dict[str, Any]
    queue: QueueStats
    cache: CacheStats
    uptime_seconds: float
