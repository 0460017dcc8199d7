"""
Built-in Models - Simulated models registered at start-up.

They echo the task input with a model-specific prefix, which keeps the
orchestrator usable without any provider configured.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from taskforge.domains.registry import CallableModel, ModelRegistry, ModelSpec, ModelType
from taskforge.domains.tasks import Task

logger = logging.getLogger(__name__)

__all__ = ["BUILTIN_SPECS", "builtin_models", "register_builtin_models"]

BUILTIN_SPECS: dict[str, tuple[ModelSpec, str]] = {
    "gemini-pro": (
        ModelSpec(
            name="gemini-pro",
            type=ModelType.GENERAL,
            capabilities=["text", "analysis", "generation"],
            max_tokens=30720,
            cost_per_token=0.00025,
            avg_latency_ms=2000,
            quality_score=0.9,
        ),
        "Processed",
    ),
    "business-analyzer": (
        ModelSpec(
            name="business-analyzer",
            type=ModelType.BUSINESS,
            capabilities=["analysis", "prediction", "reporting"],
            max_tokens=8192,
            cost_per_token=0.0005,
            avg_latency_ms=1500,
            quality_score=0.95,
        ),
        "Business Analysis",
    ),
    "quick-responder": (
        ModelSpec(
            name="quick-responder",
            type=ModelType.QUICK,
            capabilities=["summarization", "classification"],
            max_tokens=4096,
            cost_per_token=0.0001,
            avg_latency_ms=500,
            quality_score=0.8,
        ),
        "Quick Response",
    ),
}


def _simulate(name: str, prefix: str):
    async def process(task: Task) -> dict[str, Any]:
        return {
            "success": True,
            "data": f"{prefix}: {task.input}",
            "model": name,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    return process


def builtin_models() -> list[CallableModel]:
    """Fresh plugin instances for every built-in model."""
    return [CallableModel(spec, _simulate(name, prefix)) for name, (spec, prefix) in BUILTIN_SPECS.items()]


async def register_builtin_models(registry: ModelRegistry) -> list[str]:
    """
    Register the built-in models.

    Args:
        registry: Target registry

    Returns:
        Names of the registered models
    """
    names = []
    for model in builtin_models():
        await registry.register(model)
        names.append(model.name)
    logger.info("Registered %d built-in models", len(names))
    return names
