"""
Orchestrator Factory - Build a ready-to-use orchestrator from settings.
"""

from __future__ import annotations

import logging
from typing import Any

from taskforge.adapters.builtin import register_builtin_models
from taskforge.adapters.ollama import OllamaClient, OllamaModel
from taskforge.config import Settings, get_settings

from .context import OrchestratorContext
from .orchestrator import Orchestrator

logger = logging.getLogger(__name__)

__all__ = ["create_orchestrator"]


async def create_orchestrator(
    settings: Settings | None = None,
    *,
    context: OrchestratorContext | None = None,
    **kwargs: Any,
) -> Orchestrator:
    """
    Create an orchestrator with its models registered.

    Args:
        settings: Application settings, defaults to the environment
        context: Pre-built components, built from settings when omitted
        **kwargs: Extra Orchestrator arguments (providers, output schemas)

    Returns:
        Orchestrator; call ``context.start()`` or use ``async with`` to run it
    """
    settings = settings or get_settings()
    context = context or OrchestratorContext.from_settings(settings)

    if settings.register_builtin_models:
        await register_builtin_models(context.registry)

    if settings.ollama_enabled:
        client = OllamaClient(
            base_url=settings.ollama_url,
            timeout=settings.ollama_timeout_seconds,
        )
        await context.registry.register(OllamaModel(client, model=settings.ollama_model))
        context.add_closer(client.close)
        logger.info("Registered Ollama model %s at %s", settings.ollama_model, settings.ollama_url)

    return Orchestrator(
        context,
        reuse_threshold=settings.reuse_threshold,
        enforce_deadlines=settings.enforce_deadlines,
        recent_task_history=settings.recent_task_history,
        max_tracked_users=settings.max_tracked_users,
        **kwargs,
    )
