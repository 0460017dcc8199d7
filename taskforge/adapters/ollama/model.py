"""
Ollama Model - Model plugin backed by a local Ollama server.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from taskforge.domains.registry import ModelSpec, ModelType
from taskforge.domains.tasks import Task, TaskType

from .client import OllamaClient

__all__ = ["OllamaModel"]

INSTRUCTIONS: dict[TaskType, str] = {
    TaskType.ANALYSIS: "Analyze the input and report the key findings.",
    TaskType.GENERATION: "Write the requested content.",
    TaskType.SUMMARIZATION: "Summarize the input.",
    TaskType.TRANSLATION: "Translate the input.",
    TaskType.CLASSIFICATION: "Classify the input and answer with the category only.",
    TaskType.PREDICTION: "Forecast likely outcomes from the input.",
    TaskType.PLANNING: "Produce a step-by-step plan.",
}


def system_prompt(task: Task) -> str:
    """Build a system prompt from the task type and the requesting user's context."""
    parts = ["You are a business assistant.", INSTRUCTIONS.get(task.type, "Complete the task.")]

    if task.context is not None:
        prefs = task.context.preferences
        if prefs.language:
            parts.append(f"Answer in {prefs.language}.")
        if prefs.response_style:
            parts.append(f"Use a {prefs.response_style} style.")
        role = task.context.business_context.role
        if role:
            parts.append(f"The user is a {role}.")

    return " ".join(parts)


class OllamaModel:
    """Model plugin that sends each task to an Ollama model."""

    def __init__(
        self,
        client: OllamaClient,
        model: str = "llama3.2",
        spec: ModelSpec | None = None,
    ) -> None:
        self._client = client
        self._model = model
        self._spec = spec or ModelSpec(
            name=f"ollama-{model}",
            type=ModelType.GENERAL,
            capabilities=["text", "generation", "summarization", "translation"],
            max_tokens=8192,
            cost_per_token=0.0,
            avg_latency_ms=3000,
            quality_score=0.8,
        )

    @property
    def name(self) -> str:
        return self._spec.name

    @property
    def spec(self) -> ModelSpec:
        return self._spec

    async def process(self, task: Task) -> dict[str, Any]:
        text = await self._client.generate(self._model, task.input, system=system_prompt(task))
        return {
            "success": True,
            "data": text,
            "model": self.name,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
