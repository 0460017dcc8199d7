"""Ollama local LLM adapter."""

from .client import OllamaClient
from .model import OllamaModel, system_prompt

__all__ = ["OllamaClient", "OllamaModel", "system_prompt"]
