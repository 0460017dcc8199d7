"""
Adapters - Model plugin implementations.

External model backends are wrapped here to isolate domains from third-party changes.
"""

from .builtin import builtin_models, register_builtin_models
from .ollama import OllamaClient, OllamaModel

__all__ = [
    # Simulated models
    "builtin_models",
    "register_builtin_models",
    # Local LLM
    "OllamaClient",
    "OllamaModel",
]
