"""Built-in simulated models."""

from .models import BUILTIN_SPECS, builtin_models, register_builtin_models

__all__ = ["BUILTIN_SPECS", "builtin_models", "register_builtin_models"]
