"""
Registry Domain - Model catalog and selection.

This domain handles:
- Model registration and indexing
- Hard-constraint candidate filtering
- Composite scoring and best-model selection
"""

from .contracts import ModelPlugin, ModelSelector
from .models import (
    DuplicatePolicy,
    ModelSpec,
    ModelType,
    ScoredModel,
    SelectionCriteria,
)
from .plugin import CallableModel
from .registry import ModelRegistry, capability_for

__all__ = [
    # Contracts
    "ModelPlugin",
    "ModelSelector",
    # Models
    "ModelSpec",
    "ModelType",
    "DuplicatePolicy",
    "SelectionCriteria",
    "ScoredModel",
    # Implementations
    "CallableModel",
    "ModelRegistry",
    "capability_for",
]
