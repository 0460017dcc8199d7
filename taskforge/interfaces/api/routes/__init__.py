"""
API Routes.
"""

from . import health, models, tasks

__all__ = ["health", "tasks", "models"]
