"""
CLI Interface - Command-line tools for TaskForge.

Provides commands for:
- Running tasks
- Inspecting and ranking models
- Performance reports
- Serving the API
"""

from .main import app, main

__all__ = ["app", "main"]
