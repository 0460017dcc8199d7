"""
API Interface - FastAPI REST API over the orchestrator.
"""

from .main import create_app

__all__ = ["create_app"]
