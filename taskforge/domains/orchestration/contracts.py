"""
Orchestration Contracts - Collaborators consulted during task enrichment.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from taskforge.domains.tasks import BusinessContext, Task, UserPreferences

from .models import ResultEnvelope


@runtime_checkable
class BusinessContextProvider(Protocol):
    """Contract for organisational context lookup."""

    async def get_business_context(self, user_id: str) -> BusinessContext | Mapping[str, Any]:
        """
        Resolve a user's organisational context.

        Args:
            user_id: Requesting user

        Returns:
            Role, company, projects, team and permissions
        """
        ...


@runtime_checkable
class PreferenceStore(Protocol):
    """Contract for user preference lookup."""

    async def get_preferences(self, user_id: str) -> UserPreferences | Mapping[str, Any]:
        """Resolve a user's AI interaction preferences."""
        ...


@runtime_checkable
class TaskProcessor(Protocol):
    """Contract for end-to-end task processing."""

    async def process(
        self,
        task: Task | Mapping[str, Any],
        user_id: str | None = None,
    ) -> ResultEnvelope:
        """
        Process a task.

        Args:
            task: Task or raw task mapping
            user_id: Requesting user, used for context enrichment

        Returns:
            Normalized result envelope
        """
        ...
