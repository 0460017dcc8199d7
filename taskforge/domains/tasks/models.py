"""
Task Models - The task submission contract shared by every domain.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class TaskType(str, Enum):
    """Kinds of AI work a caller can request."""

    ANALYSIS = "analysis"
    GENERATION = "generation"
    SUMMARIZATION = "summarization"
    TRANSLATION = "translation"
    CLASSIFICATION = "classification"
    PREDICTION = "prediction"
    PLANNING = "planning"
    OPTIMIZATION = "optimization"
    AUTOMATION = "automation"
    REPORTING = "reporting"
    SUPPORT = "support"
    SEARCH = "search"


class Priority(str, Enum):
    """Queue priority tiers."""

    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"

    @property
    def rank(self) -> int:
        """Sort rank; lower runs first."""
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    Priority.URGENT: 0,
    Priority.HIGH: 1,
    Priority.NORMAL: 2,
    Priority.LOW: 3,
}


class CostConstraint(str, Enum):
    """How much the caller is willing to spend per token."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Complexity(str, Enum):
    """Estimated task complexity."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class AttachmentType(str, Enum):
    """Attachment media types."""

    IMAGE = "image"
    DOCUMENT = "document"
    AUDIO = "audio"
    VIDEO = "video"


class Attachment(BaseModel):
    """Media attached to a task."""

    type: AttachmentType
    url: str
    metadata: dict[str, Any] = Field(default_factory=dict)

    model_config = {"frozen": True}


class BusinessContext(BaseModel):
    """Organisational context of the requesting user."""

    role: str | None = None  # admin, manager, employee, client
    company: str | None = None
    department: str | None = None
    current_projects: list[str] = Field(default_factory=list)
    team_members: list[str] = Field(default_factory=list)
    permissions: list[str] = Field(default_factory=list)


class UserPreferences(BaseModel):
    """AI interaction preferences of the requesting user."""

    language: str | None = None
    response_style: str | None = None  # concise, detailed, technical
    ai_personality: str | None = None  # professional, friendly, direct
    privacy: str | None = None  # strict, balanced, open


class TaskContext(BaseModel):
    """Context resolved by the orchestrator before execution."""

    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: str | None = None
    session_id: str | None = None
    previous_tasks: list[Task] = Field(default_factory=list)
    business_context: BusinessContext = Field(default_factory=BusinessContext)
    preferences: UserPreferences = Field(default_factory=UserPreferences)


class Task(BaseModel):
    """A unit of requested AI work. Immutable once submitted."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    type: TaskType
    input: str = Field(..., min_length=1)
    attachments: list[Attachment] = Field(default_factory=list)
    priority: Priority = Priority.NORMAL
    max_latency_ms: int = Field(default=5000, gt=0)
    min_quality: float = Field(default=0.8, ge=0.0, le=1.0)
    cost_constraint: CostConstraint = CostConstraint.MEDIUM
    session_id: str | None = None
    context: TaskContext | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    model_config = {"frozen": True}

    def with_context(self, context: TaskContext) -> Task:
        """Return an enriched copy; the original is left untouched."""
        return self.model_copy(update={"context": context})


TaskContext.model_rebuild()
Task.model_rebuild()
