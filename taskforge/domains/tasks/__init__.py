"""
Tasks Domain - The task submission contract.

Every other domain consumes these types:
- Task and its constraint enums
- Attachments
- Context resolved during enrichment
"""

from .models import (
    Attachment,
    AttachmentType,
    BusinessContext,
    Complexity,
    CostConstraint,
    Priority,
    Task,
    TaskContext,
    TaskType,
    UserPreferences,
)

__all__ = [
    "Task",
    "TaskType",
    "Priority",
    "CostConstraint",
    "Complexity",
    "Attachment",
    "AttachmentType",
    "TaskContext",
    "BusinessContext",
    "UserPreferences",
]
