"""
Error Taxonomy - Consistent error codes across the orchestration core.

Usage:
    from taskforge.config.errors import ErrorCode, TaskForgeError

    raise TaskForgeError(ErrorCode.NO_CANDIDATE, "No model meets the constraints")
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Standardized error codes for machine-readable error responses."""

    # Task errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    TASK_TIMEOUT = "TASK_TIMEOUT"

    # Model selection errors
    NO_CANDIDATE = "NO_CANDIDATE"
    REGISTRATION_FAILED = "REGISTRATION_FAILED"
    MODEL_UNAVAILABLE = "MODEL_UNAVAILABLE"

    # Execution errors
    PROCESSING_FAILED = "PROCESSING_FAILED"
    QUEUE_EXHAUSTED = "QUEUE_EXHAUSTED"
    OUTPUT_INVALID = "OUTPUT_INVALID"

    # Cache errors
    CACHE_FAILED = "CACHE_FAILED"

    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    NOT_FOUND = "NOT_FOUND"


class TaskForgeError(Exception):
    """Base exception with error code support."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(f"[{code.value}] {message}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to API-friendly dictionary."""
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }


# Domain-specific exceptions for cleaner imports
class TaskValidationError(TaskForgeError):
    """Malformed task submission."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.VALIDATION_ERROR, message, details)


class NoCandidateError(TaskForgeError):
    """No registered model satisfies the hard selection constraints."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.NO_CANDIDATE, message, details)


class RegistrationError(TaskForgeError):
    """Model registration refused."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.REGISTRATION_FAILED, message, details)


class ModelUnavailableError(TaskForgeError):
    """Model backend could not be reached."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.MODEL_UNAVAILABLE, message, details)


class ProcessingError(TaskForgeError):
    """Model processing failed."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        code: ErrorCode = ErrorCode.PROCESSING_FAILED,
    ) -> None:
        super().__init__(code, message, details)


class QueueExhaustedError(ProcessingError):
    """Processing kept failing after every allowed retry."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, details, code=ErrorCode.QUEUE_EXHAUSTED)


class OutputValidationError(ProcessingError):
    """Model output did not match the schema registered for its task type."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, details, code=ErrorCode.OUTPUT_INVALID)


class TaskTimeoutError(TaskForgeError):
    """Task deadline passed while queued or running."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.TASK_TIMEOUT, message, details)


class CacheError(TaskForgeError):
    """Cache fingerprinting or similarity failure. Never propagated past the cache."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.CACHE_FAILED, message, details)
