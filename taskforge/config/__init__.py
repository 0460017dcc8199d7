"""
Configuration - Application settings, error taxonomy, and logging setup.
"""

from .errors import (
    CacheError,
    ErrorCode,
    ModelUnavailableError,
    NoCandidateError,
    OutputValidationError,
    ProcessingError,
    QueueExhaustedError,
    RegistrationError,
    TaskForgeError,
    TaskTimeoutError,
    TaskValidationError,
)
from .logging import configure_logging
from .settings import Settings, get_settings

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "configure_logging",
    # Errors
    "ErrorCode",
    "TaskForgeError",
    "TaskValidationError",
    "NoCandidateError",
    "RegistrationError",
    "ModelUnavailableError",
    "ProcessingError",
    "QueueExhaustedError",
    "OutputValidationError",
    "TaskTimeoutError",
    "CacheError",
]
