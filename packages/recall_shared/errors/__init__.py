"""Public shared error API for Recall components."""

from . import codes
from .exceptions import (
    CacheConnectionError,
    RecallError,
    RecallNotFoundError,
    RecallProviderError,
    RecallStorageError,
    RecallValidationError,
)
from .factories import (
    dependency_error,
    internal_error,
    not_found_error,
    validation_error,
)
from .normalize import exception_to_error
from .types import ErrorCategory, ErrorDetail

__all__ = [
    "CacheConnectionError",
    "ErrorCategory",
    "ErrorDetail",
    "RecallError",
    "RecallNotFoundError",
    "RecallProviderError",
    "RecallStorageError",
    "RecallValidationError",
    "codes",
    "dependency_error",
    "exception_to_error",
    "internal_error",
    "not_found_error",
    "validation_error",
]
