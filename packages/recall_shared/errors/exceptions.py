"""Typed exception hierarchy raised across Recall component boundaries.

Each exception carries one ``ErrorDetail`` so callers can branch on
``category``/``code`` without string matching and routing layers can map
failures to responses without importing component internals.
"""

from __future__ import annotations

from typing import ClassVar, Mapping

from . import codes
from .types import ErrorCategory, ErrorDetail


class RecallError(Exception):
    """Base error type for all typed Recall failures."""

    category: ClassVar[ErrorCategory] = ErrorCategory.INTERNAL
    default_code: ClassVar[str] = codes.INTERNAL_ERROR
    default_retryable: ClassVar[bool] = False

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        retryable: bool | None = None,
        metadata: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.detail = ErrorDetail(
            code=code or self.default_code,
            message=message,
            category=self.category,
            retryable=self.default_retryable if retryable is None else retryable,
            metadata=dict(metadata or {}),
        )

    @property
    def code(self) -> str:
        """Return the machine-readable error code."""
        return self.detail.code

    @property
    def message(self) -> str:
        """Return the human-readable error message."""
        return self.detail.message

    @property
    def retryable(self) -> bool:
        """Return whether a caller may reasonably retry the operation."""
        return self.detail.retryable


class RecallValidationError(RecallError):
    """Bad input shape, dimension, or pagination value."""

    category = ErrorCategory.VALIDATION
    default_code = codes.INVALID_ARGUMENT


class RecallNotFoundError(RecallError):
    """Referenced record does not exist."""

    category = ErrorCategory.NOT_FOUND
    default_code = codes.RESOURCE_NOT_FOUND


class RecallStorageError(RecallError):
    """Underlying persistence or cache backend failure."""

    category = ErrorCategory.DEPENDENCY
    default_code = codes.DEPENDENCY_FAILURE


class CacheConnectionError(RecallError):
    """Cache connection is absent, closed, or unreachable."""

    category = ErrorCategory.DEPENDENCY
    default_code = codes.DEPENDENCY_UNAVAILABLE
    default_retryable = True


class RecallProviderError(RecallError):
    """External generation provider call failed."""

    category = ErrorCategory.DEPENDENCY
    default_code = codes.PROVIDER_FAILURE
