"""Redis exception normalization helpers."""

from __future__ import annotations

from redis import exceptions as redis_exceptions

from packages.recall_shared.errors import (
    CacheConnectionError,
    RecallError,
    RecallStorageError,
    codes,
)


def normalize_redis_error(exc: Exception, *, operation: str) -> RecallError:
    """Map one redis-py exception into the shared typed error hierarchy."""
    metadata = {"exception_type": type(exc).__name__, "operation": operation}

    if isinstance(exc, RecallError):
        return exc

    if isinstance(exc, redis_exceptions.TimeoutError):
        return CacheConnectionError(
            f"redis {operation} timed out",
            code=codes.DEPENDENCY_TIMEOUT,
            metadata=metadata,
        )

    if isinstance(exc, redis_exceptions.ConnectionError):
        return CacheConnectionError(
            f"redis unavailable during {operation}",
            metadata=metadata,
        )

    if isinstance(exc, redis_exceptions.ResponseError):
        # WRONGTYPE and friends: the key holds a different shape.
        return RecallStorageError(
            f"redis rejected {operation}: {exc}",
            retryable=False,
            metadata=metadata,
        )

    return RecallStorageError(
        f"redis {operation} failed",
        retryable=False,
        metadata=metadata,
    )
