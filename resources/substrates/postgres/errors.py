"""SQLAlchemy exception normalization helpers."""

from __future__ import annotations

from sqlalchemy import exc as sa_exc

from packages.recall_shared.errors import RecallStorageError, codes


def normalize_postgres_error(exc: Exception, *, operation: str) -> RecallStorageError:
    """Map one low-level DB exception into a typed storage error."""
    metadata = {"exception_type": type(exc).__name__, "operation": operation}
    message = str(exc).lower()

    if isinstance(exc, sa_exc.IntegrityError):
        return RecallStorageError(
            f"{operation} violated a storage constraint",
            code=codes.DEPENDENCY_FAILURE,
            retryable=False,
            metadata=metadata,
        )

    if isinstance(exc, (sa_exc.TimeoutError,)) or "timeout" in message:
        return RecallStorageError(
            f"{operation} timed out",
            code=codes.DEPENDENCY_TIMEOUT,
            retryable=True,
            metadata=metadata,
        )

    if isinstance(exc, (sa_exc.OperationalError, sa_exc.InterfaceError)):
        return RecallStorageError(
            "database unavailable",
            code=codes.DEPENDENCY_UNAVAILABLE,
            retryable=True,
            metadata=metadata,
        )

    return RecallStorageError(
        f"{operation} failed",
        code=codes.DEPENDENCY_FAILURE,
        retryable=False,
        metadata=metadata,
    )
