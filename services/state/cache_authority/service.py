"""Authoritative in-process Python API for Cache Authority Service."""

from __future__ import annotations

from abc import ABC, abstractmethod

from packages.recall_shared.config import RecallSettings
from resources.substrates.redis import RedisSubstrate
from services.state.cache_authority.domain import HealthStatus


class CacheAuthorityService(ABC):
    """Public API for typed cache operations over four value shapes.

    Scalar, hash, list, and set operations share one connection. Each key
    should be used with a single shape; misuse surfaces as a storage error
    from the backend.
    """

    @abstractmethod
    def set_value(self, *, key: str, value: str, ttl_seconds: int | None = None) -> None:
        """Set one scalar value; without a TTL it persists until deleted."""

    @abstractmethod
    def get_value(self, *, key: str) -> str | None:
        """Get one scalar value or ``None`` when absent or expired."""

    @abstractmethod
    def delete_value(self, *, key: str) -> int:
        """Delete one key of any shape and return the count removed (0 or 1)."""

    @abstractmethod
    def exists(self, *, key: str) -> bool:
        """Return whether ``key`` currently holds a value of any shape."""

    @abstractmethod
    def set_field(self, *, key: str, field: str, value: str) -> int:
        """Set one hash field; 1 when newly created, 0 when overwritten."""

    @abstractmethod
    def get_field(self, *, key: str, field: str) -> str | None:
        """Get one hash field or ``None``."""

    @abstractmethod
    def get_all_fields(self, *, key: str) -> dict[str, str]:
        """Get every hash field; empty mapping when the key is absent."""

    @abstractmethod
    def delete_field(self, *, key: str, field: str) -> int:
        """Delete one hash field and return the count removed."""

    @abstractmethod
    def append(self, *, key: str, value: str) -> int:
        """Append one list value and return the new length."""

    @abstractmethod
    def prepend(self, *, key: str, values: tuple[str, ...]) -> int:
        """Push values onto the list head (``LPUSH`` order); returns new length."""

    @abstractmethod
    def list_range(self, *, key: str, start: int = 0, end: int = -1) -> list[str]:
        """Return list values from ``start`` through ``end`` inclusive."""

    @abstractmethod
    def remove_value(self, *, key: str, value: str) -> int:
        """Remove every occurrence of ``value`` from a list."""

    @abstractmethod
    def add_members(self, *, key: str, members: tuple[str, ...]) -> int:
        """Add set members and return how many were newly added."""

    @abstractmethod
    def get_members(self, *, key: str) -> list[str]:
        """Return set members in unspecified order."""

    @abstractmethod
    def is_member(self, *, key: str, member: str) -> bool:
        """Return whether ``member`` is in the set."""

    @abstractmethod
    def remove_member(self, *, key: str, member: str) -> int:
        """Remove one set member and return the count removed."""

    @abstractmethod
    def health(self) -> HealthStatus:
        """Return CAS and Redis substrate readiness."""


def build_cache_authority_service(
    *,
    settings: RecallSettings,
    backend: RedisSubstrate | None = None,
) -> CacheAuthorityService:
    """Build default Cache Authority implementation from typed settings."""
    from resources.substrates.redis import (
        RedisClientSubstrate,
        resolve_redis_settings,
    )
    from services.state.cache_authority.config import resolve_cache_authority_settings
    from services.state.cache_authority.implementation import (
        DefaultCacheAuthorityService,
    )

    return DefaultCacheAuthorityService(
        settings=resolve_cache_authority_settings(settings),
        backend=backend
        or RedisClientSubstrate(settings=resolve_redis_settings(settings)),
    )
