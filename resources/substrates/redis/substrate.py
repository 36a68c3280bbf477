"""Transport-agnostic substrate contract for Redis-backed cache shapes."""

from __future__ import annotations

from typing import Protocol

from pydantic import BaseModel, ConfigDict


class RedisHealthStatus(BaseModel):
    """Redis substrate readiness payload."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    ready: bool
    detail: str


class RedisSubstrate(Protocol):
    """Protocol for direct Redis operations over one shared connection.

    Operations invoked while the substrate is not connected raise
    ``CacheConnectionError``; backend failures propagate as redis-py
    exceptions for the owning service to normalize.
    """

    @property
    def is_connected(self) -> bool:
        """Return whether ``connect`` succeeded and ``close`` has not run."""

    def connect(self) -> None:
        """Open the shared connection and verify it with ``PING``."""

    def close(self) -> None:
        """Release the shared connection; idempotent."""

    def set_value(self, *, key: str, value: str, ttl_seconds: int | None) -> None:
        """Set one string value with optional TTL in seconds."""

    def get_value(self, *, key: str) -> str | None:
        """Get one string value or ``None`` when missing or expired."""

    def delete_value(self, *, key: str) -> int:
        """Delete one key and return the number of keys removed."""

    def exists(self, *, key: str) -> bool:
        """Return whether any value is stored under ``key``."""

    def set_field(self, *, key: str, field: str, value: str) -> int:
        """Set one hash field and return 1 when newly created, else 0."""

    def get_field(self, *, key: str, field: str) -> str | None:
        """Get one hash field or ``None`` when missing."""

    def get_all_fields(self, *, key: str) -> dict[str, str]:
        """Return every field of one hash; empty when the key is absent."""

    def delete_field(self, *, key: str, field: str) -> int:
        """Delete one hash field and return the number removed."""

    def push_tail(self, *, key: str, value: str) -> int:
        """Append one value to a list and return the new length."""

    def push_head(self, *, key: str, values: tuple[str, ...]) -> int:
        """Push values onto the list head one by one and return the new length.

        Matches ``LPUSH``: the last value in ``values`` ends up first.
        """

    def list_range(self, *, key: str, start: int, end: int) -> list[str]:
        """Return list values between inclusive ``start`` and ``end`` indices."""

    def remove_from_list(self, *, key: str, value: str) -> int:
        """Remove every occurrence of ``value`` and return the count removed."""

    def add_members(self, *, key: str, members: tuple[str, ...]) -> int:
        """Add set members and return how many were not already present."""

    def get_members(self, *, key: str) -> set[str]:
        """Return all members of one set."""

    def is_member(self, *, key: str, member: str) -> bool:
        """Return whether ``member`` belongs to the set at ``key``."""

    def remove_member(self, *, key: str, member: str) -> int:
        """Remove one set member and return the number removed."""

    def ping(self) -> bool:
        """Return substrate liveness from Redis ``PING``."""

    def health(self) -> RedisHealthStatus:
        """Probe Redis substrate readiness and detail."""
