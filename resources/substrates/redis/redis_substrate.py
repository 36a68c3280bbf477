"""Redis client-backed substrate implementation."""

from __future__ import annotations

import threading

from redis import Redis
from redis.exceptions import RedisError

from packages.recall_shared.errors import CacheConnectionError, codes
from packages.recall_shared.logging import get_logger
from resources.substrates.redis.client import (
    create_redis_client,
    create_redis_client_with_timeouts,
)
from resources.substrates.redis.config import RedisSettings
from resources.substrates.redis.substrate import RedisHealthStatus, RedisSubstrate

_LOGGER = get_logger(__name__)


class RedisClientSubstrate(RedisSubstrate):
    """Concrete Redis substrate owning one shared redis-py client.

    The client is created by ``connect`` and released by ``close``; no
    operation ever opens a connection implicitly.
    """

    def __init__(self, *, settings: RedisSettings) -> None:
        self._settings = settings
        self._lock = threading.Lock()
        self._client: Redis | None = None
        self._health_client: Redis | None = None

    @property
    def is_connected(self) -> bool:
        """Return whether the shared client is open."""
        return self._client is not None

    def connect(self) -> None:
        """Create the shared client and verify reachability; idempotent."""
        with self._lock:
            if self._client is not None:
                return
            client = create_redis_client(self._settings)
            try:
                client.ping()
            except RedisError as exc:
                client.close()
                raise CacheConnectionError(
                    "redis connection could not be established",
                    metadata={"exception_type": type(exc).__name__},
                ) from exc
            self._client = client
            self._health_client = create_redis_client_with_timeouts(
                settings=self._settings,
                connect_timeout_seconds=self._settings.health_timeout_seconds,
                socket_timeout_seconds=self._settings.health_timeout_seconds,
            )
        _LOGGER.info("Redis substrate connected")

    def close(self) -> None:
        """Close shared clients; later operations raise ``CacheConnectionError``."""
        with self._lock:
            clients = (self._client, self._health_client)
            self._client = None
            self._health_client = None
        for client in clients:
            if client is not None:
                client.close()
        if clients[0] is not None:
            _LOGGER.info("Redis substrate closed")

    def set_value(self, *, key: str, value: str, ttl_seconds: int | None) -> None:
        """Set one value with optional TTL in seconds."""
        client = self._require_client()
        if ttl_seconds is None:
            client.set(name=key, value=value)
            return
        client.set(name=key, value=value, ex=ttl_seconds)

    def get_value(self, *, key: str) -> str | None:
        """Read one value by key."""
        value = self._require_client().get(name=key)
        if value is None:
            return None
        return str(value)

    def delete_value(self, *, key: str) -> int:
        """Delete one key and return how many keys were removed."""
        return int(self._require_client().delete(key))

    def exists(self, *, key: str) -> bool:
        """Return whether ``key`` currently holds any value."""
        return int(self._require_client().exists(key)) > 0

    def set_field(self, *, key: str, field: str, value: str) -> int:
        """Set one hash field; returns 1 only for a newly created field."""
        return int(self._require_client().hset(key, field, value))

    def get_field(self, *, key: str, field: str) -> str | None:
        """Read one hash field."""
        value = self._require_client().hget(key, field)
        if value is None:
            return None
        return str(value)

    def get_all_fields(self, *, key: str) -> dict[str, str]:
        """Read every field of one hash."""
        raw = self._require_client().hgetall(key)
        return {str(name): str(value) for name, value in raw.items()}

    def delete_field(self, *, key: str, field: str) -> int:
        """Delete one hash field."""
        return int(self._require_client().hdel(key, field))

    def push_tail(self, *, key: str, value: str) -> int:
        """Append one list value with ``RPUSH``."""
        return int(self._require_client().rpush(key, value))

    def push_head(self, *, key: str, values: tuple[str, ...]) -> int:
        """Prepend list values with ``LPUSH``."""
        return int(self._require_client().lpush(key, *values))

    def list_range(self, *, key: str, start: int, end: int) -> list[str]:
        """Read an inclusive list slice with ``LRANGE`` index semantics."""
        return [str(item) for item in self._require_client().lrange(key, start, end)]

    def remove_from_list(self, *, key: str, value: str) -> int:
        """Remove all occurrences of one list value with ``LREM`` count 0."""
        return int(self._require_client().lrem(key, 0, value))

    def add_members(self, *, key: str, members: tuple[str, ...]) -> int:
        """Add set members with ``SADD``."""
        return int(self._require_client().sadd(key, *members))

    def get_members(self, *, key: str) -> set[str]:
        """Read all set members."""
        return {str(item) for item in self._require_client().smembers(key)}

    def is_member(self, *, key: str, member: str) -> bool:
        """Check set membership."""
        return bool(self._require_client().sismember(key, member))

    def remove_member(self, *, key: str, member: str) -> int:
        """Remove one set member with ``SREM``."""
        return int(self._require_client().srem(key, member))

    def ping(self) -> bool:
        """Return Redis ping status using short health timeouts."""
        client = self._health_client
        if client is None:
            raise CacheConnectionError(
                "redis connection is not open", code=codes.NOT_CONNECTED
            )
        return bool(client.ping())

    def health(self) -> RedisHealthStatus:
        """Return Redis substrate readiness and concise detail."""
        if not self.is_connected:
            return RedisHealthStatus(ready=False, detail="redis connection is not open")
        try:
            ready = self.ping()
        except (RedisError, CacheConnectionError) as exc:
            return RedisHealthStatus(
                ready=False,
                detail=f"redis ping failed: {type(exc).__name__}",
            )
        return RedisHealthStatus(
            ready=ready,
            detail="ok" if ready else "redis ping returned false",
        )

    def _require_client(self) -> Redis:
        """Return the open client or raise when disconnected."""
        client = self._client
        if client is None:
            raise CacheConnectionError(
                "redis connection is not open", code=codes.NOT_CONNECTED
            )
        return client
