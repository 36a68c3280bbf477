"""Concrete Cache Authority Service implementation."""

from __future__ import annotations

from typing import Callable, TypeVar

from redis.exceptions import RedisError

from packages.recall_shared.logging import get_logger, public_api_instrumented
from packages.recall_shared.validation import validate_request
from resources.substrates.redis import RedisSubstrate, normalize_redis_error
from services.state.cache_authority.component import SERVICE_COMPONENT_ID
from services.state.cache_authority.config import CacheAuthoritySettings
from services.state.cache_authority.domain import HealthStatus
from services.state.cache_authority.service import CacheAuthorityService
from services.state.cache_authority.validation import (
    FieldRequest,
    KeyRequest,
    ListRangeRequest,
    ListValueRequest,
    ListValuesRequest,
    MemberRequest,
    MembersRequest,
    SetFieldRequest,
    SetValueRequest,
)

_LOGGER = get_logger(__name__)

T = TypeVar("T")


class DefaultCacheAuthorityService(CacheAuthorityService):
    """Default CAS implementation backed by the Redis substrate resource."""

    def __init__(
        self,
        *,
        settings: CacheAuthoritySettings,
        backend: RedisSubstrate,
    ) -> None:
        self._settings = settings
        self._backend = backend

    @public_api_instrumented(
        logger=_LOGGER, component_id=str(SERVICE_COMPONENT_ID), id_fields=("key",)
    )
    def set_value(self, *, key: str, value: str, ttl_seconds: int | None = None) -> None:
        """Set one scalar value with optional TTL."""
        request = validate_request(
            SetValueRequest, {"key": key, "value": value, "ttl_seconds": ttl_seconds}
        )
        self._call(
            "set_value",
            lambda: self._backend.set_value(
                key=self._cache_key(request.key),
                value=request.value,
                ttl_seconds=request.ttl_seconds,
            ),
        )

    @public_api_instrumented(
        logger=_LOGGER, component_id=str(SERVICE_COMPONENT_ID), id_fields=("key",)
    )
    def get_value(self, *, key: str) -> str | None:
        """Get one scalar value."""
        request = validate_request(KeyRequest, {"key": key})
        return self._call(
            "get_value", lambda: self._backend.get_value(key=self._cache_key(request.key))
        )

    @public_api_instrumented(
        logger=_LOGGER, component_id=str(SERVICE_COMPONENT_ID), id_fields=("key",)
    )
    def delete_value(self, *, key: str) -> int:
        """Delete one key."""
        request = validate_request(KeyRequest, {"key": key})
        return self._call(
            "delete_value",
            lambda: self._backend.delete_value(key=self._cache_key(request.key)),
        )

    @public_api_instrumented(
        logger=_LOGGER, component_id=str(SERVICE_COMPONENT_ID), id_fields=("key",)
    )
    def exists(self, *, key: str) -> bool:
        """Check key existence."""
        request = validate_request(KeyRequest, {"key": key})
        return self._call(
            "exists", lambda: self._backend.exists(key=self._cache_key(request.key))
        )

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(SERVICE_COMPONENT_ID),
        id_fields=("key", "field"),
    )
    def set_field(self, *, key: str, field: str, value: str) -> int:
        """Set one hash field."""
        request = validate_request(
            SetFieldRequest, {"key": key, "field": field, "value": value}
        )
        return self._call(
            "set_field",
            lambda: self._backend.set_field(
                key=self._cache_key(request.key),
                field=request.field,
                value=request.value,
            ),
        )

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(SERVICE_COMPONENT_ID),
        id_fields=("key", "field"),
    )
    def get_field(self, *, key: str, field: str) -> str | None:
        """Get one hash field."""
        request = validate_request(FieldRequest, {"key": key, "field": field})
        return self._call(
            "get_field",
            lambda: self._backend.get_field(
                key=self._cache_key(request.key), field=request.field
            ),
        )

    @public_api_instrumented(
        logger=_LOGGER, component_id=str(SERVICE_COMPONENT_ID), id_fields=("key",)
    )
    def get_all_fields(self, *, key: str) -> dict[str, str]:
        """Get every hash field."""
        request = validate_request(KeyRequest, {"key": key})
        return self._call(
            "get_all_fields",
            lambda: self._backend.get_all_fields(key=self._cache_key(request.key)),
        )

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(SERVICE_COMPONENT_ID),
        id_fields=("key", "field"),
    )
    def delete_field(self, *, key: str, field: str) -> int:
        """Delete one hash field."""
        request = validate_request(FieldRequest, {"key": key, "field": field})
        return self._call(
            "delete_field",
            lambda: self._backend.delete_field(
                key=self._cache_key(request.key), field=request.field
            ),
        )

    @public_api_instrumented(
        logger=_LOGGER, component_id=str(SERVICE_COMPONENT_ID), id_fields=("key",)
    )
    def append(self, *, key: str, value: str) -> int:
        """Append one list value."""
        request = validate_request(ListValueRequest, {"key": key, "value": value})
        return self._call(
            "append",
            lambda: self._backend.push_tail(
                key=self._cache_key(request.key), value=request.value
            ),
        )

    @public_api_instrumented(
        logger=_LOGGER, component_id=str(SERVICE_COMPONENT_ID), id_fields=("key",)
    )
    def prepend(self, *, key: str, values: tuple[str, ...]) -> int:
        """Push list values onto the head."""
        request = validate_request(ListValuesRequest, {"key": key, "values": values})
        return self._call(
            "prepend",
            lambda: self._backend.push_head(
                key=self._cache_key(request.key), values=request.values
            ),
        )

    @public_api_instrumented(
        logger=_LOGGER, component_id=str(SERVICE_COMPONENT_ID), id_fields=("key",)
    )
    def list_range(self, *, key: str, start: int = 0, end: int = -1) -> list[str]:
        """Read an inclusive list range."""
        request = validate_request(
            ListRangeRequest, {"key": key, "start": start, "end": end}
        )
        return self._call(
            "list_range",
            lambda: self._backend.list_range(
                key=self._cache_key(request.key),
                start=request.start,
                end=request.end,
            ),
        )

    @public_api_instrumented(
        logger=_LOGGER, component_id=str(SERVICE_COMPONENT_ID), id_fields=("key",)
    )
    def remove_value(self, *, key: str, value: str) -> int:
        """Remove all occurrences of one list value."""
        request = validate_request(ListValueRequest, {"key": key, "value": value})
        return self._call(
            "remove_value",
            lambda: self._backend.remove_from_list(
                key=self._cache_key(request.key), value=request.value
            ),
        )

    @public_api_instrumented(
        logger=_LOGGER, component_id=str(SERVICE_COMPONENT_ID), id_fields=("key",)
    )
    def add_members(self, *, key: str, members: tuple[str, ...]) -> int:
        """Add set members."""
        request = validate_request(MembersRequest, {"key": key, "members": members})
        return self._call(
            "add_members",
            lambda: self._backend.add_members(
                key=self._cache_key(request.key), members=request.members
            ),
        )

    @public_api_instrumented(
        logger=_LOGGER, component_id=str(SERVICE_COMPONENT_ID), id_fields=("key",)
    )
    def get_members(self, *, key: str) -> list[str]:
        """Read set members."""
        request = validate_request(KeyRequest, {"key": key})
        members = self._call(
            "get_members",
            lambda: self._backend.get_members(key=self._cache_key(request.key)),
        )
        return list(members)

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(SERVICE_COMPONENT_ID),
        id_fields=("key", "member"),
    )
    def is_member(self, *, key: str, member: str) -> bool:
        """Check set membership."""
        request = validate_request(MemberRequest, {"key": key, "member": member})
        return self._call(
            "is_member",
            lambda: self._backend.is_member(
                key=self._cache_key(request.key), member=request.member
            ),
        )

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(SERVICE_COMPONENT_ID),
        id_fields=("key", "member"),
    )
    def remove_member(self, *, key: str, member: str) -> int:
        """Remove one set member."""
        request = validate_request(MemberRequest, {"key": key, "member": member})
        return self._call(
            "remove_member",
            lambda: self._backend.remove_member(
                key=self._cache_key(request.key), member=request.member
            ),
        )

    @public_api_instrumented(logger=_LOGGER, component_id=str(SERVICE_COMPONENT_ID))
    def health(self) -> HealthStatus:
        """Return CAS and Redis substrate readiness."""
        substrate = self._backend.health()
        return HealthStatus(
            service_ready=True,
            substrate_ready=substrate.ready,
            detail=substrate.detail,
        )

    def _cache_key(self, key: str) -> str:
        """Compose the namespaced Redis key for one caller key."""
        return f"{self._settings.key_prefix}:{key}"

    def _call(self, operation: str, fn: Callable[[], T]) -> T:
        """Run one substrate call, normalizing redis-py failures."""
        try:
            return fn()
        except RedisError as exc:
            _LOGGER.warning(
                "CAS operation failed due to dependency error: operation=%s exception_type=%s",
                operation,
                type(exc).__name__,
                exc_info=exc,
            )
            raise normalize_redis_error(exc, operation=operation) from exc
