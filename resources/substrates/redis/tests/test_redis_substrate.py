"""Unit tests for the Redis client substrate wrapper."""

from __future__ import annotations

import pytest

import resources.substrates.redis.redis_substrate as redis_substrate_module
from packages.recall_shared.errors import CacheConnectionError, codes
from resources.substrates.redis.config import RedisSettings
from resources.substrates.redis.redis_substrate import RedisClientSubstrate
from tests.fakes import FakeClock, FakeRedisClient


def _connected_substrate(
    monkeypatch: pytest.MonkeyPatch, fake_client: FakeRedisClient
) -> RedisClientSubstrate:
    """Return a connected substrate whose clients are ``fake_client``."""
    monkeypatch.setattr(
        redis_substrate_module,
        "create_redis_client",
        lambda settings: fake_client,
    )
    monkeypatch.setattr(
        redis_substrate_module,
        "create_redis_client_with_timeouts",
        lambda **kwargs: fake_client,
    )
    substrate = RedisClientSubstrate(settings=RedisSettings())
    substrate.connect()
    return substrate


def test_operations_before_connect_raise_connection_error() -> None:
    """No operation may implicitly open a connection."""
    substrate = RedisClientSubstrate(settings=RedisSettings())

    with pytest.raises(CacheConnectionError) as exc_info:
        substrate.get_value(key="k")

    assert exc_info.value.code == codes.NOT_CONNECTED
    assert substrate.is_connected is False


def test_operations_after_close_raise_connection_error(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Closing releases the client and later calls fail fast."""
    fake_client = FakeRedisClient()
    substrate = _connected_substrate(monkeypatch, fake_client)

    substrate.close()
    substrate.close()

    assert fake_client.closed is True
    with pytest.raises(CacheConnectionError):
        substrate.set_value(key="k", value="v", ttl_seconds=None)


def test_connect_wraps_unreachable_server(monkeypatch: pytest.MonkeyPatch) -> None:
    """A failed initial ping surfaces as a cache connection error."""
    from redis.exceptions import ConnectionError as RedisConnectionError

    fake_client = FakeRedisClient(fail_with=RedisConnectionError("refused"))
    monkeypatch.setattr(
        redis_substrate_module, "create_redis_client", lambda settings: fake_client
    )
    substrate = RedisClientSubstrate(settings=RedisSettings())

    with pytest.raises(CacheConnectionError):
        substrate.connect()

    assert fake_client.closed is True
    assert substrate.is_connected is False


def test_scalar_value_expires_after_ttl(monkeypatch: pytest.MonkeyPatch) -> None:
    """A value set with ttl=1 is readable immediately and absent after expiry."""
    clock = FakeClock()
    substrate = _connected_substrate(monkeypatch, FakeRedisClient(clock=clock))

    substrate.set_value(key="k", value="v", ttl_seconds=1)
    assert substrate.get_value(key="k") == "v"

    clock.advance(1.5)

    assert substrate.get_value(key="k") is None
    assert substrate.exists(key="k") is False


def test_scalar_value_without_ttl_persists_until_deleted(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """No TTL means the value survives until explicitly deleted."""
    clock = FakeClock()
    substrate = _connected_substrate(monkeypatch, FakeRedisClient(clock=clock))

    substrate.set_value(key="k", value="v", ttl_seconds=None)
    clock.advance(10_000)

    assert substrate.get_value(key="k") == "v"
    assert substrate.delete_value(key="k") == 1
    assert substrate.delete_value(key="k") == 0


def test_hash_field_creation_counts(monkeypatch: pytest.MonkeyPatch) -> None:
    """Setting a new field reports 1; overwriting an existing field reports 0."""
    substrate = _connected_substrate(monkeypatch, FakeRedisClient())

    assert substrate.set_field(key="h", field="a", value="1") == 1
    assert substrate.set_field(key="h", field="a", value="2") == 0
    assert substrate.set_field(key="h", field="b", value="3") == 1

    assert substrate.get_field(key="h", field="a") == "2"
    assert substrate.get_field(key="h", field="missing") is None
    assert substrate.get_all_fields(key="h") == {"a": "2", "b": "3"}
    assert substrate.get_all_fields(key="absent") == {}
    assert substrate.delete_field(key="h", field="a") == 1


def test_list_range_follows_inclusive_negative_index_semantics(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Range end is inclusive and negative indices count from the tail."""
    substrate = _connected_substrate(monkeypatch, FakeRedisClient())

    for value in ("a", "b", "c", "d"):
        length = substrate.push_tail(key="l", value=value)

    assert length == 4
    assert substrate.list_range(key="l", start=0, end=-1) == ["a", "b", "c", "d"]
    assert substrate.list_range(key="l", start=1, end=2) == ["b", "c"]
    assert substrate.list_range(key="l", start=-2, end=-1) == ["c", "d"]
    assert substrate.list_range(key="l", start=3, end=1) == []


def test_list_head_push_and_removal(monkeypatch: pytest.MonkeyPatch) -> None:
    """Head pushes follow LPUSH order and removal drops every occurrence."""
    substrate = _connected_substrate(monkeypatch, FakeRedisClient())

    substrate.push_tail(key="l", value="x")
    assert substrate.push_head(key="l", values=("a", "b")) == 3
    substrate.push_tail(key="l", value="a")

    assert substrate.list_range(key="l", start=0, end=-1) == ["b", "a", "x", "a"]
    assert substrate.remove_from_list(key="l", value="a") == 2
    assert substrate.list_range(key="l", start=0, end=-1) == ["b", "x"]


def test_set_membership_operations(monkeypatch: pytest.MonkeyPatch) -> None:
    """Set adds count only new members and removal reports the count removed."""
    substrate = _connected_substrate(monkeypatch, FakeRedisClient())

    assert substrate.add_members(key="s", members=("a", "b")) == 2
    assert substrate.add_members(key="s", members=("b", "c")) == 1

    assert substrate.get_members(key="s") == {"a", "b", "c"}
    assert substrate.is_member(key="s", member="a") is True
    assert substrate.is_member(key="s", member="z") is False
    assert substrate.remove_member(key="s", member="a") == 1
    assert substrate.remove_member(key="s", member="a") == 0


def test_health_reports_readiness(monkeypatch: pytest.MonkeyPatch) -> None:
    """Health is ready only while connected and pingable."""
    substrate = RedisClientSubstrate(settings=RedisSettings())
    assert substrate.health().ready is False

    substrate = _connected_substrate(monkeypatch, FakeRedisClient())

    status = substrate.health()

    assert status.ready is True
    assert status.detail == "ok"
