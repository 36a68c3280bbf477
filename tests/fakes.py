"""In-memory fakes shared by unit tests across components."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable

from redis.exceptions import ResponseError

from resources.adapters.litellm.adapter import (
    AdapterChatResult,
    AdapterEmbeddingResult,
    AdapterHealthResult,
)


@dataclass
class FakeClock:
    """Manually advanced monotonic clock in seconds."""

    now: float = 1_000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@dataclass
class FakeRedisClient:
    """Dict-backed stand-in for the redis-py calls used by the substrate.

    Mirrors Redis semantics that callers observe: TTL expiry, WRONGTYPE
    errors on shape misuse, and removal of keys whose container empties.
    """

    clock: Callable[[], float] = time.monotonic
    data: dict[str, object] = field(default_factory=dict)
    expiries: dict[str, float] = field(default_factory=dict)
    fail_with: Exception | None = None
    closed: bool = False
    calls: list[str] = field(default_factory=list)

    def set(self, name: str, value: str, ex: int | None = None) -> bool:
        self._touch("set")
        self.data[name] = str(value)
        if ex is None:
            self.expiries.pop(name, None)
        else:
            self.expiries[name] = self.clock() + ex
        return True

    def get(self, name: str) -> str | None:
        self._touch("get")
        return self._typed(name, str)

    def delete(self, *names: str) -> int:
        self._touch("delete")
        removed = 0
        for name in names:
            if self._live(name):
                self._drop(name)
                removed += 1
        return removed

    def exists(self, *names: str) -> int:
        self._touch("exists")
        return sum(1 for name in names if self._live(name))

    def hset(self, name: str, key: str, value: str) -> int:
        self._touch("hset")
        fields = self._container(name, dict)
        created = 0 if key in fields else 1
        fields[key] = str(value)
        return created

    def hget(self, name: str, key: str) -> str | None:
        self._touch("hget")
        fields = self._typed(name, dict)
        if fields is None:
            return None
        return fields.get(key)

    def hgetall(self, name: str) -> dict[str, str]:
        self._touch("hgetall")
        return dict(self._typed(name, dict) or {})

    def hdel(self, name: str, *keys: str) -> int:
        self._touch("hdel")
        fields = self._typed(name, dict)
        if fields is None:
            return 0
        removed = sum(1 for key in keys if fields.pop(key, None) is not None)
        self._drop_if_empty(name)
        return removed

    def rpush(self, name: str, *values: str) -> int:
        self._touch("rpush")
        items = self._container(name, list)
        items.extend(str(value) for value in values)
        return len(items)

    def lpush(self, name: str, *values: str) -> int:
        self._touch("lpush")
        items = self._container(name, list)
        for value in values:
            items.insert(0, str(value))
        return len(items)

    def lrange(self, name: str, start: int, end: int) -> list[str]:
        self._touch("lrange")
        items = self._typed(name, list) or []
        length = len(items)
        if start < 0:
            start = max(length + start, 0)
        if end < 0:
            end = length + end
        end = min(end, length - 1)
        if start > end:
            return []
        return list(items[start : end + 1])

    def lrem(self, name: str, count: int, value: str) -> int:
        self._touch("lrem")
        assert count == 0, "fake only supports removing every occurrence"
        items = self._typed(name, list)
        if items is None:
            return 0
        kept = [item for item in items if item != value]
        removed = len(items) - len(kept)
        items[:] = kept
        self._drop_if_empty(name)
        return removed

    def sadd(self, name: str, *values: str) -> int:
        self._touch("sadd")
        members = self._container(name, set)
        before = len(members)
        members.update(str(value) for value in values)
        return len(members) - before

    def smembers(self, name: str) -> set[str]:
        self._touch("smembers")
        return set(self._typed(name, set) or set())

    def sismember(self, name: str, value: str) -> bool:
        self._touch("sismember")
        return value in (self._typed(name, set) or set())

    def srem(self, name: str, *values: str) -> int:
        self._touch("srem")
        members = self._typed(name, set)
        if members is None:
            return 0
        removed = 0
        for value in values:
            if value in members:
                members.discard(value)
                removed += 1
        self._drop_if_empty(name)
        return removed

    def ping(self) -> bool:
        self._touch("ping")
        return True

    def close(self) -> None:
        self.closed = True

    def _touch(self, operation: str) -> None:
        self.calls.append(operation)
        if self.fail_with is not None:
            raise self.fail_with

    def _live(self, name: str) -> bool:
        expiry = self.expiries.get(name)
        if expiry is not None and expiry <= self.clock():
            self._drop(name)
        return name in self.data

    def _drop(self, name: str) -> None:
        self.data.pop(name, None)
        self.expiries.pop(name, None)

    def _drop_if_empty(self, name: str) -> None:
        value = self.data.get(name)
        if isinstance(value, (dict, list, set)) and len(value) == 0:
            self._drop(name)

    def _typed(self, name: str, kind: type) -> object | None:
        if not self._live(name):
            return None
        value = self.data[name]
        if not isinstance(value, kind):
            raise ResponseError(
                "WRONGTYPE Operation against a key holding the wrong kind of value"
            )
        return value

    def _container(self, name: str, kind: type) -> object:
        existing = self._typed(name, kind)
        if existing is not None:
            return existing
        created = kind()
        self.data[name] = created
        return created


@dataclass
class FakeLiteLlmAdapter:
    """In-memory LiteLLM adapter recording calls and returning canned results.

    ``vectors`` maps input text to the vector returned for it; unknown texts
    get ``default_vector``.
    """

    vectors: dict[str, tuple[float, ...]] = field(default_factory=dict)
    default_vector: tuple[float, ...] = (1.0, 0.0, 0.0)
    completion: str = "completed"
    raise_on_embed: Exception | None = None
    raise_on_chat: Exception | None = None
    ready: bool = True
    embed_calls: list[dict[str, object]] = field(default_factory=list)
    chat_calls: list[dict[str, object]] = field(default_factory=list)

    def chat(
        self,
        *,
        provider: str,
        model: str,
        prompt: str,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> AdapterChatResult:
        self.chat_calls.append(
            {
                "provider": provider,
                "model": model,
                "prompt": prompt,
                "max_tokens": max_tokens,
                "temperature": temperature,
            }
        )
        if self.raise_on_chat is not None:
            raise self.raise_on_chat
        return AdapterChatResult(text=self.completion, provider=provider, model=model)

    def embed(self, *, provider: str, model: str, text: str) -> AdapterEmbeddingResult:
        self.embed_calls.append({"provider": provider, "model": model, "text": text})
        if self.raise_on_embed is not None:
            raise self.raise_on_embed
        return AdapterEmbeddingResult(
            values=self.vectors.get(text, self.default_vector),
            provider=provider,
            model=model,
        )

    def health(self) -> AdapterHealthResult:
        return AdapterHealthResult(
            adapter_ready=self.ready, detail="ok" if self.ready else "unavailable"
        )
