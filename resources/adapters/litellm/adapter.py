"""Transport-agnostic LiteLLM adapter contract and DTOs."""

from __future__ import annotations

from typing import Protocol

from pydantic import BaseModel, ConfigDict


class AdapterError(Exception):
    """Base exception for adapter-level failures."""


class AdapterDependencyError(AdapterError):
    """Upstream provider failure (network, rate limit, timeout, 5xx)."""


class AdapterInternalError(AdapterError):
    """Misconfiguration or a response the adapter cannot interpret."""


class AdapterChatResult(BaseModel):
    """Adapter response payload for one chat completion."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    text: str
    provider: str
    model: str


class AdapterEmbeddingResult(BaseModel):
    """Adapter response payload for one embedding generation."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    values: tuple[float, ...]
    provider: str
    model: str


class AdapterHealthResult(BaseModel):
    """Adapter readiness payload."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    adapter_ready: bool
    detail: str


class LiteLlmAdapter(Protocol):
    """Protocol for LiteLLM-backed completion and embedding operations."""

    def chat(
        self,
        *,
        provider: str,
        model: str,
        prompt: str,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> AdapterChatResult:
        """Generate one single-turn chat completion."""

    def embed(
        self,
        *,
        provider: str,
        model: str,
        text: str,
    ) -> AdapterEmbeddingResult:
        """Generate one embedding vector."""

    def health(self) -> AdapterHealthResult:
        """Return adapter health state."""
