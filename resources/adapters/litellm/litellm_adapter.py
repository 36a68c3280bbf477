"""In-process LiteLLM adapter implementation."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Mapping, NoReturn

import litellm

from packages.recall_shared.logging import get_logger, public_api_instrumented
from resources.adapters.litellm.adapter import (
    AdapterChatResult,
    AdapterDependencyError,
    AdapterEmbeddingResult,
    AdapterHealthResult,
    AdapterInternalError,
    LiteLlmAdapter,
)
from resources.adapters.litellm.component import RESOURCE_COMPONENT_ID
from resources.adapters.litellm.config import (
    LiteLlmAdapterSettings,
    LiteLlmProviderSettings,
)

_LOGGER = get_logger(__name__)

# LiteLLM exception class names that describe upstream, not local, failures.
_DEPENDENCY_EXCEPTION_NAMES = frozenset(
    {
        "APIConnectionError",
        "APIError",
        "BadGatewayError",
        "InternalServerError",
        "RateLimitError",
        "ServiceUnavailableError",
        "Timeout",
    }
)


@dataclass(frozen=True)
class _ProviderCall:
    """Resolved request settings for one provider."""

    api_base: str
    api_key: str
    timeout_seconds: float
    max_retries: int
    options: dict[str, Any] = field(default_factory=dict)

    def request_kwargs(self, *, provider: str, model: str) -> dict[str, Any]:
        """Build LiteLLM keyword arguments shared by every call."""
        kwargs: dict[str, Any] = {
            "model": f"{provider}/{model}",
            "timeout": self.timeout_seconds,
            "num_retries": self.max_retries,
        }
        if self.api_base != "":
            kwargs["api_base"] = self.api_base
        if self.api_key != "":
            kwargs["api_key"] = self.api_key
        kwargs.update(self.options)
        return kwargs


class LiteLlmLibraryAdapter(LiteLlmAdapter):
    """In-process adapter backed by the ``litellm`` Python package."""

    def __init__(self, *, settings: LiteLlmAdapterSettings) -> None:
        self._settings = settings

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(RESOURCE_COMPONENT_ID),
        id_fields=("provider", "model"),
    )
    def chat(
        self,
        *,
        provider: str,
        model: str,
        prompt: str,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> AdapterChatResult:
        """Send ``prompt`` as one user message and return the first choice."""
        kwargs = self._provider(provider).request_kwargs(provider=provider, model=model)
        kwargs["messages"] = [{"role": "user", "content": prompt}]
        if max_tokens is not None:
            kwargs["max_tokens"] = max_tokens
        if temperature is not None:
            kwargs["temperature"] = temperature

        module = _load_litellm_module()
        try:
            response = module.completion(**kwargs)
        except Exception as exc:
            _raise_mapped(exc, operation="completion")
        return AdapterChatResult(
            text=_extract_chat_content(response), provider=provider, model=model
        )

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(RESOURCE_COMPONENT_ID),
        id_fields=("provider", "model"),
    )
    def embed(
        self,
        *,
        provider: str,
        model: str,
        text: str,
    ) -> AdapterEmbeddingResult:
        """Embed one text and return its vector."""
        kwargs = self._provider(provider).request_kwargs(provider=provider, model=model)
        kwargs["input"] = [text]

        module = _load_litellm_module()
        try:
            response = module.embedding(**kwargs)
        except Exception as exc:
            _raise_mapped(exc, operation="embedding")
        return AdapterEmbeddingResult(
            values=_extract_first_embedding(response), provider=provider, model=model
        )

    @public_api_instrumented(logger=_LOGGER, component_id=str(RESOURCE_COMPONENT_ID))
    def health(self) -> AdapterHealthResult:
        """Report whether the library loads and every provider resolves."""
        try:
            _load_litellm_module()
            for provider_name in self._settings.providers:
                self._provider(provider_name)
        except AdapterInternalError as exc:
            return AdapterHealthResult(adapter_ready=False, detail=str(exc))
        return AdapterHealthResult(adapter_ready=True, detail="ok")

    def _provider(self, provider: str) -> _ProviderCall:
        """Resolve per-provider settings merged over adapter defaults."""
        config = self._settings.providers.get(provider)
        if config is None:
            raise AdapterInternalError(f"provider '{provider}' is not configured")
        return _ProviderCall(
            api_base=config.api_base.strip(),
            api_key=_resolve_api_key(provider=provider, config=config),
            timeout_seconds=(
                self._settings.timeout_seconds
                if config.timeout_seconds is None
                else config.timeout_seconds
            ),
            max_retries=(
                self._settings.max_retries
                if config.max_retries is None
                else config.max_retries
            ),
            options=dict(config.options),
        )


def _load_litellm_module() -> Any:
    """Return the imported ``litellm`` module."""
    return litellm


def _resolve_api_key(*, provider: str, config: LiteLlmProviderSettings) -> str:
    """Resolve provider API key from inline value or environment variable."""
    inline_key = config.api_key.strip()
    if inline_key != "":
        return inline_key
    env_key = config.api_key_env.strip()
    if env_key == "":
        return ""
    resolved = os.environ.get(env_key, "").strip()
    if resolved == "":
        raise AdapterInternalError(
            f"provider '{provider}' requires environment variable '{env_key}'"
        )
    return resolved


def _raise_mapped(exc: Exception, *, operation: str) -> NoReturn:
    """Map a LiteLLM or provider exception onto the adapter error classes."""
    _LOGGER.warning(
        "LiteLLM %s call failed: exception_type=%s",
        operation,
        type(exc).__name__,
        exc_info=exc,
    )
    if _is_dependency_exception(exc):
        raise AdapterDependencyError(
            str(exc) or f"litellm {operation} dependency failure"
        ) from exc
    raise AdapterInternalError(str(exc) or f"litellm {operation} failed") from exc


def _is_dependency_exception(exc: Exception) -> bool:
    """Return whether ``exc`` describes an upstream or transport failure."""
    if isinstance(exc, (TimeoutError, ConnectionError)):
        return True
    return any(
        klass.__name__ in _DEPENDENCY_EXCEPTION_NAMES for klass in type(exc).__mro__
    )


def _extract_chat_content(response: object) -> str:
    """Extract first choice message content from a completion response."""
    choices = _response_field(response, "choices")
    if not isinstance(choices, list) or len(choices) == 0:
        raise AdapterInternalError("completion response has no choices")
    message = _response_field(choices[0], "message")
    content = _response_field(message, "content")
    if not isinstance(content, str):
        raise AdapterInternalError("completion response content is invalid")
    return content


def _extract_first_embedding(response: object) -> tuple[float, ...]:
    """Extract the first embedding vector from an embedding response."""
    rows = _response_field(response, "data")
    if not isinstance(rows, list) or len(rows) == 0:
        raise AdapterInternalError("embedding response has no data")
    embedding = _response_field(rows[0], "embedding")
    if not isinstance(embedding, list):
        raise AdapterInternalError("embedding values are missing")
    try:
        return tuple(float(item) for item in embedding)
    except (TypeError, ValueError):
        raise AdapterInternalError("embedding values are invalid") from None


def _response_field(response: object, name: str) -> object:
    """Read one field from a response mapping or object."""
    if isinstance(response, Mapping):
        value = response.get(name)
    else:
        value = getattr(response, name, None)
    if value is None:
        raise AdapterInternalError(f"response missing {name}")
    return value
