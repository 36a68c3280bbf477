"""Concrete Language Model Service implementation."""

from __future__ import annotations

from typing import Callable, TypeVar

from packages.recall_shared.embeddings import validate_vector
from packages.recall_shared.errors import RecallProviderError, codes
from packages.recall_shared.logging import get_logger, public_api_instrumented
from packages.recall_shared.validation import validate_request
from resources.adapters.litellm import (
    RESOURCE_COMPONENT_ID as ADAPTER_COMPONENT_ID,
    AdapterDependencyError,
    AdapterInternalError,
    LiteLlmAdapter,
)
from services.action.language_model.component import SERVICE_COMPONENT_ID
from services.action.language_model.config import LanguageModelServiceSettings
from services.action.language_model.domain import HealthStatus
from services.action.language_model.service import LanguageModelService
from services.action.language_model.validation import (
    GenerateCompletionRequest,
    GenerateVectorRequest,
)

_LOGGER = get_logger(__name__)

T = TypeVar("T")


class DefaultLanguageModelService(LanguageModelService):
    """Default LMS implementation backed by a LiteLLM adapter resource."""

    def __init__(
        self,
        *,
        settings: LanguageModelServiceSettings,
        adapter: LiteLlmAdapter,
    ) -> None:
        self._settings = settings
        self._adapter = adapter

    @public_api_instrumented(logger=_LOGGER, component_id=str(SERVICE_COMPONENT_ID))
    def generate_vector(self, *, text: str) -> tuple[float, ...]:
        """Embed ``text`` and return a usable vector."""
        request = validate_request(GenerateVectorRequest, {"text": text})
        profile = self._settings.embedding
        result = self._call(
            "generate_vector",
            lambda: self._adapter.embed(
                provider=profile.provider, model=profile.model, text=request.text
            ),
        )
        try:
            return validate_vector(result.values)
        except ValueError as exc:
            raise RecallProviderError(
                f"provider returned an unusable vector: {exc}",
                metadata={"adapter": str(ADAPTER_COMPONENT_ID)},
            ) from exc

    @public_api_instrumented(logger=_LOGGER, component_id=str(SERVICE_COMPONENT_ID))
    def generate_completion(self, *, prompt: str) -> str:
        """Send ``prompt`` as one user message and return the reply text."""
        request = validate_request(GenerateCompletionRequest, {"prompt": prompt})
        profile = self._settings.completion
        result = self._call(
            "generate_completion",
            lambda: self._adapter.chat(
                provider=profile.provider,
                model=profile.model,
                prompt=request.prompt,
                max_tokens=self._settings.max_tokens,
                temperature=self._settings.temperature,
            ),
        )
        if result.text == "":
            raise RecallProviderError(
                "provider returned an empty completion",
                metadata={"adapter": str(ADAPTER_COMPONENT_ID)},
            )
        return result.text

    @public_api_instrumented(logger=_LOGGER, component_id=str(SERVICE_COMPONENT_ID))
    def health(self) -> HealthStatus:
        """Return LMS-level readiness with adapter probe result."""
        result = self._adapter.health()
        return HealthStatus(
            service_ready=True,
            adapter_ready=result.adapter_ready,
            detail=result.detail,
        )

    def _call(self, operation: str, fn: Callable[[], T]) -> T:
        """Run one adapter call, mapping adapter failures to provider errors."""
        try:
            return fn()
        except AdapterDependencyError as exc:
            raise RecallProviderError(
                str(exc) or "litellm dependency failure",
                code=codes.DEPENDENCY_UNAVAILABLE,
                retryable=True,
                metadata={"adapter": str(ADAPTER_COMPONENT_ID), "operation": operation},
            ) from exc
        except AdapterInternalError as exc:
            raise RecallProviderError(
                str(exc) or "litellm adapter internal failure",
                metadata={"adapter": str(ADAPTER_COMPONENT_ID), "operation": operation},
            ) from exc
