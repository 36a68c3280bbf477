"""Authoritative in-process Python API for Language Model Service."""

from __future__ import annotations

from abc import ABC, abstractmethod

from packages.recall_shared.config import RecallSettings
from resources.adapters.litellm.adapter import LiteLlmAdapter
from services.action.language_model.domain import HealthStatus


class LanguageModelService(ABC):
    """Public API for embedding and completion generation.

    Every upstream failure surfaces as ``RecallProviderError``; nothing is
    retried at this layer.
    """

    @abstractmethod
    def generate_vector(self, *, text: str) -> tuple[float, ...]:
        """Embed one text with the configured embedding model."""

    @abstractmethod
    def generate_completion(self, *, prompt: str) -> str:
        """Complete one single-turn prompt with the configured chat model."""

    @abstractmethod
    def health(self) -> HealthStatus:
        """Return LMS and adapter health state."""


def build_language_model_service(
    *,
    settings: RecallSettings,
    adapter: LiteLlmAdapter | None = None,
) -> LanguageModelService:
    """Build default Language Model implementation from typed settings."""
    from resources.adapters.litellm import (
        LiteLlmLibraryAdapter,
        resolve_litellm_adapter_settings,
    )
    from services.action.language_model.config import (
        resolve_language_model_service_settings,
    )
    from services.action.language_model.implementation import (
        DefaultLanguageModelService,
    )

    return DefaultLanguageModelService(
        settings=resolve_language_model_service_settings(settings),
        adapter=adapter
        or LiteLlmLibraryAdapter(settings=resolve_litellm_adapter_settings(settings)),
    )
