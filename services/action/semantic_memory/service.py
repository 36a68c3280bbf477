"""Authoritative in-process Python API for the Semantic Memory facade."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping

from pydantic import JsonValue

from packages.recall_shared.config import RecallSettings
from services.action.language_model.service import LanguageModelService
from services.action.semantic_memory.domain import HealthStatus
from services.state.embedding_authority.domain import EmbeddingRecord, SimilarityMatch
from services.state.embedding_authority.service import EmbeddingAuthorityService


class SemanticMemoryService(ABC):
    """Text-in, text-out memory operations composed from the store and provider.

    The facade owns no state. A provider failure aborts the operation before
    the store is touched.
    """

    @abstractmethod
    def save_text(
        self,
        *,
        text: str,
        category: str | None = None,
        metadata: Mapping[str, JsonValue] | None = None,
    ) -> EmbeddingRecord:
        """Embed ``text`` and save it with its vector."""

    @abstractmethod
    def search_by_text(
        self,
        *,
        query_text: str,
        limit: int | str | None = None,
        threshold: float | None = None,
    ) -> list[SimilarityMatch]:
        """Embed ``query_text`` and run a similarity search with it."""

    @abstractmethod
    def generate_completion(self, *, prompt: str) -> str:
        """Complete one prompt with the configured chat model."""

    @abstractmethod
    def health(self) -> HealthStatus:
        """Return aggregate store and provider readiness."""


def build_semantic_memory_service(
    *,
    settings: RecallSettings,
    embedding_service: EmbeddingAuthorityService | None = None,
    language_model: LanguageModelService | None = None,
) -> SemanticMemoryService:
    """Build the default facade, constructing dependencies when not supplied."""
    from services.action.language_model.service import build_language_model_service
    from services.action.semantic_memory.implementation import (
        DefaultSemanticMemoryService,
    )
    from services.state.embedding_authority.config import (
        resolve_embedding_authority_settings,
    )
    from services.state.embedding_authority.service import (
        build_embedding_authority_service,
    )

    return DefaultSemanticMemoryService(
        store=embedding_service or build_embedding_authority_service(settings=settings),
        language_model=language_model or build_language_model_service(settings=settings),
        store_settings=resolve_embedding_authority_settings(settings),
    )
