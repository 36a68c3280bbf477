"""Concrete Semantic Memory facade implementation."""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import JsonValue

from packages.recall_shared.logging import get_logger, public_api_instrumented
from packages.recall_shared.parsing import parse_non_negative_int
from packages.recall_shared.validation import validate_request
from services.action.language_model.service import LanguageModelService
from services.action.semantic_memory.component import SERVICE_COMPONENT_ID
from services.action.semantic_memory.domain import HealthStatus
from services.action.semantic_memory.service import SemanticMemoryService
from services.action.semantic_memory.validation import SemanticSearchOptions
from services.state.embedding_authority.config import EmbeddingAuthoritySettings
from services.state.embedding_authority.domain import EmbeddingRecord, SimilarityMatch
from services.state.embedding_authority.service import EmbeddingAuthorityService

_LOGGER = get_logger(__name__)


class DefaultSemanticMemoryService(SemanticMemoryService):
    """Facade that vectorizes text through the LMS before each store call."""

    def __init__(
        self,
        *,
        store: EmbeddingAuthorityService,
        language_model: LanguageModelService,
        store_settings: EmbeddingAuthoritySettings | None = None,
    ) -> None:
        self._store = store
        self._language_model = language_model
        self._store_settings = store_settings or EmbeddingAuthoritySettings()

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(SERVICE_COMPONENT_ID),
        id_fields=("category",),
    )
    def save_text(
        self,
        *,
        text: str,
        category: str | None = None,
        metadata: Mapping[str, JsonValue] | None = None,
    ) -> EmbeddingRecord:
        """Generate a vector, then save; no record is written if generation fails."""
        vector = self._language_model.generate_vector(text=text)
        return self._store.save(
            text=text, vector=vector, category=category, metadata=metadata
        )

    @public_api_instrumented(logger=_LOGGER, component_id=str(SERVICE_COMPONENT_ID))
    def search_by_text(
        self,
        *,
        query_text: str,
        limit: int | str | None = None,
        threshold: float | None = None,
    ) -> list[SimilarityMatch]:
        """Generate a query vector, then run a similarity search."""
        options = validate_request(
            SemanticSearchOptions,
            {
                "limit": parse_non_negative_int(
                    limit,
                    field_name="limit",
                    default=self._store_settings.default_search_limit,
                ),
                "threshold": (
                    self._store_settings.default_similarity_threshold
                    if threshold is None
                    else threshold
                ),
            },
        )
        query_vector = self._language_model.generate_vector(text=query_text)
        return self._store.search_by_similarity(
            query_vector=query_vector,
            limit=options.limit,
            threshold=options.threshold,
        )

    @public_api_instrumented(logger=_LOGGER, component_id=str(SERVICE_COMPONENT_ID))
    def generate_completion(self, *, prompt: str) -> str:
        """Pass one prompt through to the language model."""
        return self._language_model.generate_completion(prompt=prompt)

    @public_api_instrumented(logger=_LOGGER, component_id=str(SERVICE_COMPONENT_ID))
    def health(self) -> HealthStatus:
        """Combine store and provider readiness."""
        store = self._store.health()
        provider = self._language_model.health()
        store_ready = store.service_ready and store.substrate_ready
        provider_ready = provider.service_ready and provider.adapter_ready
        return HealthStatus(
            service_ready=True,
            store_ready=store_ready,
            provider_ready=provider_ready,
            detail=f"store: {store.detail}; provider: {provider.detail}",
        )
