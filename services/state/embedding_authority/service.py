"""Authoritative in-process Python API for Embedding Authority Service."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence

from pydantic import JsonValue

from packages.recall_shared.config import RecallSettings
from resources.substrates.postgres import PostgresSubstrate
from services.state.embedding_authority.domain import (
    EmbeddingRecord,
    HealthStatus,
    RecordPage,
    SimilarityMatch,
)


class EmbeddingAuthorityService(ABC):
    """Public API for the embedding store.

    Records pair a text with one fixed-length vector. Listings are ordered
    newest first; similarity search is ordered by descending cosine score.
    Pagination arguments accept integers or integer strings and fall back to
    configured defaults when omitted.
    """

    @abstractmethod
    def save(
        self,
        *,
        text: str,
        vector: Sequence[float],
        category: str | None = None,
        metadata: Mapping[str, JsonValue] | None = None,
    ) -> EmbeddingRecord:
        """Persist one record; the first save establishes the dimensionality."""

    @abstractmethod
    def get(self, *, record_id: str) -> EmbeddingRecord | None:
        """Read one record by id, or ``None`` when absent."""

    @abstractmethod
    def update(
        self,
        *,
        record_id: str,
        text: str | None = None,
        category: str | None = None,
        metadata: Mapping[str, JsonValue] | None = None,
    ) -> EmbeddingRecord:
        """Overwrite supplied fields; the vector is never changed in place."""

    @abstractmethod
    def delete(self, *, record_id: str) -> bool:
        """Delete one record and report whether it existed."""

    @abstractmethod
    def list_by_category(self, *, category: str) -> list[EmbeddingRecord]:
        """List every record with ``category``, newest first."""

    @abstractmethod
    def list_all(
        self,
        *,
        limit: int | str | None = None,
        offset: int | str | None = None,
    ) -> RecordPage:
        """List one page of records with the unfiltered total count."""

    @abstractmethod
    def search_by_text(
        self,
        *,
        query: str,
        limit: int | str | None = None,
        category: str | None = None,
    ) -> list[EmbeddingRecord]:
        """Case-insensitive literal substring search over record text."""

    @abstractmethod
    def search_by_similarity(
        self,
        *,
        query_vector: Sequence[float],
        limit: int | str | None = None,
        threshold: float | None = None,
    ) -> list[SimilarityMatch]:
        """Return records scoring strictly above ``threshold``, best first."""

    @abstractmethod
    def count(self) -> int:
        """Return the number of stored records."""

    @abstractmethod
    def health(self) -> HealthStatus:
        """Return EAS and SQL substrate readiness."""


def build_embedding_authority_service(
    *,
    settings: RecallSettings,
    postgres_substrate: PostgresSubstrate | None = None,
) -> EmbeddingAuthorityService:
    """Build the default EAS and ensure its tables exist."""
    from resources.substrates.postgres import (
        SharedPostgresSubstrate,
        resolve_postgres_settings,
    )
    from services.state.embedding_authority.config import (
        resolve_embedding_authority_settings,
    )
    from services.state.embedding_authority.data import (
        EmbeddingStoreRuntime,
        SqlEmbeddingRepository,
    )
    from services.state.embedding_authority.implementation import (
        DefaultEmbeddingAuthorityService,
    )

    service_settings = resolve_embedding_authority_settings(settings)
    substrate = postgres_substrate or SharedPostgresSubstrate(
        settings=resolve_postgres_settings(settings)
    )
    runtime = EmbeddingStoreRuntime.from_substrate(substrate)
    runtime.ensure_schema(dimensions=service_settings.dimensions)
    return DefaultEmbeddingAuthorityService(
        settings=service_settings,
        repository=SqlEmbeddingRepository(runtime.session_factory),
        substrate=substrate,
    )
