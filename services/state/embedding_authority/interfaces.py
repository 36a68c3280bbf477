"""Internal persistence contract used by the EAS implementation."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping, Sequence
from datetime import datetime

from pydantic import JsonValue

from services.state.embedding_authority.domain import EmbeddingRecord


class EmbeddingRepository(ABC):
    """Authoritative record persistence for the embedding store.

    Each method runs in its own transaction. Implementations raise SQLAlchemy
    errors unchanged; the service normalizes them.
    """

    @abstractmethod
    def get_dimensions(self) -> int | None:
        """Return the established vector length, or ``None`` while unset."""

    @abstractmethod
    def insert_record(
        self,
        *,
        record_id: str,
        text: str,
        vector: Sequence[float],
        category: str | None,
        metadata: Mapping[str, JsonValue] | None,
        now: datetime,
    ) -> EmbeddingRecord:
        """Insert one record, establishing the dimensionality when unset."""

    @abstractmethod
    def get_record(self, *, record_id: str) -> EmbeddingRecord | None:
        """Fetch one record by id."""

    @abstractmethod
    def get_records(self, *, record_ids: Sequence[str]) -> dict[str, EmbeddingRecord]:
        """Fetch many records keyed by id; missing ids are omitted."""

    @abstractmethod
    def update_record(
        self,
        *,
        record_id: str,
        text: str | None,
        category: str | None,
        metadata: Mapping[str, JsonValue] | None,
        now: datetime,
    ) -> EmbeddingRecord | None:
        """Overwrite supplied fields and advance ``updated_at``; ``None`` if absent."""

    @abstractmethod
    def delete_record(self, *, record_id: str) -> bool:
        """Delete one record and report whether it existed."""

    @abstractmethod
    def list_by_category(self, *, category: str) -> list[EmbeddingRecord]:
        """List records for one category, newest first."""

    @abstractmethod
    def list_page(self, *, limit: int, offset: int) -> list[EmbeddingRecord]:
        """List one page of records, newest first."""

    @abstractmethod
    def count(self) -> int:
        """Return the total number of stored records."""

    @abstractmethod
    def search_text(
        self, *, query: str, limit: int, category: str | None
    ) -> list[EmbeddingRecord]:
        """Case-insensitive literal substring search, newest first."""

    @abstractmethod
    def iter_vectors(self) -> Iterator[tuple[str, tuple[float, ...]]]:
        """Stream ``(id, vector)`` pairs for every stored record."""
