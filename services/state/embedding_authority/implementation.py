"""Concrete Embedding Authority Service implementation."""

from __future__ import annotations

import heapq
from collections.abc import Mapping, Sequence
from datetime import UTC, datetime
from typing import Callable, TypeVar

from pydantic import JsonValue
from sqlalchemy.exc import SQLAlchemyError

from packages.recall_shared.embeddings import cosine_similarity
from packages.recall_shared.errors import (
    RecallNotFoundError,
    RecallValidationError,
    codes,
)
from packages.recall_shared.ids import MonotonicUlidGenerator
from packages.recall_shared.logging import get_logger, public_api_instrumented
from packages.recall_shared.parsing import parse_non_negative_int
from packages.recall_shared.validation import validate_request
from resources.substrates.postgres import PostgresSubstrate, normalize_postgres_error
from services.state.embedding_authority.component import SERVICE_COMPONENT_ID
from services.state.embedding_authority.config import EmbeddingAuthoritySettings
from services.state.embedding_authority.domain import (
    EmbeddingRecord,
    HealthStatus,
    RecordPage,
    SimilarityMatch,
)
from services.state.embedding_authority.interfaces import EmbeddingRepository
from services.state.embedding_authority.service import EmbeddingAuthorityService
from services.state.embedding_authority.validation import (
    CategoryRequest,
    RecordIdRequest,
    SaveRecordRequest,
    SimilaritySearchRequest,
    TextSearchRequest,
    UpdateRecordRequest,
)

_LOGGER = get_logger(__name__)

T = TypeVar("T")


def _utcnow() -> datetime:
    return datetime.now(UTC)


class DefaultEmbeddingAuthorityService(EmbeddingAuthorityService):
    """Default EAS implementation with an exact cosine scan over SQL rows."""

    def __init__(
        self,
        *,
        settings: EmbeddingAuthoritySettings,
        repository: EmbeddingRepository,
        substrate: PostgresSubstrate,
        clock: Callable[[], datetime] = _utcnow,
        id_generator: Callable[[], str] | None = None,
    ) -> None:
        self._settings = settings
        self._repository = repository
        self._substrate = substrate
        self._clock = clock
        self._next_id = id_generator or MonotonicUlidGenerator()

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(SERVICE_COMPONENT_ID),
        id_fields=("category",),
    )
    def save(
        self,
        *,
        text: str,
        vector: Sequence[float],
        category: str | None = None,
        metadata: Mapping[str, JsonValue] | None = None,
    ) -> EmbeddingRecord:
        """Validate and insert one record."""
        request = validate_request(
            SaveRecordRequest,
            {"text": text, "vector": vector, "category": category, "metadata": metadata},
        )
        return self._call(
            "save",
            lambda: self._repository.insert_record(
                record_id=self._next_id(),
                text=request.text,
                vector=request.vector,
                category=request.category,
                metadata=request.metadata,
                now=self._clock(),
            ),
        )

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(SERVICE_COMPONENT_ID),
        id_fields=("record_id",),
    )
    def get(self, *, record_id: str) -> EmbeddingRecord | None:
        """Read one record by id."""
        request = validate_request(RecordIdRequest, {"record_id": record_id})
        return self._call(
            "get", lambda: self._repository.get_record(record_id=request.record_id)
        )

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(SERVICE_COMPONENT_ID),
        id_fields=("record_id",),
    )
    def update(
        self,
        *,
        record_id: str,
        text: str | None = None,
        category: str | None = None,
        metadata: Mapping[str, JsonValue] | None = None,
    ) -> EmbeddingRecord:
        """Overwrite supplied fields and advance ``updated_at``."""
        request = validate_request(
            UpdateRecordRequest,
            {
                "record_id": record_id,
                "text": text,
                "category": category,
                "metadata": metadata,
            },
        )
        updated = self._call(
            "update",
            lambda: self._repository.update_record(
                record_id=request.record_id,
                text=request.text,
                category=request.category,
                metadata=request.metadata,
                now=self._clock(),
            ),
        )
        if updated is None:
            raise RecallNotFoundError(
                "record not found",
                metadata={"record_id": request.record_id},
            )
        return updated

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(SERVICE_COMPONENT_ID),
        id_fields=("record_id",),
    )
    def delete(self, *, record_id: str) -> bool:
        """Delete one record by id."""
        request = validate_request(RecordIdRequest, {"record_id": record_id})
        return self._call(
            "delete", lambda: self._repository.delete_record(record_id=request.record_id)
        )

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(SERVICE_COMPONENT_ID),
        id_fields=("category",),
    )
    def list_by_category(self, *, category: str) -> list[EmbeddingRecord]:
        """List records for one category."""
        request = validate_request(CategoryRequest, {"category": category})
        return self._call(
            "list_by_category",
            lambda: self._repository.list_by_category(category=request.category),
        )

    @public_api_instrumented(logger=_LOGGER, component_id=str(SERVICE_COMPONENT_ID))
    def list_all(
        self,
        *,
        limit: int | str | None = None,
        offset: int | str | None = None,
    ) -> RecordPage:
        """List one page with the unfiltered total count."""
        page_limit = parse_non_negative_int(
            limit, field_name="limit", default=self._settings.default_list_limit
        )
        page_offset = parse_non_negative_int(offset, field_name="offset", default=0)
        records = self._call(
            "list_all",
            lambda: self._repository.list_page(limit=page_limit, offset=page_offset),
        )
        total = self._call("list_all", self._repository.count)
        return RecordPage(records=records, total_count=total)

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(SERVICE_COMPONENT_ID),
        id_fields=("category",),
    )
    def search_by_text(
        self,
        *,
        query: str,
        limit: int | str | None = None,
        category: str | None = None,
    ) -> list[EmbeddingRecord]:
        """Substring search, newest first."""
        request = validate_request(
            TextSearchRequest,
            {
                "query": query,
                "limit": parse_non_negative_int(
                    limit, field_name="limit", default=self._settings.default_search_limit
                ),
                "category": category,
            },
        )
        if request.limit == 0:
            return []
        return self._call(
            "search_by_text",
            lambda: self._repository.search_text(
                query=request.query, limit=request.limit, category=request.category
            ),
        )

    @public_api_instrumented(logger=_LOGGER, component_id=str(SERVICE_COMPONENT_ID))
    def search_by_similarity(
        self,
        *,
        query_vector: Sequence[float],
        limit: int | str | None = None,
        threshold: float | None = None,
    ) -> list[SimilarityMatch]:
        """Exact cosine scan keeping the best ``limit`` scores above ``threshold``."""
        request = validate_request(
            SimilaritySearchRequest,
            {
                "query_vector": query_vector,
                "limit": parse_non_negative_int(
                    limit, field_name="limit", default=self._settings.default_search_limit
                ),
                "threshold": (
                    self._settings.default_similarity_threshold
                    if threshold is None
                    else threshold
                ),
            },
        )
        dimensions = self._call("search_by_similarity", self._repository.get_dimensions)
        if dimensions is not None and dimensions != len(request.query_vector):
            raise RecallValidationError(
                f"query_vector: expected {dimensions} dimensions, "
                f"got {len(request.query_vector)}",
                code=codes.DIMENSION_MISMATCH,
                metadata={
                    "expected": str(dimensions),
                    "actual": str(len(request.query_vector)),
                },
            )
        if dimensions is None or request.limit == 0:
            return []

        def _scan() -> list[tuple[str, float]]:
            candidates = (
                (record_id, cosine_similarity(request.query_vector, vector))
                for record_id, vector in self._repository.iter_vectors()
            )
            # Ids are monotonic ULIDs, so ascending id is insertion order.
            return heapq.nsmallest(
                request.limit,
                (item for item in candidates if item[1] > request.threshold),
                key=lambda item: (-item[1], item[0]),
            )

        ranked = self._call("search_by_similarity", _scan)
        records = self._call(
            "search_by_similarity",
            lambda: self._repository.get_records(
                record_ids=[record_id for record_id, _ in ranked]
            ),
        )
        return [
            SimilarityMatch(record=records[record_id], score=score)
            for record_id, score in ranked
            if record_id in records
        ]

    @public_api_instrumented(logger=_LOGGER, component_id=str(SERVICE_COMPONENT_ID))
    def count(self) -> int:
        """Return the number of stored records."""
        return self._call("count", self._repository.count)

    @public_api_instrumented(logger=_LOGGER, component_id=str(SERVICE_COMPONENT_ID))
    def health(self) -> HealthStatus:
        """Return EAS and SQL substrate readiness."""
        substrate = self._substrate.health()
        return HealthStatus(
            service_ready=True,
            substrate_ready=substrate.ready,
            detail=substrate.detail,
        )

    def _call(self, operation: str, fn: Callable[[], T]) -> T:
        """Run one repository call, normalizing SQLAlchemy failures."""
        try:
            return fn()
        except SQLAlchemyError as exc:
            _LOGGER.warning(
                "EAS operation failed due to dependency error: operation=%s exception_type=%s",
                operation,
                type(exc).__name__,
                exc_info=exc,
            )
            raise normalize_postgres_error(exc, operation=operation) from exc
