"""Authoritative SQL repository for Embedding Authority Service state."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from datetime import UTC, datetime, timedelta

from pydantic import JsonValue
from sqlalchemy import delete, desc, func, select, update
from sqlalchemy.orm import Session, sessionmaker

from packages.recall_shared.errors import RecallValidationError, codes
from resources.substrates.postgres import transactional_session
from services.state.embedding_authority.domain import EmbeddingRecord
from services.state.embedding_authority.interfaces import EmbeddingRepository

from .schema import SPEC_SINGLETON_ID, embedding_store_spec, embeddings

_SCAN_BATCH_SIZE = 500
_MIN_TICK = timedelta(microseconds=1)


class SqlEmbeddingRepository(EmbeddingRepository):
    """SQL repository over EAS-owned tables."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def get_dimensions(self) -> int | None:
        """Read the established vector length."""
        with transactional_session(self._session_factory) as session:
            return session.execute(
                select(embedding_store_spec.c.dimensions).where(
                    embedding_store_spec.c.id == SPEC_SINGLETON_ID
                )
            ).scalar_one_or_none()

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
        """Check dimensionality under a row lock and insert in one transaction."""
        with transactional_session(self._session_factory) as session:
            self._claim_dimensions(session, length=len(vector))
            values = {
                "id": record_id,
                "text": text,
                "vector": list(vector),
                "category": category,
                "metadata": dict(metadata) if metadata is not None else None,
                "created_at": now,
                "updated_at": now,
            }
            session.execute(embeddings.insert().values(**values))
            return _to_record(values)

    def get_record(self, *, record_id: str) -> EmbeddingRecord | None:
        """Fetch one record by id."""
        with transactional_session(self._session_factory) as session:
            row = (
                session.execute(select(embeddings).where(embeddings.c.id == record_id))
                .mappings()
                .one_or_none()
            )
            return _to_record(row) if row is not None else None

    def get_records(self, *, record_ids: Sequence[str]) -> dict[str, EmbeddingRecord]:
        """Fetch many records in one query."""
        if not record_ids:
            return {}
        with transactional_session(self._session_factory) as session:
            rows = (
                session.execute(
                    select(embeddings).where(embeddings.c.id.in_(list(record_ids)))
                )
                .mappings()
                .all()
            )
            return {str(row["id"]): _to_record(row) for row in rows}

    def update_record(
        self,
        *,
        record_id: str,
        text: str | None,
        category: str | None,
        metadata: Mapping[str, JsonValue] | None,
        now: datetime,
    ) -> EmbeddingRecord | None:
        """Overwrite supplied fields under a row lock."""
        with transactional_session(self._session_factory) as session:
            current = (
                session.execute(
                    select(embeddings)
                    .where(embeddings.c.id == record_id)
                    .with_for_update()
                )
                .mappings()
                .one_or_none()
            )
            if current is None:
                return None

            previous = _row_dt(current, "updated_at")
            changes: dict[str, object] = {"updated_at": max(now, previous + _MIN_TICK)}
            if text is not None:
                changes["text"] = text
            if category is not None:
                changes["category"] = category
            if metadata is not None:
                changes["metadata"] = dict(metadata)

            session.execute(
                update(embeddings).where(embeddings.c.id == record_id).values(**changes)
            )
            return _to_record({**current, **changes})

    def delete_record(self, *, record_id: str) -> bool:
        """Delete one record by id."""
        with transactional_session(self._session_factory) as session:
            result = session.execute(delete(embeddings).where(embeddings.c.id == record_id))
            return bool(result.rowcount)

    def list_by_category(self, *, category: str) -> list[EmbeddingRecord]:
        """List every record for one category, newest first."""
        with transactional_session(self._session_factory) as session:
            rows = (
                session.execute(
                    select(embeddings)
                    .where(embeddings.c.category == category)
                    .order_by(*_newest_first())
                )
                .mappings()
                .all()
            )
            return [_to_record(row) for row in rows]

    def list_page(self, *, limit: int, offset: int) -> list[EmbeddingRecord]:
        """List one page of records, newest first."""
        with transactional_session(self._session_factory) as session:
            rows = (
                session.execute(
                    select(embeddings)
                    .order_by(*_newest_first())
                    .limit(limit)
                    .offset(offset)
                )
                .mappings()
                .all()
            )
            return [_to_record(row) for row in rows]

    def count(self) -> int:
        """Count every stored record."""
        with transactional_session(self._session_factory) as session:
            return int(
                session.execute(select(func.count()).select_from(embeddings)).scalar_one()
            )

    def search_text(
        self, *, query: str, limit: int, category: str | None
    ) -> list[EmbeddingRecord]:
        """Match ``query`` literally and case-insensitively inside record text."""
        stmt = select(embeddings).where(embeddings.c.text.icontains(query, autoescape=True))
        if category is not None:
            stmt = stmt.where(embeddings.c.category == category)
        stmt = stmt.order_by(*_newest_first()).limit(limit)
        with transactional_session(self._session_factory) as session:
            rows = session.execute(stmt).mappings().all()
            return [_to_record(row) for row in rows]

    def iter_vectors(self) -> Iterator[tuple[str, tuple[float, ...]]]:
        """Stream ids and vectors in batches from one read transaction."""
        stmt = select(embeddings.c.id, embeddings.c.vector).execution_options(
            yield_per=_SCAN_BATCH_SIZE
        )
        with transactional_session(self._session_factory) as session:
            for record_id, vector in session.execute(stmt):
                yield str(record_id), _to_vector(vector)

    def _claim_dimensions(self, session: Session, *, length: int) -> None:
        """Establish or enforce the store dimensionality inside ``session``."""
        stored = session.execute(
            select(embedding_store_spec.c.dimensions)
            .where(embedding_store_spec.c.id == SPEC_SINGLETON_ID)
            .with_for_update()
        ).one_or_none()
        if stored is None:
            session.execute(
                embedding_store_spec.insert().values(
                    id=SPEC_SINGLETON_ID, dimensions=length
                )
            )
            return

        dimensions = stored[0]
        if dimensions is None:
            session.execute(
                embedding_store_spec.update()
                .where(embedding_store_spec.c.id == SPEC_SINGLETON_ID)
                .values(dimensions=length)
            )
            return
        if dimensions != length:
            raise RecallValidationError(
                f"vector: expected {dimensions} dimensions, got {length}",
                code=codes.DIMENSION_MISMATCH,
                metadata={"expected": str(dimensions), "actual": str(length)},
            )


def _newest_first() -> tuple[object, ...]:
    """Order clause for newest-first listings with id as tiebreaker."""
    return (desc(embeddings.c.created_at), desc(embeddings.c.id))


def _to_record(row: Mapping[str, object]) -> EmbeddingRecord:
    """Map row mapping to ``EmbeddingRecord``."""
    metadata = row.get("metadata")
    category = row.get("category")
    return EmbeddingRecord(
        id=str(row["id"]),
        text=str(row["text"]),
        vector=_to_vector(row["vector"]),
        category=str(category) if category is not None else None,
        metadata=dict(metadata) if isinstance(metadata, Mapping) else None,
        created_at=_row_dt(row, "created_at"),
        updated_at=_row_dt(row, "updated_at"),
    )


def _to_vector(value: object) -> tuple[float, ...]:
    """Normalize a stored JSON list or float array into a float tuple."""
    if not isinstance(value, (list, tuple)):
        raise ValueError("expected sequence column for vector")
    return tuple(float(item) for item in value)


def _row_dt(row: Mapping[str, object], key: str) -> datetime:
    """Return UTC-aware datetime from row key with strict type enforcement."""
    value = row.get(key)
    if not isinstance(value, datetime):
        raise ValueError(f"expected datetime column for {key}")
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
