"""EAS-owned SQL runtime wiring.

Composes the shared SQL substrate into a service-local handle that owns
table creation and the store dimensionality seed row.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import Engine, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from packages.recall_shared.errors import RecallValidationError, codes
from packages.recall_shared.logging import get_logger
from resources.substrates.postgres import (
    PostgresSubstrate,
    normalize_postgres_error,
    transactional_session,
)

from .schema import SPEC_SINGLETON_ID, embedding_store_spec, metadata

_LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class EmbeddingStoreRuntime:
    """Concrete EAS handle over the shared engine and session factory."""

    engine: Engine
    session_factory: sessionmaker[Session]

    @classmethod
    def from_substrate(cls, substrate: PostgresSubstrate) -> "EmbeddingStoreRuntime":
        """Build the EAS runtime from the shared SQL substrate."""
        return cls(engine=substrate.engine, session_factory=substrate.session_factory)

    def ensure_schema(self, *, dimensions: int | None = None) -> None:
        """Create owned tables and seed the dimensionality row when absent.

        A configured ``dimensions`` pins an empty store; it must agree with
        any dimensionality already recorded.
        """
        try:
            metadata.create_all(self.engine)
            self._seed_dimensions(dimensions)
        except SQLAlchemyError as exc:
            raise normalize_postgres_error(exc, operation="ensure_schema") from exc

    def _seed_dimensions(self, dimensions: int | None) -> None:
        """Insert, pin, or verify the singleton dimensionality row."""
        with transactional_session(self.session_factory) as session:
            stored = session.execute(
                select(embedding_store_spec.c.dimensions)
                .where(embedding_store_spec.c.id == SPEC_SINGLETON_ID)
                .with_for_update()
            ).one_or_none()
            if stored is None:
                session.execute(
                    embedding_store_spec.insert().values(
                        id=SPEC_SINGLETON_ID, dimensions=dimensions
                    )
                )
                _LOGGER.info("Embedding store initialized: dimensions=%s", dimensions)
                return

            current = stored[0]
            if dimensions is None or current == dimensions:
                return
            if current is not None:
                raise RecallValidationError(
                    f"configured dimensions {dimensions} conflict with stored "
                    f"dimensions {current}",
                    code=codes.DIMENSION_MISMATCH,
                )
            session.execute(
                embedding_store_spec.update()
                .where(embedding_store_spec.c.id == SPEC_SINGLETON_ID)
                .values(dimensions=dimensions)
            )
            _LOGGER.info("Embedding store dimensions pinned: dimensions=%s", dimensions)
