"""SQLAlchemy engine construction for the shared SQL substrate."""

from __future__ import annotations

from sqlalchemy import Engine, create_engine
from sqlalchemy.pool import StaticPool

from resources.substrates.postgres.config import PostgresSettings


def create_postgres_engine(settings: PostgresSettings) -> Engine:
    """Construct a configured SQLAlchemy engine.

    PostgreSQL URLs get psycopg connect options (connect and statement
    timeouts, sslmode) plus queue-pool sizing. Other URLs, in practice
    SQLite, get a single shared connection so in-memory databases survive
    across sessions.
    """
    url = settings.url or ""
    if not settings.is_postgres:
        return create_engine(
            url,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )

    statement_timeout_ms = max(1, int(settings.statement_timeout_seconds * 1000))
    connect_args = {
        "connect_timeout": max(1, int(settings.connect_timeout_seconds)),
        "sslmode": settings.sslmode,
        "options": f"-c statement_timeout={statement_timeout_ms}",
    }
    return create_engine(
        url,
        pool_size=settings.pool_size,
        max_overflow=settings.max_overflow,
        pool_timeout=settings.pool_timeout_seconds,
        pool_pre_ping=settings.pool_pre_ping,
        connect_args=connect_args,
    )
