"""Tests for SQL substrate readiness probes and error mapping."""

from __future__ import annotations

from types import SimpleNamespace

from sqlalchemy import exc as sa_exc

from packages.recall_shared.errors import RecallStorageError, codes
from resources.substrates.postgres.config import PostgresSettings
from resources.substrates.postgres.errors import normalize_postgres_error
from resources.substrates.postgres.health import ping
from resources.substrates.postgres.substrate import SharedPostgresSubstrate


class _FakeConnection:
    """Minimal context-managed connection double capturing execute calls."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, object] | None]] = []

    def __enter__(self) -> "_FakeConnection":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        del exc_type, exc, tb

    def execute(self, statement, params=None) -> None:
        self.calls.append((str(statement), params))


class _FakeEngine:
    """Minimal engine double exposing ``connect`` and a dialect name."""

    def __init__(self, conn: _FakeConnection, dialect: str = "postgresql") -> None:
        self._conn = conn
        self.dialect = SimpleNamespace(name=dialect)

    def connect(self) -> _FakeConnection:
        return self._conn


def test_ping_applies_statement_timeout_on_postgres() -> None:
    """Ping sets a transaction-local statement timeout then runs SELECT 1."""
    conn = _FakeConnection()

    assert ping(_FakeEngine(conn), timeout_seconds=1.2) is True
    assert conn.calls[0] == (
        "SELECT set_config('statement_timeout', :timeout_value, true)",
        {"timeout_value": "1200ms"},
    )
    assert conn.calls[1] == ("SELECT 1", None)


def test_ping_skips_timeout_for_other_dialects() -> None:
    """Only PostgreSQL understands ``set_config``."""
    conn = _FakeConnection()

    assert ping(_FakeEngine(conn, dialect="sqlite")) is True
    assert conn.calls == [("SELECT 1", None)]


def test_ping_returns_false_when_query_fails() -> None:
    """Ping degrades cleanly on database errors."""

    class _FailingConnection(_FakeConnection):
        def execute(self, statement, params=None) -> None:
            del statement, params
            raise sa_exc.OperationalError("SELECT 1", {}, Exception("down"))

    assert ping(_FakeEngine(_FailingConnection()), timeout_seconds=1.0) is False


def test_substrate_health_and_dispose_on_sqlite() -> None:
    """The shared substrate reports readiness against a real in-memory engine."""
    substrate = SharedPostgresSubstrate(settings=PostgresSettings(url="sqlite://"))

    status = substrate.health()
    substrate.dispose()

    assert status.ready is True
    assert status.detail == "ok"


def test_operational_errors_map_to_retryable_unavailable() -> None:
    """Connectivity failures are retryable dependency errors."""
    error = normalize_postgres_error(
        sa_exc.OperationalError("SELECT 1", {}, Exception("refused")),
        operation="save",
    )

    assert isinstance(error, RecallStorageError)
    assert error.code == codes.DEPENDENCY_UNAVAILABLE
    assert error.retryable is True
    assert error.detail.metadata["operation"] == "save"


def test_integrity_errors_are_not_retryable() -> None:
    """Constraint violations are permanent storage failures."""
    error = normalize_postgres_error(
        sa_exc.IntegrityError("INSERT", {}, Exception("duplicate key")),
        operation="save",
    )

    assert error.code == codes.DEPENDENCY_FAILURE
    assert error.retryable is False
