"""Pydantic settings for the Postgres substrate component."""

from __future__ import annotations

import os
from typing import Literal
from urllib.parse import quote_plus

from pydantic import BaseModel, ConfigDict, Field, model_validator

from packages.recall_shared.config import RecallSettings, resolve_component_settings
from resources.substrates.postgres.component import RESOURCE_COMPONENT_ID

SslMode = Literal["disable", "allow", "prefer", "require", "verify-ca", "verify-full"]


class PostgresSettings(BaseModel):
    """Runtime settings for constructing the shared SQLAlchemy engine.

    ``url`` may name any SQLAlchemy URL; pool and psycopg connect options are
    applied only for ``postgresql`` URLs. A ``sqlite://`` URL is accepted for
    local runs and tests.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    url: str | None = None
    host: str = "localhost"
    port: int = Field(default=5432, gt=0)
    database: str = "recall"
    user: str = "recall"
    password: str = ""
    password_env: str = ""
    sslmode: SslMode = "prefer"
    pool_size: int = Field(default=5, gt=0)
    max_overflow: int = Field(default=10, ge=0)
    pool_timeout_seconds: float = Field(default=30.0, gt=0)
    pool_pre_ping: bool = True
    connect_timeout_seconds: float = Field(default=10.0, gt=0)
    statement_timeout_seconds: float = Field(default=30.0, gt=0)
    health_timeout_seconds: float = Field(default=1.0, gt=0)

    @model_validator(mode="after")
    def _resolve_url(self) -> "PostgresSettings":
        """Build the psycopg URL from split fields when no URL is given."""
        if self.url is not None and self.url.strip() != "":
            object.__setattr__(self, "url", self.url.strip())
            return self
        object.__setattr__(self, "url", _build_url_from_parts(self))
        return self

    @property
    def is_postgres(self) -> bool:
        """Return whether the configured URL targets PostgreSQL."""
        return (self.url or "").startswith("postgresql")


def _build_url_from_parts(postgres: PostgresSettings) -> str:
    """Construct SQLAlchemy psycopg URL from split config values."""
    host = postgres.host.strip()
    database = postgres.database.strip()
    user = postgres.user.strip()
    if host == "":
        raise ValueError("substrate.postgres.host is required when url is unset")
    if database == "":
        raise ValueError("substrate.postgres.database is required when url is unset")
    if user == "":
        raise ValueError("substrate.postgres.user is required when url is unset")

    password = _resolve_password(
        password=postgres.password, password_env=postgres.password_env
    )
    auth = quote_plus(user)
    if password != "":
        auth += f":{quote_plus(password)}"
    return f"postgresql+psycopg://{auth}@{host}:{postgres.port}/{quote_plus(database)}"


def _resolve_password(*, password: str, password_env: str) -> str:
    """Resolve password from inline value or environment variable reference."""
    inline = password.strip()
    env_name = password_env.strip()
    if inline != "" and env_name != "":
        raise ValueError(
            "substrate.postgres.password and password_env are mutually exclusive"
        )
    if env_name == "":
        return inline
    resolved = os.environ.get(env_name, "").strip()
    if resolved == "":
        raise ValueError(
            f"substrate.postgres.password_env references missing env var '{env_name}'"
        )
    return resolved


def resolve_postgres_settings(settings: RecallSettings) -> PostgresSettings:
    """Resolve Postgres substrate settings from ``components.substrate.postgres``."""
    return resolve_component_settings(
        settings=settings,
        component_id=str(RESOURCE_COMPONENT_ID),
        model=PostgresSettings,
    )
