"""SQLAlchemy table definitions owned by Embedding Authority Service."""

from __future__ import annotations

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
)
from sqlalchemy.dialects.postgresql import ARRAY, JSONB

from packages.recall_shared.ids import ULID_STRING_LENGTH

SPEC_SINGLETON_ID = 1

metadata = MetaData()

# Vectors are double-precision arrays on Postgres and JSON lists elsewhere.
vector_type = JSON().with_variant(ARRAY(Float(precision=53)), "postgresql")
metadata_type = JSON(none_as_null=True).with_variant(
    JSONB(none_as_null=True), "postgresql"
)

embeddings = Table(
    "embeddings",
    metadata,
    Column("id", String(ULID_STRING_LENGTH), primary_key=True),
    Column("text", Text, nullable=False),
    Column("vector", vector_type, nullable=False),
    Column("category", String(255), nullable=True),
    Column("metadata", metadata_type, nullable=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)

embedding_store_spec = Table(
    "embedding_store_spec",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=False),
    Column("dimensions", Integer, nullable=True),
    CheckConstraint(f"id = {SPEC_SINGLETON_ID}", name="ck_embedding_store_spec_singleton"),
    CheckConstraint(
        "dimensions IS NULL OR dimensions > 0",
        name="ck_embedding_store_spec_dimensions_positive",
    ),
)

Index("ix_embeddings_category", embeddings.c.category)
Index("ix_embeddings_created_at", embeddings.c.created_at)
