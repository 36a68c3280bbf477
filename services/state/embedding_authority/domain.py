"""Domain models for the Embedding Authority Service (EAS)."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, JsonValue


class EmbeddingRecord(BaseModel):
    """One stored text with its vector and optional labels."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    text: str
    vector: tuple[float, ...]
    category: str | None = None
    metadata: dict[str, JsonValue] | None = None
    created_at: datetime
    updated_at: datetime


class SimilarityMatch(BaseModel):
    """One similarity search hit with its cosine score."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    record: EmbeddingRecord
    score: float


class RecordPage(BaseModel):
    """One page of records plus the unfiltered store count."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    records: list[EmbeddingRecord]
    total_count: int


class HealthStatus(BaseModel):
    """EAS and SQL substrate readiness status payload."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    service_ready: bool
    substrate_ready: bool
    detail: str
