"""Pydantic request models for Embedding Authority Service validation."""

from __future__ import annotations

import math
from collections.abc import Sequence

from pydantic import (
    BaseModel,
    ConfigDict,
    JsonValue,
    StrictFloat,
    StrictInt,
    StrictStr,
    field_validator,
)

from packages.recall_shared.embeddings import validate_vector
from packages.recall_shared.ids import ulid_str_to_bytes

CATEGORY_MAX_LENGTH = 255


class _ValidationModel(BaseModel):
    """Base request model with strict shape semantics."""

    model_config = ConfigDict(frozen=True, extra="forbid")


def _require_text(value: str) -> str:
    """Require non-blank text, returned verbatim."""
    if value.strip() == "":
        raise ValueError("must not be blank")
    return value


def _normalize_category(value: str) -> str:
    """Strip one category label and enforce its length bound."""
    normalized = value.strip()
    if normalized == "":
        raise ValueError("must not be blank")
    if len(normalized) > CATEGORY_MAX_LENGTH:
        raise ValueError(f"must be at most {CATEGORY_MAX_LENGTH} characters")
    return normalized


def _coerce_vector(value: object) -> tuple[float, ...]:
    """Validate one raw vector into a finite, non-zero float tuple."""
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise ValueError("must be a sequence of numbers")
    return validate_vector(value)


class RecordIdRequest(_ValidationModel):
    """Validated request shape addressing one record by ULID."""

    record_id: StrictStr

    @field_validator("record_id")
    @classmethod
    def _validate_record_id(cls, value: str) -> str:
        """Require one canonical ULID string."""
        normalized = value.strip().upper()
        try:
            ulid_str_to_bytes(normalized)
        except ValueError:
            raise ValueError("must be a valid ULID string") from None
        return normalized


class SaveRecordRequest(_ValidationModel):
    """Validated request shape for one record insert."""

    text: StrictStr
    vector: tuple[float, ...]
    category: StrictStr | None = None
    metadata: dict[str, JsonValue] | None = None

    @field_validator("text")
    @classmethod
    def _validate_text(cls, value: str) -> str:
        return _require_text(value)

    @field_validator("vector", mode="before")
    @classmethod
    def _validate_vector(cls, value: object) -> tuple[float, ...]:
        return _coerce_vector(value)

    @field_validator("category")
    @classmethod
    def _validate_category(cls, value: str | None) -> str | None:
        return None if value is None else _normalize_category(value)


class UpdateRecordRequest(RecordIdRequest):
    """Validated partial update; ``None`` means the field is left untouched."""

    text: StrictStr | None = None
    category: StrictStr | None = None
    metadata: dict[str, JsonValue] | None = None

    @field_validator("text")
    @classmethod
    def _validate_text(cls, value: str | None) -> str | None:
        return None if value is None else _require_text(value)

    @field_validator("category")
    @classmethod
    def _validate_category(cls, value: str | None) -> str | None:
        return None if value is None else _normalize_category(value)


class CategoryRequest(_ValidationModel):
    """Validated request shape addressing one category label."""

    category: StrictStr

    @field_validator("category")
    @classmethod
    def _validate_category(cls, value: str) -> str:
        return _normalize_category(value)


class TextSearchRequest(_ValidationModel):
    """Validated substring search request."""

    query: StrictStr
    limit: StrictInt
    category: StrictStr | None = None

    @field_validator("query")
    @classmethod
    def _validate_query(cls, value: str) -> str:
        return _require_text(value)

    @field_validator("category")
    @classmethod
    def _validate_category(cls, value: str | None) -> str | None:
        return None if value is None else _normalize_category(value)


class SimilaritySearchRequest(_ValidationModel):
    """Validated vector similarity search request."""

    query_vector: tuple[float, ...]
    limit: StrictInt
    threshold: StrictFloat | StrictInt

    @field_validator("query_vector", mode="before")
    @classmethod
    def _validate_query_vector(cls, value: object) -> tuple[float, ...]:
        return _coerce_vector(value)

    @field_validator("threshold")
    @classmethod
    def _validate_threshold(cls, value: float) -> float:
        """Require a finite cosine threshold within ``[-1, 1]``."""
        converted = float(value)
        if not math.isfinite(converted) or converted < -1.0 or converted > 1.0:
            raise ValueError("must be a finite number within [-1, 1]")
        return converted
