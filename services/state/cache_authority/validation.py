"""Request validation models for Cache Authority Service public API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, field_validator


def _require_non_blank(value: str) -> str:
    """Reject empty or whitespace-only identifiers without altering them."""
    if value.strip() == "":
        raise ValueError("must be non-empty")
    return value


class _KeyRequest(BaseModel):
    """Base request carrying one cache key."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    key: StrictStr

    @field_validator("key")
    @classmethod
    def _validate_key(cls, value: str) -> str:
        """Keys are used verbatim and must not be blank."""
        return _require_non_blank(value)


class SetValueRequest(_KeyRequest):
    """Validate one scalar set request."""

    value: StrictStr
    ttl_seconds: StrictInt | None = Field(default=None, gt=0)


class KeyRequest(_KeyRequest):
    """Validate one request addressing a key only."""


class FieldRequest(_KeyRequest):
    """Validate one hash-field request."""

    field: StrictStr

    @field_validator("field")
    @classmethod
    def _validate_field(cls, value: str) -> str:
        """Hash field names must not be blank."""
        return _require_non_blank(value)


class SetFieldRequest(FieldRequest):
    """Validate one hash-field write."""

    value: StrictStr


class ListValueRequest(_KeyRequest):
    """Validate one list write or removal."""

    value: StrictStr


class ListValuesRequest(_KeyRequest):
    """Validate one bulk list head push."""

    values: tuple[StrictStr, ...] = Field(min_length=1)


class ListRangeRequest(_KeyRequest):
    """Validate one inclusive list range read."""

    start: StrictInt = 0
    end: StrictInt = -1


class MembersRequest(_KeyRequest):
    """Validate one set add request."""

    members: tuple[StrictStr, ...] = Field(min_length=1)


class MemberRequest(_KeyRequest):
    """Validate one set membership request."""

    member: StrictStr
