"""Tests for boundary parsing and pydantic request validation helpers."""

from __future__ import annotations

import pytest
from pydantic import BaseModel, ConfigDict, StrictInt

from packages.recall_shared.errors import RecallValidationError, codes
from packages.recall_shared.parsing import parse_non_negative_int
from packages.recall_shared.validation import validate_request


class _Request(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    limit: StrictInt = 10


@pytest.mark.parametrize(
    ("value", "expected"),
    [(None, 7), ("", 7), ("  ", 7), (0, 0), (3, 3), ("12", 12), (" 4 ", 4), ("+5", 5)],
)
def test_parse_non_negative_int_accepts_ints_and_numeric_text(
    value: int | str | None, expected: int
) -> None:
    assert parse_non_negative_int(value, field_name="limit", default=7) == expected


@pytest.mark.parametrize(
    ("value", "message"),
    [
        ("abc", "limit: must be an integer"),
        ("1.5", "limit: must be an integer"),
        (True, "limit: must be an integer"),
        (2.0, "limit: must be an integer"),
        (-1, "limit: must be >= 0"),
        ("-3", "limit: must be >= 0"),
    ],
)
def test_parse_non_negative_int_rejects_bad_input(value: object, message: str) -> None:
    with pytest.raises(RecallValidationError) as exc_info:
        parse_non_negative_int(value, field_name="limit", default=7)

    assert exc_info.value.message == message
    assert exc_info.value.code == codes.INVALID_ARGUMENT


def test_validate_request_returns_model() -> None:
    request = validate_request(_Request, {"name": "n", "limit": 2})

    assert request == _Request(name="n", limit=2)


def test_validate_request_names_first_offending_field() -> None:
    """Pydantic failures become ``<field>: <msg>`` validation errors."""
    with pytest.raises(RecallValidationError) as exc_info:
        validate_request(_Request, {"name": "n", "limit": "2"})

    error = exc_info.value
    assert error.message.startswith("limit: ")
    assert error.detail.metadata == {"field": "limit"}
    assert error.retryable is False


def test_validate_request_reports_missing_fields() -> None:
    with pytest.raises(RecallValidationError, match="^name: Field required"):
        validate_request(_Request, {})
