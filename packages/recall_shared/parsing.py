"""Boundary parsing helpers for loosely-typed caller input."""

from __future__ import annotations

import re

from packages.recall_shared.errors import RecallValidationError

_INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")


def parse_non_negative_int(
    value: int | str | None,
    *,
    field_name: str,
    default: int,
) -> int:
    """Parse a pagination-style integer, rejecting non-numeric or negative input.

    ``None`` and blank strings fall back to ``default``. Booleans and floats are
    rejected rather than coerced.
    """
    if value is None:
        return default
    if isinstance(value, bool):
        raise RecallValidationError(f"{field_name}: must be an integer")
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text == "":
            return default
        if not _INTEGER_PATTERN.match(text):
            raise RecallValidationError(f"{field_name}: must be an integer")
        parsed = int(text)
    else:
        raise RecallValidationError(f"{field_name}: must be an integer")

    if parsed < 0:
        raise RecallValidationError(f"{field_name}: must be >= 0")
    return parsed
