"""Shared ULID primitives for record identifiers."""

from packages.recall_shared.ids.ulid import (
    ULID_STRING_LENGTH,
    MonotonicUlidGenerator,
    generate_ulid_str,
    is_ulid_str,
    ulid_bytes_to_str,
    ulid_str_to_bytes,
)

__all__ = [
    "ULID_STRING_LENGTH",
    "MonotonicUlidGenerator",
    "generate_ulid_str",
    "is_ulid_str",
    "ulid_bytes_to_str",
    "ulid_str_to_bytes",
]
