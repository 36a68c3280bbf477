"""ULID generation and conversion helpers.

The canonical string form is 26 Crockford Base32 characters representing
exactly 128 bits: a 48-bit millisecond timestamp followed by 80 bits of
entropy. ``MonotonicUlidGenerator`` additionally guarantees that ids produced
by one process sort in generation order, even within a single millisecond.
"""

from __future__ import annotations

import secrets
import threading
import time
from typing import Callable

_ULID_ALPHABET = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"
_DECODE_TABLE = {char: index for index, char in enumerate(_ULID_ALPHABET)}
_MAX_ULID_INT = (1 << 128) - 1
_MAX_TIMESTAMP_MS = (1 << 48) - 1
_MAX_ENTROPY = (1 << 80) - 1

ULID_STRING_LENGTH = 26


def ulid_str_to_bytes(value: str) -> bytes:
    """Decode canonical 26-char ULID string into 16-byte big-endian form."""
    candidate = value.strip().upper()
    if len(candidate) != ULID_STRING_LENGTH:
        raise ValueError("ULID string must be exactly 26 characters")

    number = 0
    for char in candidate:
        if char not in _DECODE_TABLE:
            raise ValueError(f"Invalid ULID character: {char!r}")
        number = (number << 5) | _DECODE_TABLE[char]

    # 26 base32 chars encode 130 bits; canonical ULID uses only lower 128 bits.
    if number > _MAX_ULID_INT:
        raise ValueError("ULID value exceeds 128-bit range")
    return number.to_bytes(16, byteorder="big", signed=False)


def ulid_bytes_to_str(value: bytes) -> str:
    """Encode 16-byte big-endian ULID into canonical 26-char Base32 string."""
    if len(value) != 16:
        raise ValueError("ULID bytes must be exactly 16 bytes")
    return _encode(int.from_bytes(value, byteorder="big", signed=False))


def generate_ulid_str(*, timestamp_ms: int | None = None) -> str:
    """Generate a new ULID in canonical string format with random entropy."""
    ts_ms = _current_ms() if timestamp_ms is None else int(timestamp_ms)
    _require_timestamp(ts_ms)
    entropy = int.from_bytes(secrets.token_bytes(10), byteorder="big", signed=False)
    return _encode((ts_ms << 80) | entropy)


class MonotonicUlidGenerator:
    """Thread-safe ULID source whose output strictly increases per instance.

    When the clock has not advanced past the previous id's timestamp, the
    previous entropy is incremented instead of drawing fresh randomness.
    """

    def __init__(self, *, clock_ms: Callable[[], int] | None = None) -> None:
        self._clock_ms = clock_ms or _current_ms
        self._lock = threading.Lock()
        self._last_ms = -1
        self._last_entropy = 0

    def __call__(self) -> str:
        with self._lock:
            ts_ms = self._clock_ms()
            _require_timestamp(ts_ms)
            if ts_ms > self._last_ms:
                self._last_ms = ts_ms
                self._last_entropy = int.from_bytes(
                    secrets.token_bytes(10), byteorder="big", signed=False
                )
            elif self._last_entropy < _MAX_ENTROPY:
                self._last_entropy += 1
            else:
                if self._last_ms >= _MAX_TIMESTAMP_MS:
                    raise OverflowError("ULID space exhausted")
                self._last_ms += 1
                self._last_entropy = 0
            return _encode((self._last_ms << 80) | self._last_entropy)


def is_ulid_str(value: object) -> bool:
    """Return whether ``value`` is a syntactically valid ULID string."""
    if not isinstance(value, str):
        return False
    try:
        ulid_str_to_bytes(value)
    except ValueError:
        return False
    return True


def _encode(number: int) -> str:
    chars: list[str] = []
    for _ in range(ULID_STRING_LENGTH):
        number, remainder = divmod(number, 32)
        chars.append(_ULID_ALPHABET[remainder])
    return "".join(reversed(chars))


def _current_ms() -> int:
    return time.time_ns() // 1_000_000


def _require_timestamp(ts_ms: int) -> None:
    if ts_ms < 0 or ts_ms > _MAX_TIMESTAMP_MS:
        raise ValueError("timestamp_ms out of ULID 48-bit range")
