"""Shared vector math for embedding similarity.

Vectors are plain float sequences. Similarity is cosine similarity in
``[-1, 1]``; higher means more similar.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

DISTANCE_METRIC_COSINE = "cosine"


def vector_norm(vector: Sequence[float]) -> float:
    """Return the Euclidean norm of ``vector``."""
    return math.sqrt(math.fsum(value * value for value in vector))


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Return ``dot(a, b) / (|a| * |b|)`` clamped to ``[-1, 1]``.

    Raises ``ValueError`` for mismatched lengths, empty vectors, or a
    zero-norm operand.
    """
    if len(a) != len(b):
        raise ValueError(f"vector length mismatch: {len(a)} != {len(b)}")
    if len(a) == 0:
        raise ValueError("vectors must be non-empty")

    denominator = vector_norm(a) * vector_norm(b)
    if denominator == 0.0:
        raise ValueError("cosine similarity is undefined for zero-norm vectors")

    dot = math.fsum(left * right for left, right in zip(a, b))
    return max(-1.0, min(1.0, dot / denominator))


def validate_vector(vector: Sequence[float]) -> tuple[float, ...]:
    """Return ``vector`` as a float tuple or raise ``ValueError`` if unusable.

    Usable vectors are non-empty, contain only finite numbers, and have a
    non-zero norm.
    """
    values: list[float] = []
    for index, value in enumerate(vector):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"vector[{index}] must be a number")
        converted = float(value)
        if not math.isfinite(converted):
            raise ValueError(f"vector[{index}] must be finite")
        values.append(converted)

    if len(values) == 0:
        raise ValueError("vector must be non-empty")
    if vector_norm(values) == 0.0:
        raise ValueError("vector must have non-zero norm")
    return tuple(values)
