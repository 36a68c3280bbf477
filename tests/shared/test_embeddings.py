"""Tests for shared cosine similarity and vector validation."""

from __future__ import annotations

import math

import pytest

from packages.recall_shared.embeddings import (
    cosine_similarity,
    validate_vector,
    vector_norm,
)


def test_vector_is_maximally_similar_to_itself() -> None:
    assert cosine_similarity([0.3, -1.2, 4.0], [0.3, -1.2, 4.0]) == pytest.approx(1.0)


def test_similarity_is_scale_invariant() -> None:
    assert cosine_similarity([1.0, 2.0], [10.0, 20.0]) == pytest.approx(1.0)


def test_orthogonal_and_opposite_vectors() -> None:
    assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)
    assert cosine_similarity([1.0, 0.0], [-1.0, 0.0]) == pytest.approx(-1.0)


def test_known_pair_score() -> None:
    """[1,0,0] against [0.9,0.1,0] scores 0.9 / sqrt(0.82)."""
    score = cosine_similarity([1.0, 0.0, 0.0], [0.9, 0.1, 0.0])

    assert score == pytest.approx(0.9 / math.sqrt(0.82))
    assert score == pytest.approx(0.9938837, abs=1e-6)


def test_similarity_stays_within_unit_range() -> None:
    """Rounding never pushes identical vectors above 1."""
    vector = [0.1] * 1536

    assert cosine_similarity(vector, vector) <= 1.0


@pytest.mark.parametrize(
    ("left", "right", "message"),
    [
        ([1.0], [1.0, 0.0], "length mismatch"),
        ([], [], "non-empty"),
        ([0.0, 0.0], [1.0, 0.0], "zero-norm"),
    ],
)
def test_similarity_rejects_unusable_operands(
    left: list[float], right: list[float], message: str
) -> None:
    with pytest.raises(ValueError, match=message):
        cosine_similarity(left, right)


def test_vector_norm() -> None:
    assert vector_norm([3.0, 4.0]) == 5.0


def test_validate_vector_converts_ints_to_float_tuple() -> None:
    assert validate_vector([1, 2.5, -3]) == (1.0, 2.5, -3.0)


@pytest.mark.parametrize(
    ("vector", "message"),
    [
        ([], "non-empty"),
        ([0.0, 0.0], "non-zero norm"),
        ([1.0, float("nan")], r"vector\[1\] must be finite"),
        ([float("inf")], r"vector\[0\] must be finite"),
        ([1.0, True], r"vector\[1\] must be a number"),
        ([1.0, "2"], r"vector\[1\] must be a number"),
    ],
)
def test_validate_vector_rejects_unusable_input(vector: list, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        validate_vector(vector)
