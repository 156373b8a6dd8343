"""Tests for cosine scoring and vector validation."""

from __future__ import annotations

import math

import numpy as np
import pytest
from pydantic import ValidationError

from pipeline.errors import DimensionMismatch, EmbeddingMalformed
from pipeline.scorer import cosine_similarity
from pipeline.vector import as_vector
from schemas.documents import DocumentRecord


def test_self_similarity_is_one():
    rng = np.random.default_rng(7)
    for _ in range(20):
        v = rng.normal(size=16).tolist()
        assert cosine_similarity(v, v) == pytest.approx(1.0)


def test_symmetry():
    rng = np.random.default_rng(11)
    for _ in range(20):
        a = rng.normal(size=8).tolist()
        b = rng.normal(size=8).tolist()
        assert cosine_similarity(a, b) == cosine_similarity(b, a)


def test_known_values():
    assert cosine_similarity([1, 0], [0, 1]) == pytest.approx(0.0)
    assert cosine_similarity([1, 0], [-1, 0]) == pytest.approx(-1.0)
    assert cosine_similarity([1, 0], [0.9, 0.1]) == pytest.approx(0.9 / math.sqrt(0.82))


def test_magnitude_does_not_matter():
    assert cosine_similarity([1, 2, 3], [10, 20, 30]) == pytest.approx(1.0)


def test_scores_stay_in_range():
    rng = np.random.default_rng(3)
    for _ in range(50):
        a = rng.normal(size=5).tolist()
        b = rng.normal(size=5).tolist()
        assert -1.0 <= cosine_similarity(a, b) <= 1.0


def test_dimension_mismatch_raises():
    with pytest.raises(DimensionMismatch) as exc_info:
        cosine_similarity([1.0, 0.0], [1.0, 0.0, 0.0])
    assert exc_info.value.expected == 2
    assert exc_info.value.actual == 3


def test_zero_vector_scores_zero():
    assert cosine_similarity([0.0, 0.0], [1.0, 0.0]) == 0.0
    assert cosine_similarity([1.0, 0.0], [0.0, 0.0]) == 0.0
    assert cosine_similarity([0.0, 0.0], [0.0, 0.0]) == 0.0


def test_huge_components_do_not_overflow():
    score = cosine_similarity([1e200, 1e200], [1e200, 0.0])
    assert math.isfinite(score)
    assert score == pytest.approx(1 / math.sqrt(2))


def test_as_vector_accepts_numbers():
    assert as_vector([1, 2.5, np.float32(3)]) == (1.0, 2.5, 3.0)
    assert as_vector(np.array([0.5, 0.25])) == (0.5, 0.25)


@pytest.mark.parametrize(
    "bad",
    [
        [], (), "abc", None, {"embedding": [1.0]}, [1.0, "2"], [True, 1.0],
        [float("nan")], [1.0, float("inf")], np.array(1.0), np.array([[1.0, 0.0]]),
    ],
)
def test_as_vector_rejects_malformed(bad):
    with pytest.raises(EmbeddingMalformed):
        as_vector(bad)


@pytest.mark.parametrize("b", [[float("inf"), 1.0], [float("nan"), 1.0], [-float("inf"), 0.0]])
def test_non_finite_components_are_rejected(b):
    with pytest.raises(EmbeddingMalformed):
        cosine_similarity([1.0, 0.0], b)
    with pytest.raises(EmbeddingMalformed):
        cosine_similarity(b, [1.0, 0.0])


@pytest.mark.parametrize(
    "embedding",
    [(), (float("nan"), 1.0), (float("inf"), 1.0), ("0.1", "0.2"), (True, 1.0)],
)
def test_document_record_rejects_bad_embedding(embedding):
    with pytest.raises(ValidationError):
        DocumentRecord(content="x", embedding=embedding)


def test_document_record_accepts_ints_and_numpy_floats():
    record = DocumentRecord(content="x", embedding=(1, np.float64(0.5)))
    assert record.embedding == (1.0, 0.5)
