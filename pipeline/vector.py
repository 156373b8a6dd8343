"""Step 1: embedding vector validation and dimension rules."""

from __future__ import annotations

import math
from collections.abc import Sequence
from numbers import Real

import numpy as np

from pipeline.errors import DimensionMismatch, EmbeddingMalformed

EmbeddingVector = tuple[float, ...]


def as_vector(values: object) -> EmbeddingVector:
    """Validate provider or caller output and freeze it into a tuple of floats.

    Raises:
        EmbeddingMalformed: if the value is not a sequence, is empty, or holds
            anything other than finite real numbers.
    """
    if isinstance(values, (str, bytes)) or not isinstance(values, (Sequence, np.ndarray)):
        raise EmbeddingMalformed(f"embedding must be a sequence of numbers, got {type(values).__name__}")
    if isinstance(values, np.ndarray) and values.ndim != 1:
        raise EmbeddingMalformed(f"embedding must be one-dimensional, got shape {values.shape}")
    if len(values) == 0:
        raise EmbeddingMalformed("embedding is empty")

    out: list[float] = []
    for i, v in enumerate(values):
        if isinstance(v, bool) or not isinstance(v, Real):
            raise EmbeddingMalformed(f"embedding component {i} is not numeric: {v!r}")
        f = float(v)
        if not math.isfinite(f):
            raise EmbeddingMalformed(f"embedding component {i} is not finite: {f}")
        out.append(f)
    return tuple(out)


def check_dimension(
    expected: Sequence[float],
    actual: Sequence[float],
    record_id: str | None = None,
) -> None:
    if len(expected) != len(actual):
        raise DimensionMismatch(len(expected), len(actual), record_id=record_id)
