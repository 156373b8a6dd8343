"""Step 2: cosine similarity between two embedding vectors."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from pipeline.errors import EmbeddingMalformed
from pipeline.vector import check_dimension


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Return dot(a, b) / (|a| * |b|), clamped to [-1, 1].

    A zero vector is similar to nothing: if either side has zero norm the
    score is 0.0, including zero against zero.

    Raises:
        DimensionMismatch: if ``len(a) != len(b)``.
        EmbeddingMalformed: if either vector holds NaN or inf.
    """
    check_dimension(a, b)
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    if va.size == 0:
        return 0.0
    if not (np.all(np.isfinite(va)) and np.all(np.isfinite(vb))):
        raise EmbeddingMalformed("cannot score a vector with non-finite components")

    # Cosine is scale-invariant; rescaling by the largest component keeps the
    # norms from overflowing on very large values.
    scale_a = np.max(np.abs(va))
    scale_b = np.max(np.abs(vb))
    if scale_a == 0.0 or scale_b == 0.0:
        return 0.0
    va = va / scale_a
    vb = vb / scale_b

    # Elementwise sums rather than BLAS dot keep score(a, b) == score(b, a) exactly.
    dot = np.sum(va * vb)
    denom = np.sqrt(np.sum(va * va)) * np.sqrt(np.sum(vb * vb))
    return float(np.clip(dot / denom, -1.0, 1.0))
