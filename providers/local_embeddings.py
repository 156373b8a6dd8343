"""Hash-based local embeddings for demos and tests (no external API needed)."""

from __future__ import annotations

import hashlib
import math

import numpy as np

EMBEDDING_DIM = 64


class LocalEmbeddings:
    """Deterministic pseudo-embeddings from SHA-256. Implements EmbeddingProvider protocol.

    Same text, same vector; different texts land on near-orthogonal unit
    vectors, so only identical (normalized) texts score close to 1.
    """

    def __init__(self, dim: int = EMBEDDING_DIM) -> None:
        if dim < 1:
            raise ValueError(f"dim must be >= 1, got {dim}")
        self.dim = dim

    async def embed(self, text: str) -> list[float]:
        return self._hash_embed(text)

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        return [self._hash_embed(t) for t in texts]

    def _hash_embed(self, text: str) -> list[float]:
        normalized = " ".join(text.lower().split())
        rounds = math.ceil(self.dim / 32)
        digest = b"".join(
            hashlib.sha256(f"{normalized}::{i}".encode()).digest() for i in range(rounds)
        )
        # bytes -> [-1, 1], then L2 normalize
        vec = np.frombuffer(digest[: self.dim], dtype=np.uint8).astype(np.float64) / 127.5 - 1.0
        norm = np.linalg.norm(vec) or 1.0
        return (vec / norm).tolist()
