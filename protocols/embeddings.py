"""Embedding provider protocol."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Anything that turns text into a fixed-length numeric vector.

    Implementations may raise on network failure or return garbage; the
    engine bounds every call with a timeout and validates the vector, so
    provider output is never trusted or cached beyond one call.
    """

    async def embed(self, text: str) -> Sequence[float]: ...

    async def embed_batch(self, texts: list[str]) -> list[Sequence[float]]: ...
