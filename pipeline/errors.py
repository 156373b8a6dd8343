"""Typed failures surfaced by the search engine.

Every failure has its own class so callers can tell "no results" (an empty
RankedResult) apart from "could not compute results" (one of these).
"""

from __future__ import annotations


class SearchError(Exception):
    """Base class for every engine failure."""


class DimensionMismatch(SearchError, ValueError):
    """Two vectors of different length were compared."""

    def __init__(self, expected: int, actual: int, record_id: str | None = None) -> None:
        self.expected = expected
        self.actual = actual
        self.record_id = record_id
        where = f" (record {record_id})" if record_id else ""
        super().__init__(f"dimension mismatch{where}: expected {expected}, got {actual}")


class EmbeddingUnavailable(SearchError):
    """The embedding provider failed or did not answer in time."""


class EmbeddingMalformed(SearchError):
    """The embedding provider answered with an empty or non-numeric vector."""


class PersistenceError(SearchError):
    """The document store was unreachable, rejected a write or timed out."""


class Cancelled(SearchError):
    """The caller cancelled a query before ranking finished."""
