"""Document and query schemas flowing through the search engine."""

from __future__ import annotations

from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator

from schemas.embeddings import Component


class DocumentRecord(BaseModel):
    """A stored piece of text and its embedding. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    content: str
    embedding: tuple[Component, ...] = Field(min_length=1)

    @property
    def dimension(self) -> int:
        return len(self.embedding)


class ScoredDocument(BaseModel):
    """A document paired with its similarity to one query. Never persisted."""

    model_config = ConfigDict(frozen=True)

    id: str
    content: str
    score: float

    @classmethod
    def from_record(cls, record: DocumentRecord, score: float) -> ScoredDocument:
        return cls(id=record.id, content=record.content, score=score)


class QueryRequest(BaseModel):
    """Query by raw text or by a precomputed vector, never both."""

    model_config = ConfigDict(frozen=True)

    text: str | None = None
    # Left loose here; the query path validates it like provider output.
    vector: tuple[Any, ...] | None = None
    threshold: float | None = Field(default=None, allow_inf_nan=False)
    top_k: int | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _exactly_one_source(self) -> QueryRequest:
        if (self.text is None) == (self.vector is None):
            raise ValueError("exactly one of 'text' or 'vector' must be given")
        return self


class RankedResult(BaseModel):
    """Ordered matches for one query, best first."""

    model_config = ConfigDict(frozen=True)

    documents: list[ScoredDocument] = Field(default_factory=list)
    threshold: float
    top_k: int
    corpus_size: int = 0
    skipped: list[str] = Field(
        default_factory=list,
        description="Ids of records left out because their dimension differs from the query",
    )

    @property
    def ids(self) -> list[str]:
        return [d.id for d in self.documents]

    @property
    def is_empty(self) -> bool:
        return not self.documents
