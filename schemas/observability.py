"""Observability schemas for query runs."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class QueryRunRecord(BaseModel):
    """Summary of one query evaluation."""

    query_id: str = Field(default_factory=lambda: str(uuid4()))
    started_at: datetime = Field(default_factory=_utcnow)
    finished_at: datetime | None = None
    query_source: str = ""  # "text" or "vector"
    corpus_size: int = 0
    results_returned: int = 0
    records_skipped: int = 0
    threshold: float = 0.0
    top_k: int = 0
    top_score: float | None = None
    step_latency_ms: dict[str, float] = Field(default_factory=dict)

    @property
    def total_latency_ms(self) -> float:
        return round(sum(self.step_latency_ms.values()), 2)
