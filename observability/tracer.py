"""Query tracing — tracks query_id, step timings, and result counts."""

from __future__ import annotations

import time
from datetime import datetime, timezone
from uuid import uuid4

from observability.logger import get_logger
from schemas.documents import RankedResult
from schemas.observability import QueryRunRecord

log = get_logger(__name__)


class QueryTracer:
    """Tracks a single query evaluation with per-step timing."""

    def __init__(self, query_source: str = "text") -> None:
        self.query_id = str(uuid4())
        self.query_source = query_source
        self._started_at = datetime.now(timezone.utc)
        self._step_start: float | None = None
        self._latencies: dict[str, float] = {}

    def start_step(self, step_name: str) -> None:
        self._step_start = time.perf_counter()
        log.debug("query.step.start", step=step_name, query_id=self.query_id)

    def end_step(self, step_name: str) -> float:
        elapsed = 0.0
        if self._step_start is not None:
            elapsed = (time.perf_counter() - self._step_start) * 1000
        self._latencies[step_name] = round(elapsed, 2)
        log.debug(
            "query.step.end",
            step=step_name,
            query_id=self.query_id,
            latency_ms=round(elapsed, 2),
        )
        self._step_start = None
        return elapsed

    def to_record(self, result: RankedResult) -> QueryRunRecord:
        return QueryRunRecord(
            query_id=self.query_id,
            started_at=self._started_at,
            finished_at=datetime.now(timezone.utc),
            query_source=self.query_source,
            corpus_size=result.corpus_size,
            results_returned=len(result.documents),
            records_skipped=len(result.skipped),
            threshold=result.threshold,
            top_k=result.top_k,
            top_score=result.documents[0].score if result.documents else None,
            step_latency_ms=dict(self._latencies),
        )
