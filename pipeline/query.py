"""Step 6: query — resolve the query vector, snapshot the corpus, rank."""

from __future__ import annotations

import asyncio
import threading
from typing import TYPE_CHECKING

from pipeline.errors import Cancelled
from pipeline.ingest import embed_text
from pipeline.ranking import MismatchPolicy, rank
from pipeline.vector import EmbeddingVector, as_vector

if TYPE_CHECKING:
    from observability.tracer import QueryTracer
    from pipeline.corpus import CorpusAccessor
    from protocols.embeddings import EmbeddingProvider
    from schemas.documents import QueryRequest, RankedResult


async def resolve_query_vector(
    request: QueryRequest,
    embedder: EmbeddingProvider,
    timeout: float | None = 10.0,
) -> EmbeddingVector:
    if request.text is not None:
        return await embed_text(embedder, request.text, timeout=timeout)
    return as_vector(request.vector)


async def run_query(
    request: QueryRequest,
    embedder: EmbeddingProvider,
    corpus: CorpusAccessor,
    *,
    threshold: float,
    top_k: int,
    on_mismatch: MismatchPolicy = "skip",
    timeout: float | None = 10.0,
    cancel: threading.Event | None = None,
    tracer: QueryTracer | None = None,
) -> RankedResult:
    """Evaluate one query against a fresh corpus snapshot.

    ``threshold`` and ``top_k`` are the fallbacks used when the request does
    not carry its own. The scan runs in a worker thread; if the awaiting task
    is cancelled the scan's cancel event is set so it stops at the next record.
    """
    scan_cancel = cancel or threading.Event()
    if scan_cancel.is_set():
        raise Cancelled("query cancelled before it started")

    _start(tracer, "embed")
    query_vector = await resolve_query_vector(request, embedder, timeout=timeout)
    _end(tracer, "embed")

    _start(tracer, "snapshot")
    snapshot = await corpus.all_records()
    _end(tracer, "snapshot")

    _start(tracer, "rank")
    try:
        result = await asyncio.to_thread(
            rank,
            query_vector,
            snapshot,
            request.threshold if request.threshold is not None else threshold,
            request.top_k if request.top_k is not None else top_k,
            on_mismatch=on_mismatch,
            cancel=scan_cancel,
        )
    except asyncio.CancelledError:
        scan_cancel.set()
        raise
    _end(tracer, "rank")
    return result


def _start(tracer: QueryTracer | None, step: str) -> None:
    if tracer is not None:
        tracer.start_step(step)


def _end(tracer: QueryTracer | None, step: str) -> None:
    if tracer is not None:
        tracer.end_step(step)
