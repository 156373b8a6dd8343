"""Search engine: the inbound surface for ingestion and similarity queries."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from observability.logger import bind_operation, clear_operation, get_logger
from observability.tracer import QueryTracer
from pipeline.corpus import CorpusAccessor
from pipeline.ingest import ingest_document, ingest_documents
from pipeline.query import run_query
from pipeline.ranking import DEFAULT_THRESHOLD, DEFAULT_TOP_K, MismatchPolicy

if TYPE_CHECKING:
    from config.settings import Settings
    from protocols.document_store import DocumentStore
    from protocols.embeddings import EmbeddingProvider
    from schemas.documents import DocumentRecord, QueryRequest, RankedResult

log = get_logger(__name__)


class SearchEngine:
    """Exact, brute-force similarity search over an append-only corpus.

    Holds no corpus state of its own: every query takes a fresh snapshot from
    the store, so a record ingested concurrently with a query may or may not
    be seen by it.
    """

    def __init__(
        self,
        embedder: EmbeddingProvider,
        store: DocumentStore,
        *,
        threshold: float = DEFAULT_THRESHOLD,
        top_k: int = DEFAULT_TOP_K,
        on_mismatch: MismatchPolicy = "skip",
        embedding_timeout: float | None = 10.0,
        store_timeout: float | None = 10.0,
    ) -> None:
        self.embedder = embedder
        self.corpus = CorpusAccessor(store, timeout=store_timeout)
        self.threshold = threshold
        self.top_k = top_k
        self.on_mismatch = on_mismatch
        self.embedding_timeout = embedding_timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> SearchEngine:
        from providers.factory import build_embedder, build_store

        return cls(
            embedder=build_embedder(settings),
            store=build_store(settings),
            threshold=settings.search_threshold,
            top_k=settings.search_top_k,
            on_mismatch=settings.dimension_mismatch_policy,
            embedding_timeout=settings.embedding_timeout_seconds,
            store_timeout=settings.store_timeout_seconds,
        )

    async def ingest(self, content: str) -> DocumentRecord:
        """Embed and store one piece of text."""
        return await ingest_document(
            content, self.embedder, self.corpus, timeout=self.embedding_timeout,
        )

    async def ingest_batch(self, contents: list[str]) -> list[DocumentRecord]:
        """Embed contents with one batch call, then append them in order.

        An embedding failure appends nothing. A store failure aborts the rest;
        records appended before it stay appended.
        """
        return await ingest_documents(
            contents, self.embedder, self.corpus, timeout=self.embedding_timeout,
        )

    async def query(
        self,
        request: QueryRequest,
        *,
        cancel: threading.Event | None = None,
    ) -> RankedResult:
        """Return the stored documents most similar to the request, best first.

        Args:
            request: Query text or vector, with optional threshold / top_k.
            cancel: Set it to abandon the query; a cancelled query raises
                Cancelled instead of returning a truncated ranking.
        """
        tracer = QueryTracer(query_source="text" if request.text is not None else "vector")
        bind_operation("query", tracer.query_id)
        try:
            result = await run_query(
                request,
                self.embedder,
                self.corpus,
                threshold=self.threshold,
                top_k=self.top_k,
                on_mismatch=self.on_mismatch,
                timeout=self.embedding_timeout,
                cancel=cancel,
                tracer=tracer,
            )
            record = tracer.to_record(result)
            log.info(
                "query.done",
                source=record.query_source,
                corpus_size=record.corpus_size,
                results=record.results_returned,
                skipped=record.records_skipped,
                top_score=round(record.top_score, 4) if record.top_score is not None else None,
                latency_ms=record.total_latency_ms,
            )
            return result
        finally:
            clear_operation()
