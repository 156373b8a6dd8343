"""Tests for the query path through SearchEngine."""

from __future__ import annotations

import asyncio
import math
import threading

import pytest
from pydantic import ValidationError

import pipeline.query as query_module
import pipeline.ranking as ranking_module
from pipeline.engine import SearchEngine
from pipeline.errors import Cancelled, DimensionMismatch, EmbeddingMalformed, EmbeddingUnavailable, PersistenceError
from providers.memory_store import InMemoryDocumentStore
from schemas.documents import DocumentRecord, QueryRequest
from tests.fakes import BrokenStore, FakeEmbedder


async def test_vector_query_scenario(abc_engine: SearchEngine):
    result = await abc_engine.query(QueryRequest(vector=(1.0, 0.0), threshold=0.5, top_k=10))

    assert result.ids == ["A", "B"]
    assert result.documents[0].score == pytest.approx(1.0)
    assert result.documents[1].score == pytest.approx(0.9 / math.sqrt(0.82), abs=1e-6)


async def test_text_query_is_embedded(abc_engine: SearchEngine, fake_embedder: FakeEmbedder):
    result = await abc_engine.query(QueryRequest(text="finance"))

    assert fake_embedder.calls == ["finance"]
    assert result.ids == ["C"]


async def test_vector_query_skips_provider(abc_engine: SearchEngine, fake_embedder: FakeEmbedder):
    await abc_engine.query(QueryRequest(vector=(1.0, 0.0)))
    assert fake_embedder.calls == []


async def test_engine_defaults_apply(abc_store):
    engine = SearchEngine(FakeEmbedder(), abc_store, threshold=0.0, top_k=1)
    result = await engine.query(QueryRequest(vector=(1.0, 0.0)))

    assert result.threshold == 0.0
    assert result.top_k == 1
    assert result.ids == ["A"]


async def test_request_overrides_defaults(abc_engine: SearchEngine):
    result = await abc_engine.query(QueryRequest(vector=(1.0, 0.0), threshold=-1.0, top_k=3))
    assert result.ids == ["A", "B", "C"]


async def test_empty_corpus_returns_empty_result(engine: SearchEngine):
    result = await engine.query(QueryRequest(text="cats"))
    assert result.is_empty
    assert result.corpus_size == 0


async def test_query_is_idempotent(abc_engine: SearchEngine):
    request = QueryRequest(text="cats", threshold=0.0)
    first = await abc_engine.query(request)
    second = await abc_engine.query(request)
    assert first == second


async def test_ingested_documents_are_queryable(engine: SearchEngine):
    cats = await engine.ingest("cats")
    await engine.ingest("finance")

    result = await engine.query(QueryRequest(text="cats"))
    assert result.ids == [cats.id]


async def test_local_embeddings_find_exact_text(local_engine: SearchEngine):
    await local_engine.ingest_batch(["the quick brown fox", "a lazy dog", "stock prices fell"])

    result = await local_engine.query(QueryRequest(text="The quick  brown fox", threshold=0.9))
    assert [d.content for d in result.documents] == ["the quick brown fox"]
    assert result.documents[0].score == pytest.approx(1.0)


async def test_provider_timeout_fails_query(abc_store):
    engine = SearchEngine(FakeEmbedder(default=[1.0, 0.0], delay=1.0), abc_store, embedding_timeout=0.05)

    with pytest.raises(EmbeddingUnavailable):
        await engine.query(QueryRequest(text="cats"))


@pytest.mark.parametrize(
    "vector",
    [(), ("a", "b"), ("0.1", "0.2"), (True, 1.0), (float("nan"), 1.0), (float("inf"), 0.0)],
)
async def test_malformed_query_vector(abc_engine: SearchEngine, vector):
    with pytest.raises(EmbeddingMalformed):
        await abc_engine.query(QueryRequest(vector=vector))


async def test_store_failure_fails_query(fake_embedder):
    engine = SearchEngine(fake_embedder, BrokenStore(error=ConnectionError("down")))

    with pytest.raises(PersistenceError):
        await engine.query(QueryRequest(text="cats"))


async def test_mismatched_record_skipped_by_default(abc_corpus):
    store = InMemoryDocumentStore([*abc_corpus, DocumentRecord(id="3d", content="", embedding=(1.0, 0.0, 0.0))])
    engine = SearchEngine(FakeEmbedder(), store)

    result = await engine.query(QueryRequest(vector=(1.0, 0.0)))
    assert result.ids == ["A", "B"]
    assert result.skipped == ["3d"]


async def test_mismatched_record_fails_when_strict(abc_corpus):
    store = InMemoryDocumentStore([*abc_corpus, DocumentRecord(id="3d", content="", embedding=(1.0, 0.0, 0.0))])
    engine = SearchEngine(FakeEmbedder(), store, on_mismatch="fail")

    with pytest.raises(DimensionMismatch):
        await engine.query(QueryRequest(vector=(1.0, 0.0)))


async def test_cancelled_query_returns_nothing(abc_engine: SearchEngine):
    cancel = threading.Event()
    cancel.set()

    with pytest.raises(Cancelled):
        await abc_engine.query(QueryRequest(vector=(1.0, 0.0)), cancel=cancel)


async def test_task_cancellation_propagates(abc_store):
    engine = SearchEngine(FakeEmbedder(default=[1.0, 0.0], delay=5.0), abc_store)
    task = asyncio.create_task(engine.query(QueryRequest(text="cats")))
    await asyncio.sleep(0.01)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task


async def test_task_cancellation_stops_running_scan(abc_engine: SearchEngine, monkeypatch):
    scoring = threading.Event()
    release = threading.Event()
    finished = threading.Event()
    scored: list[tuple[float, ...]] = []
    outcome: list[BaseException] = []

    def blocking_similarity(a, b):
        scored.append(tuple(b))
        scoring.set()
        release.wait(timeout=5)
        return 1.0

    real_rank = query_module.rank

    def observed_rank(*args, **kwargs):
        try:
            return real_rank(*args, **kwargs)
        except Cancelled as exc:
            outcome.append(exc)
            raise
        finally:
            finished.set()

    monkeypatch.setattr(ranking_module, "cosine_similarity", blocking_similarity)
    monkeypatch.setattr(query_module, "rank", observed_rank)

    task = asyncio.create_task(abc_engine.query(QueryRequest(vector=(1.0, 0.0), threshold=-1.0)))
    assert await asyncio.to_thread(scoring.wait, 5)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    release.set()
    assert await asyncio.to_thread(finished.wait, 5)
    assert len(scored) == 1
    assert len(outcome) == 1 and isinstance(outcome[0], Cancelled)


async def test_snapshot_ignores_later_appends(abc_engine: SearchEngine):
    snapshot = await abc_engine.corpus.all_records()
    await abc_engine.ingest("cats")
    assert len(snapshot) == 3
    assert len(await abc_engine.corpus.all_records()) == 4


@pytest.mark.parametrize(
    "kwargs",
    [
        {},
        {"text": "cats", "vector": (1.0, 0.0)},
        {"text": "cats", "top_k": -1},
        {"text": "cats", "threshold": float("nan")},
        {"vector": "abc"},
    ],
)
def test_query_request_validation(kwargs):
    with pytest.raises(ValidationError):
        QueryRequest(**kwargs)
