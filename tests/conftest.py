"""Shared fixtures for tests — all using fake/in-memory providers."""

from __future__ import annotations

import pytest

from pipeline.engine import SearchEngine
from providers.local_embeddings import LocalEmbeddings
from providers.memory_store import InMemoryDocumentStore
from schemas.documents import DocumentRecord
from tests.fakes import FakeEmbedder


@pytest.fixture
def abc_corpus() -> list[DocumentRecord]:
    return [
        DocumentRecord(id="A", content="cats are great", embedding=(1.0, 0.0)),
        DocumentRecord(id="B", content="dogs are great", embedding=(0.9, 0.1)),
        DocumentRecord(id="C", content="stock market news", embedding=(0.0, 1.0)),
    ]


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def abc_store(abc_corpus) -> InMemoryDocumentStore:
    return InMemoryDocumentStore(abc_corpus)


@pytest.fixture
def fake_embedder() -> FakeEmbedder:
    return FakeEmbedder(
        {
            "hello world": [0.2, 0.4, 0.4],
            "cats": [1.0, 0.0],
            "finance": [0.0, 1.0],
        }
    )


@pytest.fixture
def engine(fake_embedder, store) -> SearchEngine:
    return SearchEngine(embedder=fake_embedder, store=store)


@pytest.fixture
def abc_engine(fake_embedder, abc_store) -> SearchEngine:
    return SearchEngine(embedder=fake_embedder, store=abc_store)


@pytest.fixture
def local_engine(store) -> SearchEngine:
    return SearchEngine(embedder=LocalEmbeddings(dim=32), store=store)
