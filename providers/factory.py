"""Build providers from settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from providers.http_embeddings import HTTPEmbeddings
from providers.jsonl_store import JSONLDocumentStore
from providers.local_embeddings import LocalEmbeddings
from providers.memory_store import InMemoryDocumentStore

if TYPE_CHECKING:
    from config.settings import Settings
    from protocols.document_store import DocumentStore
    from protocols.embeddings import EmbeddingProvider


def build_embedder(settings: Settings) -> EmbeddingProvider:
    if settings.embedding_backend == "http":
        return HTTPEmbeddings(
            settings.embedding_api_url,
            timeout=settings.embedding_timeout_seconds,
            max_attempts=settings.embedding_max_attempts,
        )
    return LocalEmbeddings(dim=settings.local_embedding_dim)


def build_store(settings: Settings) -> DocumentStore:
    if settings.store_backend == "jsonl":
        return JSONLDocumentStore(settings.store_path)
    if settings.store_backend == "bigquery":
        if not settings.gcp_project_id:
            raise ValueError("GCP_PROJECT_ID is required for the bigquery store backend")
        # google-cloud-bigquery is only imported when this backend is selected.
        from providers.bigquery_store import BigQueryDocumentStore

        return BigQueryDocumentStore(
            settings.bq_documents_table_id, project_id=settings.gcp_project_id,
        )
    return InMemoryDocumentStore()
