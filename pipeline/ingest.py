"""Step 5: ingestion — embed content, build a record, append it to the corpus."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import TYPE_CHECKING

from observability.logger import get_logger
from pipeline.errors import EmbeddingMalformed, EmbeddingUnavailable
from pipeline.vector import EmbeddingVector, as_vector
from schemas.documents import DocumentRecord

if TYPE_CHECKING:
    from pipeline.corpus import CorpusAccessor
    from protocols.embeddings import EmbeddingProvider

log = get_logger(__name__)


async def embed_text(
    embedder: EmbeddingProvider,
    text: str,
    timeout: float | None = 10.0,
) -> EmbeddingVector:
    """Call the provider once and validate what comes back.

    Raises:
        EmbeddingUnavailable: the provider raised or exceeded ``timeout``.
        EmbeddingMalformed: the vector is empty, non-numeric or non-finite.
    """
    try:
        raw = await asyncio.wait_for(embedder.embed(text), timeout=timeout)
    except (EmbeddingUnavailable, EmbeddingMalformed):
        raise
    except TimeoutError as exc:
        raise EmbeddingUnavailable(f"embedding provider did not answer within {timeout}s") from exc
    except Exception as exc:
        raise EmbeddingUnavailable(f"embedding provider failed: {exc}") from exc
    return as_vector(raw)


async def ingest_document(
    content: str,
    embedder: EmbeddingProvider,
    corpus: CorpusAccessor,
    *,
    timeout: float | None = 10.0,
) -> DocumentRecord:
    """Embed ``content`` and append it as a new record. Not retried on failure."""
    embedding = await embed_text(embedder, content, timeout=timeout)
    record = DocumentRecord(content=content, embedding=embedding)
    await corpus.append(record)

    log.info(
        "ingest.done",
        doc_id=record.id,
        content_len=len(content),
        dimension=record.dimension,
    )
    return record


async def embed_texts(
    embedder: EmbeddingProvider,
    texts: list[str],
    timeout: float | None = 10.0,
) -> list[EmbeddingVector]:
    """One ``embed_batch`` call for all of ``texts``, validated like ``embed_text``."""
    try:
        raw = await asyncio.wait_for(embedder.embed_batch(texts), timeout=timeout)
    except (EmbeddingUnavailable, EmbeddingMalformed):
        raise
    except TimeoutError as exc:
        raise EmbeddingUnavailable(f"embedding provider did not answer within {timeout}s") from exc
    except Exception as exc:
        raise EmbeddingUnavailable(f"embedding provider failed: {exc}") from exc

    if isinstance(raw, (str, bytes)) or not isinstance(raw, Sequence) or len(raw) != len(texts):
        raise EmbeddingMalformed(f"expected {len(texts)} embeddings from the provider")
    return [as_vector(vector) for vector in raw]


async def ingest_documents(
    contents: list[str],
    embedder: EmbeddingProvider,
    corpus: CorpusAccessor,
    *,
    timeout: float | None = 10.0,
) -> list[DocumentRecord]:
    """Embed all ``contents`` in one provider call, then append them in order.

    Nothing is appended unless every embedding is valid. A store failure
    stops the appends; records appended before it stay appended.
    """
    if not contents:
        return []
    embeddings = await embed_texts(embedder, contents, timeout=timeout)

    records: list[DocumentRecord] = []
    for content, embedding in zip(contents, embeddings):
        record = DocumentRecord(content=content, embedding=embedding)
        await corpus.append(record)
        records.append(record)
    log.info("ingest.batch.done", count=len(records))
    return records
