"""Step 4: ranking engine. Score, filter by threshold, stable sort, top-K.

Every call scans the full snapshot it is given. An indexed backend plugs in
behind the corpus that is handed in here; the contract of rank() stays put.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Sequence
from typing import Literal

from observability.logger import get_logger
from pipeline.errors import Cancelled, DimensionMismatch
from pipeline.scorer import cosine_similarity
from schemas.documents import DocumentRecord, RankedResult, ScoredDocument

log = get_logger(__name__)

DEFAULT_THRESHOLD = 0.5
DEFAULT_TOP_K = 10

MismatchPolicy = Literal["skip", "fail"]


def rank(
    query: Sequence[float],
    corpus: Iterable[DocumentRecord],
    threshold: float = DEFAULT_THRESHOLD,
    top_k: int = DEFAULT_TOP_K,
    *,
    on_mismatch: MismatchPolicy = "skip",
    cancel: threading.Event | None = None,
) -> RankedResult:
    """Rank ``corpus`` against ``query``.

    Args:
        query: Query embedding.
        corpus: Snapshot to scan, in its natural order.
        threshold: Records scoring below this are dropped.
        top_k: Maximum number of results; 0 yields an empty result.
        on_mismatch: ``"skip"`` leaves out records whose dimension differs
            from the query and logs a warning; ``"fail"`` raises.
        cancel: Checked before each record; once set the scan stops.

    Raises:
        DimensionMismatch: a record's dimension differs and ``on_mismatch="fail"``.
        Cancelled: ``cancel`` was set before the scan finished.
    """
    if top_k < 0:
        raise ValueError(f"top_k must be >= 0, got {top_k}")

    scored: list[tuple[float, DocumentRecord]] = []
    skipped: list[str] = []
    corpus_size = 0

    for record in corpus:
        if cancel is not None and cancel.is_set():
            raise Cancelled(f"query cancelled after scoring {corpus_size} records")
        corpus_size += 1

        try:
            score = cosine_similarity(query, record.embedding)
        except DimensionMismatch as exc:
            if on_mismatch == "fail":
                raise DimensionMismatch(exc.expected, exc.actual, record_id=record.id) from None
            log.warning(
                "rank.dimension_mismatch",
                doc_id=record.id,
                expected=exc.expected,
                actual=exc.actual,
            )
            skipped.append(record.id)
            continue

        if score >= threshold:
            scored.append((score, record))

    if cancel is not None and cancel.is_set():
        raise Cancelled(f"query cancelled after scoring {corpus_size} records")

    # list.sort is stable with reverse=True: equal scores keep corpus order.
    scored.sort(key=lambda pair: pair[0], reverse=True)

    documents: list[ScoredDocument] = []
    seen: set[str] = set()
    for score, record in scored:
        if len(documents) >= top_k:
            break
        if record.id in seen:
            continue
        seen.add(record.id)
        documents.append(ScoredDocument.from_record(record, score))

    return RankedResult(
        documents=documents,
        threshold=threshold,
        top_k=top_k,
        corpus_size=corpus_size,
        skipped=skipped,
    )
