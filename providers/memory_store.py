"""In-process document store for demos and tests."""

from __future__ import annotations

from collections.abc import Iterable

from schemas.documents import DocumentRecord


class InMemoryDocumentStore:
    """Append-only list of records. Implements DocumentStore protocol.

    ``list_all`` returns a copy, so a snapshot is unaffected by later appends.
    """

    def __init__(self, records: Iterable[DocumentRecord] = ()) -> None:
        self._records: list[DocumentRecord] = list(records)

    async def list_all(self) -> list[DocumentRecord]:
        return list(self._records)

    async def append(self, record: DocumentRecord) -> None:
        self._records.append(record)

    def __len__(self) -> int:
        return len(self._records)
