"""Document store protocol for durable, append-only corpus storage."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from schemas.documents import DocumentRecord


@runtime_checkable
class DocumentStore(Protocol):
    """Any class that can persist records and hand back the whole corpus.

    ``list_all`` returns a snapshot in a stable order; ranking ties are
    broken by that order.
    """

    async def list_all(self) -> list[DocumentRecord]: ...

    async def append(self, record: DocumentRecord) -> None: ...
