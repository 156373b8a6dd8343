"""Step 3: snapshot reads and appends over a DocumentStore."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from observability.logger import get_logger
from pipeline.errors import PersistenceError

if TYPE_CHECKING:
    from protocols.document_store import DocumentStore
    from schemas.documents import DocumentRecord

log = get_logger(__name__)


class CorpusAccessor:
    """Thin adapter over the external document store.

    Every store call is bounded by ``timeout`` seconds (``None`` disables the
    bound) and every store failure surfaces as PersistenceError.
    """

    def __init__(self, store: DocumentStore, timeout: float | None = 10.0) -> None:
        self.store = store
        self.timeout = timeout

    async def all_records(self) -> tuple[DocumentRecord, ...]:
        """Return a point-in-time snapshot of the corpus, in store order."""
        try:
            records = await asyncio.wait_for(self.store.list_all(), timeout=self.timeout)
        except PersistenceError:
            raise
        except TimeoutError as exc:
            raise PersistenceError(f"document store did not answer within {self.timeout}s") from exc
        except Exception as exc:
            raise PersistenceError(f"document store read failed: {exc}") from exc

        snapshot = tuple(records)
        log.debug("corpus.snapshot", size=len(snapshot))
        return snapshot

    async def append(self, record: DocumentRecord) -> None:
        try:
            await asyncio.wait_for(self.store.append(record), timeout=self.timeout)
        except PersistenceError:
            raise
        except TimeoutError as exc:
            raise PersistenceError(
                f"document store did not acknowledge {record.id} within {self.timeout}s"
            ) from exc
        except Exception as exc:
            raise PersistenceError(f"document store rejected {record.id}: {exc}") from exc
