"""JSON-lines file store, one DocumentRecord per line, append-only.

File I/O runs in a worker thread so a store timeout can fire while the disk
is slow. Reads and appends share a lock, so a reader never sees half a line
written by this process.
"""

from __future__ import annotations

import asyncio
import threading
from pathlib import Path

from pydantic import ValidationError

from observability.logger import get_logger
from pipeline.errors import PersistenceError
from schemas.documents import DocumentRecord

log = get_logger(__name__)


class JSONLDocumentStore:
    """Durable append-only store backed by a local file. Implements DocumentStore protocol."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._write_lock = threading.Lock()

    async def list_all(self) -> list[DocumentRecord]:
        return await asyncio.to_thread(self._read_all)

    async def append(self, record: DocumentRecord) -> None:
        await asyncio.to_thread(self._append_line, record.model_dump_json())
        log.info("store.append", doc_id=record.id, file=str(self.path))

    def _read_all(self) -> list[DocumentRecord]:
        if not self.path.exists():
            return []
        with self._write_lock:
            lines = self.path.read_bytes().splitlines(keepends=True)

        records: list[DocumentRecord] = []
        for lineno, line in enumerate(lines, 1):
            if not line.strip():
                continue
            try:
                records.append(DocumentRecord.model_validate_json(line))
            except ValidationError as exc:
                # An unterminated last line is an append still in flight from
                # another process; it shows up on a later read.
                if lineno == len(lines) and not line.endswith(b"\n"):
                    log.debug("store.partial_line", file=str(self.path), line=lineno)
                    break
                raise PersistenceError(f"{self.path}:{lineno}: corrupt record: {exc}") from exc
        return records

    def _append_line(self, line: str) -> None:
        with self._write_lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8") as f:
                f.write(line + "\n")
                f.flush()
