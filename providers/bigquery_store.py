"""BigQuery document store — reads the corpus snapshot and appends new documents."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone

from google.api_core.exceptions import GoogleAPIError
from google.cloud import bigquery
from pydantic import ValidationError

from observability.logger import get_logger
from pipeline.errors import PersistenceError
from schemas.documents import DocumentRecord

log = get_logger(__name__)


class BigQueryDocumentStore:
    """BigQuery-backed corpus. Implements DocumentStore protocol.

    Rows are returned ordered by insertion time, then id, so ranking ties are
    broken the same way on every snapshot. The blocking client runs in a
    worker thread.
    """

    def __init__(
        self,
        table_id: str,
        client: bigquery.Client | None = None,
        project_id: str | None = None,
    ) -> None:
        self.table_id = table_id
        self._client = client or bigquery.Client(project=project_id)

    async def list_all(self) -> list[DocumentRecord]:
        query = f"""
            SELECT id, content, embedding
            FROM `{self.table_id}`
            ORDER BY created_at ASC, id ASC
        """
        try:
            rows = await asyncio.to_thread(lambda: list(self._client.query(query).result()))
        except GoogleAPIError as e:
            raise PersistenceError(f"bigquery read from {self.table_id} failed: {e}") from e

        try:
            records = [
                DocumentRecord(id=row["id"], content=row["content"], embedding=tuple(row["embedding"]))
                for row in rows
            ]
        except ValidationError as e:
            raise PersistenceError(f"bigquery table {self.table_id} holds a corrupt record: {e}") from e
        log.info("bq.list_all", count=len(records))
        return records

    async def append(self, record: DocumentRecord) -> None:
        row = {
            "id": record.id,
            "content": record.content,
            "embedding": list(record.embedding),
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        try:
            errors = await asyncio.to_thread(self._client.insert_rows_json, self.table_id, [row])
        except GoogleAPIError as e:
            raise PersistenceError(f"bigquery insert into {self.table_id} failed: {e}") from e

        if errors:
            log.error("bq.append.errors", doc_id=record.id, errors=str(errors))
            raise PersistenceError(f"bigquery rejected {record.id}: {errors}")
        log.info("bq.append", doc_id=record.id)
