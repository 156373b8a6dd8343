"""Ingest a folder of text/markdown documents into the configured document store."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from config.settings import get_settings
from observability.logger import setup_logging
from pipeline.engine import SearchEngine
from pipeline.errors import SearchError

_PATTERNS = ("*.md", "*.txt")


def collect_documents(folder: str) -> list[str]:
    """Return the contents of every matching file under ``folder``, sorted by path."""
    base = Path(folder)
    if not base.is_dir():
        return []

    paths = sorted({p for pattern in _PATTERNS for p in base.rglob(pattern)})
    contents: list[str] = []
    for path in paths:
        text = path.read_text(encoding="utf-8").strip()
        if text:
            contents.append(text)
    return contents


async def seed_corpus(engine: SearchEngine, folder: str) -> int:
    """Ingest every document found in ``folder`` and return how many were stored."""
    records = await engine.ingest_batch(collect_documents(folder))
    return len(records)


async def main() -> None:
    parser = argparse.ArgumentParser(description="Ingest documents into the search corpus")
    parser.add_argument("folder", help="Folder scanned recursively for *.md and *.txt")
    args = parser.parse_args()

    settings = get_settings()
    setup_logging(level=settings.log_level, fmt="console")
    engine = SearchEngine.from_settings(settings)

    try:
        count = await seed_corpus(engine, args.folder)
    except SearchError as e:
        print(f"❌ Ingestion failed: {e}")
        sys.exit(1)
    print(f"✅ {count} documents ingested into the {settings.store_backend} store")


if __name__ == "__main__":
    asyncio.run(main())
