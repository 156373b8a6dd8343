"""Run one similarity query against the configured corpus and print the ranking."""

from __future__ import annotations

import argparse
import asyncio
import sys

from rich.console import Console
from rich.table import Table

from config.settings import get_settings
from observability.logger import setup_logging
from pipeline.engine import SearchEngine
from pipeline.errors import SearchError
from schemas.documents import QueryRequest, RankedResult

console = Console()


def build_results_table(query: str, result: RankedResult) -> Table:
    table = Table(
        title=f"Results for {query!r} (threshold {result.threshold}, top {result.top_k})",
        show_lines=True,
    )
    table.add_column("#", style="dim", width=3)
    table.add_column("Score", style="green", width=8)
    table.add_column("Id", style="cyan", width=12)
    table.add_column("Content (preview)", max_width=80)

    for i, doc in enumerate(result.documents, 1):
        preview = doc.content[:100] + ("..." if len(doc.content) > 100 else "")
        table.add_row(str(i), f"{doc.score:.4f}", doc.id[:8], preview)
    return table


async def main() -> None:
    parser = argparse.ArgumentParser(description="Query the search corpus")
    parser.add_argument("text", help="Query text")
    parser.add_argument("--threshold", type=float, default=None, help="Minimum similarity")
    parser.add_argument("--top-k", "-k", type=int, default=None, help="Maximum results")
    args = parser.parse_args()

    settings = get_settings()
    setup_logging(level=settings.log_level, fmt="console")
    engine = SearchEngine.from_settings(settings)

    request = QueryRequest(text=args.text, threshold=args.threshold, top_k=args.top_k)
    try:
        result = await engine.query(request)
    except SearchError as e:
        console.print(f"[bold red]❌ Query failed:[/bold red] {e}")
        sys.exit(1)

    console.print(build_results_table(args.text, result))
    console.print(
        f"\n[dim]Scanned {result.corpus_size} documents, "
        f"{len(result.documents)} matched, {len(result.skipped)} skipped[/dim]"
    )


if __name__ == "__main__":
    asyncio.run(main())
