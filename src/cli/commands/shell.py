"""Interactive search loop."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt

from retrieval.engines.term_index import TermIndex
from retrieval.query import InvalidQueryError, search
from .shared import format_hit

QUIT_COMMANDS = {":q", ":quit", ":exit"}


def run_shell(
    index: TermIndex,
    *,
    limit: int,
    use_idf: bool,
    console: Console | None = None,
) -> int:
    """Read queries until EOF or a quit command; returns the number of queries run."""
    out = console or Console()
    out.print(
        f"[bold]{index.document_count}[/bold] documents, "
        f"[bold]{index.section_count}[/bold] sections indexed. "
        "Type :quit to exit."
    )
    executed = 0
    while True:
        try:
            query = Prompt.ask("search", console=out, default="", show_default=False)
        except (EOFError, KeyboardInterrupt):
            out.print()
            break
        if query.strip() in QUIT_COMMANDS:
            break
        try:
            hits = search(index, query, limit=limit, use_idf=use_idf)
        except InvalidQueryError as exc:
            out.print(f"[red]invalid query:[/red] {escape(str(exc))}")
            continue
        executed += 1
        if not hits:
            out.print("[yellow]no results[/yellow]")
            continue
        for hit in hits:
            out.print(escape(format_hit(hit)))
    return executed


__all__ = ["QUIT_COMMANDS", "run_shell"]
