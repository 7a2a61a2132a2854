"""Typer CLI entrypoint for building and querying document indexes."""

from __future__ import annotations

import logging
from pathlib import Path

import typer

from docindex import __version__

app = typer.Typer(
    help=(
        "Document corpus indexer\n\n"
        "Split Markdown/text documents into sections, build a term index and search it.\n"
    ),
    context_settings={"help_option_names": ["-h", "--help"]},
    invoke_without_command=True,
    add_completion=True,
)

_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


@app.callback()
def root(
    ctx: typer.Context,
    version_flag: bool = typer.Option(
        False,
        "-v",
        "--version",
        help="Print the version and exit",
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="Logging level (default: DOCINDEX_LOG_LEVEL or WARNING)",
    ),
) -> None:
    if version_flag:
        typer.echo(__version__)
        raise typer.Exit()
    _configure_logging(log_level)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command(help="Build an index from a directory of documents and persist it")
def index(
    corpus_dir: Path = typer.Argument(..., metavar="DIR", help="Corpus root directory"),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Index file (default: DOCINDEX_INDEX_PATH)",
    ),
    tokenizer: str | None = typer.Option(None, "--tokenizer", help="Tokenizer mode: auto|english"),
    char_ngram: int | None = typer.Option(None, "--char-ngram", help="CJK character n-gram size"),
    stopwords: bool | None = typer.Option(
        None,
        "--stopwords/--no-stopwords",
        help="Drop English stopwords from the index",
    ),
    json_out: bool = typer.Option(False, "--json", help="Print JSON summary"),
) -> None:
    from persistence.index_store import save_index
    from cli.commands.shared import build_from_corpus, emit_json, fail, print_warnings, resolve_settings

    settings = resolve_settings(tokenizer=tokenizer, char_ngram=char_ngram, stopwords=stopwords)
    built, warnings = build_from_corpus(corpus_dir, settings)
    target = output or Path(settings.index_path)
    try:
        save_index(built, target)
    except OSError as exc:
        raise fail(f"Cannot write index {target}: {exc}") from exc

    print_warnings(warnings)
    if json_out:
        emit_json(
            {
                "index_path": str(target),
                "stats": built.stats().model_dump(),
                "skipped": [warning.model_dump() for warning in warnings],
            }
        )
        return
    typer.echo(
        f"Indexed {built.document_count} documents, {built.section_count} sections, "
        f"{built.term_count} terms -> {target}"
    )
    if warnings:
        typer.echo(f"Skipped {len(warnings)} files")


@app.command(help="Search an index and print ranked sections")
def search(
    query: str = typer.Argument(..., metavar="QUERY"),
    limit: int | None = typer.Option(None, "--limit", "-n", min=1, help="Maximum results"),
    index_path: Path | None = typer.Option(None, "--index", help="Index file to read"),
    corpus_dir: Path | None = typer.Option(
        None,
        "--corpus",
        help="Build an in-memory index from this directory instead of reading one",
    ),
    use_idf: bool | None = typer.Option(None, "--idf/--no-idf", help="Weight terms by IDF"),
    json_out: bool = typer.Option(False, "--json", help="Print JSON results"),
) -> None:
    from retrieval.query import InvalidQueryError
    from retrieval.query import search as run_search
    from cli.commands.shared import (
        EXIT_INVALID_QUERY,
        emit_json,
        fail,
        format_hit,
        hits_payload,
        open_index,
        resolve_settings,
    )

    settings = resolve_settings(search_limit=limit, use_idf=use_idf)
    active = open_index(index_path, corpus_dir, settings)
    try:
        hits = run_search(active, query, limit=settings.search_limit, use_idf=settings.use_idf)
    except InvalidQueryError as exc:
        raise fail(str(exc), code=EXIT_INVALID_QUERY) from exc

    if json_out:
        emit_json(hits_payload(query, hits))
        return
    for hit in hits:
        typer.echo(format_hit(hit))


@app.command(help="Interactive search loop over an index")
def shell(
    index_path: Path | None = typer.Option(None, "--index", help="Index file to read"),
    corpus_dir: Path | None = typer.Option(None, "--corpus", help="Build from this directory"),
    limit: int | None = typer.Option(None, "--limit", "-n", min=1, help="Maximum results"),
    use_idf: bool | None = typer.Option(None, "--idf/--no-idf", help="Weight terms by IDF"),
) -> None:
    from cli.commands.shared import open_index, resolve_settings
    from cli.commands.shell import run_shell

    settings = resolve_settings(search_limit=limit, use_idf=use_idf)
    active = open_index(index_path, corpus_dir, settings)
    run_shell(active, limit=settings.search_limit, use_idf=settings.use_idf)


@app.command(help="Show index statistics")
def stats(
    index_path: Path | None = typer.Option(None, "--index", help="Index file to read"),
    corpus_dir: Path | None = typer.Option(
        None,
        "--corpus",
        help="Compare the index against this directory and report staleness",
    ),
    json_out: bool = typer.Option(False, "--json", help="Print JSON"),
) -> None:
    from cli.commands.shared import build_from_corpus, emit_json, open_index, resolve_settings

    settings = resolve_settings()
    active = open_index(index_path, None, settings)
    payload = active.stats().model_dump()
    payload["tokenizer"] = active.tokenizer.to_dict()
    if corpus_dir is not None:
        current, _ = build_from_corpus(corpus_dir, settings)
        payload["stale"] = current.fingerprint != active.fingerprint

    if json_out:
        emit_json(payload)
        return
    for key, value in payload.items():
        typer.echo(f"{key}: {value}")


@app.command(help="Print the section outline of a single document")
def outline(
    path: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        readable=True,
        metavar="FILE",
    ),
) -> None:
    from preprocessing.sections import outline as render_outline
    from preprocessing.sections import parse_sections
    from cli.commands.shared import fail

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise fail(f"Cannot read {path}: {exc}") from exc
    for line in render_outline(parse_sections(path.name, text)):
        typer.echo(line)


def _configure_logging(level_name: str | None) -> None:
    from core.config import get_settings

    name = (level_name or get_settings().log_level).strip().upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        raise typer.BadParameter(f"Unknown log level: {level_name}")
    logging.basicConfig(level=level, format=_LOG_FORMAT)
    logging.getLogger().setLevel(level)


def _register_subcommands() -> None:
    from cli.commands import config

    app.add_typer(config.app, name="config")


_register_subcommands()


def main() -> None:
    app()


__all__ = ["app", "main"]
