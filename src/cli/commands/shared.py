"""Shared helpers for CLI commands."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, List, Tuple

import typer

from core.config import Settings, get_settings
from persistence.index_store import IndexFormatError, load_index
from preprocessing.loader import CorpusRootError
from retrieval.engines.term_index import TermIndex
from schemas.internal.documents import LoadWarning
from schemas.internal.index import SearchHit
from services.index_service import (
    build_corpus_index,
    load_settings_corpus,
    tokenizer_from_settings,
)

EXIT_LOAD_FAILURE = 1
EXIT_INVALID_QUERY = 2


def emit_json(data: Any) -> None:
    typer.echo(json.dumps(data, ensure_ascii=False, indent=2))


def resolve_settings(**overrides: Any) -> Settings:
    """Return settings with non-None CLI overrides applied."""
    settings = get_settings()
    updates = {key: value for key, value in overrides.items() if value is not None}
    if not updates:
        return settings
    return settings.model_copy(update=updates)


def fail(message: str, *, code: int = EXIT_LOAD_FAILURE) -> typer.Exit:
    typer.echo(f"Error: {message}", err=True)
    return typer.Exit(code=code)


def build_from_corpus(corpus_dir: Path, settings: Settings) -> Tuple[TermIndex, List[LoadWarning]]:
    try:
        corpus = load_settings_corpus(corpus_dir, settings)
    except CorpusRootError as exc:
        raise fail(str(exc)) from exc
    return build_corpus_index(corpus, tokenizer_from_settings(settings)), corpus.warnings


def open_index(
    index_path: Path | None,
    corpus_dir: Path | None,
    settings: Settings,
) -> TermIndex:
    """Build from a corpus directory when given, else read the persisted index."""
    if corpus_dir is not None:
        index, warnings = build_from_corpus(corpus_dir, settings)
        print_warnings(warnings)
        return index
    path = index_path or Path(settings.index_path)
    try:
        return load_index(path)
    except FileNotFoundError as exc:
        raise fail(f"Index not found: {path} (run `docindex index <dir>` first)") from exc
    except IndexFormatError as exc:
        raise fail(f"Malformed index {path}: {exc}") from exc
    except OSError as exc:
        raise fail(f"Cannot read index {path}: {exc}") from exc


def print_warnings(warnings: Iterable[LoadWarning]) -> None:
    for warning in warnings:
        typer.echo(f"warning: skipped {warning.path}: {warning.reason}", err=True)


def format_score(score: float) -> str:
    return f"{score:g}"


def format_hit(hit: SearchHit) -> str:
    return f"{hit.location}: {format_score(hit.score)}"


def hits_payload(query: str, hits: Iterable[SearchHit]) -> dict[str, Any]:
    items = [hit.model_dump(mode="json") for hit in hits]
    return {"query": query, "count": len(items), "results": items}


__all__ = [
    "EXIT_INVALID_QUERY",
    "EXIT_LOAD_FAILURE",
    "build_from_corpus",
    "emit_json",
    "fail",
    "format_hit",
    "format_score",
    "hits_payload",
    "open_index",
    "print_warnings",
    "resolve_settings",
]
