"""Corpus loader: walk a directory and read text documents."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

from persistence.hashing import sha256_bytes
from preprocessing.sections import parse_sections
from schemas.internal.documents import Document, LoadWarning

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS: tuple[str, ...] = (".md", ".markdown", ".txt")
DEFAULT_SNIFF_BYTES = 8192
_BOM = "\ufeff"


class CorpusRootError(OSError):
    """The corpus root directory cannot be read."""


@dataclass(frozen=True)
class RawDocument:
    doc_id: str
    path: Path
    content: str
    sha256: str


@dataclass
class Corpus:
    root: Path
    documents: List[Document] = field(default_factory=list)
    warnings: List[LoadWarning] = field(default_factory=list)

    @property
    def doc_ids(self) -> List[str]:
        return [document.doc_id for document in self.documents]


def discover_files(
    root: Path,
    extensions: Sequence[str] = DEFAULT_EXTENSIONS,
    *,
    warnings: Optional[List[LoadWarning]] = None,
) -> List[Path]:
    """Return candidate files under root, sorted by relative POSIX path.

    Hidden files and directories are ignored. A subdirectory that cannot be
    listed is reported in ``warnings`` and its contents are skipped.
    """
    _check_root(root)
    allowed = {ext.lower() for ext in extensions}
    sink = warnings if warnings is not None else []

    def _on_error(exc: OSError) -> None:
        location = Path(exc.filename) if exc.filename else root
        if location == root:
            raise CorpusRootError(f"Cannot list corpus root {root}: {exc}") from exc
        rel = location.relative_to(root).as_posix()
        if isinstance(exc, PermissionError):
            _skip(sink, rel, "permission denied")
        else:
            _skip(sink, rel, f"read failed: {exc.strerror or exc}")

    candidates: List[Path] = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
        dirnames[:] = [name for name in dirnames if not name.startswith(".")]
        base = Path(dirpath)
        for name in filenames:
            path = base / name
            if name.startswith(".") or path.suffix.lower() not in allowed:
                continue
            if path.is_file():
                candidates.append(path)
    candidates.sort(key=lambda path: path.relative_to(root).as_posix())
    return candidates


def iter_corpus_files(
    root: str | Path,
    *,
    extensions: Sequence[str] = DEFAULT_EXTENSIONS,
    warnings: Optional[List[LoadWarning]] = None,
    sniff_bytes: int = DEFAULT_SNIFF_BYTES,
    max_file_bytes: int | None = None,
) -> Iterator[RawDocument]:
    """Lazily yield readable text files under root.

    Unreadable, binary, oversized or non-UTF-8 files are skipped; each skip
    is logged and appended to ``warnings`` when a list is provided.
    Raises CorpusRootError when root itself cannot be read.
    """
    root_path = Path(root)
    sink = warnings if warnings is not None else []
    for path in discover_files(root_path, extensions, warnings=sink):
        doc_id = path.relative_to(root_path).as_posix()
        raw = _read_candidate(path, doc_id, sink, sniff_bytes, max_file_bytes)
        if raw is not None:
            yield raw


def load_corpus(
    root: str | Path,
    *,
    extensions: Sequence[str] = DEFAULT_EXTENSIONS,
    sniff_bytes: int = DEFAULT_SNIFF_BYTES,
    max_file_bytes: int | None = None,
) -> Corpus:
    """Load and section every readable document under root."""
    root_path = Path(root)
    corpus = Corpus(root=root_path)
    for raw in iter_corpus_files(
        root_path,
        extensions=extensions,
        warnings=corpus.warnings,
        sniff_bytes=sniff_bytes,
        max_file_bytes=max_file_bytes,
    ):
        corpus.documents.append(
            Document(
                doc_id=raw.doc_id,
                path=str(raw.path),
                sha256=raw.sha256,
                sections=parse_sections(raw.doc_id, raw.content),
            )
        )
    corpus.documents.sort(key=lambda document: document.doc_id)
    logger.info(
        "Loaded %d documents from %s (%d skipped)",
        len(corpus.documents),
        root_path,
        len(corpus.warnings),
    )
    return corpus


def _check_root(root: Path) -> None:
    if not root.exists():
        raise CorpusRootError(f"Corpus root does not exist: {root}")
    if not root.is_dir():
        raise CorpusRootError(f"Corpus root is not a directory: {root}")
    try:
        next(root.iterdir(), None)
    except OSError as exc:
        raise CorpusRootError(f"Cannot read corpus root {root}: {exc}") from exc


def _read_candidate(
    path: Path,
    doc_id: str,
    sink: List[LoadWarning],
    sniff_bytes: int,
    max_file_bytes: int | None,
) -> Optional[RawDocument]:
    try:
        if max_file_bytes is not None and path.stat().st_size > max_file_bytes:
            _skip(sink, doc_id, f"larger than {max_file_bytes} bytes")
            return None
        data = path.read_bytes()
    except PermissionError:
        _skip(sink, doc_id, "permission denied")
        return None
    except OSError as exc:
        _skip(sink, doc_id, f"read failed: {exc.strerror or exc}")
        return None

    if b"\x00" in data[:sniff_bytes]:
        _skip(sink, doc_id, "binary content")
        return None

    try:
        content = data.decode("utf-8")
    except UnicodeDecodeError as exc:
        _skip(sink, doc_id, f"invalid UTF-8 at byte {exc.start}")
        return None

    if content.startswith(_BOM):
        content = content[len(_BOM):]
    return RawDocument(doc_id=doc_id, path=path, content=content, sha256=sha256_bytes(data))


def _skip(sink: List[LoadWarning], doc_id: str, reason: str) -> None:
    logger.warning("Skipping %s: %s", doc_id, reason)
    sink.append(LoadWarning(path=doc_id, reason=reason))


__all__ = [
    "Corpus",
    "CorpusRootError",
    "DEFAULT_EXTENSIONS",
    "RawDocument",
    "discover_files",
    "iter_corpus_files",
    "load_corpus",
]
