from __future__ import annotations

import logging
import os
from pathlib import Path

import pytest

from preprocessing.loader import (
    CorpusRootError,
    discover_files,
    iter_corpus_files,
    load_corpus,
)


def test_iter_corpus_files_is_sorted_and_skips_other_suffixes(corpus_dir: Path) -> None:
    items = list(iter_corpus_files(corpus_dir))

    assert [item.doc_id for item in items] == ["guides/sonar.md", "notes.txt", "spring.md"]
    assert items[2].content.startswith("# Intro")
    assert len(items[2].sha256) == 64


def test_missing_root_raises_ioerror(tmp_path: Path) -> None:
    with pytest.raises(CorpusRootError):
        list(iter_corpus_files(tmp_path / "missing"))
    with pytest.raises(IOError):
        load_corpus(tmp_path / "missing")


def test_file_root_raises(tmp_path: Path) -> None:
    target = tmp_path / "file.md"
    target.write_text("# x\n", encoding="utf-8")

    with pytest.raises(CorpusRootError, match="not a directory"):
        discover_files(target)


def test_binary_and_invalid_utf8_are_skipped_with_warnings(tmp_path: Path, caplog) -> None:
    root = tmp_path / "docs"
    root.mkdir()
    (root / "good.md").write_text("# Ok\nfine\n", encoding="utf-8")
    (root / "binary.md").write_bytes(b"# Title\x00\x01\x02")
    (root / "latin1.txt").write_bytes("caf\xe9".encode("latin-1"))

    with caplog.at_level(logging.WARNING, logger="preprocessing.loader"):
        corpus = load_corpus(root)

    assert corpus.doc_ids == ["good.md"]
    reasons = {warning.path: warning.reason for warning in corpus.warnings}
    assert reasons["binary.md"] == "binary content"
    assert reasons["latin1.txt"].startswith("invalid UTF-8")
    assert "Skipping binary.md" in caplog.text


def test_oversized_files_are_skipped(tmp_path: Path) -> None:
    root = tmp_path / "docs"
    root.mkdir()
    (root / "small.md").write_text("tiny", encoding="utf-8")
    (root / "large.md").write_text("x" * 100, encoding="utf-8")

    warnings = []
    items = list(iter_corpus_files(root, warnings=warnings, max_file_bytes=10))

    assert [item.doc_id for item in items] == ["small.md"]
    assert warnings[0].path == "large.md"


@pytest.mark.skipif(
    not hasattr(os, "geteuid") or os.geteuid() == 0,
    reason="permission bits are ignored for root",
)
def test_unreadable_file_is_skipped(tmp_path: Path) -> None:
    root = tmp_path / "docs"
    root.mkdir()
    locked = root / "locked.md"
    locked.write_text("secret", encoding="utf-8")
    (root / "open.md").write_text("open", encoding="utf-8")
    locked.chmod(0)
    try:
        corpus = load_corpus(root)
    finally:
        locked.chmod(0o644)

    assert corpus.doc_ids == ["open.md"]
    assert corpus.warnings[0].reason == "permission denied"


def test_hidden_entries_and_bom_are_handled(tmp_path: Path) -> None:
    root = tmp_path / "docs"
    (root / ".cache").mkdir(parents=True)
    (root / ".cache" / "skip.md").write_text("# hidden\n", encoding="utf-8")
    (root / ".draft.md").write_text("# hidden\n", encoding="utf-8")
    (root / "bom.md").write_bytes("\ufeff# Heading\ntext\n".encode("utf-8"))

    corpus = load_corpus(root)

    assert corpus.doc_ids == ["bom.md"]
    assert corpus.warnings == []
    assert corpus.documents[0].sections[0].title == "Heading"


def test_load_corpus_sections_documents(corpus_dir: Path) -> None:
    corpus = load_corpus(corpus_dir, extensions=[".md"])

    assert corpus.doc_ids == ["guides/sonar.md", "spring.md"]
    sonar = corpus.documents[0]
    assert [section.title for section in sonar.sections] == ["guides/sonar.md", "Install", "Run"]
    assert sonar.sections[1].doc_id == "guides/sonar.md"


def test_unreadable_subdirectory_is_reported(tmp_path: Path, monkeypatch, caplog) -> None:
    root = tmp_path / "docs"
    locked = root / "locked"
    locked.mkdir(parents=True)
    (root / "open.md").write_text("# Open\nfine\n", encoding="utf-8")
    (locked / "x.md").write_text("# X\nunreachable\n", encoding="utf-8")
    real_scandir = os.scandir

    def _scandir(path="."):
        if Path(path) == locked:
            raise PermissionError(13, "Permission denied", os.fspath(path))
        return real_scandir(path)

    monkeypatch.setattr(os, "scandir", _scandir)
    with caplog.at_level(logging.WARNING, logger="preprocessing.loader"):
        corpus = load_corpus(root)

    assert corpus.doc_ids == ["open.md"]
    assert [(w.path, w.reason) for w in corpus.warnings] == [("locked", "permission denied")]
    assert "Skipping locked" in caplog.text
