from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from core.config import Settings
from persistence.index_store import save_index
from preprocessing.loader import CorpusRootError
from services.index_service import IndexNotLoadedError, IndexService


def _settings(tmp_path: Path, **overrides) -> Settings:
    return Settings(index_path=str(tmp_path / "idx" / "index.jsonl"), **overrides)


def test_snapshot_requires_an_index(tmp_path: Path) -> None:
    service = IndexService(_settings(tmp_path))

    assert not service.is_loaded
    with pytest.raises(IndexNotLoadedError):
        service.search("spring")


def test_rebuild_swaps_in_new_index_and_keeps_old_snapshot(tmp_path: Path, corpus_dir: Path) -> None:
    service = IndexService(_settings(tmp_path))
    first = service.rebuild(corpus_dir)
    snapshot = service.snapshot()

    (corpus_dir / "kotlin.md").write_text("# Kotlin\nkotlin coroutines\n", encoding="utf-8")
    second = service.rebuild(corpus_dir)

    assert snapshot is first
    assert service.snapshot() is second
    assert service.generation == 2
    assert "kotlin" not in snapshot
    assert [hit.doc_id for hit in service.search("kotlin")] == ["kotlin.md"]
    assert first.fingerprint != second.fingerprint


def test_rebuild_records_warnings_and_persists(tmp_path: Path, corpus_dir: Path) -> None:
    (corpus_dir / "broken.md").write_bytes(b"\xff\xfe bad")
    settings = _settings(tmp_path)
    service = IndexService(settings)

    service.rebuild(corpus_dir, persist=True)

    assert [warning.path for warning in service.last_warnings] == ["broken.md"]
    assert Path(settings.index_path).exists()


def test_rebuild_uses_configured_corpus_dir(tmp_path: Path, corpus_dir: Path) -> None:
    service = IndexService(_settings(tmp_path, corpus_dir=str(corpus_dir)))

    service.rebuild()

    assert service.snapshot().document_count == 3


def test_rebuild_without_corpus_fails(tmp_path: Path) -> None:
    service = IndexService(_settings(tmp_path))

    with pytest.raises(ValueError, match="No corpus directory"):
        service.rebuild()
    with pytest.raises(CorpusRootError):
        service.rebuild(tmp_path / "missing")
    assert not service.is_loaded


def test_load_reads_persisted_index(tmp_path: Path, corpus_dir: Path) -> None:
    builder = IndexService(_settings(tmp_path))
    built = builder.rebuild(corpus_dir)
    target = tmp_path / "copy.jsonl"
    save_index(built, target)

    service = IndexService(_settings(tmp_path))
    loaded = service.load(target)

    assert loaded == built
    assert service.search("dashboard")[0].doc_id == "guides/sonar.md"


def test_search_uses_settings_defaults(tmp_path: Path, corpus_dir: Path) -> None:
    service = IndexService(_settings(tmp_path, search_limit=1))
    service.rebuild(corpus_dir)

    assert len(service.search("spring")) == 1
    assert len(service.search("spring", limit=5)) == 2


def test_explicit_zero_limit_is_rejected(tmp_path: Path, corpus_dir: Path) -> None:
    service = IndexService(_settings(tmp_path))
    service.rebuild(corpus_dir)

    with pytest.raises(ValueError):
        service.search("spring", limit=0)


def test_concurrent_readers_see_complete_snapshots(tmp_path: Path, corpus_dir: Path) -> None:
    service = IndexService(_settings(tmp_path))
    service.rebuild(corpus_dir)
    stop = threading.Event()

    def reader() -> set[int]:
        seen: set[int] = set()
        while not stop.is_set():
            index = service.snapshot()
            hits = service.search("spring")
            seen.add(len(hits))
            assert index.section_count >= 5
        return seen

    with ThreadPoolExecutor(max_workers=4) as pool:
        futures = [pool.submit(reader) for _ in range(4)]
        for _ in range(5):
            service.rebuild(corpus_dir)
        stop.set()
        results = [future.result() for future in futures]

    assert all(seen <= {2} for seen in results)
    assert service.generation == 6
