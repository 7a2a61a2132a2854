# tests/conftest.py
from __future__ import annotations

import os
from pathlib import Path

import pytest

from core.config import get_settings


@pytest.fixture(autouse=True)
def _isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    # Keep DOCINDEX_* from the developer's shell and any .env out of the tests.
    for key in list(os.environ):
        if key.startswith("DOCINDEX_"):
            monkeypatch.delenv(key, raising=False)
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def corpus_dir(tmp_path: Path) -> Path:
    root = tmp_path / "corpus"
    (root / "guides").mkdir(parents=True)
    (root / "spring.md").write_text(
        "# Intro\nspring boot is fast\n# Setup\nspring requires java\n",
        encoding="utf-8",
    )
    (root / "guides" / "sonar.md").write_text(
        "Quality scanning notes.\n\n"
        "## Install\n"
        "Download the server and unzip it.\n"
        "## Run\n"
        "Start the server, then open the dashboard.\n",
        encoding="utf-8",
    )
    (root / "notes.txt").write_text("n plus one queries hurt performance\n", encoding="utf-8")
    (root / "image.png").write_bytes(b"\x89PNG\r\n\x1a\n\x00\x00")
    return root
