"""Unit tests for the core configuration module."""

import os
from unittest.mock import patch

from core.config import Settings, get_settings


def test_settings_defaults():
    """Test that Settings initializes with expected defaults."""
    settings = Settings()

    assert settings.index_path == ".docindex/index.jsonl"
    assert settings.corpus_dir is None
    assert settings.tokenizer == "auto"
    assert settings.char_ngram == 2
    assert settings.stopwords is False
    assert settings.use_idf is False
    assert settings.search_limit == 10
    assert settings.binary_sniff_bytes == 8192
    assert settings.max_file_bytes is None
    assert settings.log_level == "WARNING"


def test_settings_with_env_vars(monkeypatch):
    """Test that Settings properly loads values from environment variables."""
    monkeypatch.setenv("DOCINDEX_SEARCH_LIMIT", "3")
    monkeypatch.setenv("DOCINDEX_STOPWORDS", "true")
    monkeypatch.setenv("DOCINDEX_LOG_LEVEL", "debug")
    monkeypatch.setenv("DOCINDEX_CORPUS_DIR", "/srv/docs")

    settings = Settings()

    assert settings.search_limit == 3
    assert settings.stopwords is True
    assert settings.log_level == "DEBUG"
    assert settings.corpus_dir == "/srv/docs"


def test_settings_reads_dotenv_file(tmp_path, monkeypatch):
    """Test that a .env file in the working directory is honored."""
    (tmp_path / ".env").write_text("DOCINDEX_USE_IDF=1\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    assert Settings().use_idf is True


def test_extension_list_normalizes_suffixes(monkeypatch):
    monkeypatch.setenv("DOCINDEX_EXTENSIONS", "MD, .txt,,rst,.md")

    assert Settings().extension_list() == [".md", ".txt", ".rst"]


def test_get_settings_singleton():
    """Test that get_settings returns the same instance each time."""
    settings1 = get_settings()
    settings2 = get_settings()

    assert settings1 is settings2
    assert isinstance(settings1, Settings)


def test_settings_extra_field_handling():
    """Test that settings ignores extra fields."""
    with patch.dict(os.environ, {"DOCINDEX_UNKNOWN_FIELD": "value"}):
        settings = Settings()

    assert hasattr(settings, "index_path")
