"""Application configuration and .env loading."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Centralized runtime configuration."""

    corpus_dir: str | None = Field(default=None, validation_alias="DOCINDEX_CORPUS_DIR")
    index_path: str = Field(
        default=".docindex/index.jsonl", validation_alias="DOCINDEX_INDEX_PATH"
    )
    extensions: str = Field(
        default=".md,.markdown,.txt", validation_alias="DOCINDEX_EXTENSIONS"
    )

    tokenizer: str = Field(default="auto", validation_alias="DOCINDEX_TOKENIZER")
    char_ngram: int = Field(default=2, validation_alias="DOCINDEX_CHAR_NGRAM")
    stopwords: bool = Field(default=False, validation_alias="DOCINDEX_STOPWORDS")

    use_idf: bool = Field(default=False, validation_alias="DOCINDEX_USE_IDF")
    search_limit: int = Field(default=10, ge=1, validation_alias="DOCINDEX_SEARCH_LIMIT")

    binary_sniff_bytes: int = Field(
        default=8192, ge=1, validation_alias="DOCINDEX_BINARY_SNIFF_BYTES"
    )
    max_file_bytes: int | None = Field(
        default=None, validation_alias="DOCINDEX_MAX_FILE_BYTES"
    )

    log_level: str = Field(default="WARNING", validation_alias="DOCINDEX_LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.strip().upper() or "WARNING"

    def extension_list(self) -> List[str]:
        """Return normalized file suffixes (lowercase, dot-prefixed)."""
        suffixes: List[str] = []
        for raw in self.extensions.split(","):
            item = raw.strip().lower()
            if not item:
                continue
            if not item.startswith("."):
                item = f".{item}"
            if item not in suffixes:
                suffixes.append(item)
        return suffixes

    def resolved(self) -> Dict[str, Any]:
        """Values as the loader and index store will use them."""
        index_path = Path(self.index_path).expanduser().resolve()
        corpus_dir = Path(self.corpus_dir).expanduser().resolve() if self.corpus_dir else None
        return {
            "corpus_dir": str(corpus_dir) if corpus_dir else None,
            "extensions": self.extension_list(),
            "index_path": str(index_path),
            "index_exists": index_path.is_file(),
        }

    def env_items(self) -> Dict[str, Any]:
        """Current values keyed by their DOCINDEX_* variable."""
        payload = self.model_dump()
        return {
            str(field.validation_alias or name.upper()): payload[name]
            for name, field in type(self).model_fields.items()
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings once from .env/environment."""
    return Settings()


__all__ = ["Settings", "get_settings"]
