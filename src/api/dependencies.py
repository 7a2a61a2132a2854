"""Shared dependencies for API routes."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from core.config import get_settings
from persistence.index_store import IndexFormatError
from preprocessing.loader import CorpusRootError
from services.index_service import IndexService

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_index_service() -> IndexService:
    """Create the process-wide index service, loading an index if one is available."""
    settings = get_settings()
    service = IndexService(settings)
    index_path = Path(settings.index_path)
    if index_path.exists():
        try:
            service.load(index_path)
        except (OSError, IndexFormatError) as exc:
            logger.warning("Cannot load index %s: %s", index_path, exc)
    elif settings.corpus_dir:
        try:
            service.rebuild(settings.corpus_dir)
        except CorpusRootError as exc:
            logger.warning("Cannot build index from %s: %s", settings.corpus_dir, exc)
    return service


__all__ = ["get_index_service"]
