"""Active index holder with atomic snapshot swapping."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import List, Optional

from core.config import Settings, get_settings
from persistence.hashing import corpus_fingerprint
from persistence.index_store import load_index, save_index
from preprocessing.loader import Corpus, load_corpus
from retrieval.engines.term_index import TermIndex, build_term_index
from retrieval.query import search
from retrieval.tokenization import TokenizerConfig, resolve_tokenizer_config
from schemas.internal.documents import LoadWarning
from schemas.internal.index import SearchHit

logger = logging.getLogger(__name__)


class IndexNotLoadedError(RuntimeError):
    """No index has been built or loaded yet."""


def tokenizer_from_settings(settings: Settings) -> TokenizerConfig:
    return resolve_tokenizer_config(
        settings.tokenizer,
        settings.char_ngram,
        stopwords=settings.stopwords,
    )


def load_settings_corpus(root: str | Path, settings: Settings) -> Corpus:
    return load_corpus(
        root,
        extensions=settings.extension_list(),
        sniff_bytes=settings.binary_sniff_bytes,
        max_file_bytes=settings.max_file_bytes,
    )


def build_corpus_index(corpus: Corpus, tokenizer: TokenizerConfig | None = None) -> TermIndex:
    fingerprint = corpus_fingerprint((doc.doc_id, doc.sha256) for doc in corpus.documents)
    return build_term_index(corpus.documents, tokenizer=tokenizer, fingerprint=fingerprint)


class IndexService:
    """Holds the active TermIndex.

    Readers take a snapshot reference and query it without locking; rebuilds
    construct a fresh index and replace the reference under a lock.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        index: TermIndex | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._index = index
        self._warnings: List[LoadWarning] = []
        self._swap_lock = threading.Lock()
        self._generation = 0 if index is None else 1

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def last_warnings(self) -> List[LoadWarning]:
        return list(self._warnings)

    @property
    def is_loaded(self) -> bool:
        return self._index is not None

    def snapshot(self) -> TermIndex:
        index = self._index
        if index is None:
            raise IndexNotLoadedError("No index loaded")
        return index

    def swap(
        self, index: TermIndex, warnings: Optional[List[LoadWarning]] = None
    ) -> Optional[TermIndex]:
        """Install a new index and return the one it replaced."""
        with self._swap_lock:
            previous = self._index
            self._index = index
            self._warnings = list(warnings or [])
            self._generation += 1
            generation = self._generation
        logger.info(
            "Activated index generation %d (%d terms, %d sections)",
            generation,
            index.term_count,
            index.section_count,
        )
        return previous

    def rebuild(self, root: str | Path | None = None, *, persist: bool = False) -> TermIndex:
        """Load the corpus and build a fresh index, then swap it in."""
        corpus_root = root or self._settings.corpus_dir
        if corpus_root is None:
            raise ValueError("No corpus directory configured")
        corpus = load_settings_corpus(corpus_root, self._settings)
        index = build_corpus_index(corpus, tokenizer_from_settings(self._settings))
        if persist:
            save_index(index, self._settings.index_path)
        self.swap(index, corpus.warnings)
        return index

    def load(self, path: str | Path | None = None) -> TermIndex:
        """Swap in a persisted index."""
        index = load_index(path or self._settings.index_path)
        self.swap(index)
        return index

    def search(
        self,
        query: str,
        *,
        limit: int | None = None,
        use_idf: bool | None = None,
    ) -> List[SearchHit]:
        index = self.snapshot()
        return search(
            index,
            query,
            limit=self._settings.search_limit if limit is None else limit,
            use_idf=self._settings.use_idf if use_idf is None else use_idf,
        )


__all__ = [
    "IndexNotLoadedError",
    "IndexService",
    "build_corpus_index",
    "load_settings_corpus",
    "tokenizer_from_settings",
]
