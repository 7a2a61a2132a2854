"""Corpus loading and section parsing."""

from .loader import Corpus, CorpusRootError, iter_corpus_files, load_corpus
from .sections import outline, parse_sections

__all__ = [
    "Corpus",
    "CorpusRootError",
    "iter_corpus_files",
    "load_corpus",
    "outline",
    "parse_sections",
]
