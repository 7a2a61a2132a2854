"""Internal schema definitions."""

from .documents import Document, LoadWarning, Section  # noqa: F401
from .index import IndexStats, Posting, SearchHit, SectionRef  # noqa: F401

__all__ = [
    "Document",
    "IndexStats",
    "LoadWarning",
    "Posting",
    "SearchHit",
    "Section",
    "SectionRef",
]
