"""Schema package for document and index contracts."""

from .internal.documents import Document, LoadWarning, Section
from .internal.index import IndexStats, Posting, SearchHit, SectionRef

__all__ = [
    "Document",
    "IndexStats",
    "LoadWarning",
    "Posting",
    "SearchHit",
    "Section",
    "SectionRef",
]
