"""Index and search result contracts."""

from __future__ import annotations

from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Posting(BaseModel):
    """Occurrence of a term in one section."""

    term: str
    doc_id: str
    section_id: int = Field(ge=0)
    frequency: int = Field(ge=1)

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("term")
    @classmethod
    def _term_not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("term must not be empty")
        return value

    @property
    def key(self) -> tuple[str, str, int]:
        return (self.term, self.doc_id, self.section_id)


class SectionRef(BaseModel):
    """Display metadata kept by the index for every indexed section."""

    doc_id: str
    section_id: int = Field(ge=0)
    title: str
    depth: int = Field(ge=0)
    anchor: str = ""
    length: int = Field(default=0, ge=0, description="Token count.")

    model_config = ConfigDict(frozen=True, extra="forbid")

    @property
    def location(self) -> str:
        if not self.anchor:
            return self.doc_id
        return f"{self.doc_id}#{self.anchor}"


class SearchHit(BaseModel):
    """A ranked section returned by the query engine."""

    doc_id: str
    section_id: int = Field(ge=0)
    title: str
    anchor: str = ""
    depth: int = Field(ge=0)
    score: float = Field(ge=0)
    frequency: int = Field(ge=0)
    matched_terms: Tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True, extra="forbid")

    @property
    def location(self) -> str:
        if not self.anchor:
            return self.doc_id
        return f"{self.doc_id}#{self.anchor}"


class IndexStats(BaseModel):
    """Counters describing a built index."""

    documents: int = 0
    sections: int = 0
    terms: int = 0
    postings: int = 0
    fingerprint: str | None = None


__all__ = ["IndexStats", "Posting", "SearchHit", "SectionRef"]
