"""Document structure contracts produced by the loading layer."""

from __future__ import annotations

from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field


class Section(BaseModel):
    """A headed block of lines owned by exactly one document."""

    doc_id: str = Field(description="Identifier of the owning document.")
    section_id: int = Field(ge=0, description="Ordinal within the document.")
    title: str
    depth: int = Field(ge=0, description="Heading marker count, 0 for the root.")
    anchor: str = ""
    lines: Tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True, extra="forbid")

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    @property
    def is_root(self) -> bool:
        return self.depth == 0


class Document(BaseModel):
    """A loaded text document split into ordered sections."""

    doc_id: str = Field(description="POSIX path relative to the corpus root.")
    path: str
    sha256: str
    sections: Tuple[Section, ...]

    model_config = ConfigDict(frozen=True, extra="forbid")


class LoadWarning(BaseModel):
    """A file that was skipped while loading a corpus."""

    path: str
    reason: str

    model_config = ConfigDict(frozen=True, extra="forbid")


__all__ = ["Document", "LoadWarning", "Section"]
