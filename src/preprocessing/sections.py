"""Heading-based section splitter for Markdown and plain-text documents."""

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Sequence, Tuple

from schemas.internal.documents import Section

_HEADING_RE = re.compile(r"^ {0,3}(#{1,6})(?:[ \t]+(.*?))?[ \t]*$")
_CLOSING_HASHES_RE = re.compile(r"(?:^|[ \t]+)#+$")
_FENCE_RE = re.compile(r"^ {0,3}(`{3,}|~{3,})")
_SLUG_DROP_RE = re.compile(r"[^\w\- ]")


def parse_heading(line: str) -> Optional[Tuple[int, str]]:
    """Return (depth, title) when the line is an ATX heading."""
    match = _HEADING_RE.match(line)
    if match is None:
        return None
    depth = len(match.group(1))
    title = _CLOSING_HASHES_RE.sub("", match.group(2) or "").strip()
    return depth, title


def parse_sections(doc_id: str, text: str) -> Tuple[Section, ...]:
    """Split raw text into ordered sections.

    Depth is taken verbatim from the heading marker; skipped or reversed
    levels are kept as written. Lines before the first heading form an
    implicit root section (depth 0) titled with the document identifier.
    Headings inside fenced code blocks are treated as content.
    """
    lines = _split_lines(text)
    if not lines:
        return (Section(doc_id=doc_id, section_id=0, title=doc_id, depth=0),)

    blocks: List[Tuple[str, int, List[str]]] = []
    current: Optional[Tuple[str, int, List[str]]] = None
    fence: Optional[str] = None

    for line in lines:
        if fence is not None:
            if _closes_fence(line, fence):
                fence = None
        else:
            opened = _FENCE_RE.match(line)
            if opened is not None:
                fence = opened.group(1)
            else:
                heading = parse_heading(line)
                if heading is not None:
                    depth, title = heading
                    current = (title, depth, [])
                    blocks.append(current)
                    continue
        if current is None:
            current = (doc_id, 0, [])
            blocks.append(current)
        current[2].append(line)

    slugger = _AnchorSlugger()
    sections: List[Section] = []
    for section_id, (title, depth, body) in enumerate(blocks):
        sections.append(
            Section(
                doc_id=doc_id,
                section_id=section_id,
                title=title,
                depth=depth,
                anchor="" if depth == 0 else slugger.slug(title),
                lines=tuple(body),
            )
        )
    return tuple(sections)


def section_lines(sections: Iterable[Section]) -> List[str]:
    """Concatenate the content lines of sections in order."""
    result: List[str] = []
    for section in sections:
        result.extend(section.lines)
    return result


def outline(sections: Sequence[Section]) -> List[str]:
    """Render an indented heading tree."""
    rendered: List[str] = []
    for section in sections:
        if section.is_root:
            rendered.append(f"{section.title} ({len(section.lines)} lines)")
            continue
        indent = "  " * max(section.depth - 1, 0)
        title = section.title or "(untitled)"
        rendered.append(
            f"{indent}{'#' * section.depth} {title} "
            f"[#{section.anchor}] ({len(section.lines)} lines)"
        )
    return rendered


def slugify(title: str) -> str:
    """GitHub-style heading anchor."""
    slug = _SLUG_DROP_RE.sub("", title.strip().casefold())
    slug = slug.replace(" ", "-")
    return slug or "section"


class _AnchorSlugger:
    def __init__(self) -> None:
        self._seen: dict[str, int] = {}

    def slug(self, title: str) -> str:
        base = slugify(title)
        count = self._seen.get(base)
        if count is None:
            self._seen[base] = 0
            return base
        while True:
            count += 1
            candidate = f"{base}-{count}"
            if candidate not in self._seen:
                break
        self._seen[base] = count
        self._seen[candidate] = 0
        return candidate


def _split_lines(text: str) -> List[str]:
    # Only \n (with an optional \r before it) ends a line; form feeds and
    # Unicode separators stay inside the line.
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _closes_fence(line: str, fence: str) -> bool:
    stripped = line.strip()
    if not stripped or len(line) - len(line.lstrip(" ")) > 3:
        return False
    marker = fence[0]
    run = len(stripped) - len(stripped.lstrip(marker))
    return run >= len(fence) and stripped == marker * run


__all__ = [
    "outline",
    "parse_heading",
    "parse_sections",
    "section_lines",
    "slugify",
]
