"""Line-delimited JSON persistence for TermIndex.

Layout, one JSON object per line:

    {"kind": "header", "format": "docindex", "version": 1, ...}
    {"kind": "section", "doc": ..., "section": ..., "title": ..., ...}
    {"kind": "posting", "term": ..., "doc": ..., "section": ..., "tf": ...}

Sections and postings are written in index order, so two indexes built from
identical input serialize to identical bytes.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from pydantic import ValidationError

from persistence.hashing import stable_json_dumps
from retrieval.engines.term_index import TermIndex
from retrieval.tokenization import TokenizerConfig
from schemas.internal.index import Posting, SectionRef

logger = logging.getLogger(__name__)

FORMAT_NAME = "docindex"
FORMAT_VERSION = 1


class IndexFormatError(ValueError):
    """A persisted index cannot be parsed."""


def index_records(index: TermIndex) -> List[Dict[str, Any]]:
    records: List[Dict[str, Any]] = [
        {
            "kind": "header",
            "format": FORMAT_NAME,
            "version": FORMAT_VERSION,
            "tokenizer": index.tokenizer.to_dict(),
            "fingerprint": index.fingerprint,
            "counts": {
                "documents": index.document_count,
                "sections": index.section_count,
                "terms": index.term_count,
                "postings": index.posting_count,
            },
        }
    ]
    for ref in index.sections():
        records.append(
            {
                "kind": "section",
                "doc": ref.doc_id,
                "section": ref.section_id,
                "title": ref.title,
                "depth": ref.depth,
                "anchor": ref.anchor,
                "length": ref.length,
            }
        )
    for posting in index.all_postings():
        records.append(
            {
                "kind": "posting",
                "term": posting.term,
                "doc": posting.doc_id,
                "section": posting.section_id,
                "tf": posting.frequency,
            }
        )
    return records


def dumps_index(index: TermIndex) -> str:
    """Serialize an index to JSON lines."""
    return "".join(stable_json_dumps(record) + "\n" for record in index_records(index))


def loads_index(text: str) -> TermIndex:
    """Parse JSON lines produced by dumps_index."""
    header: Dict[str, Any] | None = None
    sections: List[SectionRef] = []
    postings: Dict[str, List[Posting]] = {}

    for lineno, line in enumerate(text.split("\n"), start=1):
        if not line.strip():
            continue
        try:
            record = json.loads(line)
        except json.JSONDecodeError as exc:
            raise IndexFormatError(f"line {lineno}: invalid JSON ({exc.msg})") from exc
        if not isinstance(record, dict):
            raise IndexFormatError(f"line {lineno}: expected an object")
        kind = record.get("kind")
        try:
            if kind == "header":
                if header is not None:
                    raise IndexFormatError(f"line {lineno}: duplicate header")
                header = _check_header(record, lineno)
            elif header is None:
                raise IndexFormatError(f"line {lineno}: record before header")
            elif kind == "section":
                sections.append(
                    SectionRef(
                        doc_id=record["doc"],
                        section_id=record["section"],
                        title=record["title"],
                        depth=record["depth"],
                        anchor=record.get("anchor", ""),
                        length=record.get("length", 0),
                    )
                )
            elif kind == "posting":
                posting = Posting(
                    term=record["term"],
                    doc_id=record["doc"],
                    section_id=record["section"],
                    frequency=record["tf"],
                )
                postings.setdefault(posting.term, []).append(posting)
            else:
                raise IndexFormatError(f"line {lineno}: unknown record kind {kind!r}")
        except KeyError as exc:
            raise IndexFormatError(f"line {lineno}: missing field {exc.args[0]!r}") from exc
        except ValidationError as exc:
            raise IndexFormatError(f"line {lineno}: {exc}") from exc

    if header is None:
        raise IndexFormatError("missing header record")

    tokenizer = TokenizerConfig.from_dict(header.get("tokenizer") or {})
    try:
        index = TermIndex(
            postings=postings,
            sections=sections,
            tokenizer=tokenizer,
            fingerprint=header.get("fingerprint"),
        )
    except ValueError as exc:
        raise IndexFormatError(str(exc)) from exc

    counts = header.get("counts") or {}
    expected = counts.get("postings")
    if expected is not None and expected != index.posting_count:
        raise IndexFormatError(
            f"posting count mismatch: header {expected}, found {index.posting_count}"
        )
    return index


def save_index(index: TermIndex, path: str | Path) -> Path:
    """Write an index atomically (temp file then replace)."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    temp = target.with_suffix(target.suffix + ".tmp")
    temp.write_text(dumps_index(index), encoding="utf-8")
    temp.replace(target)
    logger.info("Wrote index with %d postings to %s", index.posting_count, target)
    return target


def load_index(path: str | Path) -> TermIndex:
    """Read an index written by save_index."""
    source = Path(path)
    return loads_index(source.read_text(encoding="utf-8"))


def _check_header(record: Dict[str, Any], lineno: int) -> Dict[str, Any]:
    if record.get("format") != FORMAT_NAME:
        raise IndexFormatError(f"line {lineno}: not a {FORMAT_NAME} index")
    version = record.get("version")
    if version != FORMAT_VERSION:
        raise IndexFormatError(f"line {lineno}: unsupported version {version!r}")
    return record


__all__ = [
    "FORMAT_NAME",
    "FORMAT_VERSION",
    "IndexFormatError",
    "dumps_index",
    "index_records",
    "load_index",
    "loads_index",
    "save_index",
]
