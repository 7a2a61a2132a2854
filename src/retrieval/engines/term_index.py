"""Inverted term index over document sections."""

from __future__ import annotations

from collections import Counter
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Sequence, Tuple

from retrieval.tokenization import TokenizerConfig, tokenize_text
from schemas.internal.documents import Document
from schemas.internal.index import IndexStats, Posting, SectionRef

SectionKey = Tuple[str, int]


class TermIndex:
    """An immutable inverted index mapping terms to section postings.

    Instances are never mutated after construction, so any number of
    readers may share one without locking. Rebuilds produce a new instance.
    """

    def __init__(
        self,
        *,
        postings: Mapping[str, Sequence[Posting]],
        sections: Sequence[SectionRef],
        tokenizer: TokenizerConfig | None = None,
        fingerprint: str | None = None,
    ) -> None:
        ordered_sections = sorted(sections, key=lambda ref: (ref.doc_id, ref.section_id))
        catalog: Dict[SectionKey, SectionRef] = {}
        for ref in ordered_sections:
            key = (ref.doc_id, ref.section_id)
            if key in catalog:
                raise ValueError(f"Duplicate section {ref.doc_id}#{ref.section_id}")
            catalog[key] = ref

        table: Dict[str, Tuple[Posting, ...]] = {}
        for term in sorted(postings):
            items = sorted(postings[term], key=lambda p: (p.doc_id, p.section_id))
            seen: set[SectionKey] = set()
            for posting in items:
                if posting.term != term:
                    raise ValueError(f"Posting for {posting.term!r} filed under {term!r}")
                key = (posting.doc_id, posting.section_id)
                if key not in catalog:
                    raise ValueError(
                        f"Posting references unknown section {posting.doc_id}#{posting.section_id}"
                    )
                if key in seen:
                    raise ValueError(
                        f"Duplicate posting for {term!r} in {posting.doc_id}#{posting.section_id}"
                    )
                seen.add(key)
            if items:
                table[term] = tuple(items)

        self._postings: Mapping[str, Tuple[Posting, ...]] = MappingProxyType(table)
        self._sections: Mapping[SectionKey, SectionRef] = MappingProxyType(catalog)
        self._doc_ids: Tuple[str, ...] = tuple(dict.fromkeys(ref.doc_id for ref in ordered_sections))
        self._tokenizer = tokenizer or TokenizerConfig()
        self._fingerprint = fingerprint

    @property
    def tokenizer(self) -> TokenizerConfig:
        return self._tokenizer

    @property
    def fingerprint(self) -> str | None:
        return self._fingerprint

    @property
    def term_count(self) -> int:
        return len(self._postings)

    @property
    def posting_count(self) -> int:
        return sum(len(items) for items in self._postings.values())

    @property
    def section_count(self) -> int:
        return len(self._sections)

    @property
    def document_count(self) -> int:
        return len(self._doc_ids)

    @property
    def doc_ids(self) -> Tuple[str, ...]:
        return self._doc_ids

    def terms(self) -> Iterator[str]:
        return iter(self._postings)

    def postings(self, term: str) -> Tuple[Posting, ...]:
        return self._postings.get(term, ())

    def document_frequency(self, term: str) -> int:
        return len(self._postings.get(term, ()))

    def all_postings(self) -> Iterator[Posting]:
        for items in self._postings.values():
            yield from items

    def section(self, doc_id: str, section_id: int) -> SectionRef:
        return self._sections[(doc_id, section_id)]

    def sections(self) -> Iterator[SectionRef]:
        return iter(self._sections.values())

    def stats(self) -> IndexStats:
        return IndexStats(
            documents=self.document_count,
            sections=self.section_count,
            terms=self.term_count,
            postings=self.posting_count,
            fingerprint=self._fingerprint,
        )

    def __contains__(self, term: object) -> bool:
        return term in self._postings

    def __len__(self) -> int:
        return len(self._postings)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TermIndex):
            return NotImplemented
        return (
            dict(self._postings) == dict(other._postings)
            and dict(self._sections) == dict(other._sections)
            and self._tokenizer == other._tokenizer
        )

    __hash__ = None  # type: ignore[assignment]


def build_term_index(
    documents: Iterable[Document],
    *,
    tokenizer: TokenizerConfig | None = None,
    fingerprint: str | None = None,
) -> TermIndex:
    """Build a TermIndex from loaded documents.

    Only section content is tokenized; heading lines are not part of a
    section's text. An empty corpus yields an empty index.
    """
    config = tokenizer or TokenizerConfig()
    postings: Dict[str, List[Posting]] = {}
    sections: List[SectionRef] = []

    for document in sorted(documents, key=lambda doc: doc.doc_id):
        for section in document.sections:
            tokens = tokenize_text(section.text, config=config)
            sections.append(
                SectionRef(
                    doc_id=document.doc_id,
                    section_id=section.section_id,
                    title=section.title,
                    depth=section.depth,
                    anchor=section.anchor,
                    length=len(tokens),
                )
            )
            for term, frequency in Counter(tokens).items():
                postings.setdefault(term, []).append(
                    Posting(
                        term=term,
                        doc_id=document.doc_id,
                        section_id=section.section_id,
                        frequency=frequency,
                    )
                )

    return TermIndex(
        postings=postings,
        sections=sections,
        tokenizer=config,
        fingerprint=fingerprint,
    )


__all__ = ["SectionKey", "TermIndex", "build_term_index"]
