"""Stateless query evaluation against a TermIndex."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, List

from retrieval.engines.term_index import SectionKey, TermIndex
from retrieval.tokenization import normalize_terms, tokenize_text
from schemas.internal.index import SearchHit

DEFAULT_LIMIT = 10


class InvalidQueryError(ValueError):
    """Query has no terms left after normalization."""


@dataclass
class _Accumulator:
    score: float = 0.0
    frequency: int = 0
    matched: List[str] = field(default_factory=list)


def query_terms(index: TermIndex, query: str) -> List[str]:
    """Normalize a query with the index tokenizer, dropping repeated terms.

    Raises InvalidQueryError when nothing survives normalization. Stopword
    filtering may still leave an empty list, which is a valid query with no
    matches.
    """
    if not normalize_terms(query or "", config=index.tokenizer):
        raise InvalidQueryError(f"Query has no searchable terms: {query!r}")
    return list(dict.fromkeys(tokenize_text(query, config=index.tokenizer)))


def search(
    index: TermIndex,
    query: str,
    *,
    limit: int = DEFAULT_LIMIT,
    use_idf: bool = False,
) -> List[SearchHit]:
    """Rank sections by additive term frequency.

    Ordering is score desc, total frequency desc, doc_id asc, section_id asc.
    With ``use_idf`` each term frequency is weighted by ln(1 + N / df).
    """
    if limit < 1:
        raise ValueError("limit must be >= 1")
    terms = query_terms(index, query)

    totals: Dict[SectionKey, _Accumulator] = {}
    n_sections = max(index.section_count, 1)
    for term in terms:
        postings = index.postings(term)
        if not postings:
            continue
        weight = _idf(n_sections, len(postings)) if use_idf else 1.0
        for posting in postings:
            key = (posting.doc_id, posting.section_id)
            acc = totals.get(key)
            if acc is None:
                acc = totals[key] = _Accumulator()
            acc.score += posting.frequency * weight
            acc.frequency += posting.frequency
            acc.matched.append(term)

    ranked = sorted(
        totals.items(),
        key=lambda item: (-item[1].score, -item[1].frequency, item[0][0], item[0][1]),
    )

    hits: List[SearchHit] = []
    for (doc_id, section_id), acc in ranked[:limit]:
        ref = index.section(doc_id, section_id)
        hits.append(
            SearchHit(
                doc_id=doc_id,
                section_id=section_id,
                title=ref.title,
                anchor=ref.anchor,
                depth=ref.depth,
                score=acc.score,
                frequency=acc.frequency,
                matched_terms=tuple(acc.matched),
            )
        )
    return hits


def _idf(n_sections: int, df: int) -> float:
    return math.log(1.0 + n_sections / df)


__all__ = ["DEFAULT_LIMIT", "InvalidQueryError", "query_terms", "search"]
