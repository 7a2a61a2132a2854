"""Tokenization helpers shared by index building and query evaluation."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Literal, cast

from retrieval.stopwords import ENGLISH_STOPWORDS

logger = logging.getLogger(__name__)

TokenizerMode = Literal["auto", "english"]

_ALLOWED_MODES = {"auto", "english"}
_WORD_RE = re.compile(r"[^\W_]+")
_DASHES = ("-", "–", "—")


@dataclass(frozen=True)
class TokenizerConfig:
    mode: TokenizerMode = "auto"
    char_ngram: int = 2
    stopwords: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"mode": self.mode, "char_ngram": self.char_ngram, "stopwords": self.stopwords}

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "TokenizerConfig":
        return resolve_tokenizer_config(
            payload.get("mode"),
            payload.get("char_ngram"),
            stopwords=bool(payload.get("stopwords", False)),
        )


def resolve_tokenizer_config(
    mode: str | None,
    char_ngram: int | None,
    *,
    stopwords: bool = False,
) -> TokenizerConfig:
    resolved_mode = (mode or "auto").strip().lower()
    if resolved_mode not in _ALLOWED_MODES:
        logger.warning("Unknown tokenizer mode: %s (fallback to auto)", resolved_mode)
        resolved_mode = "auto"
    resolved_ngram = int(char_ngram or 2)
    if resolved_ngram < 1:
        resolved_ngram = 1
    return TokenizerConfig(
        mode=cast(TokenizerMode, resolved_mode),
        char_ngram=resolved_ngram,
        stopwords=stopwords,
    )


def contains_cjk(text: str) -> bool:
    return any(_is_cjk(char) for char in text)


def normalize_terms(text: str, *, config: TokenizerConfig | None = None) -> List[str]:
    """Casefold and split text into terms, keeping duplicates.

    No stopword filtering is applied here.
    """
    if not text:
        return []
    cfg = config or TokenizerConfig()
    lowered = text.casefold()
    for dash in _DASHES:
        lowered = lowered.replace(dash, " ")
    terms: List[str] = []
    for word in _WORD_RE.findall(lowered):
        if cfg.mode == "auto" and contains_cjk(word):
            terms.extend(_split_cjk(word, cfg.char_ngram))
        else:
            terms.append(word)
    return terms


def tokenize_text(text: str, *, config: TokenizerConfig | None = None) -> List[str]:
    """Normalize text into index terms, applying the stopword filter if enabled."""
    cfg = config or TokenizerConfig()
    terms = normalize_terms(text, config=cfg)
    if cfg.stopwords:
        terms = [term for term in terms if term not in ENGLISH_STOPWORDS]
    return terms


def _split_cjk(word: str, ngram: int) -> List[str]:
    pieces: List[str] = []
    run: List[str] = []
    other: List[str] = []
    for char in word:
        if _is_cjk(char):
            if other:
                pieces.append("".join(other))
                other = []
            run.append(char)
        else:
            if run:
                pieces.extend(_cjk_ngrams(run, ngram))
                run = []
            other.append(char)
    if run:
        pieces.extend(_cjk_ngrams(run, ngram))
    if other:
        pieces.append("".join(other))
    return pieces


def _cjk_ngrams(chars: List[str], ngram: int) -> List[str]:
    if ngram <= 1:
        return list(chars)
    if len(chars) <= ngram:
        return ["".join(chars)]
    return ["".join(chars[i : i + ngram]) for i in range(len(chars) - ngram + 1)]


def _is_cjk(char: str) -> bool:
    code = ord(char)
    return (
        0x3400 <= code <= 0x4DBF
        or 0x4E00 <= code <= 0x9FFF
        or 0xF900 <= code <= 0xFAFF
        or 0x20000 <= code <= 0x2A6DF
        or 0x2A700 <= code <= 0x2B73F
        or 0x2B740 <= code <= 0x2B81F
        or 0x2B820 <= code <= 0x2CEAF
        or 0x2F800 <= code <= 0x2FA1F
    )


__all__ = [
    "TokenizerConfig",
    "TokenizerMode",
    "contains_cjk",
    "normalize_terms",
    "resolve_tokenizer_config",
    "tokenize_text",
]
