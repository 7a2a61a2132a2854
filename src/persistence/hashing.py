"""Hashing helpers for index persistence and corpus fingerprints."""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Iterable, Tuple


def sha256_bytes(data: bytes) -> str:
    """Return hex sha256 of raw bytes."""
    return hashlib.sha256(data).hexdigest()


def stable_json_dumps(payload: object) -> str:
    """Dump JSON with stable ordering for hashing and serialization."""
    return json.dumps(
        payload,
        ensure_ascii=True,
        sort_keys=True,
        separators=(",", ":"),
        default=_json_default,
    )


def hash_payload(payload: object) -> str:
    """Return sha256 hash of a JSON-serializable payload."""
    return sha256_bytes(stable_json_dumps(payload).encode("utf-8"))


def corpus_fingerprint(entries: Iterable[Tuple[str, str]]) -> str:
    """Hash (doc_id, content sha256) pairs independent of input order."""
    payload = {
        "stage": "corpus",
        "documents": sorted([doc_id, digest] for doc_id, digest in entries),
    }
    return hash_payload(payload)


def _json_default(value: object) -> str:
    if isinstance(value, Path):
        return value.as_posix()
    return str(value)


__all__ = [
    "corpus_fingerprint",
    "hash_payload",
    "sha256_bytes",
    "stable_json_dumps",
]
