"""Deterministic identifiers for parameters synthesised from a sheet."""
from __future__ import annotations

import hashlib
import re
from typing import Optional, Set

from .normalize import normalize_text
from .options import ExtractionConfig

__all__ = ["ParameterIdFactory", "slugify"]

_SLUG_RE = re.compile(r"[^a-z0-9]")
_SLUG_CHARS = 20
_DIGEST_CHARS = 8


def slugify(name: str) -> str:
    return _SLUG_RE.sub("_", name.lower())[:_SLUG_CHARS]


class ParameterIdFactory:
    """Issue ids of the form ``<slug>_<digest>``, unique within one result.

    The digest hashes the normalised name, the discovery order and the source
    cell, so the same sheet always yields the same ids.
    """

    def __init__(self, *, config: Optional[ExtractionConfig] = None) -> None:
        self._config = config
        self._issued: Set[str] = set()
        self._order = 0

    def __call__(self, name: str, row: int = -1, col: int = -1) -> str:
        normalized = normalize_text(name, "strong", config=self._config)
        seed = f"{normalized}|{self._order}|{row}|{col}"
        self._order += 1
        digest = hashlib.sha1(seed.encode("utf-8")).hexdigest()[:_DIGEST_CHARS]
        candidate = f"{slugify(name)}_{digest}"
        suffix = 1
        unique = candidate
        while unique in self._issued:
            suffix += 1
            unique = f"{candidate}_{suffix}"
        self._issued.add(unique)
        return unique
