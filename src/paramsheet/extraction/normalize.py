"""Text canonicalisation for spreadsheet labels.

Every comparison in the grid parser goes through :func:`normalize_text`. Two
strengths exist:

``basic``
    trimmed, accents folded ("Prüfung" becomes "prufung"), lower-cased,
    decoration and unit annotations removed, separators turned into spaces,
    whitespace collapsed.
``strong``
    ``basic`` plus the ordered synonym rules of the vocabulary and stopword
    removal. This is the form used for fuzzy matching.

Normalisation is pure, so results are memoised per vocabulary.
"""
from __future__ import annotations

import math
import re
import unicodedata
from functools import lru_cache
from typing import Any, List, Literal, Optional

from .options import ExtractionConfig, resolve_config
from .vocabulary import Vocabulary

__all__ = ["NormalizationMode", "cell_text", "is_blank", "normalize_text", "tokenize"]

NormalizationMode = Literal["basic", "strong"]

_LEAD_DECOR_RE = re.compile(r"^[•\-–—*]+\s*")
_SEPARATORS_RE = re.compile(r"[/\-_]")
_UNIT_BRACKETS_RE = re.compile(r"[\[\(\{]([-a-z0-9/%°\s]+)[\]\)\}]")
_KEEP_ALNUM_RE = re.compile(r"[^\w\s]+|_+")
_FOLD = str.maketrans({"ß": "ss", "ẞ": "ss"})
_WS_RE = re.compile(r"\s+")


def cell_text(value: Any) -> str:
    """Coerce a raw cell value to trimmed text (``None`` becomes ``""``)."""

    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
    return str(value).strip()


def is_blank(value: Any) -> bool:
    return cell_text(value) == ""


def _fold_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text.translate(_FOLD))
    return "".join(char for char in decomposed if not unicodedata.combining(char))


@lru_cache(maxsize=16384)
def _normalize(text: str, mode: str, vocabulary: Vocabulary, unit_max_chars: int) -> str:
    text = _LEAD_DECOR_RE.sub("", text)
    text = _fold_accents(text)
    text = text.lower()
    text = _SEPARATORS_RE.sub(" ", text)

    def _drop_unit(match: re.Match[str]) -> str:
        # only short annotations like [mm] or (V); "(Modulation)" keeps its word
        if len(match.group(1).strip()) <= unit_max_chars:
            return " "
        return f" {match.group(1)} "

    text = _UNIT_BRACKETS_RE.sub(_drop_unit, text)
    text = _KEEP_ALNUM_RE.sub(" ", text)
    text = _WS_RE.sub(" ", text).strip()
    if mode == "basic":
        return text

    for pattern, replacement in vocabulary.synonyms:
        text = pattern.sub(replacement, text)

    tokens = [token for token in text.split(" ") if token and token not in vocabulary.stopwords]
    return " ".join(tokens)


def normalize_text(
    value: Any,
    mode: NormalizationMode = "strong",
    *,
    config: Optional[ExtractionConfig] = None,
) -> str:
    """Return the canonical comparison form of ``value``.

    Absent values normalise to ``""``; callers must treat an empty result as
    "not a usable label" (e.g. ``"12.5 %"`` in ``strong`` mode).
    """

    if mode not in ("basic", "strong"):
        raise ValueError(f"Unknown normalization mode: {mode!r}")
    text = cell_text(value)
    if not text:
        return ""
    cfg = resolve_config(config)
    return _normalize(text, mode, cfg.vocabulary, cfg.thresholds.unit_annotation_max_chars)


def tokenize(
    value: Any,
    mode: NormalizationMode = "strong",
    *,
    config: Optional[ExtractionConfig] = None,
) -> List[str]:
    """Split the normalised form of ``value`` into tokens."""

    normalized = normalize_text(value, mode, config=config)
    return normalized.split(" ") if normalized else []
