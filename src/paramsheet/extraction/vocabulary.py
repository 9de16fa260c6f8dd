"""Loaders for the keyword, synonym and landmark tables used by the grid heuristics."""
from __future__ import annotations

import json
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping, Pattern, Tuple

from ..config import get_settings

__all__ = ["Landmarks", "Vocabulary", "default_vocabulary", "load_vocabulary"]


@dataclass(frozen=True)
class Landmarks:
    """Anchor phrases located in the sheet (compared in strong-normalized form)."""

    variant_list: str
    variant_name_header: str
    variant_stop: str
    project_description: str
    key_value_stops: Tuple[str, ...]
    parametercheck_prefix: str


@dataclass(frozen=True, eq=False)
class Vocabulary:
    """Locale-specific word lists, kept out of the matching logic."""

    synonyms: Tuple[Tuple[Pattern[str], str], ...]
    stopwords: frozenset[str]
    garbage_labels: frozenset[str]
    param_keywords: Tuple[str, ...]
    comment_keywords: Tuple[str, ...]
    unit_keywords: Tuple[str, ...]
    check_keywords: Tuple[str, ...]
    value_placeholders: frozenset[str]
    check_like_values: frozenset[str]
    unit_whitelist: frozenset[str]
    dimensionless_markers: frozenset[str]
    check_status_aliases: Tuple[Tuple[str, frozenset[str]], ...]
    rulebook_tokens: Tuple[str, ...]
    landmarks: Landmarks

    @property
    def role_keywords(self) -> Dict[str, Tuple[str, ...]]:
        """Header keywords per fixed column role, in classification priority order."""

        return {
            "param": self.param_keywords,
            "comment": self.comment_keywords,
            "unit": self.unit_keywords,
            "check": self.check_keywords,
        }


def _require(payload: Mapping[str, Any], key: str, path: Path) -> Any:
    if key not in payload:
        raise ValueError(f"Vocabulary file {path} is missing the '{key}' section")
    return payload[key]


def _lowered(values: Any) -> Tuple[str, ...]:
    return tuple(dict.fromkeys(str(item).strip().lower() for item in values or [] if str(item).strip()))


def _parse_payload(payload: Mapping[str, Any], path: Path) -> Vocabulary:
    synonyms = []
    for entry in _require(payload, "synonyms", path):
        if not isinstance(entry, (list, tuple)) or len(entry) != 2:
            raise ValueError(f"Synonym rules in {path} must be [pattern, replacement] pairs, got {entry!r}")
        pattern, replacement = entry
        try:
            synonyms.append((re.compile(pattern, flags=re.IGNORECASE), str(replacement)))
        except re.error as exc:
            raise ValueError(f"Invalid synonym pattern {pattern!r} in {path}") from exc

    keywords = _require(payload, "keywords", path)
    units = _require(payload, "units", path)
    status = _require(payload, "check_status", path)
    landmarks = _require(payload, "landmarks", path)

    aliases = tuple(
        (canonical, frozenset(_lowered(status.get(canonical))))
        for canonical in ("ok", "nok", "na")
    )

    return Vocabulary(
        synonyms=tuple(synonyms),
        stopwords=frozenset(_lowered(_require(payload, "stopwords", path))),
        garbage_labels=frozenset(_lowered(_require(payload, "garbage_labels", path))),
        param_keywords=_lowered(keywords.get("param")),
        comment_keywords=_lowered(keywords.get("comment")),
        unit_keywords=_lowered(keywords.get("unit")),
        check_keywords=_lowered(keywords.get("check")),
        value_placeholders=frozenset(_lowered(payload.get("value_placeholders"))),
        check_like_values=frozenset(_lowered(payload.get("check_like_values"))),
        unit_whitelist=frozenset(_lowered(units.get("whitelist"))),
        dimensionless_markers=frozenset(_lowered(units.get("dimensionless"))),
        check_status_aliases=aliases,
        rulebook_tokens=tuple(str(token).strip().upper() for token in status.get("rulebook", []) or []),
        landmarks=Landmarks(
            variant_list=str(landmarks.get("variant_list", "")).lower(),
            variant_name_header=str(landmarks.get("variant_name_header", "")).lower(),
            variant_stop=str(landmarks.get("variant_stop", "")).lower(),
            project_description=str(landmarks.get("project_description", "")).lower(),
            key_value_stops=_lowered(landmarks.get("key_value_stops")),
            parametercheck_prefix=str(landmarks.get("parametercheck_prefix", "")).lower(),
        ),
    )


def load_vocabulary(path: str | Path | None = None) -> Vocabulary:
    """Load a vocabulary table from ``path`` (defaults to the configured one)."""

    vocabulary_path = Path(path) if path is not None else get_settings().vocabulary_path
    if not vocabulary_path.exists():
        raise FileNotFoundError(f"Vocabulary file '{vocabulary_path}' does not exist")
    payload = json.loads(vocabulary_path.read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise ValueError(f"Expected dictionary at {vocabulary_path}, got {type(payload)!r}")
    return _parse_payload(payload, vocabulary_path)


@lru_cache(maxsize=4)
def _cached_vocabulary(path: Path) -> Vocabulary:
    return load_vocabulary(path)


def default_vocabulary() -> Vocabulary:
    """Return the vocabulary referenced by the current settings (cached per path)."""

    return _cached_vocabulary(get_settings().vocabulary_path)
