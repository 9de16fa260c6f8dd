"""Cell-level predicates shared by every grid heuristic.

``is_likely_label`` and ``is_likely_value`` decide what counts as a name and
what counts as data; higher layers compose them instead of re-deriving shape
rules. All helpers are pure and tolerate jagged or malformed rows.
"""
from __future__ import annotations

import re
from typing import Any, List, Optional, Sequence

from .normalize import cell_text, normalize_text
from .options import ExtractionConfig, resolve_config

__all__ = [
    "Grid",
    "cell_at",
    "first_non_empty_col",
    "is_check_like",
    "is_likely_label",
    "is_likely_value",
    "is_parametercheck_row",
    "is_separator_like_row",
    "is_unit_like",
    "keyword_role",
    "non_empty_cols",
    "row_at",
]

Grid = Sequence[Sequence[Any]]

_NUMERIC_ONLY_RE = re.compile(r"^[0-9.,\-_/\s]+$")
_BRACKETED_RE = re.compile(r"^[\[\(\{]+\s*([^\[\]\(\)\{\}]*?)\s*[\]\)\}]+$")
_MAX_KEYWORD_CELL_TOKENS = 4


def row_at(grid: Grid, index: int) -> Sequence[Any]:
    """Return row ``index`` as a sequence; missing or malformed rows are empty."""

    if index < 0 or index >= len(grid):
        return ()
    row = grid[index]
    if row is None:
        return ()
    if isinstance(row, (list, tuple)):
        return row
    return (row,)


def cell_at(grid: Grid, row: int, col: int) -> Any:
    cells = row_at(grid, row)
    if col < 0 or col >= len(cells):
        return None
    return cells[col]


def first_non_empty_col(row: Sequence[Any]) -> int:
    for index, value in enumerate(row):
        if cell_text(value):
            return index
    return -1


def non_empty_cols(row: Sequence[Any]) -> List[int]:
    return [index for index, value in enumerate(row) if cell_text(value)]


def is_likely_label(value: Any, *, config: Optional[ExtractionConfig] = None) -> bool:
    """Return ``True`` when ``value`` looks like a descriptive name."""

    if value is None or isinstance(value, (bool, int, float)):
        return False
    cfg = resolve_config(config)
    limits = cfg.thresholds
    text = cell_text(value)
    if len(text) < 2 or len(text) > limits.max_label_chars:
        return False
    strong = normalize_text(text, "strong", config=cfg)
    if not strong or len(normalize_text(text, "basic", config=cfg)) < 2:
        return False
    if _NUMERIC_ONLY_RE.match(text):
        return False
    if len(strong.split(" ")) > limits.max_label_tokens:
        return False
    if sum(1 for char in text if char.isalpha()) < 2:
        return False
    return strong not in cfg.vocabulary.garbage_labels


def is_likely_value(value: Any, *, config: Optional[ExtractionConfig] = None) -> bool:
    """Return ``True`` when ``value`` looks like usable data.

    Numbers and booleans always qualify. Text qualifies unless it is a
    placeholder (``-``, ``n/a``, ``tbd``...), too long, too wordy, or a
    label-shaped string longer than the short-value limit.
    """

    if value is None:
        return False
    if isinstance(value, (bool, int, float)):
        return cell_text(value) != ""
    cfg = resolve_config(config)
    limits = cfg.thresholds
    text = cell_text(value)
    if not text:
        return False
    if text.lower() in cfg.vocabulary.value_placeholders:
        return False
    if len(text) > limits.max_value_chars:
        return False
    strong = normalize_text(text, "strong", config=cfg)
    if strong and len(strong.split(" ")) > limits.max_value_tokens:
        return False
    if len(text) > limits.long_label_value_chars and is_likely_label(text, config=cfg):
        return False
    return True


def is_check_like(value: Any, *, config: Optional[ExtractionConfig] = None) -> bool:
    text = cell_text(value).lower()
    return bool(text) and text in resolve_config(config).vocabulary.check_like_values


def is_unit_like(value: Any, *, config: Optional[ExtractionConfig] = None) -> bool:
    """Return ``True`` for unit annotations such as ``[mm]``, ``(-)`` or ``bar``."""

    cfg = resolve_config(config)
    vocabulary = cfg.vocabulary
    text = cell_text(value).lower()
    if not text or text in vocabulary.check_like_values:
        return False
    if text in vocabulary.dimensionless_markers or text in vocabulary.unit_whitelist:
        return True
    match = _BRACKETED_RE.match(text)
    if match is None:
        return False
    inner = match.group(1)
    if inner in vocabulary.check_like_values:
        return False
    return len(inner) <= cfg.thresholds.unit_annotation_max_chars


def _keyword_forms(keywords: Sequence[str], config: ExtractionConfig) -> List[str]:
    return [form for form in (normalize_text(keyword, "basic", config=config) for keyword in keywords) if form]


def keyword_role(value: Any, *, config: Optional[ExtractionConfig] = None) -> Optional[str]:
    """Classify a header cell as ``param``, ``comment``, ``unit`` or ``check``.

    Matching uses ``basic`` normalisation so header words that are stopwords
    ("check", "parameter") survive. Short cells may contain a keyword as a
    whole-token sequence.
    """

    cfg = resolve_config(config)
    basic = normalize_text(value, "basic", config=cfg)
    if not basic:
        return None
    allow_contains = len(basic.split(" ")) <= _MAX_KEYWORD_CELL_TOKENS
    padded = f" {basic} "
    for role, keywords in cfg.vocabulary.role_keywords.items():
        for form in _keyword_forms(keywords, cfg):
            if basic == form or (allow_contains and f" {form} " in padded):
                return role
    return None


def is_parametercheck_row(row: Sequence[Any], *, config: Optional[ExtractionConfig] = None) -> bool:
    """Return ``True`` for section dividers whose first cell reads "Parametercheck"."""

    cfg = resolve_config(config)
    prefix = cfg.vocabulary.landmarks.parametercheck_prefix
    index = first_non_empty_col(row)
    if index < 0 or not prefix:
        return False
    compact = normalize_text(row[index], "basic", config=cfg).replace(" ", "")
    return compact.startswith(prefix)


def is_separator_like_row(row: Sequence[Any], *, config: Optional[ExtractionConfig] = None) -> bool:
    """Return ``True`` when ``row`` is a parametercheck divider or carries a header keyword."""

    cfg = resolve_config(config)
    if is_parametercheck_row(row, config=cfg):
        return True
    return any(keyword_role(value, config=cfg) for value in row if cell_text(value))
