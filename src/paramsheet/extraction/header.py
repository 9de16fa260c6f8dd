"""Locate the header row that anchors the parameter x variant matrix.

Two strategies are tried in order:

1. *Variant anchored*: read the variant list under the "Customer Platform
   Variants" landmark and look for the row whose cells fuzzy-match enough of
   those names.
2. *Token anchored*: look for a row carrying a parameter or comment header
   keyword and collect the variant headers to the right of it.

Unit and check columns that carry no header keyword are then inferred from
the content of the rows below the header.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Sequence, Tuple

from .cells import (
    Grid,
    cell_at,
    is_check_like,
    is_unit_like,
    keyword_role,
    row_at,
)
from .matching import token_set_ratio
from .normalize import cell_text, normalize_text
from .options import ExtractionConfig, resolve_config

__all__ = [
    "HeaderAnchor",
    "extract_variant_names",
    "find_header_row_by_tokens",
    "find_landmark_row",
    "find_matrix_header_row",
    "locate_header",
    "refine_column_roles",
]

LOGGER = logging.getLogger(__name__)

_ROLE_FIELDS = {
    "param": "param_col",
    "comment": "comment_col",
    "unit": "unit_col",
    "check": "check_col",
}


@dataclass(frozen=True)
class HeaderAnchor:
    """Header row index plus the role of each relevant column."""

    header_row: int
    col_map: Dict[int, str] = field(default_factory=dict)
    param_col: Optional[int] = None
    comment_col: Optional[int] = None
    check_col: Optional[int] = None
    unit_col: Optional[int] = None
    strategy: str = "tokens"

    def fixed_columns(self) -> Dict[str, int]:
        """Return ``{role: column}`` for every assigned fixed role."""

        return {
            role: getattr(self, attr)
            for role, attr in _ROLE_FIELDS.items()
            if getattr(self, attr) is not None
        }

    def rightmost_fixed(self) -> int:
        return max(self.fixed_columns().values(), default=-1)

    def variant_columns(self) -> List[Tuple[int, str]]:
        return sorted(self.col_map.items())


def _anchor_from_roles(
    header_row: int,
    roles: Dict[str, int],
    col_map: Dict[int, str],
    strategy: str,
) -> HeaderAnchor:
    anchor = HeaderAnchor(
        header_row=header_row,
        col_map=dict(col_map),
        strategy=strategy,
        **{_ROLE_FIELDS[role]: col for role, col in roles.items()},
    )
    return _restrict_variants(anchor)


def _restrict_variants(anchor: HeaderAnchor) -> HeaderAnchor:
    """Keep only variant columns strictly right of every fixed-role column."""

    limit = anchor.rightmost_fixed()
    kept = {col: name for col, name in anchor.col_map.items() if col > limit}
    if kept == anchor.col_map:
        return anchor
    return replace(anchor, col_map=kept)


def find_landmark_row(grid: Grid, phrase: str, *, config: Optional[ExtractionConfig] = None) -> int:
    """Return the first row holding a cell that contains ``phrase`` (strong-normalized), else -1."""

    cfg = resolve_config(config)
    target = normalize_text(phrase, "strong", config=cfg)
    if not target:
        return -1
    for r in range(len(grid)):
        for value in row_at(grid, r):
            if target in normalize_text(value, "strong", config=cfg):
                return r
    return -1


def extract_variant_names(grid: Grid, *, config: Optional[ExtractionConfig] = None) -> List[str]:
    """Read the variant names listed under the customer platform variants landmark.

    Returns an empty list unless at least ``min_variant_names`` distinct names
    are found; fewer names are too weak to anchor the matrix header.
    """

    cfg = resolve_config(config)
    limits = cfg.thresholds
    landmarks = cfg.vocabulary.landmarks

    start_row = find_landmark_row(grid, landmarks.variant_list, config=cfg)
    if start_row < 0:
        return []

    name_header = normalize_text(landmarks.variant_name_header, "strong", config=cfg)
    stop_phrase = normalize_text(landmarks.variant_stop, "strong", config=cfg)
    header_row = name_col = -1
    for r in range(start_row, min(start_row + limits.variant_scan_rows + 1, len(grid))):
        for c, value in enumerate(row_at(grid, r)):
            if normalize_text(value, "strong", config=cfg) == name_header:
                header_row, name_col = r, c
                break
        if header_row >= 0:
            break
    if header_row < 0:
        return []

    names: List[str] = []
    empty_run = 0
    last_row = min(header_row + 1 + limits.variant_list_max_rows, len(grid))
    for r in range(header_row + 1, last_row):
        name = cell_text(cell_at(grid, r, name_col))
        if not name:
            empty_run += 1
            if empty_run >= limits.variant_empty_run:
                break
            continue
        empty_run = 0
        if stop_phrase and stop_phrase in normalize_text(name, "strong", config=cfg):
            break
        if name not in names:
            names.append(name)

    if len(names) < limits.min_variant_names:
        LOGGER.debug("header.variant_list_too_short", extra={"variants": len(names)})
        return []
    return names


def _classify_row(
    row: Sequence[object], cfg: ExtractionConfig
) -> Tuple[Dict[str, int], List[Tuple[int, str]]]:
    """Split a row into fixed-role keyword cells and the remaining text cells."""

    roles: Dict[str, int] = {}
    others: List[Tuple[int, str]] = []
    for c, value in enumerate(row):
        text = cell_text(value)
        if not text:
            continue
        role = keyword_role(text, config=cfg)
        if role is None:
            others.append((c, text))
        elif role not in roles:
            roles[role] = c
    return roles, others


def find_matrix_header_row(
    grid: Grid,
    variant_names: Sequence[str],
    *,
    config: Optional[ExtractionConfig] = None,
) -> Optional[HeaderAnchor]:
    """Return the first row whose cells match at least half of ``variant_names``."""

    cfg = resolve_config(config)
    if not variant_names:
        return None
    threshold = cfg.thresholds.variant_header_match
    required = max(1, len(variant_names) // 2)

    for r in range(len(grid)):
        roles, others = _classify_row(row_at(grid, r), cfg)
        col_map: Dict[int, str] = {}
        for c, text in others:
            best_name, best_score = None, 0.0
            for name in variant_names:
                score = token_set_ratio(text, name, config=cfg)
                if score > best_score:
                    best_name, best_score = name, score
            if best_name is not None and best_score >= threshold:
                col_map[c] = best_name
        if len(col_map) < required:
            continue
        anchor = _anchor_from_roles(r, roles, col_map, "variants")
        if anchor.col_map:
            return anchor
    return None


def _header_cell_text(grid: Grid, row: int, col: int, prefer_below: bool) -> Tuple[str, bool]:
    """Return the header text of ``col`` and whether it came from the fallback row."""

    order = (row + 1, row) if prefer_below else (row, row + 1)
    for index, r in enumerate(order):
        text = cell_text(cell_at(grid, r, col))
        if text:
            return text, index == 1
    return "", False


def _collect_variant_headers(
    grid: Grid,
    header_row: int,
    start_col: int,
    prefer_below: bool,
    cfg: ExtractionConfig,
) -> Dict[int, str]:
    limits = cfg.thresholds
    width = max(len(row_at(grid, header_row)), len(row_at(grid, header_row + 1)))
    found: Dict[int, str] = {}
    empty_run = 0
    for c in range(start_col, width):
        text, from_fallback = _header_cell_text(grid, header_row, c, prefer_below)
        if not text:
            empty_run += 1
            if empty_run >= limits.header_empty_run:
                break
            continue
        empty_run = 0
        if keyword_role(text, config=cfg):
            continue
        # a blank header over "[mm]" or "OK" data is a unit/check column for refine_column_roles
        if from_fallback and not prefer_below and (is_check_like(text, config=cfg) or is_unit_like(text, config=cfg)):
            continue
        if normalize_text(text, "strong", config=cfg) in cfg.vocabulary.garbage_labels:
            continue
        found[c] = text
        if len(found) >= limits.max_variant_columns:
            break
    return found


def find_header_row_by_tokens(
    grid: Grid, *, config: Optional[ExtractionConfig] = None
) -> Optional[HeaderAnchor]:
    """Return the first row with a parameter/comment keyword and at least one variant header."""

    cfg = resolve_config(config)
    for r in range(len(grid)):
        roles, _ = _classify_row(row_at(grid, r), cfg)
        if "param" not in roles and "comment" not in roles:
            continue
        start_col = max(roles.values()) + 1
        col_map = _collect_variant_headers(grid, r, start_col, False, cfg)
        if not col_map:
            # two-row headers: the variant names sit one row below the keywords
            col_map = _collect_variant_headers(grid, r, start_col, True, cfg)
        if col_map:
            return _anchor_from_roles(r, roles, col_map, "tokens")
    return None


def refine_column_roles(
    grid: Grid,
    anchor: HeaderAnchor,
    *,
    config: Optional[ExtractionConfig] = None,
) -> HeaderAnchor:
    """Assign missing unit/check columns from the content of the rows below the header.

    Only columns left of the first variant column and not already holding a
    fixed role are considered. A column qualifies with at least
    ``role_min_samples`` non-empty cells and a hit ratio of ``role_min_ratio``;
    the best ``ratio * 100 - proximity penalty`` wins.
    """

    cfg = resolve_config(config)
    limits = cfg.thresholds
    missing = [role for role in ("unit", "check") if getattr(anchor, _ROLE_FIELDS[role]) is None]
    if not missing:
        return anchor

    first_row = anchor.header_row + 1
    sample = [row_at(grid, r) for r in range(first_row, min(first_row + limits.role_sample_rows, len(grid)))]
    width = max((len(row) for row in sample), default=0)
    if anchor.col_map:
        width = min(width, min(anchor.col_map))
    taken = set(anchor.fixed_columns().values())

    stats: Dict[int, Tuple[int, int, int]] = {}
    for c in range(width):
        if c in taken:
            continue
        non_empty = unit_hits = check_hits = 0
        for row in sample:
            value = row[c] if c < len(row) else None
            if not cell_text(value):
                continue
            non_empty += 1
            if is_unit_like(value, config=cfg):
                unit_hits += 1
            if is_check_like(value, config=cfg):
                check_hits += 1
        stats[c] = (non_empty, unit_hits, check_hits)

    assigned: Dict[str, int] = {}
    for role in missing:
        best_col, best_score = None, float("-inf")
        for c, (non_empty, unit_hits, check_hits) in stats.items():
            if c in taken or non_empty < limits.role_min_samples:
                continue
            ratio = (unit_hits if role == "unit" else check_hits) / non_empty
            if ratio < limits.role_min_ratio:
                continue
            penalty = 0.0
            if anchor.param_col is not None:
                penalty = min(limits.role_max_penalty, limits.role_penalty_per_column * abs(c - anchor.param_col))
            score = ratio * 100 - penalty
            if score > best_score:
                best_col, best_score = c, score
        if best_col is not None:
            assigned[_ROLE_FIELDS[role]] = best_col
            taken.add(best_col)

    if not assigned:
        return anchor
    LOGGER.debug("header.roles_refined", extra={"assigned": assigned})
    return _restrict_variants(replace(anchor, **assigned))


def locate_header(grid: Grid, *, config: Optional[ExtractionConfig] = None) -> Optional[HeaderAnchor]:
    """Run both header strategies in priority order and refine the column roles."""

    cfg = resolve_config(config)
    anchor: Optional[HeaderAnchor] = None
    variant_names = extract_variant_names(grid, config=cfg)
    if variant_names:
        anchor = find_matrix_header_row(grid, variant_names, config=cfg)
    if anchor is None:
        anchor = find_header_row_by_tokens(grid, config=cfg)
    if anchor is None:
        LOGGER.debug("header.not_found", extra={"rows": len(grid)})
        return None
    anchor = refine_column_roles(grid, anchor, config=cfg)
    LOGGER.debug(
        "header.located",
        extra={"row": anchor.header_row, "strategy": anchor.strategy, "variants": len(anchor.col_map)},
    )
    return anchor
