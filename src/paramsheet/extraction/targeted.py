"""Targeted extraction: look up known parameters anywhere in the grid."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Tuple, Union

from .cells import Grid, cell_at, is_likely_label, is_likely_value, row_at
from .matching import match_score
from .models import (
    ExtractedRowValues,
    ExtractedValue,
    ParameterGroup,
    ParameterRow,
    ParameterTarget,
    RowValue,
)
from .normalize import cell_text, normalize_text
from .options import ExtractionConfig, resolve_config

__all__ = [
    "LabelMatch",
    "TargetLike",
    "as_targets",
    "cell_reference",
    "extract_all_parameters",
    "extract_all_parameters_with_columns",
    "find_best_label_cell",
    "find_best_match",
    "locate_value",
    "probe_value",
    "read_row_values",
]

LOGGER = logging.getLogger(__name__)

TargetLike = Union[ParameterTarget, ParameterRow, ParameterGroup]


@dataclass(frozen=True)
class LabelMatch:
    """Best label cell for a target, with the value read next to it (if any)."""

    row: int
    col: int
    score: float
    value: Any = None


def cell_reference(row: int, col: int) -> str:
    """Return the 1-based ``R{row}C{col}`` reference of a zero-based cell."""

    return f"R{row + 1}C{col + 1}"


def as_targets(items: Iterable[TargetLike]) -> List[ParameterTarget]:
    """Flatten groups/rows/targets into a list of :class:`ParameterTarget`."""

    targets: List[ParameterTarget] = []
    for item in items:
        if isinstance(item, ParameterGroup):
            targets.extend(ParameterTarget.from_row(row) for row in item.parameters)
        elif isinstance(item, ParameterRow):
            targets.append(ParameterTarget.from_row(item))
        else:
            targets.append(item)
    return targets


def probe_value(grid: Grid, row: int, col: int, *, config: Optional[ExtractionConfig] = None) -> Any:
    """Read the value belonging to the label at ``(row, col)``.

    Probes the cell to the right, two cells to the right (an intervening unit
    column) and finally the cell below. Returns ``None`` when none qualifies.
    """

    located = locate_value(grid, row, col, config=config)
    return located[2] if located is not None else None


def locate_value(
    grid: Grid, row: int, col: int, *, config: Optional[ExtractionConfig] = None
) -> Optional[Tuple[int, int, Any]]:
    """Return ``(row, col, value)`` of the probed value cell, see :func:`probe_value`."""

    cfg = resolve_config(config)
    for r, c in ((row, col + 1), (row, col + 2), (row + 1, col)):
        value = cell_at(grid, r, c)
        if is_likely_value(value, config=cfg):
            return r, c, value
    return None


def _searchable(target_name: str, target_id: Optional[str], cfg: ExtractionConfig) -> bool:
    normalized = normalize_text(target_name, "strong", config=cfg)
    if target_id and target_id.strip():
        return True
    return len(normalized) >= cfg.thresholds.min_target_chars


def _iter_label_candidates(grid: Grid, target_name: str, target_id: Optional[str], cfg: ExtractionConfig):
    minimum = cfg.thresholds.min_match_score
    code = target_id.strip().lower() if target_id else ""
    for r in range(len(grid)):
        for c, value in enumerate(row_at(grid, r)):
            text = cell_text(value)
            if not text:
                continue
            # an embedded parameter code wins even on cells too terse to look like labels
            has_code = bool(code) and isinstance(value, str) and code in text.lower()
            if not has_code and not is_likely_label(value, config=cfg):
                continue
            score = match_score(target_name, target_id, value, config=cfg)
            if score >= minimum:
                yield r, c, score


def find_best_label_cell(
    grid: Grid,
    target_name: str,
    target_id: Optional[str] = None,
    *,
    config: Optional[ExtractionConfig] = None,
) -> Optional[LabelMatch]:
    """Return the highest scoring label cell at or above ``min_match_score``.

    Ties keep the first cell in row-major order.
    """

    cfg = resolve_config(config)
    if not _searchable(target_name, target_id, cfg):
        return None
    best: Optional[LabelMatch] = None
    for r, c, score in _iter_label_candidates(grid, target_name, target_id, cfg):
        if best is None or score > best.score:
            best = LabelMatch(row=r, col=c, score=score)
    return best


def find_best_match(
    grid: Grid,
    target_name: str,
    target_id: Optional[str] = None,
    *,
    config: Optional[ExtractionConfig] = None,
) -> Optional[LabelMatch]:
    """Like :func:`find_best_label_cell`, but only labels with a readable value compete."""

    cfg = resolve_config(config)
    if not _searchable(target_name, target_id, cfg):
        return None
    best: Optional[LabelMatch] = None
    for r, c, score in _iter_label_candidates(grid, target_name, target_id, cfg):
        if best is not None and score <= best.score:
            continue
        value = probe_value(grid, r, c, config=cfg)
        if value is not None:
            best = LabelMatch(row=r, col=c, score=score, value=value)
    return best


def read_row_values(
    grid: Grid,
    row: int,
    col: int,
    *,
    config: Optional[ExtractionConfig] = None,
) -> List[RowValue]:
    """Collect value-like cells right of ``col`` until ``row_value_gap`` misses in a row."""

    cfg = resolve_config(config)
    cells = row_at(grid, row)
    values: List[RowValue] = []
    misses = 0
    for c in range(col + 1, len(cells)):
        value = cells[c]
        if is_likely_value(value, config=cfg):
            values.append(RowValue(column=c, value=value))
            misses = 0
            continue
        misses += 1
        if misses >= cfg.thresholds.row_value_gap:
            break
    return values


def extract_all_parameters(
    grid: Grid,
    targets: Iterable[TargetLike],
    *,
    config: Optional[ExtractionConfig] = None,
) -> List[ExtractedValue]:
    """Find a single value per target parameter; unmatched targets are left out."""

    cfg = resolve_config(config)
    results: List[ExtractedValue] = []
    for target in as_targets(targets):
        match = find_best_match(grid, target.name, target.id, config=cfg)
        if match is None:
            continue
        results.append(
            ExtractedValue(
                parameter_id=target.id,
                original_name=target.name,
                found_value=match.value,
                confidence=match.score,
                source_cell=cell_reference(match.row, match.col),
                row=match.row,
                col=match.col,
            )
        )
    LOGGER.debug("targeted.values", extra={"found": len(results)})
    return results


def extract_all_parameters_with_columns(
    grid: Grid,
    targets: Iterable[TargetLike],
    *,
    config: Optional[ExtractionConfig] = None,
) -> List[ExtractedRowValues]:
    """Find every value on the label row of each target parameter."""

    cfg = resolve_config(config)
    results: List[ExtractedRowValues] = []
    for target in as_targets(targets):
        label = find_best_label_cell(grid, target.name, target.id, config=cfg)
        if label is None:
            continue
        values = read_row_values(grid, label.row, label.col, config=cfg)
        if not values:
            continue
        results.append(
            ExtractedRowValues(
                parameter_id=target.id,
                original_name=target.name,
                values=values,
                confidence=label.score,
                label_row=label.row,
                label_col=label.col,
            )
        )
    LOGGER.debug("targeted.rows", extra={"found": len(results)})
    return results
