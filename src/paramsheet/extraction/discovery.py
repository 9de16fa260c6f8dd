"""Schema-free discovery: parameter groups and key/value blocks from layout alone."""
from __future__ import annotations

import logging
import re
from typing import Any, List, Optional, Sequence

from .cells import (
    Grid,
    cell_at,
    is_likely_label,
    is_likely_value,
    is_parametercheck_row,
    is_unit_like,
    keyword_role,
    non_empty_cols,
    row_at,
)
from .header import find_landmark_row
from .ids import ParameterIdFactory
from .matrix import DEFAULT_GROUP_NAME
from .models import KeyValuePair, ParameterGroup, ParameterRow
from .normalize import cell_text, normalize_text
from .options import ExtractionConfig, resolve_config
from .targeted import locate_value

__all__ = ["discover_parameter_groups", "extract_key_values", "get_column_header"]

LOGGER = logging.getLogger(__name__)

_NUMBERED_TITLE_RE = re.compile(r"^\d+(\.\d+)*\.?\s")
_TITLE_NEIGHBOURS = 3


def _first_label_col(row: Sequence[Any], cfg: ExtractionConfig) -> int:
    for index, value in enumerate(row):
        if is_likely_label(value, config=cfg):
            return index
    return -1


def _first_key_col(row: Sequence[Any], normalized: Sequence[str], cfg: ExtractionConfig) -> int:
    # generic words such as "Customer" are fine as keys here
    for index, value in enumerate(row):
        if is_likely_label(value, config=cfg) or (
            isinstance(value, str) and normalized[index] in cfg.vocabulary.garbage_labels
        ):
            return index
    return -1


def _is_matrix_header(row: Sequence[Any], cfg: ExtractionConfig) -> bool:
    # a lone keyword cell such as "Status" is an ordinary description key
    if is_parametercheck_row(row, config=cfg):
        return True
    roles = {keyword_role(value, config=cfg) for value in row if cell_text(value)}
    roles.discard(None)
    return len(roles) >= 2


def _looks_like_group_title(row: Sequence[Any], col: int, text: str, cfg: ExtractionConfig) -> bool:
    limits = cfg.thresholds
    neighbours = row[col + 1 : col + 1 + _TITLE_NEIGHBOURS]
    if any(cell_text(value) for value in neighbours):
        return False
    tokens = normalize_text(text, "strong", config=cfg).split(" ")
    if len(text) > limits.max_label_chars or len(tokens) > limits.max_label_tokens:
        return False
    return bool(_NUMBERED_TITLE_RE.match(text)) or len(text) < limits.group_title_max_chars


def discover_parameter_groups(
    grid: Grid, *, config: Optional[ExtractionConfig] = None
) -> List[ParameterGroup]:
    """Synthesize parameter groups from positional heuristics only.

    A label without a value and without filled neighbours opens a new group
    ("1. Vehicle Data"); a label with a value next to (or below) it becomes a
    parameter whose probed value is kept as ``default_value``.
    """

    cfg = resolve_config(config)
    make_id = ParameterIdFactory(config=cfg)
    groups: List[ParameterGroup] = []
    current = ParameterGroup(group_name=DEFAULT_GROUP_NAME)

    for r in range(len(grid)):
        row = row_at(grid, r)
        col = _first_label_col(row, cfg)
        if col < 0:
            continue
        text = cell_text(row[col])
        located = locate_value(grid, r, col, config=cfg)
        if located is not None and located[0] != r and is_likely_label(located[2], config=cfg):
            # the label of the next row is not this row's value
            located = None

        if located is None:
            if _looks_like_group_title(row, col, text, cfg):
                if current.parameters:
                    groups.append(current)
                current = ParameterGroup(group_name=text)
            continue

        value_row, value_col, value = located
        unit = ""
        beyond = cell_at(grid, r, col + 2)
        if value_col == col + 1 and is_unit_like(value, config=cfg) and is_likely_value(beyond, config=cfg):
            # "Mass | kg | 1850": the unit cell sits between label and value
            unit, value = cell_text(value), beyond
        elif value_row == r and value_col > col + 1:
            unit = cell_text(row[col + 1])
        is_number = isinstance(value, (int, float)) and not isinstance(value, bool)
        current.parameters.append(
            ParameterRow(
                id=make_id(text, r, col),
                name=text,
                unit=unit,
                type="number" if is_number else "text",
                default_value=value,
                source_row=r,
                source_col=col,
            )
        )

    if current.parameters:
        groups.append(current)
    LOGGER.debug("discovery.groups", extra={"groups": len(groups)})
    return groups


def extract_key_values(grid: Grid, *, config: Optional[ExtractionConfig] = None) -> List[KeyValuePair]:
    """Read the key/value block below the "project description" landmark.

    Stops at a stop phrase, at a matrix header row (a parametercheck divider
    or two header keywords) or after ``key_value_empty_run`` empty rows. Keys are de-duplicated on their
    normalised form, first occurrence wins.
    """

    cfg = resolve_config(config)
    landmarks = cfg.vocabulary.landmarks
    anchor = find_landmark_row(grid, landmarks.project_description, config=cfg)
    if anchor < 0:
        return []

    stops = [
        phrase
        for phrase in (normalize_text(stop, "strong", config=cfg) for stop in landmarks.key_value_stops)
        if phrase
    ]
    pairs: List[KeyValuePair] = []
    seen = set()
    empty_run = 0
    for r in range(anchor + 1, len(grid)):
        row = row_at(grid, r)
        if not non_empty_cols(row):
            empty_run += 1
            if empty_run >= cfg.thresholds.key_value_empty_run:
                break
            continue
        empty_run = 0
        normalized_cells = [normalize_text(value, "strong", config=cfg) for value in row]
        if any(stop in cell for cell in normalized_cells for stop in stops):
            break
        if _is_matrix_header(row, cfg):
            break

        key_col = _first_key_col(row, normalized_cells, cfg)
        if key_col < 0:
            continue
        value = next(
            (candidate for candidate in row[key_col + 1 :] if is_likely_value(candidate, config=cfg)),
            None,
        )
        if value is None:
            continue
        key = normalized_cells[key_col]
        if not key or key in seen:
            continue
        seen.add(key)
        pairs.append(KeyValuePair(key=cell_text(row[key_col]), value=value, row=r))

    LOGGER.debug("discovery.key_values", extra={"pairs": len(pairs)})
    return pairs


def get_column_header(
    grid: Grid, col: int, start_row: int, *, config: Optional[ExtractionConfig] = None
) -> str:
    """Return the nearest label-like cell in the three rows above ``start_row``."""

    cfg = resolve_config(config)
    for r in range(start_row - 1, max(start_row - 4, -1), -1):
        value = cell_at(grid, r, col)
        if is_likely_label(value, config=cfg):
            return cell_text(value)
    return ""
