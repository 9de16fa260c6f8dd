"""Turn the rows below a located header into parameter groups and variant values."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .cells import (
    Grid,
    is_likely_label,
    is_likely_value,
    is_parametercheck_row,
    is_separator_like_row,
    non_empty_cols,
    row_at,
)
from .header import HeaderAnchor, locate_header
from .ids import ParameterIdFactory
from .models import MatrixResult, ParameterGroup, ParameterRow, Variant
from .normalize import cell_text, normalize_text
from .options import ExtractionConfig, resolve_config

__all__ = [
    "DEFAULT_GROUP_NAME",
    "is_category_row",
    "normalize_check_status",
    "parse_matrix",
    "resolve_parameter_name",
]

LOGGER = logging.getLogger(__name__)

DEFAULT_GROUP_NAME = "General Parameters"


def normalize_check_status(value: Any, *, config: Optional[ExtractionConfig] = None) -> str:
    """Map a check cell onto ``ok``/``nok``/``na`` or a rulebook token.

    Unknown non-empty text is returned unchanged so new status words survive.
    """

    cfg = resolve_config(config)
    text = cell_text(value)
    if not text:
        return ""
    if text.upper() in cfg.vocabulary.rulebook_tokens:
        return text.upper()
    basic = normalize_text(text, "basic", config=cfg)
    for canonical, aliases in cfg.vocabulary.check_status_aliases:
        if basic in aliases:
            return canonical
    return text


def is_category_row(grid: Grid, index: int, *, config: Optional[ExtractionConfig] = None) -> bool:
    """Return ``True`` for a lone label cell directly below a separator-like row.

    A single filled cell is not enough on its own: parameter rows without
    values look the same, so the preceding row must be a parametercheck
    divider or carry a header keyword.
    """

    cfg = resolve_config(config)
    row = row_at(grid, index)
    filled = non_empty_cols(row)
    if len(filled) != 1 or not is_likely_label(row[filled[0]], config=cfg):
        return False
    if index == 0:
        return False
    return is_separator_like_row(row_at(grid, index - 1), config=cfg)


def resolve_parameter_name(
    row: Sequence[Any],
    anchor: HeaderAnchor,
    *,
    config: Optional[ExtractionConfig] = None,
) -> Optional[Tuple[int, str]]:
    """Return ``(column, name)`` of the parameter label in ``row``, if any."""

    cfg = resolve_config(config)
    if anchor.param_col is not None and anchor.param_col < len(row):
        value = row[anchor.param_col]
        if is_likely_label(value, config=cfg):
            return anchor.param_col, cell_text(value)
    for c in range(min(cfg.thresholds.name_scan_columns, len(row))):
        if c in anchor.col_map:
            continue
        if is_likely_label(row[c], config=cfg):
            return c, cell_text(row[c])
    return None


def _cell_string(row: Sequence[Any], col: Optional[int]) -> str:
    if col is None or col >= len(row):
        return ""
    return cell_text(row[col])


def parse_matrix(
    grid: Grid,
    *,
    config: Optional[ExtractionConfig] = None,
    anchor: Optional[HeaderAnchor] = None,
) -> Optional[MatrixResult]:
    """Parse the parameter x variant matrix of ``grid``.

    Returns ``None`` when no header row can be located. Rows below the header
    are read twice: first to build groups and parameters, then to fill the
    variant value maps for every row that produced a parameter.
    """

    cfg = resolve_config(config)
    if anchor is None:
        anchor = locate_header(grid, config=cfg)
    if anchor is None:
        return None

    garbage = cfg.vocabulary.garbage_labels
    make_id = ParameterIdFactory(config=cfg)
    groups: List[ParameterGroup] = []
    current = ParameterGroup(group_name=DEFAULT_GROUP_NAME)
    row_parameters: Dict[int, str] = {}

    for r in range(anchor.header_row + 1, len(grid)):
        row = row_at(grid, r)
        if not row or is_parametercheck_row(row, config=cfg):
            continue
        if is_category_row(grid, r, config=cfg):
            if current.parameters:
                groups.append(current)
            current = ParameterGroup(group_name=cell_text(row[non_empty_cols(row)[0]]))
            continue

        located = resolve_parameter_name(row, anchor, config=cfg)
        if located is None:
            continue
        col, name = located
        normalized = normalize_text(name, "strong", config=cfg)
        if not normalized or normalized in garbage:
            continue

        parameter = ParameterRow(
            id=make_id(name, r, col),
            name=name,
            unit=_cell_string(row, anchor.unit_col),
            user_comment=_cell_string(row, anchor.comment_col),
            check_status=normalize_check_status(_cell_string(row, anchor.check_col), config=cfg),
            source_row=r,
            source_col=col,
        )
        current.parameters.append(parameter)
        row_parameters[r] = parameter.id

    if current.parameters:
        groups.append(current)

    columns = anchor.variant_columns()
    variants = [
        Variant(id=f"v{index}", name=name or f"Variant {index}")
        for index, (_, name) in enumerate(columns, start=1)
    ]
    for r, parameter_id in row_parameters.items():
        row = row_at(grid, r)
        for variant, (col, _) in zip(variants, columns):
            if col < len(row) and is_likely_value(row[col], config=cfg):
                variant.values[parameter_id] = row[col]

    LOGGER.debug(
        "matrix.parsed",
        extra={
            "header_row": anchor.header_row,
            "groups": len(groups),
            "parameters": len(row_parameters),
            "variants": len(variants),
        },
    )
    return MatrixResult(parameter_groups=groups, variants=variants)
