"""High level entry point bundling every extraction mode over one grid."""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from ..utils.logging import generate_trace_id, log_event
from .cells import Grid
from .discovery import discover_parameter_groups, extract_key_values, get_column_header
from .header import HeaderAnchor, extract_variant_names, locate_header
from .matrix import parse_matrix
from .models import ExtractedRowValues, ExtractedValue, KeyValuePair, MatrixResult, ParameterGroup
from .options import ExtractionConfig, resolve_config
from .targeted import TargetLike, as_targets, extract_all_parameters, extract_all_parameters_with_columns

__all__ = ["SheetExtractor"]

_UNSET = object()


class SheetExtractor:
    """Run the matrix parser, targeted lookups and discovery over one grid.

    The grid is never modified. The located header is computed once and
    reused by :meth:`parse_matrix` and :meth:`locate_header`. Every call emits
    a structured event on ``logger`` sharing the extractor's trace id.
    """

    def __init__(
        self,
        grid: Grid,
        config: Optional[ExtractionConfig] = None,
        logger: Optional[logging.Logger] = None,
        trace_id: Optional[str] = None,
    ) -> None:
        self.grid = grid
        self.config = resolve_config(config)
        self.logger = logger or logging.getLogger("paramsheet")
        self.trace_id = trace_id or generate_trace_id()
        self._anchor = _UNSET

    def _log(self, event: str, **fields) -> None:
        log_event(self.logger, event, trace_id=self.trace_id, rows=len(self.grid), **fields)

    def locate_header(self) -> Optional[HeaderAnchor]:
        if self._anchor is _UNSET:
            self._anchor = locate_header(self.grid, config=self.config)
        return self._anchor

    def variant_names(self) -> List[str]:
        names = extract_variant_names(self.grid, config=self.config)
        self._log("extract.variants", variants=len(names))
        return names

    def parse_matrix(self) -> Optional[MatrixResult]:
        """Return the parameter x variant matrix, or ``None`` when no header row exists."""

        anchor = self.locate_header()
        if anchor is None:
            self._log("extract.matrix.no_header", level=logging.WARNING)
            return None
        result = parse_matrix(self.grid, config=self.config, anchor=anchor)
        self._log(
            "extract.matrix",
            header_row=anchor.header_row,
            strategy=anchor.strategy,
            groups=len(result.parameter_groups),
            parameters=sum(len(group.parameters) for group in result.parameter_groups),
            variants=len(result.variants),
        )
        return result

    def extract_all_parameters(self, targets: Iterable[TargetLike]) -> List[ExtractedValue]:
        flat = as_targets(targets)
        found = extract_all_parameters(self.grid, flat, config=self.config)
        self._log("extract.targeted", targets=len(flat), found=len(found))
        return found

    def extract_all_parameters_with_columns(self, targets: Iterable[TargetLike]) -> List[ExtractedRowValues]:
        flat = as_targets(targets)
        found = extract_all_parameters_with_columns(self.grid, flat, config=self.config)
        self._log("extract.targeted_rows", targets=len(flat), found=len(found))
        return found

    def discover_parameter_groups(self) -> List[ParameterGroup]:
        groups = discover_parameter_groups(self.grid, config=self.config)
        self._log(
            "extract.discover",
            groups=len(groups),
            parameters=sum(len(group.parameters) for group in groups),
        )
        return groups

    def extract_key_values(self) -> List[KeyValuePair]:
        pairs = extract_key_values(self.grid, config=self.config)
        self._log("extract.key_values", pairs=len(pairs))
        return pairs

    def get_column_header(self, col: int, start_row: int) -> str:
        return get_column_header(self.grid, col, start_row, config=self.config)
