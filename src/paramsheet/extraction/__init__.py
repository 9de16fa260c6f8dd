"""Heuristic extraction of parameter matrices from loosely structured sheets.

The package works on an in-memory grid (rows of cell values) and never raises
on sheet content: missing anchors yield ``None`` or empty collections.
:class:`SheetExtractor` bundles every mode; the functions below can also be
used on their own.
"""

from .cells import Grid, is_check_like, is_likely_label, is_likely_value, is_unit_like
from .discovery import discover_parameter_groups, extract_key_values, get_column_header
from .engine import SheetExtractor
from .header import (
    HeaderAnchor,
    extract_variant_names,
    find_header_row_by_tokens,
    find_matrix_header_row,
    locate_header,
    refine_column_roles,
)
from .ids import ParameterIdFactory
from .matching import match_score, token_set_ratio
from .matrix import DEFAULT_GROUP_NAME, is_category_row, normalize_check_status, parse_matrix
from .models import (
    ExtractedRowValues,
    ExtractedValue,
    KeyValuePair,
    MatrixResult,
    ParameterGroup,
    ParameterRow,
    ParameterTarget,
    RowValue,
    Variant,
)
from .normalize import normalize_text, tokenize
from .options import ExtractionConfig
from .targeted import (
    extract_all_parameters,
    extract_all_parameters_with_columns,
    find_best_label_cell,
    find_best_match,
)
from .vocabulary import Vocabulary, default_vocabulary, load_vocabulary

__all__ = [
    "Grid",
    "SheetExtractor",
    "ExtractionConfig",
    "Vocabulary",
    "default_vocabulary",
    "load_vocabulary",
    "normalize_text",
    "tokenize",
    "token_set_ratio",
    "match_score",
    "is_likely_label",
    "is_likely_value",
    "is_unit_like",
    "is_check_like",
    "HeaderAnchor",
    "extract_variant_names",
    "find_matrix_header_row",
    "find_header_row_by_tokens",
    "refine_column_roles",
    "locate_header",
    "DEFAULT_GROUP_NAME",
    "is_category_row",
    "normalize_check_status",
    "parse_matrix",
    "ParameterIdFactory",
    "extract_all_parameters",
    "extract_all_parameters_with_columns",
    "find_best_label_cell",
    "find_best_match",
    "discover_parameter_groups",
    "extract_key_values",
    "get_column_header",
    "ExtractedRowValues",
    "ExtractedValue",
    "KeyValuePair",
    "MatrixResult",
    "ParameterGroup",
    "ParameterRow",
    "ParameterTarget",
    "RowValue",
    "Variant",
]
