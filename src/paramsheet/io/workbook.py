"""Read ``.xlsx``/``.xlsm`` workbooks and ``.csv`` exports into jagged grids."""
from __future__ import annotations

import csv
import logging
import re
from pathlib import Path
from typing import Any, List, Optional, Sequence

from openpyxl import load_workbook

__all__ = ["SUPPORTED_EXTENSIONS", "UnsupportedSpreadsheetError", "list_sheets", "load_grid"]

LOGGER = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".xlsx", ".xlsm", ".csv")
_WORKBOOK_EXTENSIONS = (".xlsx", ".xlsm")

_INT_RE = re.compile(r"^[+-]?\d+$")
_FLOAT_RE = re.compile(r"^[+-]?(\d+\.\d*|\.\d+|\d+)([eE][+-]?\d+)?$")
_CSV_DELIMITERS = (",", ";", "\t")


class UnsupportedSpreadsheetError(ValueError):
    """Raised for files outside the extension allow-list."""


def _check_extension(path: Path) -> str:
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_EXTENSIONS:
        raise UnsupportedSpreadsheetError(
            f"Unsupported spreadsheet '{path.name}': expected one of {', '.join(SUPPORTED_EXTENSIONS)}"
        )
    return suffix


def _trim(row: Sequence[Any]) -> List[Any]:
    cells = list(row)
    while cells and (cells[-1] is None or (isinstance(cells[-1], str) and not cells[-1].strip())):
        cells.pop()
    return cells


def _csv_cell(text: str) -> Any:
    stripped = text.strip()
    if not stripped:
        return None
    if _INT_RE.match(stripped):
        return int(stripped)
    if _FLOAT_RE.match(stripped):
        return float(stripped)
    return text


def _sniff_delimiter(first_line: str) -> str:
    counts = {delimiter: first_line.count(delimiter) for delimiter in _CSV_DELIMITERS}
    best = max(counts, key=counts.get)
    return best if counts[best] else ","


def _read_csv(path: Path) -> List[List[Any]]:
    with path.open("r", encoding="utf-8-sig", newline="") as handle:
        delimiter = _sniff_delimiter(handle.readline())
        handle.seek(0)
        return [_trim([_csv_cell(cell) for cell in row]) for row in csv.reader(handle, delimiter=delimiter)]


def list_sheets(path: str | Path) -> List[str]:
    """Return the worksheet names of a workbook (a single pseudo-sheet for CSV)."""

    path = Path(path)
    if _check_extension(path) not in _WORKBOOK_EXTENSIONS:
        return [path.stem]
    workbook = load_workbook(path, read_only=True, data_only=True)
    try:
        return list(workbook.sheetnames)
    finally:
        workbook.close()


def load_grid(path: str | Path, sheet: Optional[str] = None) -> List[List[Any]]:
    """Decode ``path`` into a list of rows with trailing empty cells removed.

    Workbooks are read with cached formula results (``data_only``); ``sheet``
    selects a worksheet by name and defaults to the active one. CSV files
    ignore ``sheet`` and have numeric text converted to numbers.
    """

    path = Path(path)
    suffix = _check_extension(path)
    if not path.exists():
        raise FileNotFoundError(f"Spreadsheet '{path}' does not exist")

    if suffix not in _WORKBOOK_EXTENSIONS:
        grid = _read_csv(path)
    else:
        workbook = load_workbook(path, read_only=True, data_only=True)
        try:
            if sheet is None:
                worksheet = workbook.active
            elif sheet in workbook.sheetnames:
                worksheet = workbook[sheet]
            else:
                raise ValueError(
                    f"Sheet '{sheet}' not found in '{path.name}'; available: {', '.join(workbook.sheetnames)}"
                )
            grid = [_trim(row) for row in worksheet.iter_rows(values_only=True)]
        finally:
            workbook.close()

    LOGGER.debug("io.grid_loaded", extra={"path": str(path), "rows": len(grid)})
    return grid
