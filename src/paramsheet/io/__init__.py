"""Spreadsheet decoding: turn workbook files into in-memory grids."""

from .workbook import SUPPORTED_EXTENSIONS, UnsupportedSpreadsheetError, list_sheets, load_grid

__all__ = ["SUPPORTED_EXTENSIONS", "UnsupportedSpreadsheetError", "list_sheets", "load_grid"]
