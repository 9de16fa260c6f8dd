from pathlib import Path

import pytest
from openpyxl import Workbook

from paramsheet.io import UnsupportedSpreadsheetError, list_sheets, load_grid


def _workbook(path: Path) -> Path:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Matrix"
    sheet.append(["Parametercheck", "Free Text", "Var1", "Var2", None])
    sheet.append(["Voltage", None, 12, 13.5])
    extra = workbook.create_sheet("Notes")
    extra.append(["Project Description"])
    workbook.save(path)
    return path


def test_xlsx_rows_are_trimmed(tmp_path: Path) -> None:
    path = _workbook(tmp_path / "sheet.xlsx")

    assert list_sheets(path) == ["Matrix", "Notes"]
    grid = load_grid(path)
    assert grid[0] == ["Parametercheck", "Free Text", "Var1", "Var2"]
    assert grid[1] == ["Voltage", None, 12, 13.5]
    assert load_grid(path, sheet="Notes") == [["Project Description"]]


def test_unknown_sheet_is_reported(tmp_path: Path) -> None:
    path = _workbook(tmp_path / "sheet.xlsx")

    with pytest.raises(ValueError, match="Missing"):
        load_grid(path, sheet="Missing")


def test_csv_cells_are_typed(tmp_path: Path) -> None:
    path = tmp_path / "sheet.csv"
    path.write_text("Parameter;Unit;Var1\nVoltage;[V];12\nGain;;0.5\n\n", encoding="utf-8")

    assert list_sheets(path) == ["sheet"]
    assert load_grid(path) == [
        ["Parameter", "Unit", "Var1"],
        ["Voltage", "[V]", 12],
        ["Gain", None, 0.5],
        [],
    ]


@pytest.mark.parametrize("name", ["sheet.xls", "sheet.ods", "notes.txt"])
def test_extension_allow_list(tmp_path: Path, name: str) -> None:
    path = tmp_path / name
    path.write_text("x", encoding="utf-8")

    with pytest.raises(UnsupportedSpreadsheetError):
        load_grid(path)
