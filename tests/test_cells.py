import pytest

from paramsheet.extraction.cells import (
    cell_at,
    is_check_like,
    is_likely_label,
    is_likely_value,
    is_parametercheck_row,
    is_separator_like_row,
    is_unit_like,
    keyword_role,
    row_at,
)


@pytest.mark.parametrize(
    "value",
    ["Voltage", "Inner Diameter [mm]", "1. Vehicle Parameters", "Brake Line Pressure"],
)
def test_is_likely_label_accepts_names(value) -> None:
    assert is_likely_label(value)


@pytest.mark.parametrize(
    "value",
    [
        None,
        "",
        "x",
        12,
        True,
        "12.5",
        "1-2/3",
        "Unit",
        "Kommentar",
        "Please check",
        "A1",
        "a" * 81,
        "one two three four five six seven eight nine ten eleven",
    ],
)
def test_is_likely_label_rejects_noise(value) -> None:
    assert not is_likely_label(value)


@pytest.mark.parametrize("value", [12, 0, 3.5, False, "12 V", "OK", "Type B", "steel"])
def test_is_likely_value_accepts_data(value) -> None:
    assert is_likely_value(value)


@pytest.mark.parametrize("value", [None, "", "  ", "-", "N/A", "na", "TBD", "none", "x" * 61])
def test_is_likely_value_rejects_placeholders(value) -> None:
    assert not is_likely_value(value)


def test_long_label_shaped_text_is_not_a_value() -> None:
    text = "Maximum Brake Line Pressure"
    assert len(text) > 18
    assert is_likely_label(text)
    assert not is_likely_value(text)
    assert is_likely_value("Brake Pressure")


@pytest.mark.parametrize("value, expected", [("[mm]", True), ("(-)", True), ("bar", True), ("%", True), ("OK", False), ("[ok]", False), ("Voltage", False), ("[very long unit]", False)])
def test_is_unit_like(value, expected) -> None:
    assert is_unit_like(value) is expected


@pytest.mark.parametrize("value, expected", [("OK", True), ("nok", True), ("N/A", True), ("yes", True), ("[mm]", False), (None, False)])
def test_is_check_like(value, expected) -> None:
    assert is_check_like(value) is expected


@pytest.mark.parametrize(
    "value, role",
    [
        ("Parametercheck", "param"),
        ("Parameter", "param"),
        ("Free Text", "comment"),
        ("Bemerkung", "comment"),
        ("Prüfung", "check"),
        ("Unit", "unit"),
        ("Einheit", "unit"),
        ("Check", "check"),
        ("Status", "check"),
        ("Unit [-]", "unit"),
        ("Var1", None),
        ("Parameter of the rear axle spring preload at rest", None),
    ],
)
def test_keyword_role(value, role) -> None:
    assert keyword_role(value) == role


def test_parametercheck_and_separator_rows() -> None:
    assert is_parametercheck_row(["", " Parametercheck "])
    assert is_parametercheck_row(["Parameter-Check 2"])
    assert not is_parametercheck_row(["Voltage", 12])
    assert is_separator_like_row(["Name", "Free Text"])
    assert not is_separator_like_row(["Voltage", "", 12, 13])


def test_jagged_and_malformed_rows_are_tolerated() -> None:
    grid = [["a", "b"], None, "loose text", []]
    assert row_at(grid, 1) == ()
    assert row_at(grid, 2) == ("loose text",)
    assert row_at(grid, 9) == ()
    assert cell_at(grid, 0, 5) is None
    assert cell_at(grid, 3, 0) is None
