import pytest

from paramsheet.extraction.ids import ParameterIdFactory
from paramsheet.extraction.matrix import (
    DEFAULT_GROUP_NAME,
    is_category_row,
    normalize_check_status,
    parse_matrix,
)


def _vehicle_sheet() -> list:
    return [
        ["Parametercheck", "Free Text", "Var1", "Var2"],
        ["1. Vehicle Parameters"],
        ["Parametercheck"],
        ["Voltage", "", 12, 13],
    ]


def test_category_row_opens_a_group_and_values_fill_variants() -> None:
    result = parse_matrix(_vehicle_sheet())

    assert result is not None
    assert [group.group_name for group in result.parameter_groups] == ["1. Vehicle Parameters"]
    (parameter,) = result.parameter_groups[0].parameters
    assert parameter.name == "Voltage"
    assert [(variant.id, variant.name) for variant in result.variants] == [("v1", "Var1"), ("v2", "Var2")]
    assert result.variants[0].values == {parameter.id: 12}
    assert result.variants[1].values == {parameter.id: 13}


def test_payload_uses_the_application_keys() -> None:
    payload = parse_matrix(_vehicle_sheet()).to_payload()

    group = payload["parameterGroups"][0]
    assert group["groupName"] == "1. Vehicle Parameters"
    parameter = group["parameters"][0]
    assert {"id", "name", "unit", "userComment", "checkStatus", "type"} <= set(parameter)
    assert payload["variants"][0]["values"] == {parameter["id"]: 12}


@pytest.mark.parametrize("placeholder", ["-", "N/A", "TBD", "none", ""])
def test_placeholders_never_reach_the_value_map(placeholder) -> None:
    grid = _vehicle_sheet()
    grid[3] = ["Voltage", "", placeholder, 13]

    result = parse_matrix(grid)

    assert result.variants[0].values == {}
    assert list(result.variants[1].values.values()) == [13]


def test_lone_cell_without_separator_is_not_a_category() -> None:
    grid = _vehicle_sheet() + [["Lonely Label"], ["Current", "", 3, 4]]

    assert not is_category_row(grid, 4)
    result = parse_matrix(grid)
    assert [group.group_name for group in result.parameter_groups] == ["1. Vehicle Parameters"]
    names = [parameter.name for parameter in result.iter_parameters()]
    assert names == ["Voltage", "Lonely Label", "Current"]


def test_rows_before_any_category_land_in_the_default_group() -> None:
    grid = [
        ["Parameter", "Comment", "Var1"],
        ["Wheel Base", "long", 2700],
        ["Track Width", "", 1550],
    ]
    result = parse_matrix(grid)

    assert [group.group_name for group in result.parameter_groups] == [DEFAULT_GROUP_NAME]
    assert [parameter.user_comment for parameter in result.iter_parameters()] == ["long", ""]


def test_garbage_rows_contribute_nothing() -> None:
    grid = _vehicle_sheet() + [["Unit", "", 1, 2], ["Values", "", 3, 4]]
    result = parse_matrix(grid)

    assert [parameter.name for parameter in result.iter_parameters()] == ["Voltage"]
    known = set(result.parameter_index())
    for variant in result.variants:
        assert set(variant.values) <= known


def test_unit_comment_and_check_columns_are_read() -> None:
    grid = [
        ["Parameter", "Unit", "Comment", "Check", "Var1", "Var2"],
        ["Supply Voltage", "[V]", "nominal", "OK", 12, 13],
        ["Brake Line Pressure", "[bar]", "", "not ok", 80, 85],
        ["Pedal Travel", "[mm]", None, "RD", 120, 118],
    ]
    result = parse_matrix(grid)
    rows = list(result.iter_parameters())

    assert [row.unit for row in rows] == ["[V]", "[bar]", "[mm]"]
    assert [row.user_comment for row in rows] == ["nominal", "", ""]
    assert [row.check_status for row in rows] == ["ok", "nok", "RD"]
    assert result.variants[1].values[rows[1].id] == 85


def test_matrix_parse_is_deterministic() -> None:
    grid = _vehicle_sheet() + [["Current", "", 3, 4], ["Current", "", 5, 6]]

    first = parse_matrix(grid).to_payload()
    second = parse_matrix(grid).to_payload()

    assert first == second
    ids = [parameter["id"] for parameter in first["parameterGroups"][0]["parameters"]]
    assert len(ids) == len(set(ids)) == 3


def test_no_header_returns_none() -> None:
    assert parse_matrix([["Voltage", 12], ["Current", 3]]) is None


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("OK", "ok"),
        ("i.O.", "ok"),
        ("NOK", "nok"),
        ("Not OK", "nok"),
        ("n/a", "na"),
        ("r", "R"),
        ("o", "O"),
        ("", ""),
        (None, ""),
        ("pending review", "pending review"),
    ],
)
def test_normalize_check_status(raw, expected) -> None:
    assert normalize_check_status(raw) == expected


def test_id_factory_is_deterministic_and_unique() -> None:
    first, second = ParameterIdFactory(), ParameterIdFactory()
    ids = [first("Supply Voltage", 3, 0), first("Supply Voltage", 3, 0)]
    again = [second("Supply Voltage", 3, 0), second("Supply Voltage", 3, 0)]

    assert ids == again
    assert len(set(ids)) == 2
    assert ids[0].startswith("supply_voltage_")


def test_single_letter_variant_headers_are_kept() -> None:
    result = parse_matrix([["Parameter", "Comment", "A", "B", "C"], ["Voltage", "", 1, 2, 3]])

    assert result is not None
    (parameter,) = result.parameter_groups[0].parameters
    assert [variant.name for variant in result.variants] == ["A", "B", "C"]
    assert [variant.values for variant in result.variants] == [
        {parameter.id: 1},
        {parameter.id: 2},
        {parameter.id: 3},
    ]
