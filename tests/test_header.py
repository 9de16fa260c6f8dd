from paramsheet.extraction.header import (
    HeaderAnchor,
    extract_variant_names,
    find_header_row_by_tokens,
    find_landmark_row,
    locate_header,
    refine_column_roles,
)

VARIANTS = ["Variant A", "Variant B", "Variant C", "Variant D", "Variant E"]


def _variant_sheet() -> list:
    return [
        ["Project Description"],
        [],
        ["Parameter", "Unit", "Comment", *VARIANTS],
        ["Supply Voltage", "[V]", "", 12, 12, 13, 13, 14],
        ["Brake Line Pressure", "[bar]", "max", 80, 85, 90, 95, 100],
        [],
        ["Customer Platform Variants"],
        [],
        ["Name", "Platform", "SOP"],
        *[[name, "MQB", 2026] for name in VARIANTS],
    ]


def test_variant_names_follow_the_landmark() -> None:
    grid = _variant_sheet()
    assert find_landmark_row(grid, "customer platform variants") == 6
    assert extract_variant_names(grid) == VARIANTS


def test_variant_list_stops_at_attention_and_dedupes() -> None:
    grid = [
        ["Customer Platform Variants"],
        ["Name"],
        *[[name] for name in VARIANTS],
        ["Variant A"],
        ["Attention: names below are obsolete"],
        ["Variant Z"],
    ]
    assert extract_variant_names(grid) == VARIANTS


def test_short_variant_list_is_ignored() -> None:
    grid = [["Customer Platform Variants"], ["Name"], ["Variant A"], ["Variant B"]]
    assert extract_variant_names(grid) == []


def test_variant_anchored_header() -> None:
    anchor = locate_header(_variant_sheet())

    assert anchor is not None
    assert anchor.strategy == "variants"
    assert anchor.header_row == 2
    assert anchor.param_col == 0
    assert anchor.unit_col == 1
    assert anchor.comment_col == 2
    assert [name for _, name in anchor.variant_columns()] == VARIANTS
    assert [col for col, _ in anchor.variant_columns()] == [3, 4, 5, 6, 7]


def test_token_anchored_header_reads_two_row_headers() -> None:
    grid = [
        ["Parametercheck", "Free Text", "", ""],
        ["", "", "Var1", "Var2"],
        ["Voltage", "", 12, 13],
    ]
    anchor = find_header_row_by_tokens(grid)

    assert anchor is not None
    assert anchor.header_row == 0
    assert anchor.param_col == 0
    assert anchor.comment_col == 1
    assert anchor.col_map == {2: "Var1", 3: "Var2"}


def test_no_header_anywhere() -> None:
    assert locate_header([["Voltage", 12], ["Current", 3]]) is None
    assert locate_header([]) is None


def _headerless_roles_sheet() -> list:
    rows = [
        ("Inner Diameter", "[mm]", "OK"),
        ("Outer Diameter", "[mm]", "NOK"),
        ("Supply Voltage", "[V]", "OK"),
        ("Housing Length", "[mm]", "n/a"),
        ("Spring Rate", "[N/mm]", "OK"),
        ("Seal Width", "[mm]", "OK"),
    ]
    return [
        ["Parameter", "", "", "Var1", "Var2"],
        *[[name, unit, status, 1.5, 2.5] for name, unit, status in rows],
    ]


def test_unit_and_check_columns_are_inferred_from_content() -> None:
    anchor = locate_header(_headerless_roles_sheet())

    assert anchor is not None
    assert anchor.unit_col == 1
    assert anchor.check_col == 2
    assert anchor.col_map == {3: "Var1", 4: "Var2"}


def test_refinement_needs_enough_samples() -> None:
    grid = _headerless_roles_sheet()[:4]
    anchor = HeaderAnchor(header_row=0, col_map={3: "Var1", 4: "Var2"}, param_col=0)

    refined = refine_column_roles(grid, anchor)

    assert refined.unit_col is None
    assert refined.check_col is None


def test_fixed_roles_are_exclusive_and_left_of_variants() -> None:
    for grid in (_variant_sheet(), _headerless_roles_sheet()):
        anchor = locate_header(grid)
        fixed = list(anchor.fixed_columns().values())
        assert len(fixed) == len(set(fixed))
        assert all(col > max(fixed) for col in anchor.col_map)


def test_unit_shaped_variant_names_on_the_header_row_are_kept() -> None:
    anchor = find_header_row_by_tokens([["Parameter", "S", "M", "L"], ["Spring Rate", 10, 12, 14]])

    assert anchor is not None
    assert anchor.col_map == {1: "S", 2: "M", 3: "L"}
