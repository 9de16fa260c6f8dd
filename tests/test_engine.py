import json
import logging
from pathlib import Path

from paramsheet.extraction import ParameterTarget, SheetExtractor
from paramsheet.utils.logging import configure_json_logger, flush_handlers

GRID = [
    ["Project Description"],
    ["Project Name", "Alpha Brake"],
    [],
    ["Parametercheck", "Free Text", "Var1", "Var2"],
    ["1. Vehicle Parameters"],
    ["Parametercheck"],
    ["Voltage", "", 12, 13],
    ["Brake Line Pressure", "max", 80, 85],
]


def test_facade_runs_every_mode() -> None:
    extractor = SheetExtractor(GRID)

    anchor = extractor.locate_header()
    assert anchor.header_row == 3
    assert extractor.locate_header() is anchor

    result = extractor.parse_matrix()
    assert [row.name for row in result.iter_parameters()] == ["Voltage", "Brake Line Pressure"]
    assert extractor.variant_names() == []

    rows = extractor.extract_all_parameters_with_columns(result.parameter_groups)
    assert [[value.value for value in row.values] for row in rows] == [[12, 13], ["max", 80, 85]]

    (found,) = extractor.extract_all_parameters([ParameterTarget(id="p_volt", name="Voltage")])
    assert found.found_value == 12
    assert [(pair.key, pair.value) for pair in extractor.extract_key_values()] == [("Project Name", "Alpha Brake")]
    assert extractor.get_column_header(2, 6) == "Var1"


def test_facade_returns_none_without_header() -> None:
    extractor = SheetExtractor([["Wheel Base", 2700]])

    assert extractor.parse_matrix() is None
    assert [group.group_name for group in extractor.discover_parameter_groups()] == ["General Parameters"]


def test_facade_logs_with_one_trace_id(tmp_path: Path) -> None:
    log_file = tmp_path / "engine.jsonl"
    logger = configure_json_logger(log_file)

    extractor = SheetExtractor(GRID, logger=logger)
    extractor.parse_matrix()
    extractor.extract_key_values()
    flush_handlers(logger)

    lines = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
    assert [line["event"] for line in lines] == ["extract.matrix", "extract.key_values"]
    assert {line["trace_id"] for line in lines} == {extractor.trace_id}
    assert lines[0]["parameters"] == 2
    configure_json_logger(None, level=logging.INFO)
