"""CLI entrypoints for the extraction modes."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from pydantic import ValidationError

from ..config import get_settings
from ..extraction import ParameterGroup, ParameterTarget, SheetExtractor
from ..extraction.targeted import TargetLike
from ..io import UnsupportedSpreadsheetError, load_grid
from ..utils.logging import configure_json_logger, flush_handlers, generate_trace_id, log_event

__all__ = [
    "describe_command",
    "discover_command",
    "matrix_command",
    "targeted_command",
    "variants_command",
]


def _resolve_log_file(log_file: Optional[Path]) -> Optional[Path]:
    return log_file if log_file is not None else get_settings().log_path


def _open_sheet(path: Path, sheet: Optional[str], log_file: Optional[Path], command: str):
    logger = configure_json_logger(_resolve_log_file(log_file))
    trace_id = generate_trace_id()
    log_event(logger, f"cli.{command}.start", trace_id=trace_id, input=str(path), sheet=sheet)
    try:
        grid = load_grid(path, sheet=sheet)
    except (UnsupportedSpreadsheetError, ValueError) as exc:
        log_event(logger, f"cli.{command}.error", trace_id=trace_id, error=str(exc))
        flush_handlers(logger)
        raise typer.BadParameter(str(exc), param_hint="FILE") from exc
    return SheetExtractor(grid, logger=logger, trace_id=trace_id)


def _emit(payload: Any, output: Optional[Path]) -> None:
    text = json.dumps(payload, indent=2, ensure_ascii=False, default=str)
    if output is None:
        typer.echo(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text + "\n", encoding="utf-8")
    typer.echo(json.dumps({"output": str(output)}, indent=2, ensure_ascii=False))


def _finish(extractor: SheetExtractor, command: str, **fields: Any) -> None:
    log_event(extractor.logger, f"cli.{command}.completed", trace_id=extractor.trace_id, **fields)
    flush_handlers(extractor.logger)


def _load_targets(path: Path) -> List[TargetLike]:
    """Read targets from a JSON list of ``{id, name}`` items, groups, or a matrix payload."""

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"Invalid JSON in {path}: {exc}", param_hint="--targets") from exc

    if isinstance(payload, dict):
        payload = payload.get("parameterGroups", payload.get("parameter_groups", [payload]))
    if not isinstance(payload, list):
        raise typer.BadParameter("Targets must be a JSON list", param_hint="--targets")

    targets: List[TargetLike] = []
    try:
        for item in payload:
            if isinstance(item, dict) and "parameters" in item:
                targets.append(ParameterGroup.model_validate(item))
            else:
                targets.append(ParameterTarget.model_validate(item))
    except ValidationError as exc:
        raise typer.BadParameter(f"Invalid target entry: {exc}", param_hint="--targets") from exc
    return targets


_FILE_ARGUMENT = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Spreadsheet (.xlsx, .xlsm, .csv)")
_SHEET_OPTION = typer.Option(None, "--sheet", help="Worksheet name (defaults to the active sheet)")
_OUTPUT_OPTION = typer.Option(None, "--output", dir_okay=False, help="Write the JSON result to this file")
_LOG_OPTION = typer.Option(None, "--log-file", dir_okay=False, help="Optional JSONL log path")


def matrix_command(
    path: Path = _FILE_ARGUMENT,
    sheet: Optional[str] = _SHEET_OPTION,
    output: Optional[Path] = _OUTPUT_OPTION,
    log_file: Optional[Path] = _LOG_OPTION,
) -> None:
    """Parse the parameter x variant matrix and print it as JSON."""

    extractor = _open_sheet(path, sheet, log_file, "matrix")
    result = extractor.parse_matrix()
    if result is None:
        _finish(extractor, "matrix", status="no_header")
        typer.echo(f"No matrix header row found in {path.name}", err=True)
        raise typer.Exit(code=1)
    _emit(result.to_payload(), output)
    _finish(extractor, "matrix", status="ok", variants=len(result.variants))


def discover_command(
    path: Path = _FILE_ARGUMENT,
    sheet: Optional[str] = _SHEET_OPTION,
    output: Optional[Path] = _OUTPUT_OPTION,
    log_file: Optional[Path] = _LOG_OPTION,
) -> None:
    """Synthesize parameter groups without a header row."""

    extractor = _open_sheet(path, sheet, log_file, "discover")
    groups = extractor.discover_parameter_groups()
    _emit({"parameterGroups": [group.to_payload() for group in groups]}, output)
    _finish(extractor, "discover", groups=len(groups))


def targeted_command(
    path: Path = _FILE_ARGUMENT,
    targets: Path = typer.Option(
        ...,
        "--targets",
        exists=True,
        dir_okay=False,
        readable=True,
        help="JSON list of {id, name} targets, parameter groups or a matrix payload",
    ),
    rows: bool = typer.Option(False, "--rows", help="Collect every value on the label row"),
    sheet: Optional[str] = _SHEET_OPTION,
    output: Optional[Path] = _OUTPUT_OPTION,
    log_file: Optional[Path] = _LOG_OPTION,
) -> None:
    """Find the values of known parameters anywhere in the sheet."""

    wanted = _load_targets(targets)
    extractor = _open_sheet(path, sheet, log_file, "targeted")
    if rows:
        found: List[Dict[str, Any]] = [
            item.to_payload() for item in extractor.extract_all_parameters_with_columns(wanted)
        ]
    else:
        found = [item.to_payload() for item in extractor.extract_all_parameters(wanted)]
    _emit(found, output)
    _finish(extractor, "targeted", found=len(found), rows=rows)


def describe_command(
    path: Path = _FILE_ARGUMENT,
    sheet: Optional[str] = _SHEET_OPTION,
    output: Optional[Path] = _OUTPUT_OPTION,
    log_file: Optional[Path] = _LOG_OPTION,
) -> None:
    """Print the project description key/value pairs."""

    extractor = _open_sheet(path, sheet, log_file, "describe")
    pairs = extractor.extract_key_values()
    _emit([pair.to_payload() for pair in pairs], output)
    _finish(extractor, "describe", pairs=len(pairs))


def variants_command(
    path: Path = _FILE_ARGUMENT,
    sheet: Optional[str] = _SHEET_OPTION,
    log_file: Optional[Path] = _LOG_OPTION,
) -> None:
    """Print the variant names listed under the customer platform variants landmark."""

    extractor = _open_sheet(path, sheet, log_file, "variants")
    names = extractor.variant_names()
    _emit(names, None)
    _finish(extractor, "variants", variants=len(names))
