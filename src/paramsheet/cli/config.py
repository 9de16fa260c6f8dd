"""Inspect the resolved paramsheet settings."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Dict

import typer

from ..config import Settings, get_settings

__all__ = ["app"]

app = typer.Typer(help="Configuration diagnostics.", add_completion=False)


def _describe(path: Path | None) -> Dict[str, str | bool | None]:
    if path is None:
        return {"path": None, "exists": False, "kind": "unset"}
    if path.is_dir():
        kind = "directory"
    elif path.is_file():
        kind = "file"
    else:
        kind = "missing"
    return {"path": str(path), "exists": path.exists(), "kind": kind}


def _inventory(settings: Settings) -> Dict[str, Dict[str, str | bool | None]]:
    return {
        "resources_dir": _describe(settings.resources_dir),
        "vocabulary_path": _describe(settings.vocabulary_path),
        "log_path": _describe(settings.log_path),
    }


@app.command("paths")
def show_paths(
    config_file: Path = typer.Option(
        None,
        "--config-file",
        exists=True,
        dir_okay=False,
        readable=True,
        help="TOML/YAML configuration to use instead of the environment.",
    ),
    refresh: bool = typer.Option(
        False,
        "--refresh",
        help="Ignore the cache and rebuild the settings from the environment.",
    ),
) -> None:
    """Print the resolved resource paths and thresholds as JSON."""

    try:
        settings = get_settings(refresh=refresh, config_file=config_file)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--config-file") from exc
    payload = {
        "config_source": str(config_file) if config_file else "environment",
        "paths": _inventory(settings),
        "thresholds": settings.as_dict()["thresholds"],
    }
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
