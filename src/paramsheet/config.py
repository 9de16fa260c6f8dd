"""Centralized configuration for the paramsheet extraction engine.

This module exposes :func:`get_settings` returning the vocabulary location and
the heuristic thresholds used by the grid parser. Values can be customized via
environment variables or by pointing ``PARAMSHEET_CONFIG_FILE`` to a TOML/YAML
document with ``[paths]`` and ``[thresholds]`` sections.
"""
from __future__ import annotations

import os
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

try:  # Python 3.11+
    import tomllib  # type: ignore[import-not-found]
except ModuleNotFoundError:  # pragma: no cover - safety for Python <3.11
    tomllib = None  # type: ignore[assignment]

import yaml

__all__ = ["Settings", "Thresholds", "get_settings", "reset_settings"]

_PACKAGE_ROOT = Path(__file__).resolve().parent
_DEFAULT_RESOURCES_DIR = _PACKAGE_ROOT / "extraction" / "resources"
_CONFIG_CACHE: Optional["Settings"] = None
_CONFIG_SOURCE: Optional[Path] = None


@dataclass(frozen=True)
class Thresholds:
    """Tunable constants of the grid heuristics."""

    min_match_score: float = 88.0
    variant_header_match: float = 85.0
    min_target_chars: int = 3
    max_label_chars: int = 80
    max_label_tokens: int = 10
    max_value_chars: int = 60
    max_value_tokens: int = 8
    long_label_value_chars: int = 18
    unit_annotation_max_chars: int = 8
    min_variant_names: int = 5
    variant_scan_rows: int = 12
    variant_empty_run: int = 8
    variant_list_max_rows: int = 160
    max_variant_columns: int = 12
    header_empty_run: int = 5
    role_sample_rows: int = 50
    role_min_samples: int = 6
    role_min_ratio: float = 0.40
    role_max_penalty: float = 25.0
    role_penalty_per_column: float = 5.0
    row_value_gap: int = 3
    name_scan_columns: int = 3
    key_value_empty_run: int = 5
    group_title_max_chars: int = 50

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Thresholds":
        """Build thresholds from a config section, rejecting unknown keys."""

        known = {item.name: item for item in fields(cls)}
        unknown = sorted(set(data) - set(known))
        if unknown:
            raise ValueError(f"Unknown threshold(s) in configuration: {', '.join(unknown)}")
        defaults = cls()
        overrides: Dict[str, Any] = {}
        for key, value in data.items():
            current = getattr(defaults, key)
            try:
                overrides[key] = type(current)(value)
            except (TypeError, ValueError) as exc:
                raise ValueError(f"Threshold '{key}' expects {type(current).__name__}, got {value!r}") from exc
        return replace(defaults, **overrides)


@dataclass(frozen=True)
class Settings:
    """Resolved resource locations and heuristic thresholds."""

    resources_dir: Path
    vocabulary_path: Path
    log_path: Optional[Path]
    thresholds: Thresholds

    def as_dict(self) -> Dict[str, Any]:
        """Expose the settings as plain JSON-friendly values (useful for logging)."""

        return {
            "resources_dir": str(self.resources_dir),
            "vocabulary_path": str(self.vocabulary_path),
            "log_path": str(self.log_path) if self.log_path else None,
            "thresholds": asdict(self.thresholds),
        }


def _normalize_path(value: Optional[str | Path], *, base: Optional[Path]) -> Optional[Path]:
    if value is None or value == "":
        return None
    candidate = Path(value).expanduser()
    if not candidate.is_absolute() and base is not None:
        candidate = base / candidate
    return candidate.resolve()


def _load_config_file(path: Path) -> Mapping[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Config file '{path}' does not exist")
    suffix = path.suffix.lower()
    if suffix == ".toml":
        if tomllib is None:  # pragma: no cover - Python <3.11 fallback
            raise RuntimeError("TOML configuration requires Python 3.11 or tomllib")
        with path.open("rb") as handle:
            return tomllib.load(handle)
    if suffix in {".yaml", ".yml"}:
        with path.open("r", encoding="utf-8") as handle:
            loaded = yaml.safe_load(handle)
            return loaded or {}
    raise ValueError(f"Unsupported config file format: '{suffix}'")


def _coalesce_mapping(source: Any) -> Mapping[str, Any]:
    if not isinstance(source, Mapping):
        return {}
    return source


def _build_settings(config_file: Optional[Path]) -> Settings:
    config_data: Mapping[str, Any] = {}
    config_dir: Optional[Path] = None
    if config_file is not None:
        config_file = _normalize_path(config_file, base=Path.cwd())
        if config_file is not None:
            config_data = _load_config_file(config_file)
            config_dir = config_file.parent

    paths_section = _coalesce_mapping(config_data.get("paths"))
    thresholds_section = _coalesce_mapping(config_data.get("thresholds"))

    env = os.environ

    resources_dir = _normalize_path(
        env.get("PARAMSHEET_RESOURCES_DIR") or paths_section.get("resources"),
        base=config_dir,
    ) or _DEFAULT_RESOURCES_DIR

    vocabulary_path = _normalize_path(
        env.get("PARAMSHEET_VOCABULARY_PATH") or paths_section.get("vocabulary"),
        base=config_dir,
    ) or (resources_dir / "vocabulary.json")

    log_path = _normalize_path(
        env.get("PARAMSHEET_LOG_PATH") or paths_section.get("log"),
        base=config_dir,
    )

    return Settings(
        resources_dir=resources_dir,
        vocabulary_path=vocabulary_path,
        log_path=log_path,
        thresholds=Thresholds.from_mapping(thresholds_section),
    )


def get_settings(*, refresh: bool = False, config_file: str | Path | None = None) -> Settings:
    """Return the cached :class:`Settings` configuration.

    Parameters
    ----------
    refresh:
        When ``True`` the cached configuration is discarded and recomputed.
    config_file:
        Optional explicit path to the configuration document. When provided the
        returned instance is not cached globally, allowing callers (e.g. tests)
        to override settings temporarily.
    """

    global _CONFIG_CACHE, _CONFIG_SOURCE

    if config_file is not None:
        return _build_settings(Path(config_file).expanduser())

    env_path = os.getenv("PARAMSHEET_CONFIG_FILE")
    source_path = Path(env_path).expanduser() if env_path else None

    if refresh or _CONFIG_CACHE is None or _CONFIG_SOURCE != source_path:
        _CONFIG_CACHE = _build_settings(source_path)
        _CONFIG_SOURCE = source_path

    return _CONFIG_CACHE


def reset_settings() -> None:
    """Clear the cached configuration (mainly useful for tests)."""

    global _CONFIG_CACHE, _CONFIG_SOURCE
    _CONFIG_CACHE = None
    _CONFIG_SOURCE = None
