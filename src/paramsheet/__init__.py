"""paramsheet – parameter matrix extraction for engineering spreadsheets."""

from ._version import __version__

__all__ = [
    "__version__",
    "cli",
    "config",
    "extraction",
    "io",
    "utils",
]
