"""Command line interface for paramsheet."""

from .main import app, run

__all__ = ["app", "run"]
