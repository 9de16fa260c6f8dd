"""Bundle of thresholds and vocabulary threaded through every extraction step."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..config import Thresholds, get_settings
from .vocabulary import Vocabulary, default_vocabulary

__all__ = ["ExtractionConfig", "resolve_config"]


@dataclass(frozen=True)
class ExtractionConfig:
    """Thresholds plus the locale tables for one extraction run."""

    thresholds: Thresholds = field(default_factory=Thresholds)
    vocabulary: Vocabulary = field(default_factory=default_vocabulary)

    @classmethod
    def default(cls) -> "ExtractionConfig":
        return cls(thresholds=get_settings().thresholds, vocabulary=default_vocabulary())


def resolve_config(config: Optional[ExtractionConfig]) -> ExtractionConfig:
    return config if config is not None else ExtractionConfig.default()
