"""Fuzzy label matching on normalised token sets."""
from __future__ import annotations

from typing import Any, Optional

from .normalize import cell_text, normalize_text, tokenize
from .options import ExtractionConfig

__all__ = ["PERFECT_SCORE", "match_score", "token_set_ratio"]

PERFECT_SCORE = 100.0


def token_set_ratio(a: Any, b: Any, *, config: Optional[ExtractionConfig] = None) -> float:
    """Score two labels between 0 and 100 by symmetric token containment.

    Both inputs are ``strong``-normalised and reduced to token sets. The score
    is the mean of the share of ``a``'s tokens found in ``b`` and the share of
    ``b``'s tokens found in ``a``, so a short label fully contained in a
    verbose cell still scores well. The function is commutative.
    """

    tokens_a = set(tokenize(a, "strong", config=config))
    tokens_b = set(tokenize(b, "strong", config=config))
    if not tokens_a or not tokens_b:
        return 0.0
    shared = len(tokens_a & tokens_b)
    return (shared / len(tokens_a) + shared / len(tokens_b)) / 2 * 100


def match_score(
    target_name: Any,
    target_id: Optional[str],
    candidate: Any,
    *,
    config: Optional[ExtractionConfig] = None,
) -> float:
    """Score ``candidate`` cell text against a known parameter.

    An embedded identifier (case-insensitive substring) or an exact normalised
    match scores 100; otherwise the fuzzy token set ratio is returned.
    """

    text = cell_text(candidate)
    if not text:
        return 0.0
    if target_id and target_id.strip() and target_id.strip().lower() in text.lower():
        return PERFECT_SCORE
    normalized_target = normalize_text(target_name, "strong", config=config)
    if normalized_target and normalized_target == normalize_text(text, "strong", config=config):
        return PERFECT_SCORE
    return token_set_ratio(target_name, text, config=config)
