"""Threshold filter applied between scoring and ranking."""

from __future__ import annotations

from likemindr.matching.scorer import ScoredCandidate

DEFAULT_THRESHOLD = 40


def filter_by_threshold(
    scored:    list[ScoredCandidate],
    threshold: int = DEFAULT_THRESHOLD,
) -> list[ScoredCandidate]:
    """Drop every candidate whose score is strictly below ``threshold``.

    Survivors keep their relative order. An empty input yields an empty list.
    """
    return [sc for sc in scored if sc.score >= threshold]
