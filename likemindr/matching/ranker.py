"""
Match ranker: orders scored candidates and bounds them to a top-N list.

Ordering
--------
1. score descending
2. last_active descending (the more recently active reader first)
3. reader_id ascending (stable identity tiebreak)

The key is a total order over distinct readers, so repeated calls on the
same input always return the same sequence regardless of input order.
"""

from __future__ import annotations

from likemindr.matching.scorer import ScoredCandidate

DEFAULT_LIMIT = 10


def rank_key(sc: ScoredCandidate) -> tuple[int, float, str]:
    """Sort key implementing the ranking order above."""
    return (-sc.score, -sc.last_active.timestamp(), sc.reader_id)


def rank_candidates(
    scored: list[ScoredCandidate],
    limit:  int = DEFAULT_LIMIT,
) -> list[ScoredCandidate]:
    """Return the top ``limit`` candidates in ranking order.

    Args:
        scored: Scored candidates in any order.
        limit:  Max results. ``limit <= 0`` returns an empty list; a limit
                larger than the pool returns every candidate.

    Returns:
        New list; ``scored`` is not modified.
    """
    if limit <= 0:
        return []
    return sorted(scored, key=rank_key)[:limit]
