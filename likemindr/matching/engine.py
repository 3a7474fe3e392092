"""
Matching engine: score → filter → rank → reason for one subject.

Usage::

    from likemindr.matching.engine import find_matches

    results = find_matches(subject, subject_record, candidates, limit=5)
    for r in results:
        print(r.rank, r.reader_id, r.score, r.reason)

``find_matches`` is a pure function of its arguments. ``now`` is captured
once at the start of the call and shared by scoring and reason generation,
so a request spanning an hour boundary cannot score and describe the same
candidate differently.

When ``should_continue`` stops scoring early, ``MatchCancelledError``
propagates and nothing is returned; filtering and ranking only ever see a
fully scored pool.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Iterable, Optional

from likemindr.matching.filter import DEFAULT_THRESHOLD, filter_by_threshold
from likemindr.matching.ranker import DEFAULT_LIMIT, rank_candidates
from likemindr.matching.reasons import ACTIVE_REASON_HOURS, generate_reason
from likemindr.matching.scorer import (
    ScoreBreakdown,
    ScoredCandidate,
    iter_scored_candidates,
    score_candidates,
)
from likemindr.models.match import Candidate
from likemindr.models.reader import Reader, ReadingRecord
from likemindr.utils.time_utils import ensure_utc, utcnow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchResult:
    """One ranked match, ready to hand back to the caller.

    Attributes:
        scored: The scored candidate.
        reason: Human-readable explanation (never empty).
        rank:   1-based position in the result list.
    """

    scored: ScoredCandidate
    reason: str
    rank:   int

    @property
    def candidate(self) -> Candidate:
        return self.scored.candidate

    @property
    def reader_id(self) -> str:
        return self.scored.reader_id

    @property
    def score(self) -> int:
        return self.scored.score

    @property
    def breakdown(self) -> ScoreBreakdown:
        return self.scored.breakdown

    def to_matched_reader(self) -> dict[str, Any]:
        """Profile fields plus match data, the shape match cards render."""
        reader = self.candidate.reader
        return {
            "reader_id":       reader.reader_id,
            "username":        reader.username,
            "avatar_id":       reader.avatar_id,
            "bio":             reader.bio,
            "favorite_genres": list(reader.favorite_genres),
            "last_active":     reader.last_active.isoformat(),
            "match_score":     self.score,
            "current_page":    self.candidate.record.current_page,
            "book": {
                "book_id": self.candidate.book.book_id,
                "title":   self.candidate.book.title,
                "author":  self.candidate.book.author,
            },
            "reason":          self.reason,
        }


def find_matches(
    subject:         Reader,
    subject_record:  ReadingRecord,
    candidates:      Iterable[Candidate],
    now:             Optional[datetime] = None,
    threshold:       int = DEFAULT_THRESHOLD,
    limit:           int = DEFAULT_LIMIT,
    compose_reasons: bool = False,
    chunk_size:      Optional[int] = None,
    should_continue: Optional[Callable[[], bool]] = None,
    active_hours:    float = ACTIVE_REASON_HOURS,
) -> list[MatchResult]:
    """Compute the ranked, annotated top-N matches for ``subject``.

    Args:
        subject:         The reader matches are computed for.
        subject_record:  The subject's active reading record.
        candidates:      Candidate pool; every record must share the
                         subject's book.
        now:             Reference time; defaults to current UTC.
        threshold:       Minimum score to survive filtering.
        limit:           Max results returned.
        compose_reasons: Join all qualifying reasons per result.
        chunk_size:      Score in chunks of this size (streaming). ``None``
                         scores the pool in one pass.
        should_continue: Cancellation probe checked between chunks.
        active_hours:    Cutoff for the "Active reader" reason.

    Returns:
        List of MatchResult in rank order; empty for an empty pool.

    Raises:
        MatchValidationError: A candidate is for a different book, or a
            ``current_page`` is missing.
        MatchCancelledError: ``should_continue()`` returned False.
    """
    now = ensure_utc(now) if now is not None else utcnow()

    if chunk_size is None and should_continue is None:
        scored = score_candidates(subject, subject_record, candidates, now=now)
    else:
        scored = []
        for chunk in iter_scored_candidates(
            subject,
            subject_record,
            candidates,
            now=now,
            chunk_size=chunk_size or 500,
            should_continue=should_continue,
        ):
            scored.extend(chunk)

    survivors = filter_by_threshold(scored, threshold=threshold)
    top = rank_candidates(survivors, limit=limit)

    results = [
        MatchResult(
            scored=sc,
            reason=generate_reason(
                subject,
                sc.candidate,
                sc.score,
                now=now,
                compose=compose_reasons,
                active_hours=active_hours,
            ),
            rank=i,
        )
        for i, sc in enumerate(top, start=1)
    ]

    logger.info(
        "Matches for %s on book %s | pool=%d | above_threshold=%d | returned=%d",
        subject.reader_id, subject_record.book_id,
        len(scored), len(survivors), len(results),
        extra={
            "subject":         subject.reader_id,
            "book_id":         subject_record.book_id,
            "pool":            len(scored),
            "above_threshold": len(survivors),
            "returned":        len(results),
        },
    )
    return results
