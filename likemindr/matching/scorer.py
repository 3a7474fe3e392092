"""
Match scoring: turns one (subject, candidate) pair into a 0–100 score with
a per-factor breakdown.

Score formula (sum of capped factors, clamped to 0–100)
--------------------------------------------------------
    total = progress (≤30) + genre (≤25) + recency (≤25) + temporal (≤20)

The unrounded factor contributions are summed, clamped, and rounded once to
give the integer score. The per-factor ints on the breakdown are rounded
separately for display and need not add up to the score exactly. See
``likemindr.matching.factors`` for the per-factor formulas.

Validation
----------
``compute_score`` raises ``MatchValidationError`` when the two reading
records point at different books, or when either record has no
``current_page``. Bad input is never coerced into a score.

Large pools
-----------
``iter_scored_candidates`` scores in chunks and consults an optional
``should_continue`` callback between chunks, so a caller on a deadline can
abandon the remaining work. Scoring holds no resources, so abandoning is
free.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, Iterator, Optional, Sequence

from likemindr.matching.exceptions import MatchCancelledError, MatchValidationError
from likemindr.matching.factors import (
    DEFAULT_FACTORS,
    ScoringContext,
    ScoringFactor,
    genre_overlap,
    hours_inactive,
    page_gap,
)
from likemindr.models.match import Candidate
from likemindr.models.reader import Reader, ReadingRecord
from likemindr.utils.time_utils import ensure_utc, utcnow

logger = logging.getLogger(__name__)

MIN_SCORE = 0
MAX_SCORE = 100


@dataclass(frozen=True)
class ScoreBreakdown:
    """All components of a compatibility score.

    Attributes:
        progress:       0–30, reading-progress proximity.
        genre:          0–25, favorite-genre overlap.
        recency:        0–25, candidate activity recency.
        temporal:       0–20, timezone / availability compatibility.
        page_gap:       Raw absolute page distance.
        genre_overlap:  Raw Jaccard similarity (0–1).
        hours_inactive: Raw hours since the candidate was last active.
        raw_total:      Unrounded sum of every factor contribution.
        extra:          (name, points) pairs from any additional custom factors.
    """

    progress:       int
    genre:          int
    recency:        int
    temporal:       int
    page_gap:       int
    genre_overlap:  float
    hours_inactive: float
    raw_total:      float
    extra:          tuple[tuple[str, int], ...] = ()

    @property
    def total(self) -> int:
        """Unrounded factor sum clamped to [0, 100], rounded once."""
        return round(max(MIN_SCORE, min(MAX_SCORE, self.raw_total)))

    def as_dict(self) -> dict[str, int]:
        """Named sub-scores, core factors first."""
        points = {
            "progress": self.progress,
            "genre":    self.genre,
            "recency":  self.recency,
            "temporal": self.temporal,
        }
        points.update(dict(self.extra))
        return points


@dataclass(frozen=True)
class ScoredCandidate:
    """A candidate coupled with its aggregate score and breakdown.

    Attributes:
        candidate: The evaluated candidate.
        score:     Aggregate score, 0–100.
        breakdown: Per-factor detail behind ``score``.
    """

    candidate: Candidate
    score:     int
    breakdown: ScoreBreakdown

    @property
    def reader_id(self) -> str:
        return self.candidate.reader.reader_id

    @property
    def last_active(self) -> datetime:
        return self.candidate.reader.last_active


def validate_pair(subject_record: ReadingRecord, candidate: Candidate) -> None:
    """Raise ``MatchValidationError`` if the pair cannot be scored."""
    if subject_record.book_id != candidate.record.book_id:
        raise MatchValidationError(
            f"Candidate {candidate.reader.reader_id} is reading book "
            f"'{candidate.record.book_id}', subject is reading '{subject_record.book_id}'."
        )
    for label, record in (("subject", subject_record), ("candidate", candidate.record)):
        if record.current_page is None:
            raise MatchValidationError(
                f"{label} record for reader {record.reader_id} has no current_page."
            )
        if record.current_page < 0:
            raise MatchValidationError(
                f"{label} record for reader {record.reader_id} has negative "
                f"current_page ({record.current_page})."
            )


def compute_score(
    subject:        Reader,
    subject_record: ReadingRecord,
    candidate:      Candidate,
    now:            Optional[datetime] = None,
    factors:        Sequence[ScoringFactor] = DEFAULT_FACTORS,
) -> ScoreBreakdown:
    """Compute every score component for one (subject, candidate) pair.

    Args:
        subject:        The reader matches are being computed for.
        subject_record: The subject's reading record for the shared book.
        candidate:      The candidate under evaluation.
        now:            Reference time for recency; defaults to current UTC.
        factors:        Scoring factors to apply. Factors named ``progress``,
                        ``genre``, ``recency`` or ``temporal`` fill the
                        matching breakdown field; any others land in ``extra``.

    Returns:
        ScoreBreakdown with all fields populated. ``.total`` is the score.

    Raises:
        MatchValidationError: Books differ or a ``current_page`` is missing.
    """
    validate_pair(subject_record, candidate)
    now = ensure_utc(now) if now is not None else utcnow()

    ctx = ScoringContext(
        subject=subject,
        subject_record=subject_record,
        candidate=candidate,
        now=now,
    )

    contributions: dict[str, float] = {}
    for factor in factors:
        if factor.name in contributions:
            raise ValueError(f"Duplicate scoring factor name '{factor.name}'.")
        contributions[factor.name] = factor.contribute(ctx)

    points = {name: round(value) for name, value in contributions.items()}

    return ScoreBreakdown(
        progress=points.pop("progress", 0),
        genre=points.pop("genre", 0),
        recency=points.pop("recency", 0),
        temporal=points.pop("temporal", 0),
        page_gap=page_gap(subject_record, candidate.record),
        genre_overlap=round(
            genre_overlap(subject.favorite_genres, candidate.reader.favorite_genres), 4
        ),
        hours_inactive=round(hours_inactive(candidate.reader.last_active, now), 4),
        raw_total=sum(contributions.values()),
        extra=tuple(points.items()),
    )


def score_candidate(
    subject:        Reader,
    subject_record: ReadingRecord,
    candidate:      Candidate,
    now:            Optional[datetime] = None,
    factors:        Sequence[ScoringFactor] = DEFAULT_FACTORS,
) -> ScoredCandidate:
    """Score one candidate and wrap it as a ``ScoredCandidate``."""
    breakdown = compute_score(subject, subject_record, candidate, now=now, factors=factors)
    return ScoredCandidate(candidate=candidate, score=breakdown.total, breakdown=breakdown)


def iter_scored_candidates(
    subject:         Reader,
    subject_record:  ReadingRecord,
    candidates:      Iterable[Candidate],
    now:             Optional[datetime] = None,
    chunk_size:      int = 500,
    should_continue: Optional[Callable[[], bool]] = None,
    factors:         Sequence[ScoringFactor] = DEFAULT_FACTORS,
) -> Iterator[list[ScoredCandidate]]:
    """Score ``candidates`` lazily, one chunk at a time.

    ``should_continue`` is checked before each chunk; when it returns False
    the generator raises ``MatchCancelledError`` instead of yielding more.

    Args:
        subject:         The subject reader.
        subject_record:  The subject's reading record.
        candidates:      Any iterable of candidates (may be a generator).
        now:             Reference time shared by every chunk.
        chunk_size:      Candidates per yielded chunk (>= 1).
        should_continue: Optional cancellation probe.
        factors:         Scoring factors to apply.

    Yields:
        Lists of ScoredCandidate in input order.

    Raises:
        ValueError: ``chunk_size < 1``.
        MatchCancelledError: ``should_continue()`` returned False.
        MatchValidationError: Any candidate fails validation.
    """
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be >= 1, got {chunk_size}.")
    now = ensure_utc(now) if now is not None else utcnow()

    chunk: list[Candidate] = []
    chunk_no = 0

    def _score_chunk(batch: list[Candidate]) -> list[ScoredCandidate]:
        if should_continue is not None and not should_continue():
            raise MatchCancelledError(
                f"Scoring cancelled before chunk {chunk_no} for subject {subject.reader_id}."
            )
        return [
            score_candidate(subject, subject_record, c, now=now, factors=factors)
            for c in batch
        ]

    for candidate in candidates:
        chunk.append(candidate)
        if len(chunk) >= chunk_size:
            chunk_no += 1
            scored = _score_chunk(chunk)
            logger.debug("Scored chunk %d (%d candidates)", chunk_no, len(scored))
            yield scored
            chunk = []

    if chunk:
        chunk_no += 1
        scored = _score_chunk(chunk)
        logger.debug("Scored chunk %d (%d candidates)", chunk_no, len(scored))
        yield scored


def score_candidates(
    subject:        Reader,
    subject_record: ReadingRecord,
    candidates:     Iterable[Candidate],
    now:            Optional[datetime] = None,
    factors:        Sequence[ScoringFactor] = DEFAULT_FACTORS,
) -> list[ScoredCandidate]:
    """Score a whole pool eagerly, preserving input order.

    Returns an empty list for an empty pool.
    """
    now = ensure_utc(now) if now is not None else utcnow()
    return [
        score_candidate(subject, subject_record, c, now=now, factors=factors)
        for c in candidates
    ]
