"""
Scoring factors: the four weighted components of a compatibility score.

Each factor answers one question about a (subject, candidate) pair and
contributes between 0 and ``max_points``. ``compute_score()`` sums the
contributions; the caps add up to 100.

Factor caps
-----------
    progress   30   max(0, 30 - page_gap / 5)
    genre      25   jaccard(favorite genres, case-insensitive) * 25
    recency    25   max(0, 25 - hours since candidate last active)
    temporal   20   fixed 15 (placeholder, see PlaceholderTemporalFactor)

Adding a factor means subclassing ``ScoringFactor`` and passing a custom
factor tuple to ``compute_score()``; nothing else in the pipeline changes.
All factors are stateless.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from likemindr.matching.exceptions import MatchValidationError
from likemindr.models.match import Candidate
from likemindr.models.reader import Reader, ReadingRecord
from likemindr.utils.time_utils import hours_between


@dataclass(frozen=True)
class ScoringContext:
    """Everything a factor may look at for one (subject, candidate) pair.

    ``now`` is captured once per request so every factor and every
    candidate is measured against the same instant.
    """

    subject: Reader
    subject_record: ReadingRecord
    candidate: Candidate
    now: datetime


class ScoringFactor(ABC):
    """A named component that contributes up to ``max_points``."""

    name: str
    max_points: float

    @abstractmethod
    def raw_points(self, ctx: ScoringContext) -> float:
        """Unclamped contribution for this pair."""

    def contribute(self, ctx: ScoringContext) -> float:
        """Contribution clamped to ``[0, max_points]``."""
        return _clamp(self.raw_points(ctx), 0.0, self.max_points)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, max_points={self.max_points})"


class ProgressFactor(ScoringFactor):
    """Readers on nearby pages can talk without spoilers."""

    name = "progress"
    max_points = 30.0
    pages_per_point = 5.0

    def raw_points(self, ctx: ScoringContext) -> float:
        gap = page_gap(ctx.subject_record, ctx.candidate.record)
        return max(0.0, self.max_points - gap / self.pages_per_point)


class GenreFactor(ScoringFactor):
    """Shared taste beyond the current book."""

    name = "genre"
    max_points = 25.0

    def raw_points(self, ctx: ScoringContext) -> float:
        overlap = genre_overlap(
            ctx.subject.favorite_genres, ctx.candidate.reader.favorite_genres
        )
        return overlap * self.max_points


class RecencyFactor(ScoringFactor):
    """One point lost per hour the candidate has been away."""

    name = "recency"
    max_points = 25.0

    def raw_points(self, ctx: ScoringContext) -> float:
        hours = hours_inactive(ctx.candidate.reader.last_active, ctx.now)
        return max(0.0, self.max_points - hours)


class PlaceholderTemporalFactor(ScoringFactor):
    """Stand-in for timezone / availability compatibility.

    There is no timezone or availability data yet, so every pair gets the
    same medium contribution. Replace this class with a real factor named
    ``"temporal"`` once that data exists.
    """

    name = "temporal"
    max_points = 20.0
    fixed_points = 15.0

    def raw_points(self, ctx: ScoringContext) -> float:
        return self.fixed_points


DEFAULT_FACTORS: tuple[ScoringFactor, ...] = (
    ProgressFactor(),
    GenreFactor(),
    RecencyFactor(),
    PlaceholderTemporalFactor(),
)


# ── Signals shared with the reason generator ─────────────────────────────────

def page_gap(subject_record: ReadingRecord, candidate_record: ReadingRecord) -> int:
    """Absolute page distance between two records.

    Raises:
        MatchValidationError: Either record has no ``current_page``.
    """
    for record in (subject_record, candidate_record):
        if record.current_page is None:
            raise MatchValidationError(
                f"Record for reader {record.reader_id} has no current_page."
            )
    return abs(subject_record.current_page - candidate_record.current_page)


def genre_overlap(genres_a: Iterable[str], genres_b: Iterable[str]) -> float:
    """Case-insensitive Jaccard similarity of two genre collections.

    Returns 0.0 when either side is empty.
    """
    set_a = {g.lower() for g in genres_a}
    set_b = {g.lower() for g in genres_b}
    if not set_a or not set_b:
        return 0.0
    return len(set_a & set_b) / len(set_a | set_b)


def shared_genres(subject_genres: Iterable[str], candidate_genres: Iterable[str]) -> list[str]:
    """Genres both readers like, in the subject's order and spelling."""
    candidate_lower = {g.lower() for g in candidate_genres}
    seen: set[str] = set()
    shared: list[str] = []
    for genre in subject_genres:
        key = genre.lower()
        if key in candidate_lower and key not in seen:
            seen.add(key)
            shared.append(genre)
    return shared


def hours_inactive(last_active: datetime, now: datetime) -> float:
    """Fractional hours since ``last_active``; future timestamps count as 0."""
    return max(0.0, hours_between(last_active, now))


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))
