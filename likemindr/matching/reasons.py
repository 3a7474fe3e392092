"""
Match reasons: a short, human-readable answer to "why this reader?".

Reasons are checked in priority order and the first that applies wins:

    1. "Both love {genre}"     genre overlap > 0.5 and a literal shared genre
    2. "Active reader"         candidate active within the last 24 hours
    3. "Reading the same book" fallback, always true for a valid candidate

With ``compose=True`` every qualifying reason from checks 1–2 is joined with
``REASON_SEPARATOR`` instead, matching how the app's match cards display
them. The fallback only appears when nothing else qualifies.

``is_active_reader()`` lives here too: it decides whether a reading record
is fresh enough to put its reader into a candidate pool at all.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from likemindr.matching.factors import genre_overlap, hours_inactive, shared_genres
from likemindr.models.match import Candidate
from likemindr.models.reader import Reader, ReadingRecord
from likemindr.taxonomy.reading_status import ReadingStatus
from likemindr.utils.time_utils import days_between, ensure_utc, utcnow

REASON_SEPARATOR = " • "
FALLBACK_REASON = "Reading the same book"
ACTIVE_REASON = "Active reader"

GENRE_OVERLAP_THRESHOLD = 0.5
ACTIVE_REASON_HOURS = 24.0
ACTIVE_READER_MAX_DAYS = 7.0


def candidate_reasons(
    subject:      Reader,
    candidate:    Candidate,
    now:          Optional[datetime] = None,
    active_hours: float = ACTIVE_REASON_HOURS,
) -> list[str]:
    """Every qualifying reason for ``candidate``, highest priority first.

    Never empty: falls back to ``FALLBACK_REASON``.
    """
    now = ensure_utc(now) if now is not None else utcnow()
    reasons: list[str] = []

    overlap = genre_overlap(subject.favorite_genres, candidate.reader.favorite_genres)
    if overlap > GENRE_OVERLAP_THRESHOLD:
        common = shared_genres(subject.favorite_genres, candidate.reader.favorite_genres)
        if common:
            reasons.append(f"Both love {common[0]}")

    if hours_inactive(candidate.reader.last_active, now) < active_hours:
        reasons.append(ACTIVE_REASON)

    return reasons or [FALLBACK_REASON]


def generate_reason(
    subject:      Reader,
    candidate:    Candidate,
    score:        int,
    now:          Optional[datetime] = None,
    compose:      bool = False,
    active_hours: float = ACTIVE_REASON_HOURS,
) -> str:
    """Return the display reason for one match.

    Args:
        subject:      The subject reader.
        candidate:    The matched candidate.
        score:        Aggregate score (not used by the current rules).
        now:          Reference time for the activity check.
        compose:      Join all qualifying reasons instead of taking the first.
        active_hours: Cutoff for the "Active reader" reason.

    Returns:
        Non-empty reason string.
    """
    reasons = candidate_reasons(subject, candidate, now=now, active_hours=active_hours)
    if compose:
        return REASON_SEPARATOR.join(reasons)
    return reasons[0]


def is_active_reader(
    record:   ReadingRecord,
    now:      Optional[datetime] = None,
    max_days: float = ACTIVE_READER_MAX_DAYS,
) -> bool:
    """True iff the record is ``currently_reading`` and updated within ``max_days``."""
    if record.status != ReadingStatus.CURRENTLY_READING:
        return False
    now = ensure_utc(now) if now is not None else utcnow()
    return days_between(record.updated_at, now) <= max_days
