"""
Time helpers shared by the matching engine.

Every timestamp that enters the engine is normalised to an aware UTC
``datetime``. Naive values are assumed to already be UTC (the storage layer
writes ISO strings without an offset).
"""

from __future__ import annotations

from datetime import datetime, timezone

SECONDS_PER_HOUR = 60 * 60
SECONDS_PER_DAY = 24 * SECONDS_PER_HOUR


def utcnow() -> datetime:
    """Return the current UTC datetime with timezone info.

    Prefer this over ``datetime.utcnow()`` (which returns naive datetimes).
    """
    return datetime.now(tz=timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime.

    Naive datetimes are tagged as UTC; aware ones are converted.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def hours_between(earlier: datetime, later: datetime) -> float:
    """Return fractional hours from ``earlier`` to ``later`` (may be negative)."""
    delta = ensure_utc(later) - ensure_utc(earlier)
    return delta.total_seconds() / SECONDS_PER_HOUR


def days_between(earlier: datetime, later: datetime) -> float:
    """Return fractional days from ``earlier`` to ``later`` (may be negative)."""
    delta = ensure_utc(later) - ensure_utc(earlier)
    return delta.total_seconds() / SECONDS_PER_DAY
