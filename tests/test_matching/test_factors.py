"""
Tests for likemindr/matching/factors.py.

What we test
------------
ProgressFactor     : full points at gap 0, 28 at gap 10, floors at 0;
                     a record with no current_page raises, never scores as page 0.
GenreFactor        : Jaccard × 25, case-insensitive, 0 for empty sets.
RecencyFactor      : 25 − hours, fractional, floors at 0, future = full.
PlaceholderTemporalFactor : always 15, within its 20-point cap.
genre_overlap / shared_genres / hours_inactive helpers.
"""

from __future__ import annotations

from datetime import timedelta

import pytest

from likemindr.matching.exceptions import MatchValidationError
from likemindr.matching.factors import (
    DEFAULT_FACTORS,
    GenreFactor,
    PlaceholderTemporalFactor,
    ProgressFactor,
    RecencyFactor,
    ScoringContext,
    genre_overlap,
    hours_inactive,
    page_gap,
    shared_genres,
)


@pytest.fixture
def context(subject, subject_record, now):
    def _ctx(candidate, subject_override=None):
        return ScoringContext(
            subject=subject_override or subject,
            subject_record=subject_record,
            candidate=candidate,
            now=now,
        )
    return _ctx


class TestDefaultFactors:
    def test_caps_sum_to_100(self):
        assert sum(f.max_points for f in DEFAULT_FACTORS) == pytest.approx(100.0)

    def test_names_are_unique(self):
        names = [f.name for f in DEFAULT_FACTORS]
        assert names == ["progress", "genre", "recency", "temporal"]


class TestProgressFactor:
    def test_same_page_gives_full_points(self, context, make_candidate):
        assert ProgressFactor().contribute(context(make_candidate(page=100))) == pytest.approx(30.0)

    def test_ten_page_gap_gives_28(self, context, make_candidate):
        assert ProgressFactor().contribute(context(make_candidate(page=110))) == pytest.approx(28.0)

    def test_gap_is_symmetric(self, context, make_candidate):
        behind = ProgressFactor().contribute(context(make_candidate(page=90)))
        ahead = ProgressFactor().contribute(context(make_candidate(page=110)))
        assert behind == ahead

    def test_large_gap_floors_at_zero(self, context, make_candidate):
        assert ProgressFactor().contribute(context(make_candidate(page=400))) == 0.0

    def test_missing_candidate_page_raises(self, context, make_candidate):
        ctx = context(make_candidate(page=None))
        with pytest.raises(MatchValidationError, match="current_page"):
            ProgressFactor().contribute(ctx)

    def test_missing_page_is_not_page_zero(self, subject_record, make_record):
        with pytest.raises(MatchValidationError):
            page_gap(subject_record.model_copy(update={"current_page": None}), make_record(page=0))
        assert page_gap(subject_record, make_record(page=0)) == 100


class TestGenreFactor:
    def test_identical_sets_give_full_points(self, context, make_candidate):
        c = make_candidate(genres=("Fantasy", "Mystery"))
        assert GenreFactor().contribute(context(c)) == pytest.approx(25.0)

    def test_case_insensitive(self, context, make_candidate):
        c = make_candidate(genres=("FANTASY", "mystery"))
        assert GenreFactor().contribute(context(c)) == pytest.approx(25.0)

    def test_partial_overlap(self, context, make_candidate):
        # {fantasy, mystery} vs {fantasy, horror}: 1 / 3
        c = make_candidate(genres=("Fantasy", "Horror"))
        assert GenreFactor().contribute(context(c)) == pytest.approx(25.0 / 3)

    def test_empty_candidate_genres_give_zero(self, context, make_candidate):
        c = make_candidate(genres=())
        assert GenreFactor().contribute(context(c)) == 0.0

    def test_empty_subject_genres_give_zero(self, context, make_candidate, make_reader):
        bare = make_reader(reader_id="r-subject", genres=())
        c = make_candidate(genres=("Fantasy",))
        assert GenreFactor().contribute(context(c, subject_override=bare)) == 0.0


class TestRecencyFactor:
    def test_active_now_gives_full_points(self, context, make_candidate):
        assert RecencyFactor().contribute(context(make_candidate(hours_ago=0))) == pytest.approx(25.0)

    def test_fractional_hours(self, context, make_candidate):
        c = make_candidate(hours_ago=2.5)
        assert RecencyFactor().contribute(context(c)) == pytest.approx(22.5)

    def test_inactive_30_hours_gives_zero(self, context, make_candidate):
        assert RecencyFactor().contribute(context(make_candidate(hours_ago=30))) == 0.0

    def test_future_last_active_is_capped(self, context, make_candidate):
        c = make_candidate(hours_ago=-3)
        assert RecencyFactor().contribute(context(c)) == pytest.approx(25.0)


class TestPlaceholderTemporalFactor:
    def test_fixed_contribution(self, context, make_candidate):
        for c in (make_candidate(page=0), make_candidate(hours_ago=100, genres=())):
            assert PlaceholderTemporalFactor().contribute(context(c)) == 15.0

    def test_within_cap(self):
        f = PlaceholderTemporalFactor()
        assert f.fixed_points <= f.max_points


class TestHelpers:
    def test_genre_overlap_empty(self):
        assert genre_overlap([], ["Fantasy"]) == 0.0
        assert genre_overlap(["Fantasy"], []) == 0.0

    def test_genre_overlap_duplicates_collapse(self):
        assert genre_overlap(["Fantasy", "fantasy"], ["FANTASY"]) == pytest.approx(1.0)

    def test_shared_genres_keeps_subject_order_and_spelling(self):
        shared = shared_genres(["Mystery", "fantasy", "Horror"], ["FANTASY", "mystery"])
        assert shared == ["Mystery", "fantasy"]

    def test_shared_genres_none(self):
        assert shared_genres(["Poetry"], ["Manga"]) == []

    def test_hours_inactive(self, now):
        assert hours_inactive(now - timedelta(minutes=90), now) == pytest.approx(1.5)
        assert hours_inactive(now + timedelta(hours=2), now) == 0.0
