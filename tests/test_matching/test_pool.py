"""Tests for likemindr/matching/pool.py — request loading and eligibility."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from likemindr.matching.pool import MatchRequest, eligible_candidates, load_match_request
from likemindr.models.reader import Book
from likemindr.taxonomy.reading_status import ReadingStatus


def _request_dict() -> dict:
    return {
        "subject": {
            "reader_id": "r-subject",
            "username": "ana",
            "favorite_genres": ["Fantasy", "Mystery"],
            "last_active": "2026-10-19T11:00:00Z",
        },
        "subject_record": {
            "reader_id": "r-subject",
            "book_id": "book-hobbit",
            "status": "currently_reading",
            "current_page": 100,
            "created_at": "2026-10-01T00:00:00Z",
            "updated_at": "2026-10-18T00:00:00Z",
        },
        "candidates": [
            {
                "reader": {
                    "reader_id": "r-1",
                    "username": "ben",
                    "favorite_genres": ["fantasy"],
                    "last_active": "2026-10-19T10:00:00",
                },
                "record": {
                    "reader_id": "r-1",
                    "book_id": "book-hobbit",
                    "status": "currently_reading",
                    "current_page": 120,
                    "created_at": "2026-10-02T00:00:00",
                    "updated_at": "2026-10-17T00:00:00",
                },
                "book": {
                    "book_id": "book-hobbit",
                    "title": "The Hobbit",
                    "author": "J.R.R. Tolkien",
                    "genres": ["Fantasy"],
                },
            }
        ],
    }


class TestLoadMatchRequest:
    def test_loads_valid_file(self, tmp_path: Path):
        path = tmp_path / "request.json"
        path.write_text(json.dumps(_request_dict()), encoding="utf-8")
        req = load_match_request(path)
        assert isinstance(req, MatchRequest)
        assert req.subject.reader_id == "r-subject"
        assert len(req.candidates) == 1
        assert req.candidates[0].record.current_page == 120
        assert req.candidates[0].reader.last_active.tzinfo is not None

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_match_request(tmp_path / "nope.json")

    def test_invalid_content(self, tmp_path: Path):
        raw = _request_dict()
        raw["candidates"][0]["record"]["book_id"] = "book-other"
        path = tmp_path / "request.json"
        path.write_text(json.dumps(raw), encoding="utf-8")
        with pytest.raises(ValidationError):
            load_match_request(path)


class TestEligibleCandidates:
    def test_filters_pool(self, subject_record, make_candidate, now):
        dune = Book(book_id="book-dune", title="Dune", author="Frank Herbert")
        pool = [
            make_candidate(reader_id="r-ok", updated_days_ago=1),
            make_candidate(reader_id="r-stale", updated_days_ago=9),
            make_candidate(reader_id="r-done", status=ReadingStatus.FINISHED),
            make_candidate(reader_id="r-dune", candidate_book=dune),
            make_candidate(reader_id="r-subject"),
            make_candidate(reader_id="r-ok2", updated_days_ago=6.9),
        ]
        kept = eligible_candidates(subject_record, pool, now=now)
        assert [c.reader_id for c in kept] == ["r-ok", "r-ok2"]

    def test_empty(self, subject_record, now):
        assert eligible_candidates(subject_record, [], now=now) == []
