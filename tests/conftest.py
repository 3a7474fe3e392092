"""
Shared pytest fixtures for the Likemindr test suite.

Provides:
  - ``now``: a fixed reference time so recency math is exact.
  - ``book``, ``subject``, ``subject_record``: a default subject at page 100.
  - ``make_reader`` / ``make_record`` / ``make_candidate``: factory fixtures
    for building candidate pools with only the fields a test cares about.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import pytest

from likemindr.models.match import Candidate
from likemindr.models.reader import Book, Reader, ReadingRecord
from likemindr.taxonomy.reading_status import ReadingStatus

NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)
BOOK_ID = "book-hobbit"


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def book() -> Book:
    return Book(
        book_id=BOOK_ID,
        title="The Hobbit",
        author="J.R.R. Tolkien",
        genres=("Fantasy", "Classics"),
        page_count=310,
    )


@pytest.fixture
def make_reader() -> Callable[..., Reader]:
    def _make(
        reader_id: str = "r-cand",
        genres: tuple[str, ...] = ("Fantasy", "Mystery"),
        hours_ago: float = 0.0,
        username: Optional[str] = None,
    ) -> Reader:
        return Reader(
            reader_id=reader_id,
            username=username or f"user_{reader_id}",
            favorite_genres=genres,
            last_active=NOW - timedelta(hours=hours_ago),
        )
    return _make


@pytest.fixture
def make_record() -> Callable[..., ReadingRecord]:
    def _make(
        reader_id: str = "r-cand",
        page: Optional[int] = 100,
        book_id: str = BOOK_ID,
        status: ReadingStatus = ReadingStatus.CURRENTLY_READING,
        updated_days_ago: float = 1.0,
    ) -> ReadingRecord:
        updated = NOW - timedelta(days=updated_days_ago)
        return ReadingRecord(
            reader_id=reader_id,
            book_id=book_id,
            status=status,
            current_page=page,
            created_at=updated - timedelta(days=10),
            updated_at=updated,
        )
    return _make


@pytest.fixture
def make_candidate(book, make_reader, make_record) -> Callable[..., Candidate]:
    def _make(
        reader_id: str = "r-cand",
        page: Optional[int] = 100,
        genres: tuple[str, ...] = ("Fantasy", "Mystery"),
        hours_ago: float = 0.0,
        status: ReadingStatus = ReadingStatus.CURRENTLY_READING,
        updated_days_ago: float = 1.0,
        candidate_book: Optional[Book] = None,
    ) -> Candidate:
        target = candidate_book or book
        return Candidate(
            reader=make_reader(reader_id=reader_id, genres=genres, hours_ago=hours_ago),
            record=make_record(
                reader_id=reader_id,
                page=page,
                book_id=target.book_id,
                status=status,
                updated_days_ago=updated_days_ago,
            ),
            book=target,
        )
    return _make


@pytest.fixture
def subject(make_reader) -> Reader:
    return make_reader(reader_id="r-subject", genres=("Fantasy", "Mystery"), hours_ago=1.0)


@pytest.fixture
def subject_record(make_record) -> ReadingRecord:
    return make_record(reader_id="r-subject", page=100)
