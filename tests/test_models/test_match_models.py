"""Tests for the Candidate model's consistency checks."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from likemindr.models.match import Candidate
from likemindr.models.reader import Book


class TestCandidate:
    def test_valid_triple(self, make_candidate):
        c = make_candidate(reader_id="r-7")
        assert c.reader_id == "r-7"
        assert c.record.book_id == c.book.book_id

    def test_record_for_other_reader_raises(self, book, make_reader, make_record):
        with pytest.raises(ValidationError, match="reader_id"):
            Candidate(
                reader=make_reader(reader_id="r-1"),
                record=make_record(reader_id="r-2"),
                book=book,
            )

    def test_record_for_other_book_raises(self, book, make_reader, make_record):
        with pytest.raises(ValidationError, match="book_id"):
            Candidate(
                reader=make_reader(reader_id="r-1"),
                record=make_record(reader_id="r-1", book_id="book-other"),
                book=book,
            )

    def test_other_book_is_consistent_when_record_matches(self, make_candidate):
        dune = Book(book_id="book-dune", title="Dune", author="Frank Herbert")
        c = make_candidate(candidate_book=dune)
        assert c.record.book_id == "book-dune"
