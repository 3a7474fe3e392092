"""
Candidate model: one potential match for a subject reader.

A ``Candidate`` bundles the other reader, their reading record, and the book
that record points at. The caller builds the pool; the engine assumes every
candidate's record is for the subject's book and ``compute_score`` fails
loudly if it is not.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, model_validator

from likemindr.models.reader import Book, Reader, ReadingRecord


class Candidate(BaseModel):
    """A (reader, reading record, book) triple under evaluation.

    Attributes:
        reader: The candidate reader's profile.
        record: The candidate's reading record for ``book``.
        book: The shared book.
    """

    model_config = ConfigDict(frozen=True)

    reader: Reader
    record: ReadingRecord
    book: Book

    @model_validator(mode="after")
    def validate_triple(self) -> "Candidate":
        if self.record.reader_id != self.reader.reader_id:
            raise ValueError(
                f"record.reader_id ({self.record.reader_id}) does not match "
                f"reader.reader_id ({self.reader.reader_id})."
            )
        if self.record.book_id != self.book.book_id:
            raise ValueError(
                f"record.book_id ({self.record.book_id}) does not match "
                f"book.book_id ({self.book.book_id})."
            )
        return self

    @property
    def reader_id(self) -> str:
        return self.reader.reader_id
