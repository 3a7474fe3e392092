"""
Reader, book, and reading-progress models.

These are the in-memory shapes the calling layer hands to the matching
engine. The engine never mutates them, so every model is frozen.

``ReadingRecord`` ties exactly one reader to exactly one book. Its
``current_page`` is optional because "want to read" entries often have no
progress yet; scoring rejects records without a page.

All datetimes are normalised to aware UTC on construction.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from likemindr.taxonomy.reading_status import ReadingStatus
from likemindr.utils.time_utils import ensure_utc


class Reader(BaseModel):
    """A reader profile as seen by the matching engine.

    Attributes:
        reader_id: Stable identity; used as the final ranking tiebreaker.
        username: Display name.
        email: Optional contact address (never used in scoring).
        avatar_id: Avatar slug chosen at sign-up.
        bio: Optional free-text profile blurb.
        favorite_genres: Genres in the reader's own order; compared
            case-insensitively.
        created_at: Account creation time.
        last_active: Last time the reader was seen in the app.
    """

    model_config = ConfigDict(frozen=True)

    reader_id: str
    username: str
    email: Optional[str] = None
    avatar_id: Optional[str] = None
    bio: Optional[str] = None
    favorite_genres: tuple[str, ...] = ()
    created_at: Optional[datetime] = None
    last_active: datetime

    @field_validator("reader_id")
    @classmethod
    def validate_reader_id(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("reader_id must not be empty.")
        return v

    @field_validator("favorite_genres")
    @classmethod
    def strip_genres(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(g.strip() for g in v if g and g.strip())

    @field_validator("created_at", "last_active")
    @classmethod
    def normalise_timestamps(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v) if v is not None else None


class Book(BaseModel):
    """Catalog entry for a book. Referenced, never mutated, by the engine."""

    model_config = ConfigDict(frozen=True)

    book_id: str
    title: str
    author: str
    genres: tuple[str, ...] = ()
    google_books_id: Optional[str] = None
    cover_url: Optional[str] = None
    description: Optional[str] = None
    page_count: Optional[int] = None
    isbn: Optional[str] = None

    @field_validator("page_count")
    @classmethod
    def validate_page_count(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 0:
            raise ValueError(f"page_count must be non-negative, got {v}.")
        return v


class ReadingRecord(BaseModel):
    """One reader's progress through one book.

    Attributes:
        record_id: Storage PK, if the record has been persisted.
        reader_id: Owning reader.
        book_id: Book being read.
        status: Where the reader is with this book.
        current_page: Last page reached; ``None`` when no progress is logged.
        started_at: When the reader started the book.
        finished_at: When the reader finished the book.
        created_at: Record creation time.
        updated_at: Last progress update; drives ``is_active_reader``.
    """

    model_config = ConfigDict(frozen=True)

    record_id: Optional[str] = None
    reader_id: str
    book_id: str
    status: ReadingStatus
    current_page: Optional[int] = None
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    @field_validator("current_page")
    @classmethod
    def validate_current_page(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 0:
            raise ValueError(f"current_page must be non-negative, got {v}.")
        return v

    @field_validator("started_at", "finished_at", "created_at", "updated_at")
    @classmethod
    def normalise_timestamps(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v) if v is not None else None

    @model_validator(mode="after")
    def validate_timestamps(self) -> "ReadingRecord":
        if self.updated_at < self.created_at:
            raise ValueError(
                f"updated_at ({self.updated_at}) must be >= created_at ({self.created_at})."
            )
        return self
