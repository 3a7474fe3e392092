"""Reading status values for a reader's progress through a book."""

from enum import StrEnum


class ReadingStatus(StrEnum):
    """Where a reader is with a book."""

    CURRENTLY_READING = "currently_reading"
    WANT_TO_READ = "want_to_read"
    FINISHED = "finished"
