"""
Candidate pool helpers for the calling layer.

The engine never discovers candidates or reads files. These helpers are for
the code around it: the CLI loads a ``MatchRequest`` from JSON, and a
service that already has reading records can narrow them down with
``eligible_candidates()`` before calling ``find_matches()``.

JSON request format
-------------------
    {
      "subject":        {Reader fields},
      "subject_record": {ReadingRecord fields},
      "candidates": [
        {"reader": {...}, "record": {...}, "book": {...}},
        ...
      ]
    }

Timestamps are ISO 8601 strings; naive values are read as UTC.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict

from likemindr.matching.reasons import ACTIVE_READER_MAX_DAYS, is_active_reader
from likemindr.models.match import Candidate
from likemindr.models.reader import Reader, ReadingRecord
from likemindr.utils.time_utils import ensure_utc, utcnow

log = logging.getLogger(__name__)


class MatchRequest(BaseModel):
    """A subject plus the pool to match them against."""

    model_config = ConfigDict(frozen=True)

    subject: Reader
    subject_record: ReadingRecord
    candidates: tuple[Candidate, ...] = ()


def load_match_request(path: Path) -> MatchRequest:
    """Read and validate a ``MatchRequest`` JSON file.

    Raises:
        FileNotFoundError: ``path`` does not exist.
        json.JSONDecodeError: The file is not valid JSON.
        pydantic.ValidationError: The content does not fit the models.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Match request file not found: {path}")

    with open(path, encoding="utf-8") as f:
        raw = json.load(f)

    request = MatchRequest.model_validate(raw)
    log.debug(
        "Loaded match request from %s: subject=%s, %d candidates",
        path, request.subject.reader_id, len(request.candidates),
    )
    return request


def eligible_candidates(
    subject_record: ReadingRecord,
    candidates:     Iterable[Candidate],
    now:            Optional[datetime] = None,
    max_days:       float = ACTIVE_READER_MAX_DAYS,
) -> list[Candidate]:
    """Keep candidates worth scoring against ``subject_record``.

    A candidate is kept when it is for the same book, is not the subject,
    and its record passes ``is_active_reader``. Input order is preserved.
    """
    now = ensure_utc(now) if now is not None else utcnow()
    kept: list[Candidate] = []
    for c in candidates:
        if c.record.book_id != subject_record.book_id:
            continue
        if c.reader.reader_id == subject_record.reader_id:
            continue
        if not is_active_reader(c.record, now=now, max_days=max_days):
            continue
        kept.append(c)
    return kept
