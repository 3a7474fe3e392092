"""
Logging setup for Likemindr CLI runs.

``configure_logging(config)`` is called once by each CLI command before any
matching work. Library modules only ever do ``logging.getLogger(__name__)``;
they never add handlers themselves.

The engine emits one summary line per ``find_matches`` call and attaches the
request counters as ``extra=`` fields. In text mode those fields are already
part of the message; in JSON mode they become top-level keys so log
aggregators can filter on them::

    {"ts": "2026-10-19T15:00:00Z", "level": "INFO",
     "logger": "likemindr.matching.engine", "msg": "Matches for r-1 ...",
     "subject": "r-1", "book_id": "book-hobbit", "pool": 12,
     "above_threshold": 5, "returned": 5}
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional, TextIO

if TYPE_CHECKING:
    from likemindr.config import LoggingConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Keys every LogRecord carries; anything else arrived through extra=.
_RESERVED_KEYS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime"}


def record_context(record: logging.LogRecord) -> dict[str, Any]:
    """Fields passed to the logger call via ``extra=``."""
    return {
        key: val
        for key, val in record.__dict__.items()
        if key not in _RESERVED_KEYS and not key.startswith("_")
    }


class JsonLineFormatter(logging.Formatter):
    """One JSON object per record: ts, level, logger, msg, then context fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).strftime(
                LOG_DATE_FORMAT
            ),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        payload.update(record_context(record))
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(
    config: "LoggingConfig",
    stream: Optional[TextIO] = None,
) -> None:
    """Configure the root logger from a ``LoggingConfig`` instance.

    Args:
        config: Logging section of ``AppConfig``.
        stream: Console stream; defaults to ``sys.stdout``.
    """
    level = getattr(logging, config.level.upper(), logging.INFO)

    formatter: logging.Formatter
    if config.json_format:
        formatter = JsonLineFormatter()
    else:
        formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    handlers: list[logging.Handler] = [logging.StreamHandler(stream or sys.stdout)]

    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)

    logging.basicConfig(level=level, handlers=handlers, force=True)
