"""Errors raised by the matching engine."""


class MatchValidationError(ValueError):
    """Scoring inputs are malformed or inconsistent.

    Raised for mismatched book references and missing or negative
    ``current_page`` values. Never retried or coerced internally.
    """


class MatchCancelledError(RuntimeError):
    """Scoring was stopped between chunks by the caller's ``should_continue``."""
