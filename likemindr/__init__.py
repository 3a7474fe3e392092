"""Likemindr — pairs readers who are reading the same book."""

__version__ = "0.1.0"
