"""
Plain-text and JSON-ready renderings of match results for the CLI.

All formatters accept ``MatchResult`` lists and return strings or dicts
suitable for ``typer.echo()`` / ``json.dumps()``. No I/O here.

Table layout::

    Rank  Reader          Page  Score  Prog  Genre  Rec  Temp  Reason
    ------------------------------------------------------------------
       1  maya_reads       112     90    28     25   22    15  Both love Fantasy
"""

from __future__ import annotations

from typing import Any

from likemindr.matching.engine import MatchResult
from likemindr.taxonomy.genres import get_genre_emoji


def results_to_dicts(results: list[MatchResult]) -> list[dict[str, Any]]:
    """One JSON-ready dict per result: profile, score, breakdown, reason."""
    rows: list[dict[str, Any]] = []
    for r in results:
        row = r.to_matched_reader()
        row["rank"] = r.rank
        row["breakdown"] = r.breakdown.as_dict()
        rows.append(row)
    return rows


def format_genres(genres: list[str] | tuple[str, ...]) -> str:
    """``"🐉 Fantasy, 🔍 Mystery"``; empty input renders as ``"-"``."""
    if not genres:
        return "-"
    return ", ".join(f"{get_genre_emoji(g)} {g}" for g in genres)


def format_match_table(results: list[MatchResult], book_title: str = "") -> str:
    """Format ranked matches as a fixed-width ASCII table.

    Args:
        results:    Ranked results from ``find_matches()``.
        book_title: Optional title for the header line.

    Returns:
        Multi-line string.
    """
    lines: list[str] = []
    lines.append("")
    lines.append("=== Reader Matches ===")
    if book_title:
        lines.append(f"  Book: {book_title}")

    if not results:
        lines.append("")
        lines.append("  (no matches above threshold)")
        return "\n".join(lines)

    header = (
        f"  {'Rank':>4}  {'Reader':<16}  {'Page':>5}  {'Score':>5}  "
        f"{'Prog':>4}  {'Genre':>5}  {'Rec':>3}  {'Temp':>4}  Reason"
    )
    lines.append("")
    lines.append(header)
    lines.append("  " + "-" * (len(header) + 12))

    for r in results:
        b = r.breakdown
        page = r.candidate.record.current_page
        lines.append(
            f"  {r.rank:>4}  {r.candidate.reader.username[:16]:<16}  "
            f"{page if page is not None else '-':>5}  {r.score:>5}  "
            f"{b.progress:>4}  {b.genre:>5}  {b.recency:>3}  {b.temporal:>4}  "
            f"{r.reason}"
        )

    return "\n".join(lines)
