"""
Likemindr — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Validate inputs.
  4. Execute action.
  5. Report result to stdout.

Install and run::

    pip install -e .
    likemindr --help
    likemindr validate-config
    likemindr match --input request.json --limit 5
    likemindr genres
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="likemindr",
    help="Likemindr — match readers who are reading the same book.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from likemindr.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from likemindr.utils.logging import configure_logging
    configure_logging(config.logging)


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Match threshold:  {config.matching.threshold}")
    typer.echo(f"  Match limit:      {config.matching.limit}")
    typer.echo(f"  Compose reasons:  {config.matching.compose_reasons}")
    typer.echo(f"  Active window:    {config.activity.active_reader_max_days} days")
    typer.echo(f"  Log level:        {config.logging.level}")
    typer.echo(f"  Debug mode:       {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("match")
def match(
    input_path: str = typer.Option(
        ...,
        "--input",
        "-i",
        help="JSON file with subject, subject_record and candidates.",
    ),
    threshold: Optional[int] = typer.Option(
        None,
        "--threshold",
        help="Minimum score to keep (default from config).",
    ),
    limit: Optional[int] = typer.Option(
        None,
        "--limit",
        "-n",
        help="Max matches returned (default from config).",
    ),
    compose_reasons: bool = typer.Option(
        False,
        "--compose-reasons",
        help="Join every qualifying reason instead of the top one.",
    ),
    only_eligible: bool = typer.Option(
        False,
        "--only-eligible",
        help="Drop candidates that are not actively reading the book first.",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print results as JSON instead of a table.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Rank the candidates in a match request file for its subject."""
    from pydantic import ValidationError

    from likemindr.matching.engine import find_matches
    from likemindr.matching.exceptions import MatchValidationError
    from likemindr.matching.formatters import format_match_table, results_to_dicts
    from likemindr.matching.pool import eligible_candidates, load_match_request
    from likemindr.utils.time_utils import utcnow

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    try:
        request = load_match_request(Path(input_path))
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except (json.JSONDecodeError, ValidationError) as exc:
        typer.echo(f"[ERROR] Invalid match request: {exc}", err=True)
        raise typer.Exit(code=1)

    now = utcnow()
    candidates = list(request.candidates)
    if only_eligible:
        candidates = eligible_candidates(
            request.subject_record,
            candidates,
            now=now,
            max_days=config.activity.active_reader_max_days,
        )

    try:
        results = find_matches(
            request.subject,
            request.subject_record,
            candidates,
            now=now,
            threshold=threshold if threshold is not None else config.matching.threshold,
            limit=limit if limit is not None else config.matching.limit,
            compose_reasons=compose_reasons or config.matching.compose_reasons,
            chunk_size=config.matching.chunk_size,
            active_hours=config.activity.active_reason_hours,
        )
    except MatchValidationError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(json.dumps(results_to_dicts(results), indent=2, default=str))
        return

    book_title = request.candidates[0].book.title if request.candidates else ""
    typer.echo(format_match_table(results, book_title=book_title))


@app.command("genres")
def genres() -> None:
    """List the genres readers can pick as favorites."""
    from likemindr.taxonomy.genres import Genre, get_genre_emoji

    for genre in Genre:
        typer.echo(f"  {get_genre_emoji(genre)} {genre.value}")


if __name__ == "__main__":
    app()
