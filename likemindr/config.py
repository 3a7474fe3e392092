"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      — committed static defaults
  2. ``config/local.toml``        — optional local overrides (gitignored)
  3. ``.env``                     — local env overrides (gitignored)
  4. Environment variables        — ``LIKEMINDR_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

The matching engine itself never reads configuration; the CLI (or any other
calling layer) loads an ``AppConfig`` and passes plain values such as
``threshold`` and ``limit`` into ``find_matches()``.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

# ── Sub-config models ─────────────────────────────────────────────────────────


class MatchingConfig(BaseModel):
    """Defaults for the score → filter → rank → reason pipeline."""

    model_config = ConfigDict(frozen=True)

    threshold: int = 40
    limit: int = 10
    compose_reasons: bool = False
    chunk_size: int = 500

    @field_validator("threshold")
    @classmethod
    def validate_threshold(cls, v: int) -> int:
        if not 0 <= v <= 100:
            raise ValueError(f"threshold must be in [0, 100], got {v}.")
        return v

    @field_validator("limit")
    @classmethod
    def validate_limit(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"limit must be >= 0, got {v}.")
        return v

    @field_validator("chunk_size")
    @classmethod
    def validate_chunk_size(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"chunk_size must be >= 1, got {v}.")
        return v


class ActivityConfig(BaseModel):
    """Windows used to decide whether a reader counts as active."""

    model_config = ConfigDict(frozen=True)

    active_reader_max_days: float = 7.0
    active_reason_hours: float = 24.0


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration — the single source of truth.

    Constructed by ``load_config()`` which merges TOML + .env + env vars.
    """

    model_config = ConfigDict(frozen=True)

    matching: MatchingConfig = MatchingConfig()
    activity: ActivityConfig = ActivityConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If the specified ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    load_dotenv(dotenv_path=root / ".env", override=False)

    if config_path is None:
        config_path = root / "config" / "default.toml"

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            "Create config/default.toml or pass --config."
        )

    with open(config_path, "rb") as f:
        raw: dict[str, Any] = tomllib.load(f)

    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        with open(local_config_path, "rb") as f:
            local_raw: dict[str, Any] = tomllib.load(f)
        raw = _deep_merge(raw, local_raw)

    raw = _apply_env_overrides(raw)

    return _build_app_config(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply LIKEMINDR_* env vars to the raw config dict.

    Supported overrides:
      LIKEMINDR_LOG_LEVEL        → raw["logging"]["level"]
      LIKEMINDR_MATCH_THRESHOLD  → raw["matching"]["threshold"]
      LIKEMINDR_MATCH_LIMIT      → raw["matching"]["limit"]
      LIKEMINDR_DEBUG            → raw["debug"]
    """
    if log_level := os.environ.get("LIKEMINDR_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if threshold := os.environ.get("LIKEMINDR_MATCH_THRESHOLD"):
        raw.setdefault("matching", {})["threshold"] = int(threshold)

    if limit := os.environ.get("LIKEMINDR_MATCH_LIMIT"):
        raw.setdefault("matching", {})["limit"] = int(limit)

    if debug := os.environ.get("LIKEMINDR_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    project = raw.pop("project", {})

    return AppConfig(
        matching=MatchingConfig(**raw.get("matching", {})),
        activity=ActivityConfig(**raw.get("activity", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
