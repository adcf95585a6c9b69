# src/config/settings.py — v1
"""Typed run configuration loaded from the environment via pydantic-settings.

A single immutable RunSettings value is built by the CLI and passed to every
component that needs verbosity, color or parallelism options. Command-line
flags override the CLJFMT_* environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

from pydantic import ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when run or formatting configuration is invalid."""


class RunSettings(BaseSettings):
    """Options for one invocation of the tool."""

    model_config = SettingsConfigDict(
        env_prefix="CLJFMT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # === Output ===
    verbose: bool = False
    no_color: bool = False

    # === Batch execution ===
    max_workers: int | None = None
    config_search_depth: int = 20

    # === Logging ===
    log_format: Literal["text", "json"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 5

    # --- Validators ---

    @field_validator("max_workers")
    @classmethod
    def validate_max_workers(cls, v: int | None) -> int | None:
        if v is not None and v < 1:
            raise ValueError("max_workers must be >= 1")
        return v

    @field_validator("config_search_depth", "log_retention")
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("value must be >= 0")
        return v

    @model_validator(mode="after")
    def validate_logging(self) -> RunSettings:
        """Reject rotation sizes the file handler cannot parse."""
        from cljfmt.logging.handlers import parse_size

        parse_size(self.log_rotation)
        return self

    # --- Helpers ---

    @property
    def worker_limit(self) -> int:
        """Number of files processed concurrently."""
        if self.max_workers is not None:
            return self.max_workers
        return min(32, (os.cpu_count() or 1) + 4)

    @property
    def log_level(self) -> str:
        return "DEBUG" if self.verbose else "INFO"


def load_settings(**overrides: object) -> RunSettings:
    """Load run settings from the environment with optional overrides.

    Args:
        **overrides: Field-level overrides, typically from command-line flags.

    Returns:
        Validated, frozen RunSettings instance.

    Raises:
        ConfigurationError: If any value fails validation.
    """
    try:
        return RunSettings(**overrides)  # type: ignore[arg-type]
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid run settings: {exc}") from exc
