# src/config/loader.py — v1
"""Formatting configuration: model, ancestor discovery, and merge.

Configuration files are named ``.cljfmt.json`` and hold a JSON object whose
keys are FormatConfig fields. Sources found in ancestor directories are
merged over the built-in defaults, outermost first, so the file closest to
the formatted path wins.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from cljfmt.config.settings import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".cljfmt.json"

# "inner" indents the body two spaces regardless of what precedes it. An
# integer n is a block rule: the body is indented two spaces once the form
# following the first n arguments starts a new line.
IndentRule = Union[int, Literal["inner"]]

DEFAULT_INDENTS: dict[str, IndentRule] = {
    "def": "inner",
    "defn": "inner",
    "defn-": "inner",
    "defmacro": "inner",
    "defmethod": "inner",
    "defprotocol": "inner",
    "defrecord": "inner",
    "deftype": "inner",
    "deftest": "inner",
    "fn": "inner",
    "reify": "inner",
    "ns": 1,
    "let": 1,
    "letfn": 1,
    "loop": 1,
    "binding": 1,
    "with-open": 1,
    "with-redefs": 1,
    "if": 1,
    "if-not": 1,
    "if-let": 1,
    "if-some": 1,
    "when": 1,
    "when-not": 1,
    "when-let": 1,
    "when-some": 1,
    "when-first": 1,
    "while": 1,
    "doseq": 1,
    "dotimes": 1,
    "for": 1,
    "case": 1,
    "cond->": 1,
    "cond->>": 1,
    "locking": 1,
    "testing": 1,
    "extend-protocol": 1,
    "extend-type": 1,
    "as->": 2,
    "catch": 2,
    "condp": 2,
    "proxy": 2,
    "try": 0,
    "finally": 0,
    "do": 0,
    "cond": 0,
    "comment": 0,
    "future": 0,
}


class FormatConfig(BaseModel):
    """Merged formatting configuration shared by every file under a root."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    indentation: bool = True
    remove_trailing_whitespace: bool = True
    remove_surrounding_whitespace: bool = True
    insert_missing_whitespace: bool = True
    remove_consecutive_blank_lines: bool = True
    max_consecutive_blank_lines: int = 1
    indents: dict[str, IndentRule] = Field(default_factory=lambda: dict(DEFAULT_INDENTS))
    file_pattern: str = r"\.clj[csx]?$|\.edn$"

    @field_validator("max_consecutive_blank_lines")
    @classmethod
    def validate_blank_lines(cls, v: int) -> int:
        if v < 0:
            raise ValueError("max_consecutive_blank_lines must be >= 0")
        return v

    @field_validator("indents")
    @classmethod
    def validate_indents(
        cls, v: dict[str, IndentRule],
    ) -> dict[str, IndentRule]:
        bad = sorted(k for k, n in v.items() if isinstance(n, int) and n < 0)
        if bad:
            raise ValueError(f"negative indent for: {', '.join(bad)}")
        return v

    @field_validator("file_pattern")
    @classmethod
    def validate_file_pattern(cls, v: str) -> str:
        try:
            re.compile(v)
        except re.error as exc:
            raise ValueError(f"invalid file_pattern regex: {exc}") from exc
        return v

    def matches(self, path: Path) -> bool:
        """Return True if the file name is eligible for formatting."""
        return re.search(self.file_pattern, path.name) is not None


DEFAULT_CONFIG = FormatConfig()


class ConfigSource(BaseModel):
    """One parsed configuration file."""

    path: Path
    settings: dict[str, Any]


def read_config(path: Path) -> ConfigSource:
    """Parse a single configuration file.

    Raises:
        ConfigurationError: If the file is unreadable, not a JSON object, or
            names keys FormatConfig does not know.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Failed to read config {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config {path} must contain a JSON object")
    unknown = sorted(set(data) - set(FormatConfig.model_fields))
    if unknown:
        raise ConfigurationError(
            f"Config {path} has unknown keys: {', '.join(unknown)}"
        )
    return ConfigSource(path=path, settings=data)


def find_parents(path: Path, depth: int) -> list[ConfigSource]:
    """Collect config files from the path's directory and up to ``depth``
    ancestors. Returned outermost first."""
    directory = path if path.is_dir() else path.parent
    found: list[ConfigSource] = []
    for level, candidate_dir in enumerate([directory, *directory.parents]):
        if level > depth:
            break
        candidate = candidate_dir / CONFIG_FILE_NAME
        if candidate.is_file():
            found.append(read_config(candidate))
    found.reverse()
    return found


def merge_settings(
    default: FormatConfig, *sources: ConfigSource,
) -> FormatConfig:
    """Merge sources over a base config; later sources win.

    The ``indents`` map merges key by key; other keys replace. Validation
    runs once on the fully merged value, so no partial result escapes.
    """
    merged: dict[str, Any] = default.model_dump()
    for source in sources:
        for key, value in source.settings.items():
            if key == "indents" and isinstance(value, dict):
                merged["indents"] = {**merged["indents"], **value}
            else:
                merged[key] = value
    try:
        return FormatConfig.model_validate(merged)
    except ValidationError as exc:
        origins = ", ".join(str(s.path) for s in sources) or "defaults"
        raise ConfigurationError(
            f"Invalid configuration from {origins}: {exc}"
        ) from exc


def load_config(path: Path, depth: int = 20) -> FormatConfig:
    """Load the merged configuration that applies to ``path``."""
    sources = find_parents(path, depth)
    if sources:
        logger.debug(
            "Using cljfmt configuration from %d sources for %s:\n%s",
            len(sources), path, "\n".join(str(s.path) for s in sources),
        )
    else:
        logger.debug("Using default cljfmt configuration for %s", path)
    return merge_settings(DEFAULT_CONFIG, *sources)
