# src/batch/roots.py — v1
"""Root resolution — turn command-line path arguments into canonical roots."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

logger = logging.getLogger(__name__)


class RootResolutionError(Exception):
    """Raised when a path argument does not name an existing location."""


def resolve_roots(paths: Sequence[str | Path]) -> list[Path]:
    """Canonicalize each path argument, defaulting to the current directory.

    Symbolic links are resolved and relative segments collapsed. Order
    follows the arguments.

    Raises:
        RootResolutionError: If any path does not exist. No roots are
            returned in that case, since a bad path is a usage mistake.
    """
    roots: list[Path] = []
    for raw in paths or ["."]:
        try:
            roots.append(Path(raw).expanduser().resolve(strict=True))
        except (OSError, RuntimeError) as exc:
            raise RootResolutionError(f"Path does not exist: {raw}") from exc
    logger.debug("Resolved %d search roots: %s", len(roots), ", ".join(map(str, roots)))
    return roots
