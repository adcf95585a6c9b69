# src/batch/scanner.py — v1
"""File discovery — enumerate the source files under a root."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from cljfmt.config.loader import FormatConfig

logger = logging.getLogger(__name__)


def logical_path(path: Path, cwd: Path | None = None) -> str:
    """Path string used in reports: relative to ``cwd`` when under it."""
    base = cwd or Path.cwd()
    try:
        return str(path.relative_to(base))
    except ValueError:
        return str(path)


def discover_files(
    root: Path, config: FormatConfig, cwd: Path | None = None,
) -> list[tuple[str, Path]]:
    """List (logical_path, file) pairs to process under ``root``.

    A file root is returned as-is, whatever its name. A directory root is
    walked recursively, skipping hidden directories and keeping files that
    match ``config.file_pattern``. Order is sorted for stable display only.
    """
    if root.is_file():
        return [(logical_path(root, cwd), root)]
    if not root.is_dir():
        msg = f"Root is neither a file nor a directory: {root}"
        raise ValueError(msg)

    found: list[tuple[str, Path]] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
        for name in sorted(filenames):
            path = Path(dirpath) / name
            if config.matches(path):
                found.append((logical_path(path, cwd), path))

    logger.debug("Found %d source files under %s", len(found), root)
    return found
