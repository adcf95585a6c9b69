# src/batch/operations.py — v1
"""Per-file operations run by the batch runner.

Both operations read the file, reformat it, and compare. ``check`` never
writes; ``fix`` overwrites files whose content changed. The write is a
plain overwrite, so an interrupted fix can leave a partially written file.
"""

from __future__ import annotations

import functools
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Literal

from cljfmt.batch.models import Outcome
from cljfmt.format.diff import colorize_diff, unified_diff
from cljfmt.format.reformatter import reformat_string

if TYPE_CHECKING:
    from cljfmt.config.loader import FormatConfig
    from cljfmt.config.settings import RunSettings

Operation = Callable[["FormatConfig", str, Path], Outcome]
BatchCommand = Literal["check", "fix"]


def _read(file: Path) -> str:
    # newline="" keeps CRLF line endings visible to the formatter.
    with file.open(encoding="utf-8", newline="") as fh:
        return fh.read()


def _write(file: Path, text: str) -> None:
    with file.open("w", encoding="utf-8", newline="") as fh:
        fh.write(text)


def check_source(
    settings: RunSettings, config: FormatConfig, path: str, file: Path,
) -> Outcome:
    """Check a single source file and produce an Outcome."""
    original = _read(file)
    revised = reformat_string(original, config)
    if original == revised:
        return Outcome(
            kind="correct",
            debug_message=f"Source file {path} is formatted correctly",
        )

    diff = unified_diff(path, original, revised)
    if not settings.no_color:
        diff = colorize_diff(diff)
    return Outcome(
        kind="incorrect",
        debug_message=f"Source file {path} is formatted incorrectly",
        info=diff,
    )


def fix_source(
    settings: RunSettings, config: FormatConfig, path: str, file: Path,
) -> Outcome:
    """Fix a single source file in place and produce an Outcome."""
    original = _read(file)
    revised = reformat_string(original, config)
    if original == revised:
        return Outcome(
            kind="correct",
            debug_message=f"Source file {path} is formatted correctly",
        )

    _write(file, revised)
    return Outcome(kind="fixed", info=f"Reformatting source file {path}")


OPERATIONS: dict[str, Callable[..., Outcome]] = {
    "check": check_source,
    "fix": fix_source,
}


def bind_operation(command: BatchCommand, settings: RunSettings) -> Operation:
    """Return the (config, path, file) -> Outcome callable for a command."""
    try:
        operation = OPERATIONS[command]
    except KeyError:
        raise ValueError(f"Not a batch command: {command!r}") from None
    return functools.partial(operation, settings)
