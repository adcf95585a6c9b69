# src/format/diff.py — v1
"""Unified diff rendering and ANSI colorization for check output."""

from __future__ import annotations

import difflib
import io

from rich.console import Console
from rich.text import Text

# Line prefix -> rich style. Order matters: file headers before +/- lines.
_LINE_STYLES: list[tuple[str, str]] = [
    ("---", "bold"),
    ("+++", "bold"),
    ("@@", "cyan"),
    ("-", "red"),
    ("+", "green"),
]


def unified_diff(path: str, original: str, revised: str, context: int = 3) -> str:
    """Render a unified diff between two versions of a file.

    Lines without a trailing newline get one in the diff so that hunks
    always render on separate lines.
    """
    lines = difflib.unified_diff(
        original.splitlines(keepends=True),
        revised.splitlines(keepends=True),
        fromfile=f"a/{path}",
        tofile=f"b/{path}",
        n=context,
    )
    return "".join(line if line.endswith("\n") else line + "\n" for line in lines)


def _style_for(line: str) -> str | None:
    for prefix, style in _LINE_STYLES:
        if line.startswith(prefix):
            return style
    return None


def colorize_diff(diff: str) -> str:
    """Add ANSI color codes to a unified diff."""
    text = Text()
    for line in diff.splitlines(keepends=True):
        text.append(line, style=_style_for(line))

    console = Console(
        file=io.StringIO(),
        force_terminal=True,
        color_system="standard",
        highlight=False,
        soft_wrap=True,
        width=10_000,
    )
    with console.capture() as capture:
        console.print(text, end="")
    return capture.get()
