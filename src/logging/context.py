# src/logging/context.py — v1
"""Contextual logging support — attach command and file path to log records.

Context variables are copied into worker threads by asyncio.to_thread, so a
path set inside a per-file task is visible to every record that task emits.
"""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

_command: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "command", default=None
)
_path: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "path", default=None
)


@dataclass(frozen=True)
class LogContext:
    """Immutable snapshot of current logging context."""

    command: str | None = None
    path: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(command=_command.get(), path=_path.get())


def set_command_context(command: str) -> None:
    """Set the command being run (called once per invocation)."""
    _command.set(command)


def set_path_context(path: str | None) -> None:
    """Set the file currently being processed (called per work item)."""
    _path.set(path)


def clear_context() -> None:
    """Reset all context variables."""
    _command.set(None)
    _path.set(None)
