# src/version.py — v1
"""Project version string, read from installed package metadata."""

from __future__ import annotations

from importlib import metadata

DISTRIBUTION = "cljfmt-tool"

try:
    __version__ = metadata.version(DISTRIBUTION)
except metadata.PackageNotFoundError:
    __version__ = "HEAD"


def version_string() -> str:
    """Return the text printed by the ``version`` command."""
    if __version__ == "HEAD":
        return "HEAD"
    return f"{DISTRIBUTION} {__version__}"
