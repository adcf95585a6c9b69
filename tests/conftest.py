# tests/conftest.py — v1
"""Shared test fixtures for unit and integration tests.

Provides run settings, the default formatting config, and small Clojure
source trees written under tmp_path.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from cljfmt.config.loader import DEFAULT_CONFIG, FormatConfig
from cljfmt.config.settings import RunSettings

# === Sample sources ===

CORRECT_SOURCE = "(ns a)\n\n(defn foo [x]\n  (inc x))\n"
INCORRECT_SOURCE = "(ns b)\n\n\n(def y 1)\n"
REFORMATTED_SOURCE = "(ns b)\n\n(def y 1)\n"
BROKEN_SOURCE = "(ns c)\n\n(defn bar [x]\n  (inc x)\n"


# === FIXTURES: Settings ===


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep CLJFMT_* variables from the developer's shell out of tests."""
    for name in list(os.environ):
        if name.startswith("CLJFMT_"):
            monkeypatch.delenv(name)


@pytest.fixture
def settings() -> RunSettings:
    """Default run settings with colors disabled."""
    return RunSettings(_env_file=None, no_color=True)


@pytest.fixture
def default_config() -> FormatConfig:
    return DEFAULT_CONFIG


# === FIXTURES: Source trees ===


@pytest.fixture
def clj_tree(tmp_path: Path) -> Path:
    """Project with one correctly and one incorrectly formatted file."""
    root = tmp_path / "project"
    root.mkdir()
    (root / "a.clj").write_text(CORRECT_SOURCE, encoding="utf-8")
    (root / "b.clj").write_text(INCORRECT_SOURCE, encoding="utf-8")
    return root


@pytest.fixture
def nested_tree(tmp_path: Path) -> Path:
    """Project with sources in nested and hidden directories."""
    root = tmp_path / "nested"
    for rel, content in [
        ("src/app/core.clj", CORRECT_SOURCE),
        ("src/app/util.cljs", INCORRECT_SOURCE),
        ("test/app/core_test.cljc", CORRECT_SOURCE),
        ("resources/config.edn", "{:port 8080}\n"),
        ("README.md", "# readme\n"),
        (".git/hooks/pre-commit.clj", INCORRECT_SOURCE),
    ]:
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root
