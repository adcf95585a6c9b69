# tests/unit/config/test_unit_loader.py — v1
"""Tests for config/loader.py — discovery and merging of .cljfmt.json files."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from cljfmt.config.loader import (
    CONFIG_FILE_NAME,
    DEFAULT_CONFIG,
    ConfigSource,
    FormatConfig,
    find_parents,
    load_config,
    merge_settings,
    read_config,
)
from cljfmt.config.settings import ConfigurationError


def _write_config(directory: Path, data: object) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / CONFIG_FILE_NAME
    path.write_text(json.dumps(data))
    return path


class TestFormatConfig:
    def test_defaults(self):
        assert DEFAULT_CONFIG.indentation is True
        assert DEFAULT_CONFIG.max_consecutive_blank_lines == 1
        assert DEFAULT_CONFIG.indents["defn"] == "inner"
        assert DEFAULT_CONFIG.indents["let"] == 1

    @pytest.mark.parametrize("name,expected", [
        ("core.clj", True),
        ("core.cljs", True),
        ("core.cljc", True),
        ("user.cljx", True),
        ("deps.edn", True),
        ("core.py", False),
        ("clj", False),
    ])
    def test_matches(self, name, expected):
        assert DEFAULT_CONFIG.matches(Path(name)) is expected

    def test_rejects_bad_pattern(self):
        with pytest.raises(ValueError, match="file_pattern"):
            FormatConfig(file_pattern="(")

    def test_rejects_negative_block(self):
        with pytest.raises(ValueError, match="negative indent"):
            FormatConfig(indents={"foo": -1})


class TestReadConfig:
    def test_reads_object(self, tmp_path: Path):
        path = _write_config(tmp_path, {"indentation": False})
        source = read_config(path)
        assert source.settings == {"indentation": False}

    def test_invalid_json(self, tmp_path: Path):
        path = tmp_path / CONFIG_FILE_NAME
        path.write_text("{oops")
        with pytest.raises(ConfigurationError, match="Failed to read config"):
            read_config(path)

    def test_not_an_object(self, tmp_path: Path):
        path = _write_config(tmp_path, [1, 2])
        with pytest.raises(ConfigurationError, match="JSON object"):
            read_config(path)

    def test_unknown_keys(self, tmp_path: Path):
        path = _write_config(tmp_path, {"indentatoin": False})
        with pytest.raises(ConfigurationError, match="unknown keys: indentatoin"):
            read_config(path)


class TestFindParents:
    def test_outermost_first(self, tmp_path: Path):
        outer = _write_config(tmp_path / "repo", {"indentation": False})
        inner = _write_config(tmp_path / "repo" / "src", {"indentation": True})
        target = tmp_path / "repo" / "src" / "core.clj"
        target.write_text("(ns core)\n")
        assert [s.path for s in find_parents(target, 20)] == [outer, inner]

    def test_directory_path_includes_itself(self, tmp_path: Path):
        own = _write_config(tmp_path / "repo", {})
        assert [s.path for s in find_parents(tmp_path / "repo", 0)] == [own]

    def test_depth_limit(self, tmp_path: Path):
        _write_config(tmp_path / "a", {})
        deep = tmp_path / "a" / "b" / "c"
        deep.mkdir(parents=True)
        assert find_parents(deep, 1) == []
        assert len(find_parents(deep, 2)) == 1


class TestMergeSettings:
    def test_no_sources(self):
        assert merge_settings(DEFAULT_CONFIG) == DEFAULT_CONFIG

    def test_later_sources_win(self):
        a = ConfigSource(path=Path("a"), settings={"max_consecutive_blank_lines": 3})
        b = ConfigSource(path=Path("b"), settings={"max_consecutive_blank_lines": 2})
        assert merge_settings(DEFAULT_CONFIG, a, b).max_consecutive_blank_lines == 2

    def test_indents_merge_by_key(self):
        a = ConfigSource(path=Path("a"), settings={"indents": {"my-macro": 1}})
        b = ConfigSource(path=Path("b"), settings={"indents": {"let": "inner"}})
        merged = merge_settings(DEFAULT_CONFIG, a, b)
        assert merged.indents["my-macro"] == 1
        assert merged.indents["let"] == "inner"
        assert merged.indents["defn"] == "inner"

    def test_invalid_merge_raises(self):
        bad = ConfigSource(path=Path("bad"), settings={"max_consecutive_blank_lines": -2})
        with pytest.raises(ConfigurationError, match="Invalid configuration from bad"):
            merge_settings(DEFAULT_CONFIG, bad)


class TestLoadConfig:
    def test_default_when_no_files(self, tmp_path: Path):
        assert load_config(tmp_path, depth=0) == DEFAULT_CONFIG

    def test_merges_ancestors(self, tmp_path: Path):
        _write_config(tmp_path / "repo", {"remove_trailing_whitespace": False})
        _write_config(tmp_path / "repo" / "src", {"indents": {"defthing": "inner"}})
        config = load_config(tmp_path / "repo" / "src", depth=5)
        assert config.remove_trailing_whitespace is False
        assert config.indents["defthing"] == "inner"

    def test_does_not_touch_filesystem(self, tmp_path: Path):
        _write_config(tmp_path, {"indentation": False})
        before = sorted(p.name for p in tmp_path.iterdir())
        load_config(tmp_path, depth=0)
        assert sorted(p.name for p in tmp_path.iterdir()) == before
