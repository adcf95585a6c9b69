# tests/unit/config/test_settings.py — v1
"""Tests for config/settings.py — typed RunSettings and validation rules."""

from __future__ import annotations

import os

import pytest
from pydantic import ValidationError

from cljfmt.config.settings import ConfigurationError, RunSettings, load_settings


class TestSettingsDefaults:
    def test_output_flags(self):
        s = RunSettings(_env_file=None)
        assert s.verbose is False
        assert s.no_color is False
        assert s.log_level == "INFO"

    def test_batch_defaults(self):
        s = RunSettings(_env_file=None)
        assert s.max_workers is None
        assert s.config_search_depth == 20
        assert s.worker_limit == min(32, (os.cpu_count() or 1) + 4)

    def test_verbose_sets_debug(self):
        assert RunSettings(_env_file=None, verbose=True).log_level == "DEBUG"

    def test_frozen(self):
        s = RunSettings(_env_file=None)
        with pytest.raises(ValidationError):
            s.verbose = True


class TestSettingsEnvironment:
    def test_env_prefix(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("CLJFMT_NO_COLOR", "true")
        monkeypatch.setenv("CLJFMT_MAX_WORKERS", "3")
        s = RunSettings(_env_file=None)
        assert s.no_color is True
        assert s.worker_limit == 3

    def test_overrides_win(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("CLJFMT_MAX_WORKERS", "3")
        s = load_settings(_env_file=None, max_workers=7)
        assert s.max_workers == 7


class TestSettingsValidation:
    def test_zero_workers(self):
        with pytest.raises(ConfigurationError, match="max_workers"):
            load_settings(_env_file=None, max_workers=0)

    def test_negative_depth(self):
        with pytest.raises(ConfigurationError, match="Invalid run settings"):
            load_settings(_env_file=None, config_search_depth=-1)

    def test_bad_rotation(self):
        with pytest.raises(ConfigurationError, match="Invalid size format"):
            load_settings(_env_file=None, log_rotation="lots")

    def test_bad_log_format(self):
        with pytest.raises(ConfigurationError):
            load_settings(_env_file=None, log_format="xml")
