"""Tests for configuration loading.

**Feature: daily-checklist**
"""

import tempfile
from pathlib import Path

import toml

from dailycheck.config import (
    DEFAULT_ACCOUNT_NUMBER,
    DEFAULT_TRADER,
    create_template_config,
    get_account_number,
    get_trader,
    load_config,
    settings_from_config,
)
from dailycheck.models import RuleSettings


class TestConfig:
    def test_missing_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            assert load_config(Path(tmpdir) / "missing.toml") is None

    def test_unreadable_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.toml"
            path.write_text("[account\ntrader = ", encoding="utf-8")
            assert load_config(path) is None

    def test_template_round_trip(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = create_template_config(Path(tmpdir) / "nested" / "config.toml")
            config = load_config(path)

        assert get_trader(config) == DEFAULT_TRADER
        assert get_account_number(config) == DEFAULT_ACCOUNT_NUMBER
        assert settings_from_config(config) == RuleSettings()

    def test_rules_override_defaults(self):
        config = toml.loads(
            "[rules]\n"
            "max_risk_percent = 2.0\n"
            "require_journal_before_new_trade = false\n"
            "\n"
            "[[rules.allowed_sessions]]\n"
            "start = \"08:00\"\n"
            "end = \"12:00\"\n"
            "tz = \"UTC\"\n"
        )

        settings = settings_from_config(config)

        assert settings.max_risk_percent == 2.0
        assert settings.require_journal_before_new_trade is False
        assert settings.max_positions == 5
        assert settings.allowed_sessions[0].describe() == "08:00-12:00 (UTC)"

    def test_invalid_rules_fall_back(self):
        assert settings_from_config({"rules": {"max_positions": "lots"}}) == RuleSettings()

    def test_defaults_without_sections(self):
        assert get_trader({}) == DEFAULT_TRADER
        assert settings_from_config({}) == RuleSettings()
