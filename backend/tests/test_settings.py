"""
PURPOSE: Tests for configuration loading.

Covers defaults, environment overrides, Discord placeholder detection and
validation of the notification timezone.
"""

import pytest
from pydantic import ValidationError

from signal_relay.config.settings import (
    DISCORD_CHANNEL_PLACEHOLDER,
    DISCORD_TOKEN_PLACEHOLDER,
    Settings,
)


def _settings(**overrides):
    return Settings(_env_file=None, **overrides)


class TestDefaults:
    """Test values used when nothing is configured."""

    def test_defaults(self, monkeypatch):
        for name in ("PORT", "WEBHOOK_SECRET", "DISCORD_BOT_TOKEN", "DISCORD_CHANNEL_ID"):
            monkeypatch.delenv(name, raising=False)

        settings = _settings()

        assert settings.PORT == 3000
        assert settings.WEBHOOK_SECRET == ""
        assert settings.MAX_BODY_BYTES == 10 * 1024 * 1024
        assert settings.RATE_LIMIT == "100 per 15 minutes"
        assert settings.discord_enabled() is False

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("WEBHOOK_SECRET", "hunter2")

        settings = _settings()

        assert settings.PORT == 8080
        assert settings.WEBHOOK_SECRET == "hunter2"

    def test_log_level_normalized(self):
        assert _settings(LOG_LEVEL=" debug ").LOG_LEVEL == "DEBUG"


class TestDiscordConfigured:
    """Test detection of usable Discord credentials."""

    def test_real_values(self):
        settings = _settings(DISCORD_BOT_TOKEN="abc", DISCORD_CHANNEL_ID="123")
        assert settings.discord_enabled() is True

    def test_placeholder_token(self):
        settings = _settings(DISCORD_BOT_TOKEN=DISCORD_TOKEN_PLACEHOLDER, DISCORD_CHANNEL_ID="123")
        assert settings.discord_token_configured() is False
        assert settings.discord_enabled() is False

    def test_placeholder_channel(self):
        settings = _settings(DISCORD_BOT_TOKEN="abc", DISCORD_CHANNEL_ID=DISCORD_CHANNEL_PLACEHOLDER)
        assert settings.discord_channel_configured() is False
        assert settings.discord_enabled() is False

    def test_whitespace_only_is_missing(self):
        settings = _settings(DISCORD_BOT_TOKEN="   ", DISCORD_CHANNEL_ID="123")
        assert settings.discord_token_configured() is False


class TestTimezone:
    """Test NOTIFY_TIMEZONE validation."""

    def test_valid_zone(self):
        assert _settings(NOTIFY_TIMEZONE="Europe/London").NOTIFY_TIMEZONE == "Europe/London"

    def test_blank_falls_back_to_utc(self):
        assert _settings(NOTIFY_TIMEZONE="  ").NOTIFY_TIMEZONE == "UTC"

    def test_unknown_zone_rejected(self):
        with pytest.raises(ValidationError):
            _settings(NOTIFY_TIMEZONE="Mars/Olympus_Mons")
