"""
PURPOSE: Configuration settings for the TradingView signal relay.

This module uses Pydantic Settings to manage configuration from environment
variables and .env files. All settings are validated and typed.
"""

from typing import List
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Values shipped in the sample .env; treated the same as "not configured"
DISCORD_TOKEN_PLACEHOLDER = "your_discord_bot_token_here"
DISCORD_CHANNEL_PLACEHOLDER = "your_discord_channel_id_here"


class Settings(BaseSettings):
    """
    PURPOSE: Central configuration class for the signal relay.

    Manages the HTTP listener, the shared webhook secret, Discord bot
    credentials and the request-guard middleware limits. Settings are
    loaded from environment variables and the .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # HTTP Listener
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # TradingView Webhook Configuration
    # Shared secret that every inbound alert must carry in its "secret" field.
    # Left empty, every webhook is rejected with 401.
    WEBHOOK_SECRET: str = ""

    # Discord Notifications
    DISCORD_BOT_TOKEN: str = ""
    DISCORD_CHANNEL_ID: str = ""
    DISCORD_READY_TIMEOUT: float = 30.0
    NOTIFY_TIMEZONE: str = "UTC"

    # Request Guards
    MAX_BODY_BYTES: int = 10 * 1024 * 1024
    RATE_LIMIT: str = "100 per 15 minutes"
    RATE_LIMIT_ENABLED: bool = True
    CORS_ORIGINS: List[str] = ["*"]

    # System Settings
    LOG_LEVEL: str = "INFO"

    @field_validator("NOTIFY_TIMEZONE")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Validate that the notification timezone is a known IANA zone."""
        value = (v or "UTC").strip() or "UTC"
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"NOTIFY_TIMEZONE is invalid: {value}") from exc
        return value

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Upper-case the log level so 'debug' and 'DEBUG' are equivalent."""
        return v.strip().upper()

    def discord_token_configured(self) -> bool:
        """
        PURPOSE: Report whether a usable Discord bot token is set.

        Returns:
            bool: False when the token is empty or still the sample placeholder.
        """
        token = self.DISCORD_BOT_TOKEN.strip()
        return bool(token) and token != DISCORD_TOKEN_PLACEHOLDER

    def discord_channel_configured(self) -> bool:
        """
        PURPOSE: Report whether a usable Discord channel id is set.

        Returns:
            bool: False when the channel id is empty or still the sample placeholder.
        """
        channel_id = self.DISCORD_CHANNEL_ID.strip()
        return bool(channel_id) and channel_id != DISCORD_CHANNEL_PLACEHOLDER

    def discord_enabled(self) -> bool:
        """Both Discord credentials are present and not placeholders."""
        return self.discord_token_configured() and self.discord_channel_configured()


settings: Settings = Settings()
