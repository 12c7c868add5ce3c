"""
PURPOSE: Export configuration settings for the signal relay.
"""

from .settings import (
    DISCORD_CHANNEL_PLACEHOLDER,
    DISCORD_TOKEN_PLACEHOLDER,
    Settings,
    settings,
)

__all__ = [
    "settings",
    "Settings",
    "DISCORD_TOKEN_PLACEHOLDER",
    "DISCORD_CHANNEL_PLACEHOLDER",
]
