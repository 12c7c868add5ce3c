"""
PURPOSE: Notification layer: turns authenticated alerts into Discord messages.
"""

from .discord_bot import DiscordNotifier, Notifier, NotifierInitError, NotifierState
from .formatter import format_alert

__all__ = [
    "DiscordNotifier",
    "Notifier",
    "NotifierInitError",
    "NotifierState",
    "format_alert",
]
