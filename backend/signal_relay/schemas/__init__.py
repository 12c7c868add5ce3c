"""
Pydantic v2 schemas for the signal relay.
"""

from .alert import AlertAction, AlertSignal, TradingAlert
from .notification import EmbedField, NotificationPayload

__all__ = [
    "AlertAction",
    "AlertSignal",
    "TradingAlert",
    "EmbedField",
    "NotificationPayload",
]
