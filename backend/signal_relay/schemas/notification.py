"""
Notification payload schemas.

A NotificationPayload is built fresh for every send and mirrors the subset of
a Discord embed that the relay uses.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from signal_relay.utils.time_utils import as_utc


class EmbedField(BaseModel):
    """A single name/value row of an embed."""

    model_config = ConfigDict(frozen=True)

    name: str
    value: str
    inline: bool = True


class NotificationPayload(BaseModel):
    """
    Structured chat message derived from one alert.

    Attributes:
        title: Embed title
        color: 24-bit RGB color of the embed side bar
        fields: Ordered name/value rows
        description: Optional free-text body
        footer: Footer text
        timestamp: Moment the payload was built
    """

    model_config = ConfigDict(frozen=True)

    title: str
    color: int
    fields: List[EmbedField]
    description: Optional[str] = None
    footer: Optional[str] = None
    timestamp: Optional[datetime] = None

    def field_value(self, name: str) -> Optional[str]:
        """Return the value of the first field whose name contains name, if any."""
        for field in self.fields:
            if name in field.name:
                return field.value
        return None

    def to_embed_dict(self) -> Dict[str, Any]:
        """
        Convert to the dict layout accepted by discord.Embed.from_dict().

        Returns:
            dict: Embed dict with only the keys that are set.
        """
        embed: Dict[str, Any] = {
            "type": "rich",
            "title": self.title,
            "color": self.color,
            "fields": [field.model_dump() for field in self.fields],
        }
        if self.description is not None:
            embed["description"] = self.description
        if self.footer is not None:
            embed["footer"] = {"text": self.footer}
        if self.timestamp is not None:
            embed["timestamp"] = as_utc(self.timestamp).isoformat()
        return embed
