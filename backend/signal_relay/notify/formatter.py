"""
PURPOSE: Build the Discord embed payload for a TradingView alert.

format_alert() is a pure function: it reads the alert and the clock and
returns a fresh NotificationPayload. It performs no I/O and never mutates
its input.

CALLED BY:
    - notify/discord_bot.py (DiscordNotifier.send)
"""

from datetime import datetime
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Dict, List, Optional

from signal_relay.schemas.alert import AlertSignal
from signal_relay.schemas.notification import EmbedField, NotificationPayload
from signal_relay.utils.time_utils import format_for_notification, get_utc_now

ACTION_COLORS: Dict[str, int] = {
    "BUY": 0x00FF00,   # green
    "SELL": 0xFF0000,  # red
    "HOLD": 0xFFFF00,  # yellow
}
NEUTRAL_COLOR = 0x0099FF

FOOTER_TEXT = "TradingView Alert"

# Enough digits to quantize any finite float
_WIDE_CONTEXT = Context(prec=400)


# ════════════════════════════════════════════════════════════════
# Number Rendering
# ════════════════════════════════════════════════════════════════


def format_fixed(value: float, places: int) -> str:
    """
    PURPOSE: Render a number with exactly `places` decimals, rounding half up.

    Rounding works on the shortest decimal representation of the float, so
    150.555 (stored as 150.555000000000006821...) becomes "150.56" and 1.005
    (stored just below, 1.00499999999999989...) becomes "1.01". Negative zero
    renders as zero.

    Args:
        value: Number to render.
        places: Number of fraction digits.

    Returns:
        str: Fixed-point string, e.g. format_fixed(0.12345, 4) == "0.1235".
    """
    quantum = Decimal(1).scaleb(-places)
    number = float(value) + 0.0
    exact = Decimal(repr(number))
    return str(exact.quantize(quantum, rounding=ROUND_HALF_UP, context=_WIDE_CONTEXT))


def format_plain(value: float) -> str:
    """Render a number as-is, without a trailing '.0' for integral values."""
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return repr(number)


def format_grouped(value: float) -> str:
    """
    PURPOSE: Render a number with thousands separators.

    Integral values have no fraction; others keep up to three fraction digits
    with trailing zeros removed.

    Examples:
        1234567   → "1,234,567"
        1234.5678 → "1,234.568"
    """
    number = float(value)
    if number.is_integer():
        return f"{int(number):,}"
    rounded = Decimal(repr(number)).quantize(Decimal("0.001"), rounding=ROUND_HALF_UP)
    text = f"{rounded:,}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


# ════════════════════════════════════════════════════════════════
# Embed Construction
# ════════════════════════════════════════════════════════════════


def color_for_action(action: str) -> int:
    """Return the embed color for an action, neutral for anything unknown."""
    return ACTION_COLORS.get(action, NEUTRAL_COLOR)


def _indicator_fields(signal: AlertSignal) -> List[EmbedField]:
    fields: List[EmbedField] = []
    if signal.rsi is not None:
        fields.append(EmbedField(name="📈 RSI", value=format_plain(signal.rsi)))
    if signal.macd is not None:
        fields.append(EmbedField(name="📊 MACD", value=format_fixed(signal.macd, 4)))
    if signal.volume is not None:
        fields.append(EmbedField(name="📦 Volume", value=format_grouped(signal.volume)))
    return fields


def format_alert(
    signal: AlertSignal,
    now: Optional[datetime] = None,
    tz_name: str = "UTC",
) -> NotificationPayload:
    """
    PURPOSE: Convert an authenticated alert into a Discord embed payload.

    Action, price and time are always present. RSI, MACD and volume rows are
    appended only for indicators the alert carries. The alert message, if
    any, becomes the embed description.

    CALLED BY: DiscordNotifier.send()

    Args:
        signal: Validated alert (secret already stripped).
        now: Moment to stamp the payload with; defaults to the current UTC time.
        tz_name: IANA timezone for the human-readable time row.

    Returns:
        NotificationPayload: Fresh payload; the input is left untouched.
    """
    moment = now or get_utc_now()

    fields = [
        EmbedField(name="📊 Action", value=signal.action),
        EmbedField(name="💰 Price", value=f"${format_fixed(signal.price, 2)}"),
        EmbedField(name="⏰ Time", value=format_for_notification(moment, tz_name)),
    ]
    fields.extend(_indicator_fields(signal))

    return NotificationPayload(
        title=f"📈 Trading Signal: {signal.symbol}",
        color=color_for_action(signal.action),
        fields=fields,
        description=signal.message,
        footer=FOOTER_TEXT,
        timestamp=moment,
    )
