"""
TradingView alert schemas for the signal relay.

TradingAlert is the untrusted inbound webhook body; AlertSignal is the same
alert once the shared secret has been checked and stripped.
"""

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

AlertAction = Literal["BUY", "SELL", "HOLD"]


class AlertSignal(BaseModel):
    """
    Authenticated trading signal handed to the notifier.

    Attributes:
        symbol: Instrument identifier as sent by TradingView (e.g. 'AAPL', 'BINANCE:BTCUSDT')
        action: One of BUY, SELL or HOLD
        price: Price at alert time
        rsi: Optional RSI reading
        macd: Optional MACD reading
        volume: Optional traded volume
        timestamp: Optional alert time string from the Pine Script template
        message: Optional free-text message shown as the embed description
    """

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False, frozen=True)

    symbol: str = Field(min_length=1)
    action: AlertAction
    price: float
    rsi: Optional[float] = None
    macd: Optional[float] = None
    volume: Optional[float] = None
    timestamp: Optional[str] = None
    message: Optional[str] = None

    @field_validator("price", "rsi", "macd", "volume", mode="before")
    @classmethod
    def reject_booleans(cls, v: Any) -> Any:
        """Numbers and numeric strings only; true/false are not numbers."""
        if isinstance(v, bool):
            raise ValueError("must be a number, not a boolean")
        return v

    @field_validator("symbol")
    @classmethod
    def validate_symbol(cls, v: str) -> str:
        """Reject symbols that are only whitespace."""
        if not v.strip():
            raise ValueError("symbol must not be blank")
        return v


class TradingAlert(AlertSignal):
    """
    Inbound TradingView webhook body, including the shared secret.

    Attributes:
        secret: Shared secret compared against WEBHOOK_SECRET
    """

    secret: str = Field(min_length=1)

    def to_signal(self) -> AlertSignal:
        """Return the alert without its secret."""
        return AlertSignal.model_validate(self.model_dump(exclude={"secret"}))
