"""
PURPOSE: Tests for the alert and notification Pydantic schemas.

Tests validation of inbound TradingView alerts:
- Required fields and the BUY / SELL / HOLD enum
- Type checks and rejection of unknown keys
- Secret stripping when handing the alert downstream
"""

import pytest
from pydantic import ValidationError

from signal_relay.schemas.alert import AlertSignal, TradingAlert


def _alert(**overrides):
    data = {"secret": "S", "symbol": "AAPL", "action": "BUY", "price": 150.555}
    data.update(overrides)
    return data


class TestTradingAlertSchema:
    """Test TradingAlert validation."""

    def test_valid_minimal(self):
        alert = TradingAlert.model_validate(_alert())
        assert alert.symbol == "AAPL"
        assert alert.action == "BUY"
        assert alert.price == 150.555
        assert alert.rsi is None
        assert alert.message is None

    def test_valid_full(self):
        alert = TradingAlert.model_validate(
            _alert(
                rsi=30,
                macd=-0.25,
                volume=1000,
                timestamp="2024-05-01T12:00:00Z",
                message="Oversold",
            )
        )
        assert alert.rsi == 30
        assert alert.macd == -0.25
        assert alert.volume == 1000
        assert alert.message == "Oversold"

    @pytest.mark.parametrize("missing", ["secret", "symbol", "action", "price"])
    def test_missing_required_field(self, missing):
        data = _alert()
        del data[missing]
        with pytest.raises(ValidationError):
            TradingAlert.model_validate(data)

    @pytest.mark.parametrize("action", ["buy", "LONG", "", "BUY "])
    def test_invalid_action(self, action):
        with pytest.raises(ValidationError):
            TradingAlert.model_validate(_alert(action=action))

    def test_price_must_be_number(self):
        with pytest.raises(ValidationError):
            TradingAlert.model_validate(_alert(price="abc"))

    def test_numeric_string_price_is_converted(self):
        alert = TradingAlert.model_validate(_alert(price="101.5"))
        assert alert.price == 101.5

    @pytest.mark.parametrize("field", ["price", "rsi", "macd", "volume"])
    def test_boolean_not_a_number(self, field):
        with pytest.raises(ValidationError):
            TradingAlert.model_validate(_alert(**{field: True}))

    def test_price_must_be_finite(self):
        with pytest.raises(ValidationError):
            TradingAlert.model_validate(_alert(price=float("inf")))

    def test_symbol_must_be_string(self):
        with pytest.raises(ValidationError):
            TradingAlert.model_validate(_alert(symbol=123))

    def test_blank_strings_rejected(self):
        with pytest.raises(ValidationError):
            TradingAlert.model_validate(_alert(symbol="  "))
        with pytest.raises(ValidationError):
            TradingAlert.model_validate(_alert(secret=""))

    def test_unknown_key_rejected(self):
        with pytest.raises(ValidationError):
            TradingAlert.model_validate(_alert(leverage=10))

    def test_null_optional_treated_as_absent(self):
        alert = TradingAlert.model_validate(_alert(rsi=None))
        assert alert.rsi is None

    def test_from_json(self):
        alert = TradingAlert.model_validate_json(
            '{"secret": "S", "symbol": "AAPL", "action": "SELL", "price": 100}'
        )
        assert alert.action == "SELL"
        assert alert.price == 100.0

    def test_non_object_json_rejected(self):
        with pytest.raises(ValidationError):
            TradingAlert.model_validate_json("[1, 2, 3]")


class TestAlertSignal:
    """Test the secret-free downstream alert."""

    def test_to_signal_strips_secret(self):
        alert = TradingAlert.model_validate(_alert(rsi=55))

        signal = alert.to_signal()

        assert isinstance(signal, AlertSignal)
        assert not isinstance(signal, TradingAlert)
        assert "secret" not in signal.model_dump()
        assert signal.symbol == "AAPL"
        assert signal.rsi == 55

    def test_signal_rejects_secret_field(self):
        with pytest.raises(ValidationError):
            AlertSignal(symbol="AAPL", action="BUY", price=1, secret="S")

    def test_signal_is_immutable(self):
        signal = AlertSignal(symbol="AAPL", action="BUY", price=1)
        with pytest.raises(ValidationError):
            signal.price = 2
