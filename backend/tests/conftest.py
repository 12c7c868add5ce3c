"""
PURPOSE: Pytest fixtures for the signal relay tests.

Provides shared test data and mock objects including:
- Test configuration settings (no .env file, generous rate limit)
- Fake notifier exposing the initialize / send / is_ready / close capabilities
- FastAPI TestClient wired to the fake notifier
- Fake discord.py client and channels for DiscordNotifier tests
"""

from unittest.mock import AsyncMock, MagicMock

import discord
import pytest
from fastapi.testclient import TestClient

from signal_relay.config.settings import Settings
from signal_relay.main import create_app
from signal_relay.schemas.alert import AlertSignal

TEST_SECRET = "S"
TEST_CHANNEL_ID = "123456789012345678"


@pytest.fixture
def test_settings():
    """
    PURPOSE: Settings override with test values.

    Returns:
        Settings: Configuration object that ignores the environment's .env file.
    """
    return Settings(
        _env_file=None,
        PORT=3000,
        WEBHOOK_SECRET=TEST_SECRET,
        DISCORD_BOT_TOKEN="test_token",
        DISCORD_CHANNEL_ID=TEST_CHANNEL_ID,
        DISCORD_READY_TIMEOUT=1.0,
        NOTIFY_TIMEZONE="UTC",
        LOG_LEVEL="DEBUG",
        RATE_LIMIT="1000 per minute",
    )


@pytest.fixture
def fake_notifier():
    """
    PURPOSE: Ready notifier double that records send() calls.

    Returns:
        MagicMock: Notifier with AsyncMock initialize/send/close.
    """
    notifier = MagicMock()
    notifier.is_ready = True
    notifier.initialize = AsyncMock()
    notifier.send = AsyncMock(return_value=True)
    notifier.close = AsyncMock()
    return notifier


@pytest.fixture
def client(test_settings, fake_notifier):
    """
    PURPOSE: TestClient for an app using the fake notifier, lifespan included.
    """
    app = create_app(settings=test_settings, notifier=fake_notifier)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def valid_payload():
    """Minimal alert body that passes validation and authentication."""
    return {
        "secret": TEST_SECRET,
        "symbol": "AAPL",
        "action": "BUY",
        "price": 150.555,
    }


@pytest.fixture
def sample_signal():
    """Authenticated alert carrying every optional field."""
    return AlertSignal(
        symbol="BTCUSD",
        action="SELL",
        price=67250.5,
        rsi=71.25,
        macd=-12.345678,
        volume=1234567,
        timestamp="2024-05-01T12:00:00Z",
        message="Overbought on the 4H chart",
    )


@pytest.fixture
def text_channel():
    """Postable Discord channel double."""
    channel = MagicMock(spec=discord.TextChannel)
    channel.send = AsyncMock()
    return channel


@pytest.fixture
def discord_client(text_channel):
    """
    PURPOSE: discord.py client double whose cache holds the test channel.
    """
    mock_client = MagicMock()
    mock_client.get_channel = MagicMock(return_value=text_channel)
    mock_client.fetch_channel = AsyncMock(return_value=text_channel)
    mock_client.is_closed = MagicMock(return_value=True)
    mock_client.close = AsyncMock()
    return mock_client
