"""
PURPOSE: Discord bot session that relays TradingView alerts to one text channel.

Owns a single discord.py gateway session. The session is started once during
application startup; after that the webhook route only asks whether it is
ready and hands it alerts to post.

State machine:
    NOT_READY → CONNECTING → READY      (gateway reported ready)
    NOT_READY → CONNECTING → DISABLED   (login failed / timed out, terminal)

Delivery is best-effort: send() never raises. A missing or broken Discord
integration is logged and the alert is dropped, so the webhook caller still
gets its 200.

CALLED BY:
    - main.py (lifespan startup / shutdown)
    - api/routes_webhook.py (POST /webhook/tradingview)
"""

import asyncio
from enum import Enum
from typing import Any, Callable, Optional, Protocol

import discord

from signal_relay.config.settings import Settings
from signal_relay.notify.formatter import format_alert
from signal_relay.schemas.alert import AlertSignal
from signal_relay.utils.logger import get_logger

logger = get_logger(__name__)


class NotifierState(str, Enum):
    """Lifecycle of the Discord session."""

    NOT_READY = "not_ready"
    CONNECTING = "connecting"
    READY = "ready"
    DISABLED = "disabled"


class NotifierInitError(RuntimeError):
    """Raised when the Discord session cannot be brought to READY."""


class Notifier(Protocol):
    """Capabilities the webhook route and lifespan rely on."""

    @property
    def is_ready(self) -> bool: ...

    async def initialize(self) -> None: ...

    async def send(self, signal: AlertSignal) -> bool: ...

    async def close(self) -> None: ...


class GatewayClient(discord.Client):
    """
    PURPOSE: discord.py client that signals readiness through an asyncio.Event.

    Only the guilds and guild-messages intents are requested; the relay never
    reads message content.
    """

    def __init__(self, ready_event: asyncio.Event) -> None:
        intents = discord.Intents.none()
        intents.guilds = True
        intents.guild_messages = True
        super().__init__(intents=intents)
        self._ready_event = ready_event

    async def on_ready(self) -> None:
        logger.info("discord_logged_in", user=str(self.user))
        self._ready_event.set()

    async def on_error(self, event_method: str, /, *args: Any, **kwargs: Any) -> None:
        logger.error("discord_client_error", event_method=event_method, exc_info=True)


class DiscordNotifier:
    """
    PURPOSE: Push formatted alert embeds to the configured Discord channel.

    Attributes:
        _token: Bot token used for the gateway login.
        _channel_id: Destination channel snowflake, as configured.
        _ready_timeout: Seconds initialize() waits for the gateway ready event.
        _tz_name: Timezone for the time row of each embed.
        _state: Current NotifierState.
        _client: discord.py client, created by initialize().
        _gateway_task: Task running client.start() on the event loop.
    """

    def __init__(
        self,
        token: str,
        channel_id: str,
        ready_timeout: float = 30.0,
        tz_name: str = "UTC",
        client_factory: Optional[Callable[[asyncio.Event], discord.Client]] = None,
    ) -> None:
        self._token = token
        self._channel_id = channel_id
        self._ready_timeout = ready_timeout
        self._tz_name = tz_name
        self._client_factory = client_factory or GatewayClient
        self._state = NotifierState.NOT_READY
        self._client: Optional[discord.Client] = None
        self._gateway_task: Optional[asyncio.Task] = None
        self._closing = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "DiscordNotifier":
        """Build a notifier from the process settings."""
        return cls(
            token=settings.DISCORD_BOT_TOKEN.strip(),
            channel_id=settings.DISCORD_CHANNEL_ID.strip(),
            ready_timeout=settings.DISCORD_READY_TIMEOUT,
            tz_name=settings.NOTIFY_TIMEZONE,
        )

    @property
    def state(self) -> NotifierState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is NotifierState.READY

    # ════════════════════════════════════════════════════════════════
    # Lifecycle
    # ════════════════════════════════════════════════════════════════

    async def initialize(self) -> None:
        """
        PURPOSE: Log in to the Discord gateway and wait until it is ready.

        The gateway runs as a background task on the current event loop. This
        coroutine returns once the ready event fires, or fails when the login
        raises, the gateway stops first, or the ready timeout elapses.

        CALLED BY: main.py lifespan startup

        Raises:
            NotifierInitError: Session could not be made ready; the notifier
                is DISABLED for the rest of the process lifetime.
        """
        if self._state is not NotifierState.NOT_READY:
            logger.warning("discord_initialize_ignored", state=self._state.value)
            return

        self._state = NotifierState.CONNECTING
        logger.info("discord_connecting", channel_id=self._channel_id)

        ready_event = asyncio.Event()
        self._client = self._client_factory(ready_event)
        self._gateway_task = asyncio.create_task(
            self._client.start(self._token),
            name="discord-gateway",
        )
        ready_waiter = asyncio.create_task(ready_event.wait())

        try:
            await asyncio.wait(
                {self._gateway_task, ready_waiter},
                timeout=self._ready_timeout,
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            ready_waiter.cancel()

        if ready_event.is_set():
            self._state = NotifierState.READY
            self._gateway_task.add_done_callback(self._on_gateway_exit)
            logger.info("discord_ready", channel_id=self._channel_id)
            return

        error = self._gateway_error()
        gateway_stopped = self._gateway_task.done()
        await self._shutdown_client()
        self._state = NotifierState.DISABLED

        if error is not None:
            raise NotifierInitError(f"Discord login failed: {error}") from error
        if gateway_stopped:
            raise NotifierInitError("Discord gateway closed before becoming ready")
        raise NotifierInitError(
            f"Discord gateway not ready after {self._ready_timeout:g}s"
        )

    async def close(self) -> None:
        """
        PURPOSE: Close the gateway session and stop the background task.

        CALLED BY: main.py lifespan shutdown
        """
        self._closing = True
        await self._shutdown_client()
        if self._state is NotifierState.READY:
            self._state = NotifierState.DISABLED
        logger.info("discord_closed")

    # ════════════════════════════════════════════════════════════════
    # Delivery
    # ════════════════════════════════════════════════════════════════

    async def send(self, signal: AlertSignal) -> bool:
        """
        PURPOSE: Post one alert embed to the configured channel.

        Never raises. Every failure is logged and reported as False.

        CALLED BY: POST /webhook/tradingview route handler

        Args:
            signal: Authenticated alert (no secret).

        Returns:
            bool: True if Discord accepted the message.
        """
        if not self.is_ready:
            logger.warning(
                "discord_not_ready_alert_dropped",
                symbol=signal.symbol,
                state=self._state.value,
            )
            return False

        try:
            channel = await self._resolve_channel()
        except Exception as e:
            logger.error(
                "discord_channel_lookup_failed",
                channel_id=self._channel_id,
                error=str(e),
                exception_type=type(e).__name__,
            )
            return False

        if channel is None or not isinstance(channel, discord.abc.Messageable):
            logger.error(
                "discord_channel_not_text",
                channel_id=self._channel_id,
                channel_type=type(channel).__name__,
            )
            return False

        try:
            payload = format_alert(signal, tz_name=self._tz_name)
            await channel.send(embed=discord.Embed.from_dict(payload.to_embed_dict()))
        except Exception as e:
            logger.error(
                "discord_send_failed",
                symbol=signal.symbol,
                error=str(e),
                exception_type=type(e).__name__,
            )
            return False

        logger.info("discord_alert_sent", symbol=signal.symbol, action=signal.action)
        return True

    # ════════════════════════════════════════════════════════════════
    # Internal Helpers
    # ════════════════════════════════════════════════════════════════

    async def _resolve_channel(self) -> Any:
        """Return the destination channel from the cache, falling back to the REST API."""
        channel_id = int(self._channel_id)
        channel = self._client.get_channel(channel_id)
        if channel is None:
            channel = await self._client.fetch_channel(channel_id)
        return channel

    def _gateway_error(self) -> Optional[BaseException]:
        task = self._gateway_task
        if task is None or not task.done() or task.cancelled():
            return None
        return task.exception()

    def _on_gateway_exit(self, task: asyncio.Task) -> None:
        if self._closing:
            return
        error = None if task.cancelled() else task.exception()
        self._state = NotifierState.DISABLED
        logger.error(
            "discord_gateway_stopped",
            error=str(error) if error else None,
            exception_type=type(error).__name__ if error else None,
        )

    async def _shutdown_client(self) -> None:
        if self._client is not None and not self._client.is_closed():
            try:
                await self._client.close()
            except Exception as e:
                logger.warning("discord_close_failed", error=str(e))

        task = self._gateway_task
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
            except Exception as e:
                logger.warning("discord_gateway_task_failed", error=str(e))
