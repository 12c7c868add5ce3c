"""
PURPOSE: Rate limiting configuration for the signal relay using slowapi.

Provides a shared Limiter instance keyed by client IP address. Every route
is decorated with relay_limit, so all routes draw from one fixed window per
address (RATE_LIMIT, default "100 per 15 minutes").

configure_limiter() applies the settings of the application being created
and clears the counters; one process serves one application.
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from signal_relay.config.settings import Settings, settings as default_settings
from signal_relay.utils.logger import get_logger

logger = get_logger(__name__)

RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again later."

# Counter shared by every decorated route
RATE_LIMIT_SCOPE = "relay"

# Shared limiter instance, keyed by client IP
limiter = Limiter(
    key_func=get_remote_address,
    strategy="fixed-window",
    enabled=default_settings.RATE_LIMIT_ENABLED,
)

_current_limit = default_settings.RATE_LIMIT


def current_rate_limit() -> str:
    """Limit string in force, read on every request."""
    return _current_limit


def configure_limiter(settings: Settings) -> Limiter:
    """
    PURPOSE: Apply RATE_LIMIT / RATE_LIMIT_ENABLED and start from empty counters.

    CALLED BY: main.create_app()

    Returns:
        Limiter: The shared limiter, for app.state.limiter.
    """
    global _current_limit

    _current_limit = settings.RATE_LIMIT
    limiter.enabled = settings.RATE_LIMIT_ENABLED
    limiter.reset()
    return limiter


relay_limit = limiter.shared_limit(current_rate_limit, scope=RATE_LIMIT_SCOPE)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """
    PURPOSE: Answer throttled requests with a fixed JSON message.
    """
    logger.warning(
        "rate_limit_exceeded",
        client=get_remote_address(request),
        path=request.url.path,
        limit=str(exc.detail),
    )
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"error": RATE_LIMIT_MESSAGE},
    )
