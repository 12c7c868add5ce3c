"""
PURPOSE: Main FastAPI application factory and lifecycle management for the signal relay.

Initializes the FastAPI application with:
- Webhook and liveness routers
- Request logging, security headers, CORS, body size ceiling and rate limiting middleware
- Exception handlers (404 catch-all, last-resort 500)
- Startup event (Discord bot login, skipped when not configured)
- Shutdown event (Discord session close)
- Metadata from version.json
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from signal_relay.api import api_router
from signal_relay.config.settings import Settings, settings as default_settings
from signal_relay.core.middleware import (
    install_body_limit,
    install_request_logging,
    install_security_headers,
)
from signal_relay.core.rate_limit import configure_limiter, rate_limit_exceeded_handler
from signal_relay.notify.discord_bot import DiscordNotifier, Notifier
from signal_relay.utils.logger import get_logger, setup_logging
from signal_relay.version import get_version

logger = get_logger(__name__)

WEBHOOK_PATH = "/webhook/tradingview"


# ════════════════════════════════════════════════════════════════
# Lifecycle Events
# ════════════════════════════════════════════════════════════════


async def start_notifier(settings: Settings, notifier: Notifier) -> None:
    """
    PURPOSE: Bring up the Discord session unless it is not configured.

    Missing or placeholder credentials disable Discord by configuration; a
    failed login disables it by failure. Neither stops the HTTP service.

    CALLED BY: on_startup()
    """
    if not settings.discord_token_configured():
        logger.warning(
            "discord_token_not_configured",
            message="Discord bot token not configured. Discord functionality will be disabled.",
        )
        logger.info("discord_enable_hint", message="Set DISCORD_BOT_TOKEN in your .env file")
        return

    if not settings.discord_channel_configured():
        logger.warning(
            "discord_channel_not_configured",
            message="Discord channel ID not configured. Discord functionality will be disabled.",
        )
        logger.info("discord_enable_hint", message="Set DISCORD_CHANNEL_ID in your .env file")
        return

    try:
        await notifier.initialize()
        logger.info("discord_bot_initialized")
    except Exception as e:
        logger.error(
            "discord_bot_initialization_failed",
            error=str(e),
            exception_type=type(e).__name__,
        )
        logger.info(
            "discord_disabled",
            message="Server will continue running without Discord functionality",
        )


async def on_startup(settings: Settings, notifier: Notifier) -> None:
    """
    PURPOSE: Execute startup tasks: logging, Discord login, listener banner.

    CALLED BY: FastAPI lifespan startup
    """
    setup_logging(settings.LOG_LEVEL)
    logger.info(
        "application_startup_starting",
        version=_version_string(),
        log_level=settings.LOG_LEVEL,
    )

    if not settings.WEBHOOK_SECRET:
        logger.warning(
            "webhook_secret_not_configured",
            message="WEBHOOK_SECRET is empty; every webhook will be rejected with 401.",
        )

    await start_notifier(settings, notifier)

    logger.info(
        "application_startup_complete",
        port=settings.PORT,
        webhook_url=f"http://localhost:{settings.PORT}{WEBHOOK_PATH}",
        discord_ready=notifier.is_ready,
    )


async def on_shutdown(notifier: Notifier) -> None:
    """
    PURPOSE: Close the Discord session.

    CALLED BY: FastAPI lifespan shutdown
    """
    logger.info("application_shutdown_starting")
    try:
        await notifier.close()
    except Exception as e:
        logger.error("application_shutdown_error", error=str(e))
    logger.info("application_shutdown_complete")


# ════════════════════════════════════════════════════════════════
# Exception Handlers
# ════════════════════════════════════════════════════════════════


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> JSONResponse:
    """
    PURPOSE: Render framework HTTP errors as {"error": ...}.

    Unknown paths and unsupported methods both answer 404 "Route not found".
    """
    if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"error": "Route not found"},
        )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    PURPOSE: Handle unexpected exceptions with logging and safe error response.

    CALLED BY: FastAPI exception handler middleware

    Returns:
        JSONResponse: Safe error response without exposing internals
    """
    logger.error(
        "unhandled_exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        exception_type=type(exc).__name__,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


# ════════════════════════════════════════════════════════════════
# FastAPI Application Factory
# ════════════════════════════════════════════════════════════════


def _version_string() -> str:
    try:
        return get_version().version
    except Exception as e:
        logger.warning("version_data_unavailable", error=str(e))
        return "unknown"


def create_app(
    settings: Optional[Settings] = None,
    notifier: Optional[Notifier] = None,
) -> FastAPI:
    """
    PURPOSE: Create and configure the FastAPI application.

    CALLED BY: Module import (uvicorn entrypoint), tests

    Args:
        settings: Settings to use; defaults to the process-wide settings.
        notifier: Notifier to relay alerts through; defaults to a
            DiscordNotifier built from settings.

    Returns:
        FastAPI: Configured application ready to serve
    """
    settings = settings or default_settings
    notifier = notifier or DiscordNotifier.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await on_startup(settings, notifier)
        yield
        await on_shutdown(notifier)

    app = FastAPI(
        title="TradingView Signal Relay",
        description="Relays TradingView alert webhooks to Discord",
        version=_version_string(),
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings
    app.state.notifier = notifier

    # ────────────────────────────────────────────────────────────
    # Middleware (last added runs first)
    # ────────────────────────────────────────────────────────────

    app.state.limiter = configure_limiter(settings)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    install_body_limit(app, settings.MAX_BODY_BYTES)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    install_security_headers(app)
    install_request_logging(app)

    # ────────────────────────────────────────────────────────────
    # Routes
    # ────────────────────────────────────────────────────────────

    app.include_router(api_router)

    # ────────────────────────────────────────────────────────────
    # Exception Handlers
    # ────────────────────────────────────────────────────────────

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    logger.info(
        "fastapi_application_created",
        webhook_path=WEBHOOK_PATH,
        discord_enabled=settings.discord_enabled(),
        rate_limit=settings.RATE_LIMIT if settings.RATE_LIMIT_ENABLED else None,
    )

    return app


# Create the application
app = create_app()


def run() -> None:
    """
    PURPOSE: Run the application with Uvicorn.

    Usage:
        signal-relay
        OR
        python -m signal_relay.main
        OR
        uvicorn signal_relay.main:app --host 0.0.0.0 --port 3000
    """
    import uvicorn

    uvicorn.run(
        "signal_relay.main:app",
        host=default_settings.HOST,
        port=default_settings.PORT,
        log_level=default_settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
