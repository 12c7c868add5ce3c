"""
PURPOSE: TradingView webhook API route for the signal relay.

The POST /webhook/tradingview endpoint is PUBLIC: TradingView cannot attach
auth headers to its outbound webhook calls. Instead, every alert body carries
a "secret" field that must equal the configured WEBHOOK_SECRET.

Request handling order:
    1. Validate the body shape       → 400 on failure
    2. Check the shared secret       → 401 on mismatch
    3. Relay the alert to Discord    (best-effort, never an HTTP error)
    4. Acknowledge                   → 200
Anything unexpected along the way → 500.

CALLED BY:
    - TradingView alert webhooks (POST, public)
"""

import secrets
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from signal_relay.config.settings import Settings
from signal_relay.core.middleware import payload_too_large_response
from signal_relay.core.rate_limit import relay_limit
from signal_relay.notify.discord_bot import Notifier
from signal_relay.schemas.alert import TradingAlert
from signal_relay.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/webhook", tags=["webhook"])

INVALID_REQUEST_MESSAGE = "Invalid request data"
UNAUTHORIZED_MESSAGE = "Unauthorized"
PROCESSING_FAILED_MESSAGE = "Failed to process alert"


# ════════════════════════════════════════════════════════════════
# Dependencies
# ════════════════════════════════════════════════════════════════


def get_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_notifier(request: Request) -> Notifier:
    """Notifier owned by the application (a fake one in tests)."""
    return request.app.state.notifier


# ════════════════════════════════════════════════════════════════
# Internal Helpers
# ════════════════════════════════════════════════════════════════


def _secret_matches(provided: str, configured: str) -> bool:
    """
    PURPOSE: Compare the alert secret with the configured one.

    Exact equality, compared in constant time. An unconfigured secret never
    matches, so a relay without WEBHOOK_SECRET rejects everything.

    CALLED BY: tradingview_webhook route handler
    """
    if not configured:
        return False
    return secrets.compare_digest(provided.encode("utf-8"), configured.encode("utf-8"))


def _validation_summary(error: ValidationError) -> List[Dict[str, Any]]:
    """Location and type of each validation error, without the offending input."""
    return [
        {
            "loc": ".".join(str(part) for part in err.get("loc", ())),
            "type": err.get("type"),
            "msg": err.get("msg"),
        }
        for err in error.errors()
    ]


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


# ════════════════════════════════════════════════════════════════
# Public Inbound Endpoint
# ════════════════════════════════════════════════════════════════


@router.post("/tradingview")
@relay_limit
async def tradingview_webhook(
    request: Request,
    settings: Settings = Depends(get_settings),
    notifier: Notifier = Depends(get_notifier),
) -> JSONResponse:
    """
    PURPOSE: Receive a TradingView alert webhook and relay it to Discord.

    The body is parsed here rather than by FastAPI so that malformed
    payloads answer 400 with a generic message instead of a 422 that echoes
    validation internals.

    Args:
        request: Raw HTTP request (also keys the rate limit).
        settings: Application settings (WEBHOOK_SECRET, MAX_BODY_BYTES).
        notifier: Discord notifier; its send() never raises.

    Returns:
        JSONResponse: {"success": true, "message": "Alert processed"}

    Raises:
        HTTP 400: Malformed JSON or body not matching the alert shape.
        HTTP 401: Secret does not match WEBHOOK_SECRET.
        HTTP 413: Body larger than MAX_BODY_BYTES.
        HTTP 429: Client address over RATE_LIMIT.
        HTTP 500: Unexpected processing failure.
    """
    raw = await request.body()
    if len(raw) > settings.MAX_BODY_BYTES:
        logger.warning("webhook_body_too_large", size=len(raw), max_bytes=settings.MAX_BODY_BYTES)
        return payload_too_large_response()

    try:
        try:
            alert = TradingAlert.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(
                "webhook_invalid_payload",
                error_count=e.error_count(),
                errors=_validation_summary(e),
            )
            return _error(status.HTTP_400_BAD_REQUEST, INVALID_REQUEST_MESSAGE)

        logger.info(
            "webhook_alert_received",
            symbol=alert.symbol,
            action=alert.action,
            price=alert.price,
            alert_timestamp=alert.timestamp,
        )

        if not _secret_matches(alert.secret, settings.WEBHOOK_SECRET):
            logger.warning(
                "webhook_auth_failed",
                secret_configured=bool(settings.WEBHOOK_SECRET),
            )
            return _error(status.HTTP_401_UNAUTHORIZED, UNAUTHORIZED_MESSAGE)

        delivered = await notifier.send(alert.to_signal())

        logger.info(
            "webhook_alert_processed",
            symbol=alert.symbol,
            action=alert.action,
            delivered=delivered,
        )
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content={"success": True, "message": "Alert processed"},
        )
    except Exception as e:
        logger.error(
            "webhook_route_failed",
            error=str(e),
            exception_type=type(e).__name__,
        )
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, PROCESSING_FAILED_MESSAGE)
