"""
PURPOSE: System-level API routes for the signal relay.

Provides the liveness check used by load balancers and uptime monitors.
"""

import time
from typing import Any, Dict

from fastapi import APIRouter, Request

from signal_relay.core.rate_limit import relay_limit
from signal_relay.utils.time_utils import get_utc_now, to_iso_utc

router = APIRouter(tags=["system"])

# Monotonic so uptime never goes backwards when the wall clock is adjusted
_startup_monotonic = time.monotonic()


def get_uptime_seconds() -> float:
    """Seconds since this process imported the module."""
    return time.monotonic() - _startup_monotonic


@router.get("/health", tags=["health"])
@relay_limit
async def health_check(request: Request) -> Dict[str, Any]:
    """Liveness check: process uptime and current time."""
    return {
        "status": "OK",
        "timestamp": to_iso_utc(get_utc_now()),
        "uptime": get_uptime_seconds(),
    }
