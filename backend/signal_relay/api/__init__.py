"""
PURPOSE: API router initialization and exports for the signal relay.

This module aggregates the webhook and system routers into a single
api_router that is included in the main FastAPI application.
"""

from fastapi import APIRouter

from signal_relay.api.routes_system import router as system_router
from signal_relay.api.routes_webhook import router as webhook_router

api_router = APIRouter()

api_router.include_router(webhook_router)
api_router.include_router(system_router)

__all__ = ["api_router"]
