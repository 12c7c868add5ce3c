"""
PURPOSE: HTTP middleware for the signal relay.

- Security headers on every response (CSP, HSTS, frame and sniffing guards).
- Request body ceiling based on the declared Content-Length.
- Request id and access log line per request.
"""

import time
import uuid
from typing import Awaitable, Callable, Dict

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.responses import Response

from signal_relay.utils.logger import bind_request_context, clear_request_context, get_logger

logger = get_logger(__name__)

CallNext = Callable[[Request], Awaitable[Response]]

PAYLOAD_TOO_LARGE_MESSAGE = "Payload too large"
REQUEST_ID_HEADER = "X-Request-ID"

SECURITY_HEADERS: Dict[str, str] = {
    "Content-Security-Policy": (
        "default-src 'self';base-uri 'self';font-src 'self' https: data:;"
        "form-action 'self';frame-ancestors 'self';img-src 'self' data:;"
        "object-src 'none';script-src 'self';script-src-attr 'none';"
        "style-src 'self' https: 'unsafe-inline';upgrade-insecure-requests"
    ),
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
    "Origin-Agent-Cluster": "?1",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "X-Frame-Options": "SAMEORIGIN",
    "X-Permitted-Cross-Domain-Policies": "none",
    "X-XSS-Protection": "0",
}


def payload_too_large_response() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        content={"error": PAYLOAD_TOO_LARGE_MESSAGE},
    )


def install_security_headers(app: FastAPI) -> None:
    """
    PURPOSE: Add the standard security headers to every response.

    Headers already set by a route are left alone.

    CALLED BY: main.create_app()
    """

    @app.middleware("http")
    async def security_headers(request: Request, call_next: CallNext) -> Response:
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response


def install_body_limit(app: FastAPI, max_bytes: int) -> None:
    """
    PURPOSE: Reject requests whose declared body exceeds max_bytes with HTTP 413.

    Bodies without a Content-Length header are checked by the route after
    reading them.

    CALLED BY: main.create_app()

    Args:
        app: Application to wrap.
        max_bytes: Largest accepted body in bytes.
    """

    @app.middleware("http")
    async def body_limit(request: Request, call_next: CallNext) -> Response:
        declared = request.headers.get("content-length")
        if declared is not None:
            try:
                size = int(declared)
            except ValueError:
                logger.warning("invalid_content_length", path=request.url.path, value=declared)
                return JSONResponse(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    content={"error": "Invalid request data"},
                )
            if size > max_bytes:
                logger.warning(
                    "request_body_too_large",
                    path=request.url.path,
                    size=size,
                    max_bytes=max_bytes,
                )
                return payload_too_large_response()
        return await call_next(request)


def install_request_logging(app: FastAPI) -> None:
    """
    PURPOSE: Tag each request with an id and log its outcome and duration.

    The id is bound into the structlog context for the whole request and
    echoed in the X-Request-ID response header.

    CALLED BY: main.create_app()
    """

    @app.middleware("http")
    async def request_logging(request: Request, call_next: CallNext) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        clear_request_context()
        bind_request_context(request_id=request_id)
        started = time.perf_counter()
        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            logger.info(
                "http_request_completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            return response
        finally:
            clear_request_context()
