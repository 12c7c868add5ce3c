"""
PURPOSE: Structured logging for the signal relay.

Every log line is one JSON object carrying the event name, level, ISO
timestamp and the emitting module. Values bound with bind_request_context()
are merged into every line logged while handling that request, so a webhook's
receipt, auth result and Discord delivery share one request_id.
"""

import logging
from typing import Any

import structlog


def setup_logging(log_level: str = "INFO") -> None:
    """
    PURPOSE: Configure structlog for JSON output on stdout.

    Events below log_level are dropped before rendering. Unknown level names
    fall back to INFO.

    CALLED BY: main.on_startup()

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL (case-insensitive).
    """
    level = logging.getLevelName(str(log_level).strip().upper())
    if not isinstance(level, int):
        level = logging.INFO

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(module_name: str) -> structlog.BoundLogger:
    """
    PURPOSE: Logger with the calling module bound as "module".

    Args:
        module_name: Usually __name__.
    """
    return structlog.get_logger().bind(module=module_name)


def bind_request_context(**values: Any) -> None:
    """Attach values to every event logged in the current request context."""
    structlog.contextvars.bind_contextvars(**values)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()
