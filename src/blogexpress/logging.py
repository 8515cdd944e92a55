"""
Centralized logging configuration using structlog

Per-request fields (``request_id``, ``graphql_operation`` and, once the
bearer token is verified, ``user_id``) live in structlog's context variables
and are merged into every event logged while the request is handled. A key
passed explicitly to a log call wins over the bound value.
"""

import logging
import sys
from uuid import uuid4

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars, merge_contextvars


def configure_logging(debug: bool = False, level: str | None = None) -> None:
    """Configure structlog on top of the standard library logging module.

    Args:
        debug: Human-readable console output instead of JSON, at DEBUG level
        level: Explicit level name (e.g. "WARNING"); overrides the debug default
    """
    if level is not None:
        log_level = logging.getLevelName(level.upper())
    else:
        log_level = logging.DEBUG if debug else logging.INFO

    logging.basicConfig(level=log_level, stream=sys.stdout, format="%(message)s", force=True)

    renderer = (
        structlog.dev.ConsoleRenderer(colors=True)
        if debug
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="ISO", utc=True),
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_request(graphql_operation: str | None = None) -> str:
    """Start a fresh logging context for an incoming request.

    Returns:
        The generated request id
    """
    clear_contextvars()
    request_id = uuid4().hex[:16]
    bind_contextvars(request_id=request_id)
    if graphql_operation:
        bind_contextvars(graphql_operation=graphql_operation)
    return request_id


def bind_user(user_id: str) -> None:
    """Attach the authenticated caller to the remaining log events of the request."""
    bind_contextvars(user_id=user_id)


def clear_request_context() -> None:
    clear_contextvars()
