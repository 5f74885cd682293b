"""
Structured logging for the Service Desk.

Everything goes through structlog on top of the stdlib logging module:
colored console output in development, one JSON object per line in
production. Request-scoped values (request_id, user_id) live in structlog
contextvars and are merged into every entry.
"""

import logging
import sys
import time
import uuid
from collections.abc import MutableMapping
from functools import lru_cache
from typing import Any

import structlog
from structlog.types import Processor

# Never written to the log, whatever a caller passes as event data
REDACTED_KEYS = frozenset(
    {"password", "current_password", "new_password", "password_hash", "access_token", "refresh_token", "token"}
)


def _add_app_context(logger: Any, method_name: str, event_dict: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    event_dict["app"] = "service_desk"
    return event_dict


def _redact_secrets(logger: Any, method_name: str, event_dict: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    for key in REDACTED_KEYS.intersection(event_dict):
        event_dict[key] = "***"
    return event_dict


def get_processors(json_logs: bool = False) -> list[Processor]:
    """Processor chain for console (development) or JSON (production) output."""
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _add_app_context,
        _redact_secrets,
    ]

    if json_logs:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(exception_formatter=structlog.dev.plain_traceback))
    return processors


@lru_cache(maxsize=1)
def configure_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """Configure structlog and the root logger. Repeated calls with the same arguments are no-ops."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )
    # SQL echo is controlled by the engine, not by the app log level
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    structlog.configure(
        processors=get_processors(json_logs),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(name)  # type: ignore[no-any-return]


def bind_context(**kwargs: Any) -> None:
    """Attach values to every log entry of the current request."""
    structlog.contextvars.bind_contextvars(**kwargs)


def get_context() -> dict[str, Any]:
    return structlog.contextvars.get_contextvars()


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


class RequestLoggingMiddleware:
    """
    ASGI middleware writing one start and one completion entry per HTTP request.

    Completion is logged at info below 400, warning for 4xx and error for 5xx.
    The request context is cleared once the response has been sent.
    """

    def __init__(self, app):
        self.app = app
        self.logger = get_logger("http")

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        method = scope.get("method", "")
        path = scope.get("path", "")
        started = time.perf_counter()
        status_code = 500

        # RequestIDMiddleware binds the real id further in; this covers the start line
        if "request_id" not in get_context():
            bind_context(request_id=uuid.uuid4().hex[:8])
        self.logger.info("request_started", method=method, path=path)

        async def send_wrapper(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message.get("status", 500)
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            if status_code >= 500:
                log = self.logger.error
            elif status_code >= 400:
                log = self.logger.warning
            else:
                log = self.logger.info
            log(
                "request_complete",
                method=method,
                path=path,
                status_code=status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
            )
            clear_context()


__all__ = [
    "configure_logging",
    "get_logger",
    "bind_context",
    "get_context",
    "clear_context",
    "RequestLoggingMiddleware",
]
