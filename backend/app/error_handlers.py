"""
Exception handlers for FastAPI.

Every failure leaves the API as {"success": false, "message", "errors"?}.

Security:
- Request IDs are logged server-side for tracing but NOT exposed in bodies
- Generic message for 500 errors; the traceback is only added when DEBUG is
  on outside production
"""

import traceback

import structlog
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from servicedesk.exceptions import AuthenticationError, ServiceDeskError
from servicedesk.logging import get_logger

logger = get_logger("backend.errors")


def _get_request_id() -> str:
    """
    Get the current request ID from context.

    Used for server-side logging only - NOT exposed to clients.
    """
    return structlog.contextvars.get_contextvars().get("request_id", "-")


def _response_payload(message: str, errors: list | None = None) -> dict:
    payload: dict = {"success": False, "message": message}
    if errors:
        payload["errors"] = errors
    return payload


def _validation_errors(exc: RequestValidationError) -> list[dict]:
    """Flatten pydantic errors into {field, msg} pairs."""
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append({"field": ".".join(location) or None, "msg": error.get("msg", "Invalid value")})
    return errors


def register_exception_handlers(app: FastAPI, debug: bool = False) -> None:
    @app.exception_handler(ServiceDeskError)
    async def service_desk_error_handler(request: Request, exc: ServiceDeskError):
        logger.warning(
            "request_failed",
            error_type=type(exc).__name__,
            message=exc.message,
            status_code=exc.status_code,
            path=request.url.path,
            request_id=_get_request_id(),
        )
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
        return JSONResponse(
            status_code=exc.status_code,
            content=jsonable_encoder(_response_payload(exc.message, exc.errors)),
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = _validation_errors(exc)
        logger.warning(
            "validation_error",
            errors=errors,
            path=request.url.path,
            request_id=_get_request_id(),
        )
        return JSONResponse(
            status_code=400,
            content=_response_payload("Validation failed", errors),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger.warning(
            "http_exception",
            detail=exc.detail,
            status_code=exc.status_code,
            request_id=_get_request_id(),
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=_response_payload(str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        # Log full details server-side (including request_id for tracing)
        logger.exception(
            "unhandled_exception",
            error=str(exc),
            error_type=type(exc).__name__,
            request_id=_get_request_id(),
        )
        payload = _response_payload("Internal server error")
        if debug:
            payload["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        return JSONResponse(status_code=500, content=payload)
