"""
FastAPI application entry point.

Uses structured logging from servicedesk.logging. The Settings value is
built once and handed to the token service, the password hasher and the
database manager; routes reach them through app.state.
"""

import time

from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from servicedesk import __version__
from servicedesk.config import Settings, get_settings
from servicedesk.db import db
from servicedesk.logging import RequestLoggingMiddleware, configure_logging, get_logger
from servicedesk.security import PasswordHasher, TokenService

from .error_handlers import register_exception_handlers
from .middleware.request_id import RequestIDMiddleware
from .routers import auth as auth_router
from .routers import issues as issues_router
from .routers import users as users_router

logger = get_logger("api")


def validate_config_on_startup(settings: Settings) -> None:
    """Log configuration warnings; fatal problems abort startup in production."""
    errors, warnings = settings.validate_production_config()

    if settings.is_production:
        for error in errors:
            logger.error("config_error", error=error)
        if errors:
            raise RuntimeError("Invalid production configuration: " + "; ".join(errors))
        for warning in warnings:
            logger.warning("config_warning", message=warning)
    else:
        for message in errors + warnings:
            logger.debug("config_warning", message=message)


def check_database_health(max_retries: int = 3, retry_delay: float = 2.0) -> bool:
    """
    Check database connectivity with retry logic.

    Args:
        max_retries: Maximum number of connection attempts
        retry_delay: Base seconds to wait between retries (grows per attempt)

    Returns:
        True if database is reachable

    Raises:
        RuntimeError: If database is unreachable after all retries
    """
    for attempt in range(max_retries):
        result = db.health_check()
        if result["healthy"]:
            logger.info("database_health_check_passed", attempt=attempt + 1, latency_ms=result["latency_ms"])
            return True

        logger.warning(
            "database_health_check_failed",
            attempt=attempt + 1,
            max_retries=max_retries,
            error=result["error"],
        )
        if attempt < max_retries - 1:
            time.sleep(retry_delay * (attempt + 1))

    raise RuntimeError(
        f"Database unreachable after {max_retries} attempts. "
        "Check DATABASE_URL configuration and database server status."
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    configure_logging(level="DEBUG" if settings.debug else "INFO", json_logs=settings.is_production)

    app = FastAPI(title=settings.app_name, version=__version__)
    app.state.settings = settings
    app.state.token_service = TokenService(settings)
    app.state.password_hasher = PasswordHasher(rounds=settings.bcrypt_rounds)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "Accept", "Origin", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
    )

    # GZip compression for responses > 500 bytes
    app.add_middleware(GZipMiddleware, minimum_size=500)

    # Request ID middleware (for tracing)
    app.add_middleware(RequestIDMiddleware)

    # Structured request logging middleware
    app.add_middleware(RequestLoggingMiddleware)

    register_exception_handlers(app, debug=settings.debug and not settings.is_production)

    @app.on_event("startup")
    async def startup_event():
        """Initialize services on startup."""
        logger.info("app_startup", app_name=settings.app_name, env=settings.env)

        validate_config_on_startup(settings)

        db.initialize(settings)
        db.create_all_tables()
        logger.info("database_initialized")

        check_database_health(max_retries=3, retry_delay=2.0)

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("app_shutdown")

    @app.get("/health", tags=["health"])
    def health_check():
        """
        Health check endpoint (liveness probe).

        Returns minimal information to avoid exposing infrastructure details.
        """
        return {"status": "ok"}

    @app.get("/health/ready", tags=["health"])
    def readiness_check():
        """
        Readiness check endpoint.

        Returns 200 if the database answers, 503 otherwise.
        """
        database_ok = db.health_check()["healthy"]
        checks = {"database": database_ok}

        if not database_ok:
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "not_ready", "checks": checks},
            )
        return {"status": "ready", "checks": checks}

    # API is accessible at /api/*
    app.include_router(auth_router.router, prefix=settings.api_prefix)
    app.include_router(issues_router.router, prefix=settings.api_prefix)
    app.include_router(users_router.router, prefix=settings.api_prefix)

    return app


app = create_app()
