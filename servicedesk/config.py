"""
Application configuration using Pydantic settings.

Usage:
    from servicedesk.config import get_settings
    settings = get_settings()

The settings object is built once at process start and handed to the
components that need it (token service, password hasher, database manager).
Business logic never reads the environment directly.
"""

import os
import warnings
from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Values that must never be used as signing keys outside development
FORBIDDEN_SECRETS = (
    "change_me",
    "changeme",
    "secret",
    "your-secret-key",
    "jwt-secret",
    "supersecret",
    "development",
    "test",
)


def _is_production_env() -> bool:
    return os.getenv("ENV", "development").lower() in ("production", "prod")


class Settings(BaseSettings):
    """
    Unified application settings loaded from environment variables and .env file.

    Required for production:
        - JWT_SECRET_KEY (min 32 chars)
        - JWT_REFRESH_SECRET_KEY (min 32 chars, different from JWT_SECRET_KEY)
        - DATABASE_URL
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App settings
    app_name: str = "Service Desk"
    api_prefix: str = Field(default="/api", validation_alias="API_PREFIX")
    debug: bool = Field(default=False, validation_alias="DEBUG")
    env: str = Field(default="development", validation_alias="ENV")

    # Database
    database_url: str = Field(default="sqlite:///service_desk.db", validation_alias="DATABASE_URL")
    db_pool_size: int = Field(default=10, validation_alias="DB_POOL_SIZE")
    db_max_overflow: int = Field(default=20, validation_alias="DB_MAX_OVERFLOW")
    db_pool_pre_ping: bool = Field(default=True, validation_alias="DB_POOL_PRE_PING")

    # JWT / Authentication
    jwt_secret_key: str = Field(default="CHANGE_ME", validation_alias="JWT_SECRET_KEY")
    jwt_refresh_secret_key: str = Field(
        default="CHANGE_ME_REFRESH", validation_alias="JWT_REFRESH_SECRET_KEY"
    )
    jwt_algorithm: str = Field(default="HS256", validation_alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(default=60, validation_alias="ACCESS_TOKEN_EXPIRE_MINUTES")
    refresh_token_expire_minutes: int = Field(
        default=60 * 24 * 7, validation_alias="REFRESH_TOKEN_EXPIRE_MINUTES"
    )

    # Password hashing
    bcrypt_rounds: int = Field(default=10, ge=4, le=16, validation_alias="BCRYPT_ROUNDS")

    # Issue workflow
    restrict_comments_to_participants: bool = Field(
        default=False, validation_alias="RESTRICT_COMMENTS_TO_PARTICIPANTS"
    )

    # CORS
    cors_allowed_origins: str = Field(default="http://localhost:5173", validation_alias="CORS_ALLOWED_ORIGINS")

    @field_validator("jwt_secret_key", "jwt_refresh_secret_key")
    @classmethod
    def validate_jwt_secret(cls, v: str) -> str:
        """Validate JWT secrets - warns in dev, errors in production."""
        is_forbidden = v.lower().startswith(FORBIDDEN_SECRETS)
        is_too_short = len(v) < 32

        if _is_production_env():
            if is_forbidden:
                raise ValueError(
                    "JWT secrets cannot be a default value in production. "
                    "Generate a secure key with: python -c \"import secrets; print(secrets.token_urlsafe(48))\""
                )
            if is_too_short:
                raise ValueError(
                    f"JWT secrets must be at least 32 characters in production (got {len(v)})."
                )
        elif is_forbidden:
            warnings.warn(
                "A JWT secret is set to a default value. "
                "This is insecure - set a proper key for production.",
                UserWarning,
                stacklevel=2,
            )
        elif is_too_short:
            warnings.warn(
                f"JWT secrets should be at least 32 characters (got {len(v)})",
                UserWarning,
                stacklevel=2,
            )

        return v

    @property
    def is_production(self) -> bool:
        return self.env.lower() in ("production", "prod")

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_allowed_origins.split(",") if origin.strip()]

    def validate_production_config(self) -> tuple[List[str], List[str]]:
        """
        Validate configuration for production deployment.

        Returns:
            Tuple of (errors, warnings) - errors are fatal, warnings are advisory
        """
        errors = []
        warnings_ = []

        if self.jwt_secret_key == self.jwt_refresh_secret_key:
            errors.append("JWT_SECRET_KEY and JWT_REFRESH_SECRET_KEY must differ")

        if self.database_url.startswith("sqlite"):
            warnings_.append("DATABASE_URL points at SQLite - use a server database in production")

        if "localhost" in self.cors_allowed_origins:
            warnings_.append("CORS_ALLOWED_ORIGINS contains localhost")

        if self.access_token_expire_minutes >= self.refresh_token_expire_minutes:
            warnings_.append("Access tokens outlive refresh tokens")

        return errors, warnings_


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()


__all__ = ["Settings", "get_settings"]
