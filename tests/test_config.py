import pytest
from pydantic import ValidationError

from servicedesk.config import Settings

STRONG_ACCESS = "a" * 16 + "-access-secret-value-0123456789"
STRONG_REFRESH = "b" * 16 + "-refresh-secret-value-0123456789"


def test_defaults(monkeypatch):
    monkeypatch.delenv("ENV", raising=False)
    with pytest.warns(UserWarning):
        settings = Settings(_env_file=None)

    assert settings.api_prefix == "/api"
    assert settings.jwt_algorithm == "HS256"
    assert settings.access_token_expire_minutes == 60
    assert settings.refresh_token_expire_minutes == 60 * 24 * 7
    assert settings.bcrypt_rounds == 10
    assert settings.restrict_comments_to_participants is False
    assert not settings.is_production


def test_values_come_from_environment(monkeypatch):
    monkeypatch.setenv("JWT_SECRET_KEY", STRONG_ACCESS)
    monkeypatch.setenv("JWT_REFRESH_SECRET_KEY", STRONG_REFRESH)
    monkeypatch.setenv("ACCESS_TOKEN_EXPIRE_MINUTES", "15")
    monkeypatch.setenv("RESTRICT_COMMENTS_TO_PARTICIPANTS", "true")
    monkeypatch.setenv("CORS_ALLOWED_ORIGINS", "https://a.example.com, https://b.example.com")

    settings = Settings(_env_file=None)

    assert settings.access_token_expire_minutes == 15
    assert settings.restrict_comments_to_participants is True
    assert settings.cors_origins_list == ["https://a.example.com", "https://b.example.com"]


def test_default_secret_fails_in_production(monkeypatch):
    monkeypatch.setenv("ENV", "production")

    with pytest.raises(ValidationError, match="default value"):
        Settings(_env_file=None)


def test_short_secret_fails_in_production(monkeypatch):
    monkeypatch.setenv("ENV", "production")
    monkeypatch.setenv("JWT_SECRET_KEY", "k3y-but-short")
    monkeypatch.setenv("JWT_REFRESH_SECRET_KEY", STRONG_REFRESH)

    with pytest.raises(ValidationError, match="at least 32 characters"):
        Settings(_env_file=None)


def test_production_requires_distinct_secrets(monkeypatch):
    monkeypatch.setenv("ENV", "production")
    monkeypatch.setenv("JWT_SECRET_KEY", STRONG_ACCESS)
    monkeypatch.setenv("JWT_REFRESH_SECRET_KEY", STRONG_ACCESS)
    monkeypatch.setenv("DATABASE_URL", "postgresql://db/servicedesk")
    monkeypatch.setenv("CORS_ALLOWED_ORIGINS", "https://desk.example.com")

    errors, warnings = Settings(_env_file=None).validate_production_config()

    assert errors == ["JWT_SECRET_KEY and JWT_REFRESH_SECRET_KEY must differ"]
    assert warnings == []
