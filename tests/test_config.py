import pytest
from pydantic import ValidationError

from app.core.config import Settings

SIGNING_KEY = "a-sufficiently-long-signing-key-for-tests-0123456789"


def _settings(**overrides) -> Settings:
    values = {"SECRET_KEY": SIGNING_KEY, "ENVIRONMENT": "development"}
    values.update(overrides)
    return Settings(_env_file=None, **values)


def test_defaults_are_consistent():
    settings = _settings()

    assert settings.access_token_lifetime_seconds == 3600
    assert settings.denylist_retention_seconds == 24 * 3600
    assert settings.denylist_retention_seconds >= settings.access_token_lifetime_seconds
    assert settings.is_production is False


def test_environment_is_normalized():
    assert _settings(ENVIRONMENT="  Production ").is_production is True


def test_retention_shorter_than_token_lifetime_is_rejected():
    with pytest.raises(ValidationError, match="DENYLIST_RETENTION_HOURS must cover"):
        _settings(ACCESS_TOKEN_EXPIRE_MINUTES=180, DENYLIST_RETENTION_HOURS=2)


def test_retention_equal_to_token_lifetime_is_accepted():
    settings = _settings(ACCESS_TOKEN_EXPIRE_MINUTES=120, DENYLIST_RETENTION_HOURS=2)

    assert settings.denylist_retention_seconds == settings.access_token_lifetime_seconds


@pytest.mark.parametrize(
    "field",
    ["ACCESS_TOKEN_EXPIRE_MINUTES", "DENYLIST_RETENTION_HOURS", "TOKEN_SWEEP_INTERVAL_SECONDS"],
)
def test_non_positive_durations_are_rejected(field):
    with pytest.raises(ValidationError, match=f"{field} must be positive"):
        _settings(**{field: 0})


def test_production_requires_strong_secret():
    with pytest.raises(ValidationError, match="SECRET_KEY must be at least 32 chars"):
        _settings(ENVIRONMENT="production", SECRET_KEY="short")

    with pytest.raises(ValidationError):
        _settings(ENVIRONMENT="production", SECRET_KEY="changeme-changeme-changeme-changeme-1234")

    assert _settings(ENVIRONMENT="production").is_production is True


def test_short_secret_allowed_outside_production():
    assert _settings(SECRET_KEY="dev").SECRET_KEY == "dev"
