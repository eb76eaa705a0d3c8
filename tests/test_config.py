"""Tests for core/config.py -- Settings defaults and production guard."""

import pytest
from pydantic import ValidationError

from accounts.core.config import DEV_SECRET_KEY, Settings


def test_development_accepts_default_secret() -> None:
    settings = Settings(_env_file=None, APP_ENV="development", SECRET_KEY=DEV_SECRET_KEY)
    assert settings.SECRET_KEY == DEV_SECRET_KEY
    assert settings.ACCESS_TOKEN_EXPIRE_MINUTES == 7 * 24 * 60
    assert settings.ALGORITHM == "HS256"


@pytest.mark.parametrize("secret", [DEV_SECRET_KEY, ""])
def test_production_rejects_default_or_empty_secret(secret) -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, APP_ENV="production", SECRET_KEY=secret)


def test_production_accepts_explicit_secret() -> None:
    settings = Settings(_env_file=None, APP_ENV="Production", SECRET_KEY="a" * 48)
    assert settings.is_production


@pytest.mark.parametrize("rounds", [3, 32])
def test_bcrypt_rounds_out_of_range(rounds) -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, BCRYPT_ROUNDS=rounds)


def test_allowed_origins_from_json_string() -> None:
    settings = Settings(_env_file=None, ALLOWED_ORIGINS='["https://a.example", "https://b.example"]')
    assert settings.ALLOWED_ORIGINS == ["https://a.example", "https://b.example"]
