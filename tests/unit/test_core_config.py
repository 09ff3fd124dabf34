"""Unit tests for Settings validation and derived values."""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from src.core.config import Settings
from src.core.enums import Environment

SECRET = "s" * 32


def make_settings(**overrides) -> Settings:
    values = {
        "database_url": "sqlite+aiosqlite:///:memory:",
        "secret_key": SECRET,
    }
    values.update(overrides)
    return Settings(**values)


@pytest.mark.unit
class TestSettingsDefaults:
    def test_lockout_and_token_defaults(self):
        settings = make_settings()

        assert settings.lock_threshold == 5
        assert settings.lock_duration == timedelta(hours=2)
        assert settings.access_token_ttl == timedelta(minutes=15)
        assert settings.refresh_token_ttl == timedelta(days=7)
        assert settings.activity_update_interval_seconds == 60
        assert settings.cleanup_interval_minutes == 60

    def test_environment_flags(self):
        settings = make_settings(environment=Environment.PRODUCTION)

        assert settings.is_production is True
        assert settings.is_development is False

    def test_trailing_slash_removed_from_base_url(self):
        settings = make_settings(api_base_url="https://api.example.com/")

        assert settings.api_base_url == "https://api.example.com"


@pytest.mark.unit
class TestSettingsValidation:
    def test_short_secret_rejected(self):
        with pytest.raises(ValidationError):
            make_settings(secret_key="short")

    @pytest.mark.parametrize(
        "field",
        [
            "lock_threshold",
            "lock_duration_minutes",
            "access_token_expire_minutes",
            "refresh_token_expire_days",
            "cleanup_interval_minutes",
        ],
    )
    def test_non_positive_values_rejected(self, field):
        with pytest.raises(ValidationError):
            make_settings(**{field: 0})

    @pytest.mark.parametrize("rounds", [3, 32])
    def test_bcrypt_rounds_bounds(self, rounds):
        with pytest.raises(ValidationError):
            make_settings(bcrypt_rounds=rounds)

    def test_store_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            make_settings(store_timeout_seconds=0)
