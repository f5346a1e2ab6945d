"""Tests for application and domain configuration."""

import pytest

from src.config import Settings
from src.domains.billing.config import BillingConfig
from src.domains.presence.config import GeofenceConfig


class TestSettings:
    def test_default_settings(self):
        settings = Settings()
        assert settings.app_name == "flexio-core"
        assert settings.app_version == "0.1.0"
        assert settings.port == 8000

    def test_settings_from_env(self, monkeypatch):
        monkeypatch.setenv("APP_NAME", "test-app")
        monkeypatch.setenv("PORT", "9000")
        monkeypatch.setenv("DEBUG", "true")
        monkeypatch.setenv("BILLING_CRON_SECRET", "s3cret")
        settings = Settings()
        assert settings.app_name == "test-app"
        assert settings.port == 9000
        assert settings.debug is True
        assert settings.billing_cron_secret == "s3cret"

    def test_database_url_default(self):
        assert "postgresql+asyncpg" in Settings().database_url

    def test_pool_sizing_from_env(self, monkeypatch):
        assert (Settings().db_pool_size, Settings().db_max_overflow) == (5, 10)
        monkeypatch.setenv("DB_POOL_SIZE", "20")
        monkeypatch.setenv("DB_MAX_OVERFLOW", "0")
        settings = Settings()
        assert settings.db_pool_size == 20
        assert settings.db_max_overflow == 0


class TestBillingConfig:
    def test_defaults(self):
        config = BillingConfig()
        assert config.unit_price == 10.0
        assert config.free_limit == 5
        assert config.billing_day == 10

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("BILLING_UNIT_PRICE", "12.5")
        monkeypatch.setenv("BILLING_FREE_LIMIT", "3")
        config = BillingConfig.from_env()
        assert config.unit_price == 12.5
        assert config.free_limit == 3

    @pytest.mark.parametrize(
        "kwargs", [{"unit_price": 0}, {"free_limit": -1}, {"billing_day": 31}]
    )
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(ValueError):
            BillingConfig(**kwargs)

    def test_invalid_env_override_rejected(self, monkeypatch):
        monkeypatch.setenv("BILLING_DAY", "0")
        with pytest.raises(ValueError):
            BillingConfig.from_env()


class TestGeofenceConfig:
    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("GEOFENCE_RADIUS_METERS", "25")
        monkeypatch.setenv("GEOFENCE_REQUIRED_PRESENCE_MINUTES", "15")
        config = GeofenceConfig.from_env()
        assert config.radius_meters == 25.0
        assert config.required_presence_minutes == 15
        assert config.max_gap_seconds == 120.0
