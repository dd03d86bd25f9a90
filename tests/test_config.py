"""Tests for environment-driven settings."""

from __future__ import annotations

from shopfinder.config import ProviderSettings, ShopFinderSettings, get_settings


def test_defaults_match_supported_market(monkeypatch):
    monkeypatch.delenv("SHOPFINDER_PROVIDER__API_KEY", raising=False)
    settings = ShopFinderSettings(_env_file=None)

    assert settings.provider.api_key is None
    assert settings.provider.engine == "google_shopping"
    assert settings.provider.location == "United Kingdom"
    assert settings.provider.language == "en"
    assert settings.provider.region == "uk"
    assert settings.provider.result_count == 20
    assert settings.history.recent_limit == 10
    assert settings.history.country_code == "UK"
    assert settings.result_cache.region == "UK"


def test_nested_environment_overrides(monkeypatch):
    monkeypatch.setenv("SHOPFINDER_PROVIDER__API_KEY", "from-env")
    monkeypatch.setenv("SHOPFINDER_PROVIDER__REGION", "us")
    monkeypatch.setenv("SHOPFINDER_RESULT_CACHE__ENABLED", "false")
    monkeypatch.setenv("SHOPFINDER_ENVIRONMENT", "prod")

    settings = ShopFinderSettings(_env_file=None)

    assert settings.provider.api_key.get_secret_value() == "from-env"
    assert settings.provider.region == "us"
    assert settings.result_cache.enabled is False
    assert settings.environment == "prod"


def test_blank_api_key_counts_as_missing():
    assert ProviderSettings(api_key="  ").api_key is None


def test_get_settings_is_cached():
    get_settings.cache_clear()
    try:
        assert get_settings() is get_settings()
    finally:
        get_settings.cache_clear()
