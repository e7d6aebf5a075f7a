"""Tests for configuration module."""

from rental_engine.config import (
    ENGINE_CONFIG,
    EngineSettings,
    GeocodingConfig,
    PricingConfig,
    RateLimitConfig,
    SearchConfig,
    get_engine_settings,
    load_engine_config,
)
from rental_engine.error_handling import RetryConfig


def test_engine_config_exists():
    """Test that ENGINE_CONFIG dictionary is properly defined."""
    assert isinstance(ENGINE_CONFIG, dict)
    for key in ("log_level", "search", "pricing", "geocoding", "rate_limiting", "retry_config"):
        assert key in ENGINE_CONFIG


def test_get_engine_settings():
    """Test that get_engine_settings returns a proper EngineSettings object."""
    settings = get_engine_settings()

    assert isinstance(settings, EngineSettings)
    assert isinstance(settings.search, SearchConfig)
    assert isinstance(settings.pricing, PricingConfig)
    assert isinstance(settings.geocoding, GeocodingConfig)
    assert isinstance(settings.rate_limiting, RateLimitConfig)
    assert isinstance(settings.retry_config, RetryConfig)


def test_environment_variable_override(monkeypatch):
    """Environment variables override defaults when the config is loaded."""
    monkeypatch.setenv("SERVICE_FEE_RATE", "0.15")
    monkeypatch.setenv("INSTANT_BOOK_MIN_OWNER_RATING", "4.8")
    monkeypatch.setenv("RANKING_SHARD_SIZE", "500")
    monkeypatch.setenv("GEOCODER_BASE_URL", "http://localhost:8080")
    monkeypatch.setenv("MAX_RETRIES", "5")

    settings = get_engine_settings(load_engine_config())

    assert settings.pricing.service_fee_rate == 0.15
    assert settings.search.instant_book_min_owner_rating == 4.8
    assert settings.search.shard_size == 500
    assert settings.geocoding.base_url == "http://localhost:8080"
    assert settings.retry_config.max_retries == 5


def test_engine_settings_with_custom_values():
    """Test creating EngineSettings with custom values."""
    settings = EngineSettings(
        log_level="DEBUG",
        pricing=PricingConfig(service_fee_rate=0.2),
    )

    assert settings.log_level == "DEBUG"
    assert settings.pricing.service_fee_rate == 0.2
    assert settings.search.instant_book_min_owner_rating == 4.5


def test_dataclass_initialization():
    """Test that all config dataclasses can be initialized with defaults."""
    assert SearchConfig().default_radius_miles == 25.0
    assert SearchConfig().shard_size == 0
    assert PricingConfig().service_fee_rate == 0.10
    assert RateLimitConfig().min_delay_seconds == 1.0
    assert GeocodingConfig().base_url == "https://nominatim.openstreetmap.org"
    assert RetryConfig().max_retries == 3
