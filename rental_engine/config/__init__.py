"""Configuration module for the rental engine."""

from .engine_config import (
    ENGINE_CONFIG,
    EngineSettings,
    SearchConfig,
    PricingConfig,
    GeocodingConfig,
    RateLimitConfig,
    RetryConfig,
    get_engine_settings,
    load_engine_config,
)

__all__ = [
    'ENGINE_CONFIG',
    'EngineSettings',
    'SearchConfig',
    'PricingConfig',
    'GeocodingConfig',
    'RateLimitConfig',
    'RetryConfig',
    'get_engine_settings',
    'load_engine_config',
]
