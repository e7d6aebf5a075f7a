"""Engine configuration settings for the rental engine."""

from dataclasses import dataclass
import os

from rental_engine.error_handling.error_handler import RetryConfig


@dataclass
class SearchConfig:
    """Search and ranking configuration."""
    default_radius_miles: float = 25.0
    instant_book_min_owner_rating: float = 4.5
    default_result_limit: int = 50
    shard_size: int = 0
    max_workers: int = 4


@dataclass
class PricingConfig:
    """Rental pricing configuration."""
    service_fee_rate: float = 0.10


@dataclass
class RateLimitConfig:
    """Geocoder request pacing configuration."""
    min_delay_seconds: float = 1.0
    max_delay_seconds: float = 1.5
    max_requests_per_hour: int = 600


@dataclass
class GeocodingConfig:
    """Geocoding service configuration."""
    base_url: str = "https://nominatim.openstreetmap.org"
    user_agent: str = "rental-engine/0.1"
    timeout_ms: int = 10000


@dataclass
class EngineSettings:
    """Main engine configuration settings."""
    log_level: str = "INFO"
    search: SearchConfig = None
    pricing: PricingConfig = None
    geocoding: GeocodingConfig = None
    rate_limiting: RateLimitConfig = None
    retry_config: RetryConfig = None

    def __post_init__(self):
        """Initialize nested configs if not provided."""
        if self.search is None:
            self.search = SearchConfig()
        if self.pricing is None:
            self.pricing = PricingConfig()
        if self.geocoding is None:
            self.geocoding = GeocodingConfig()
        if self.rate_limiting is None:
            self.rate_limiting = RateLimitConfig()
        if self.retry_config is None:
            self.retry_config = RetryConfig()


def load_engine_config() -> dict:
    """Read configuration from the environment, falling back to defaults."""
    return {
        "log_level": os.getenv("LOG_LEVEL", "INFO"),
        "search": {
            "default_radius_miles": float(os.getenv("DEFAULT_RADIUS_MILES", "25")),
            "instant_book_min_owner_rating": float(os.getenv("INSTANT_BOOK_MIN_OWNER_RATING", "4.5")),
            "default_result_limit": int(os.getenv("DEFAULT_RESULT_LIMIT", "50")),
            "shard_size": int(os.getenv("RANKING_SHARD_SIZE", "0")),
            "max_workers": int(os.getenv("RANKING_MAX_WORKERS", "4")),
        },
        "pricing": {
            "service_fee_rate": float(os.getenv("SERVICE_FEE_RATE", "0.10")),
        },
        "geocoding": {
            "base_url": os.getenv("GEOCODER_BASE_URL", "https://nominatim.openstreetmap.org"),
            "user_agent": os.getenv("GEOCODER_USER_AGENT", "rental-engine/0.1"),
            "timeout_ms": int(os.getenv("GEOCODER_TIMEOUT_MS", "10000")),
        },
        "rate_limiting": {
            "min_delay_seconds": float(os.getenv("GEOCODER_MIN_DELAY_SECONDS", "1.0")),
            "max_delay_seconds": float(os.getenv("GEOCODER_MAX_DELAY_SECONDS", "1.5")),
            "max_requests_per_hour": int(os.getenv("GEOCODER_MAX_REQUESTS_PER_HOUR", "600")),
        },
        "retry_config": {
            "max_retries": int(os.getenv("MAX_RETRIES", "3")),
            "initial_timeout_ms": int(os.getenv("INITIAL_TIMEOUT_MS", "10000")),
            "timeout_multiplier": float(os.getenv("TIMEOUT_MULTIPLIER", "1.5")),
        },
    }


# Default engine configuration
ENGINE_CONFIG = load_engine_config()


def get_engine_settings(config: dict = None) -> EngineSettings:
    """Get engine settings from configuration."""
    config = config or ENGINE_CONFIG
    return EngineSettings(
        log_level=config["log_level"],
        search=SearchConfig(**config["search"]),
        pricing=PricingConfig(**config["pricing"]),
        geocoding=GeocodingConfig(**config["geocoding"]),
        rate_limiting=RateLimitConfig(**config["rate_limiting"]),
        retry_config=RetryConfig(**config["retry_config"]),
    )
