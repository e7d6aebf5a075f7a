"""
FastAPI dependencies: settings, engine, clock and geocoder.

Settings are read once per process, after loading a .env file from the
working directory. Tests replace the clock and geocoder through
app.dependency_overrides.
"""

from datetime import datetime, timezone
from functools import lru_cache
from typing import AsyncIterator

from dotenv import find_dotenv, load_dotenv

from rental_engine.config import EngineSettings, get_engine_settings, load_engine_config
from rental_engine.engine import RentalEngine
from rental_engine.geocoding import NominatimGeocoder
from rental_engine.rate_limiting import RateLimiter


@lru_cache
def get_settings() -> EngineSettings:
    # Load environment variables from .env file
    load_dotenv(find_dotenv(usecwd=True))
    return get_engine_settings(load_engine_config())


@lru_cache
def get_engine() -> RentalEngine:
    return RentalEngine(get_settings())


@lru_cache
def get_rate_limiter() -> RateLimiter:
    """Process-wide limiter so pacing and the hourly cap span requests"""
    limits = get_settings().rate_limiting
    return RateLimiter(
        min_delay_seconds=limits.min_delay_seconds,
        max_delay_seconds=limits.max_delay_seconds,
        max_requests_per_hour=limits.max_requests_per_hour,
    )


def get_clock() -> datetime:
    """Current time for recency scoring and past-date checks"""
    return datetime.now(timezone.utc)


async def get_geocoder() -> AsyncIterator[NominatimGeocoder]:
    geocoder = NominatimGeocoder.from_settings(get_settings(), rate_limiter=get_rate_limiter())
    try:
        yield geocoder
    finally:
        await geocoder.close()
