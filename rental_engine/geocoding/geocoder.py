"""
Geocoding client - resolves free-text locations to coordinates using the
OpenStreetMap Nominatim search API.

A failed lookup never fails a search: callers use resolve_coordinates, which
turns errors into "coordinates unavailable" (None).
"""

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

import aiohttp

from rental_engine.config import EngineSettings, GeocodingConfig, RateLimitConfig
from rental_engine.error_handling import (
    ErrorHandler,
    GeocodingError,
    GeocodingUnavailableError,
    RetryConfig,
)
from rental_engine.models import Coordinates
from rental_engine.rate_limiting import RateLimiter


logger = logging.getLogger(__name__)


@dataclass
class LocationResult:
    """A geocoded location"""
    coordinates: Coordinates
    display_name: str = ""
    city: str = ""
    state: str = ""
    postcode: str = ""
    country: str = ""


class NominatimGeocoder:
    """
    Nominatim client with request pacing and retries.

    Transport failures and non-200 responses are retried with backoff; an
    address with no match fails immediately.
    """

    def __init__(
        self,
        config: GeocodingConfig = None,
        rate_limiter: RateLimiter = None,
        error_handler: ErrorHandler = None,
        session: aiohttp.ClientSession = None
    ):
        self.config = config or GeocodingConfig()
        if rate_limiter is None:
            limits = RateLimitConfig()
            rate_limiter = RateLimiter(
                min_delay_seconds=limits.min_delay_seconds,
                max_delay_seconds=limits.max_delay_seconds,
                max_requests_per_hour=limits.max_requests_per_hour,
            )
        self.rate_limiter = rate_limiter
        self.error_handler = error_handler or ErrorHandler(
            RetryConfig(initial_timeout_ms=self.config.timeout_ms),
            retry_on=(GeocodingUnavailableError,)
        )
        self._session = session

    @classmethod
    def from_settings(
        cls,
        settings: EngineSettings,
        rate_limiter: RateLimiter = None
    ) -> 'NominatimGeocoder':
        """Build a geocoder from engine settings.

        The first attempt uses the geocoding timeout; retries escalate it by
        the retry multiplier. Pass a shared rate_limiter when several
        geocoders talk to the same service.
        """
        if rate_limiter is None:
            limits = settings.rate_limiting
            rate_limiter = RateLimiter(
                min_delay_seconds=limits.min_delay_seconds,
                max_delay_seconds=limits.max_delay_seconds,
                max_requests_per_hour=limits.max_requests_per_hour,
            )
        return cls(
            config=settings.geocoding,
            rate_limiter=rate_limiter,
            error_handler=ErrorHandler(
                replace(settings.retry_config, initial_timeout_ms=settings.geocoding.timeout_ms),
                retry_on=(GeocodingUnavailableError,)
            ),
        )

    async def __aenter__(self):
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Close the HTTP session when done"""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def _ensure_session(self):
        """Ensure we have an open session"""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={"User-Agent": self.config.user_agent}
            )

    async def geocode(self, address: str) -> LocationResult:
        """
        Resolve an address to coordinates.

        Args:
            address: Free-text location such as "Austin, TX"

        Returns:
            LocationResult for the best match

        Raises:
            GeocodingError: If the address is empty, unmatched, or the service
                stays unavailable after retries
        """
        address = (address or "").strip()
        if not address:
            raise GeocodingError("Address is empty", address)

        if not self.rate_limiter.check_hourly_limit():
            raise GeocodingUnavailableError("Geocoding hourly request limit reached", address)

        await self.rate_limiter.wait_between_requests()

        return await self.error_handler.retry_with_backoff(
            self._lookup, address, timeout_ms=self.config.timeout_ms
        )

    async def resolve_coordinates(self, address: str) -> Optional[Coordinates]:
        """
        Resolve an address, returning None instead of raising on failure.

        Args:
            address: Free-text location

        Returns:
            Coordinates, or None when the location cannot be resolved
        """
        try:
            result = await self.geocode(address)
        except GeocodingError as e:
            self.error_handler.handle_geocoding_failure(e, address)
            return None
        logger.info(
            f"Resolved '{address}' to {result.coordinates.latitude:.4f}, "
            f"{result.coordinates.longitude:.4f}"
        )
        return result.coordinates

    async def _lookup(self, address: str, timeout_ms: int = 10000) -> LocationResult:
        """Single search request against the Nominatim API."""
        await self._ensure_session()

        params = {"format": "json", "q": address, "limit": "1", "addressdetails": "1"}
        timeout = aiohttp.ClientTimeout(total=timeout_ms / 1000)

        try:
            async with self._session.get(
                f"{self.config.base_url}/search",
                params=params,
                timeout=timeout
            ) as response:
                self.rate_limiter.record_request()
                if response.status != 200:
                    raise GeocodingUnavailableError(
                        f"Geocoding service unavailable (status {response.status})", address
                    )
                data = await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise GeocodingUnavailableError(
                f"Geocoding request failed: {type(e).__name__}: {e}", address
            ) from e

        if not data:
            raise GeocodingError(f"Address not found: {address}", address)

        return self._parse_result(data[0])

    @staticmethod
    def _parse_result(result: Dict[str, Any]) -> LocationResult:
        """Convert a Nominatim result into a LocationResult"""
        addr = result.get("address") or {}
        return LocationResult(
            coordinates=Coordinates(
                latitude=float(result["lat"]),
                longitude=float(result["lon"]),
            ),
            display_name=result.get("display_name", ""),
            city=addr.get("city") or addr.get("town") or addr.get("village") or "",
            state=addr.get("state", ""),
            postcode=addr.get("postcode", ""),
            country=addr.get("country", ""),
        )
