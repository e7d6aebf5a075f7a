"""
Search and pricing entry points.

``search`` runs the candidate filter and ranking engine over an already
fetched listing collection. ``price_rental`` validates a rental window and,
when it is legal, prices it. Both are pure with respect to their inputs and
the injected clock, so they can be called concurrently without locking.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional, Sequence, Union

from rental_engine.availability import AvailabilityValidator
from rental_engine.config import EngineSettings, get_engine_settings
from rental_engine.filtering import ListingFilter
from rental_engine.models import (
    BlockedRange,
    Coordinates,
    ListingSummary,
    PricingBreakdown,
    RankedResult,
    RateSchedule,
    RejectionReason,
    RentalWindow,
    SearchFilters,
)
from rental_engine.pricing import PricingCalculator
from rental_engine.ranking import RankingContext, RankingEngine


logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RentalEngine:
    """Wires the filter, ranker, validator and calculator from settings."""

    def __init__(self, settings: EngineSettings = None):
        self.settings = settings or get_engine_settings()
        self.listing_filter = ListingFilter(
            instant_book_min_owner_rating=self.settings.search.instant_book_min_owner_rating
        )
        self.ranking_engine = RankingEngine(
            shard_size=self.settings.search.shard_size,
            max_workers=self.settings.search.max_workers,
        )
        self.validator = AvailabilityValidator()
        self.calculator = PricingCalculator(
            service_fee_rate=self.settings.pricing.service_fee_rate
        )

    def search(
        self,
        listings: Iterable[ListingSummary],
        filters: SearchFilters,
        user_coordinates: Optional[Coordinates] = None,
        clock: Clock = utc_now,
        limit: Optional[int] = None,
        offset: int = 0
    ) -> List[RankedResult]:
        """Filter and rank listings.

        Args:
            listings: Listing collection from the item repository
            filters: Search filters, including the sort strategy
            user_coordinates: Search center; falls back to filters.coordinates.
                When neither is known the radius filter is skipped and the
                distance sort keeps input order.
            clock: Source of the current time
            limit: Maximum number of results, None for all
            offset: Number of leading results to skip

        Returns:
            Ranked results, empty when nothing passes the filters
        """
        coordinates = user_coordinates or filters.coordinates
        if coordinates is None and filters.radius_miles is not None:
            logger.info("Search coordinates unavailable, skipping radius filter")

        candidates = self.listing_filter.apply(listings, filters, coordinates)
        context = RankingContext(
            now=clock(),
            query=filters.query,
            user_coordinates=coordinates,
        )
        return self.ranking_engine.rank(
            candidates, filters.sort_by, context, limit=limit, offset=offset
        )

    def price_rental(
        self,
        schedule: RateSchedule,
        window: RentalWindow,
        delivery_requested: bool,
        now: datetime,
        blocked_ranges: Sequence[BlockedRange] = ()
    ) -> Union[PricingBreakdown, RejectionReason]:
        """Validate a rental window and price it.

        Args:
            schedule: Listing rates and rental policy
            window: Proposed start and end
            delivery_requested: Whether delivery is requested
            now: Current time from the injected clock
            blocked_ranges: Booked or owner-blocked intervals

        Returns:
            PricingBreakdown for a legal window, otherwise the RejectionReason
        """
        result = self.validator.validate(
            window,
            now,
            min_rental_duration=schedule.min_rental_duration,
            max_rental_duration=schedule.max_rental_duration,
            blocked_ranges=blocked_ranges,
        )
        if not result.is_valid:
            return result.rejection
        return self.calculator.calculate(schedule, result.total_hours, delivery_requested)


_default_engine: Optional[RentalEngine] = None


def get_engine() -> RentalEngine:
    """Shared engine built from environment settings."""
    global _default_engine
    if _default_engine is None:
        _default_engine = RentalEngine()
    return _default_engine


def search(
    listings: Iterable[ListingSummary],
    filters: SearchFilters,
    user_coordinates: Optional[Coordinates] = None,
    clock: Clock = utc_now,
    limit: Optional[int] = None,
    offset: int = 0
) -> List[RankedResult]:
    """Filter and rank listings with the shared engine. See RentalEngine.search."""
    return get_engine().search(
        listings, filters, user_coordinates, clock=clock, limit=limit, offset=offset
    )


def price_rental(
    schedule: RateSchedule,
    window: RentalWindow,
    delivery_requested: bool,
    now: datetime,
    blocked_ranges: Sequence[BlockedRange] = ()
) -> Union[PricingBreakdown, RejectionReason]:
    """Validate and price a rental with the shared engine. See RentalEngine.price_rental."""
    return get_engine().price_rental(
        schedule, window, delivery_requested, now, blocked_ranges=blocked_ranges
    )
