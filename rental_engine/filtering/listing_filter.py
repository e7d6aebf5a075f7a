"""
Candidate filter for rental listings.

This module applies the hard-exclusion criteria of a search: text query,
category, price band, rating floor, status, delivery, rental-duration policy,
owner gates, item condition, and search radius. Every active criterion must
pass; filtering preserves input order.
"""

import logging
from typing import Iterable, List, Optional

from rental_engine.geo import haversine_miles
from rental_engine.models import (
    AvailabilityFilter,
    Coordinates,
    DurationMode,
    ItemCondition,
    ListingSummary,
    SearchFilters,
)


logger = logging.getLogger(__name__)

HOURS_PER_WEEK = 168


class ListingFilter:
    """Filters rental listings against a set of search filters.

    Attributes:
        instant_book_min_owner_rating: Owner rating a listing needs to pass
            the instant-book filter
    """

    def __init__(self, instant_book_min_owner_rating: float = 4.5):
        self.instant_book_min_owner_rating = instant_book_min_owner_rating

    def apply(
        self,
        listings: Iterable[ListingSummary],
        filters: SearchFilters,
        search_coordinates: Optional[Coordinates] = None
    ) -> List[ListingSummary]:
        """Return the listings that pass every active filter, in input order.

        Args:
            listings: Candidate listings
            filters: Search filters to apply
            search_coordinates: Center for the radius filter; when None the
                radius filter is skipped

        Returns:
            Filtered listings
        """
        listings = list(listings)
        filtered = [
            listing for listing in listings
            if self.matches(listing, filters, search_coordinates)
        ]
        logger.debug(f"Candidate filter kept {len(filtered)}/{len(listings)} listings")
        return filtered

    def matches(
        self,
        listing: ListingSummary,
        filters: SearchFilters,
        search_coordinates: Optional[Coordinates] = None
    ) -> bool:
        """Check a single listing against every active filter."""
        query = filters.normalized_query
        if query and not self.matches_query(listing, query):
            return False

        if filters.category_id and listing.category_id != filters.category_id:
            return False

        if not self.matches_price(listing, filters.min_price, filters.max_price):
            return False

        if not self.matches_availability(listing, filters.availability):
            return False

        if listing.rating < filters.min_rating:
            return False

        if filters.delivery_available and not listing.delivery_available:
            return False

        if not self.matches_duration_mode(listing, filters.duration_mode):
            return False

        if not self.matches_duration_bounds(listing, filters.min_duration, filters.max_duration):
            return False

        if filters.verified_owners_only and not listing.owner.is_verified:
            return False

        if filters.instant_book and listing.owner.rating < self.instant_book_min_owner_rating:
            return False

        if not self.matches_condition(listing, filters.item_condition):
            return False

        if (
            search_coordinates is not None
            and filters.radius_miles is not None
            and not self.matches_radius(listing, search_coordinates, filters.radius_miles)
        ):
            return False

        return True

    def filter_by_query(
        self,
        listings: List[ListingSummary],
        query: str
    ) -> List[ListingSummary]:
        """Keep listings whose title, description, or category name contains the query.

        Matching is a case-insensitive substring test; an empty query keeps everything.
        """
        query = query.strip().lower()
        if not query:
            return list(listings)
        return [listing for listing in listings if self.matches_query(listing, query)]

    def filter_by_price(
        self,
        listings: List[ListingSummary],
        min_price: Optional[float] = None,
        max_price: Optional[float] = None
    ) -> List[ListingSummary]:
        """Filter listings by daily rate range.

        Args:
            listings: List of listings to filter
            min_price: Minimum daily rate (inclusive), None for no minimum
            max_price: Maximum daily rate (inclusive), None for no maximum

        Returns:
            List of listings that meet the price criteria
        """
        return [
            listing for listing in listings
            if self.matches_price(listing, min_price, max_price)
        ]

    def filter_by_radius(
        self,
        listings: List[ListingSummary],
        center: Coordinates,
        radius_miles: float
    ) -> List[ListingSummary]:
        """Keep listings with coordinates within radius_miles of center."""
        return [
            listing for listing in listings
            if self.matches_radius(listing, center, radius_miles)
        ]

    def filter_by_duration(
        self,
        listings: List[ListingSummary],
        min_duration: int = 1,
        max_duration: Optional[int] = None
    ) -> List[ListingSummary]:
        """Keep listings whose allowed rental durations overlap [min_duration, max_duration]."""
        return [
            listing for listing in listings
            if self.matches_duration_bounds(listing, min_duration, max_duration)
        ]

    @staticmethod
    def matches_query(listing: ListingSummary, query: str) -> bool:
        """Case-insensitive substring match against title, description and category.

        Args:
            listing: Listing to test
            query: Already lower-cased query text
        """
        if query in listing.title.lower():
            return True
        if listing.description and query in listing.description.lower():
            return True
        if listing.category_name and query in listing.category_name.lower():
            return True
        return False

    @staticmethod
    def matches_price(
        listing: ListingSummary,
        min_price: Optional[float],
        max_price: Optional[float]
    ) -> bool:
        if min_price is not None and listing.daily_rate < min_price:
            return False
        if max_price is not None and listing.daily_rate > max_price:
            return False
        return True

    @staticmethod
    def matches_availability(listing: ListingSummary, availability: AvailabilityFilter) -> bool:
        if availability == AvailabilityFilter.AVAILABLE:
            return listing.is_active
        if availability == AvailabilityFilter.UNAVAILABLE:
            return not listing.is_active
        return True

    @staticmethod
    def matches_duration_mode(listing: ListingSummary, mode: DurationMode) -> bool:
        if mode == DurationMode.HOURLY:
            return listing.offers_hourly
        if mode == DurationMode.DAILY:
            return listing.daily_rate > 0
        if mode == DurationMode.WEEKLY:
            return (
                listing.max_rental_duration is None
                or listing.max_rental_duration >= HOURS_PER_WEEK
            )
        return True

    @staticmethod
    def matches_duration_bounds(
        listing: ListingSummary,
        min_duration: int,
        max_duration: Optional[int]
    ) -> bool:
        """The listing's [min, max] rental interval must overlap the requested one."""
        if max_duration is not None and listing.min_rental_duration > max_duration:
            return False
        if (
            listing.max_rental_duration is not None
            and listing.max_rental_duration < min_duration
        ):
            return False
        return True

    @staticmethod
    def matches_condition(listing: ListingSummary, condition: ItemCondition) -> bool:
        if condition == ItemCondition.ALL:
            return True
        return listing.condition == condition.value

    @staticmethod
    def matches_radius(
        listing: ListingSummary,
        center: Coordinates,
        radius_miles: float
    ) -> bool:
        if listing.coordinates is None:
            return False
        return haversine_miles(center, listing.coordinates) <= radius_miles
