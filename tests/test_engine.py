"""
Tests for the search and price_rental entry points.
"""

from datetime import timedelta

from rental_engine import (
    RentalEngine,
    RateSchedule,
    RejectionReason,
    RentalWindow,
    SearchFilters,
    PricingBreakdown,
    price_rental,
    search,
)
from rental_engine.config import EngineSettings, PricingConfig, SearchConfig
from tests.listing_strategies import LOS_ANGELES, NOW, OAKLAND, SAN_FRANCISCO, make_listing


def clock():
    return NOW


def test_search_filters_then_ranks():
    candidates = [
        make_listing(id="low-rated", rating=3.0, delivery_available=True),
        make_listing(id="no-delivery", rating=4.9, delivery_available=False),
        make_listing(id="good", rating=4.2, delivery_available=True),
        make_listing(id="best", rating=4.7, delivery_available=True),
    ]
    filters = SearchFilters(min_rating=4, delivery_available=True, sort_by="rating")

    results = search(candidates, filters, clock=clock)

    assert [result.listing.id for result in results] == ["best", "good"]
    assert [result.rank for result in results] == [1, 2]


def test_search_with_no_matches_returns_empty_list():
    assert search([make_listing()], SearchFilters(query="kayak"), clock=clock) == []


def test_search_falls_back_to_filter_coordinates():
    candidates = [
        make_listing(id="la", coordinates=LOS_ANGELES),
        make_listing(id="oakland", coordinates=OAKLAND),
    ]
    filters = SearchFilters(coordinates=SAN_FRANCISCO, sort_by="distance")

    results = search(candidates, filters, clock=clock)
    assert [result.listing.id for result in results] == ["oakland", "la"]


def test_search_without_coordinates_skips_radius_and_distance():
    candidates = [
        make_listing(id="la", coordinates=LOS_ANGELES),
        make_listing(id="oakland", coordinates=OAKLAND),
        make_listing(id="unknown", coordinates=None),
    ]
    filters = SearchFilters(location="Somewhere", radius_miles=10, sort_by="distance")

    results = search(candidates, filters, user_coordinates=None, clock=clock)
    assert [result.listing.id for result in results] == ["la", "oakland", "unknown"]


def test_search_limit_and_offset():
    candidates = [make_listing(id=f"item-{i}", daily_rate=50 - i) for i in range(6)]
    results = search(candidates, SearchFilters(sort_by="price_low"), clock=clock, limit=2, offset=2)

    assert [result.listing.id for result in results] == ["item-3", "item-2"]
    assert [result.rank for result in results] == [3, 4]


def test_price_rental_returns_breakdown():
    schedule = RateSchedule(daily_rate=25, delivery_fee=10, security_deposit=50)
    window = RentalWindow(start=NOW + timedelta(days=1), end=NOW + timedelta(days=3))

    outcome = price_rental(schedule, window, True, NOW)

    assert isinstance(outcome, PricingBreakdown)
    assert outcome.total_hours == 48
    assert outcome.total_amount == 115.00


def test_price_rental_returns_rejection():
    schedule = RateSchedule(daily_rate=25, min_rental_duration=4)
    window = RentalWindow(start=NOW + timedelta(hours=1), end=NOW + timedelta(hours=3))

    assert price_rental(schedule, window, False, NOW) == RejectionReason.BELOW_MINIMUM_DURATION

    past = RentalWindow(start=NOW - timedelta(days=1), end=NOW + timedelta(days=1))
    assert price_rental(schedule, past, False, NOW) == RejectionReason.STARTS_IN_PAST


def test_listing_rate_schedule_feeds_pricing():
    listing = make_listing(daily_rate=30, hourly_rate=4, security_deposit=20, min_rental_duration=2)
    window = RentalWindow(start=NOW + timedelta(hours=2), end=NOW + timedelta(hours=7))

    outcome = price_rental(listing.to_rate_schedule(), window, False, NOW)

    assert outcome.subtotal == 20
    assert outcome.service_fee == 2.0
    assert outcome.total_amount == 42.0


def test_engine_uses_settings():
    settings = EngineSettings(
        search=SearchConfig(instant_book_min_owner_rating=3.0, shard_size=2, max_workers=2),
        pricing=PricingConfig(service_fee_rate=0.2),
    )
    engine = RentalEngine(settings)

    assert engine.listing_filter.instant_book_min_owner_rating == 3.0
    assert engine.ranking_engine.shard_size == 2

    schedule = RateSchedule(daily_rate=25)
    window = RentalWindow(start=NOW, end=NOW + timedelta(hours=24))
    assert engine.price_rental(schedule, window, False, NOW).service_fee == 5.0

    candidates = [make_listing(id=f"item-{i}", daily_rate=10 - i) for i in range(5)]
    results = engine.search(candidates, SearchFilters(sort_by="price_low"), clock=clock)
    assert [result.listing.id for result in results] == [f"item-{i}" for i in range(4, -1, -1)]
