"""
Shared builders and hypothesis strategies for rental listing tests.
"""

from datetime import datetime, timedelta, timezone

from hypothesis import strategies as st

from rental_engine.models import Coordinates, ListingSummary, OwnerSummary


NOW = datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc)

SAN_FRANCISCO = Coordinates(37.7749, -122.4194)
LOS_ANGELES = Coordinates(34.0522, -118.2437)
OAKLAND = Coordinates(37.8044, -122.2712)


def make_listing(**overrides) -> ListingSummary:
    """Build a listing with sensible defaults for a single test."""
    data = dict(
        id="item-1",
        title="Cordless Drill",
        description="18V drill with two batteries",
        category_id="tools",
        category_name="Tools",
        daily_rate=25.0,
        created_at=NOW - timedelta(days=60),
        rating=4.0,
        review_count=10,
        view_count=100,
        favorite_count=5,
        delivery_available=False,
        owner=OwnerSummary(rating=4.0, verification_status="verified"),
    )
    data.update(overrides)
    return ListingSummary(**data)


# Strategy for generating listing coordinates
coordinates = st.builds(
    Coordinates,
    latitude=st.floats(min_value=-89.0, max_value=89.0, allow_nan=False),
    longitude=st.floats(min_value=-179.0, max_value=179.0, allow_nan=False),
)

# Strategy for generating titles from a small vocabulary so queries hit
titles = st.lists(
    st.sampled_from(["drill", "ladder", "camera", "tent", "kayak", "projector", "saw"]),
    min_size=1,
    max_size=3,
).map(" ".join)

owners = st.builds(
    OwnerSummary,
    rating=st.floats(min_value=0, max_value=5, allow_nan=False),
    verification_status=st.sampled_from(["verified", "pending", "unverified"]),
)

min_durations = st.integers(min_value=1, max_value=240)

# Strategy for generating complete ListingSummary objects
listings = st.builds(
    ListingSummary,
    id=st.uuids().map(str),
    title=titles,
    description=titles,
    category_id=st.sampled_from(["tools", "outdoor", "electronics"]),
    category_name=st.sampled_from(["Tools", "Outdoor", "Electronics"]),
    daily_rate=st.floats(min_value=1, max_value=500, allow_nan=False),
    created_at=st.integers(min_value=0, max_value=365 * 24).map(
        lambda hours: NOW - timedelta(hours=hours)
    ),
    rating=st.floats(min_value=0, max_value=5, allow_nan=False),
    review_count=st.integers(min_value=0, max_value=500),
    view_count=st.integers(min_value=0, max_value=10000),
    favorite_count=st.integers(min_value=0, max_value=500),
    hourly_rate=st.one_of(st.none(), st.floats(min_value=1, max_value=50, allow_nan=False)),
    coordinates=st.one_of(st.none(), coordinates),
    status=st.sampled_from(["active", "inactive", "rented"]),
    delivery_available=st.booleans(),
    owner=owners,
    min_rental_duration=min_durations,
    max_rental_duration=st.one_of(st.none(), st.integers(min_value=240, max_value=2000)),
    condition=st.one_of(st.none(), st.sampled_from(["new", "like_new", "good", "fair"])),
)
