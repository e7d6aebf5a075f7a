"""
Data models for the rental engine.

This module defines the value objects passed into and returned from search
ranking and rental pricing. All of them are request-scoped: they are built
from data supplied by the item repository or the booking form, and never
persisted here.
"""

from dataclasses import dataclass, asdict, field, fields
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from rental_engine.error_handling.exceptions import InvalidFiltersError


def ensure_utc(value: datetime) -> datetime:
    """Return an aware datetime, treating naive values as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def parse_datetime(value: Any) -> datetime:
    """Parse an ISO-8601 string (or pass through a datetime) into an aware datetime."""
    if isinstance(value, datetime):
        return ensure_utc(value)
    text = str(value).strip()
    # fromisoformat on older interpreters rejects a trailing Z
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    return ensure_utc(datetime.fromisoformat(text))


def known_fields(cls, data: dict) -> dict:
    """Drop keys that are not fields of the dataclass, such as extra export columns."""
    names = {f.name for f in fields(cls)}
    return {key: value for key, value in data.items() if key in names}


class SortStrategy(str, Enum):
    """Ordering applied to filtered listings"""
    RELEVANCE = "relevance"
    PRICE_LOW = "price_low"
    PRICE_HIGH = "price_high"
    RATING = "rating"
    NEWEST = "newest"
    POPULAR = "popular"
    TRENDING = "trending"
    DISTANCE = "distance"


class AvailabilityFilter(str, Enum):
    """Listing status constraint"""
    ALL = "all"
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


class DurationMode(str, Enum):
    """Rental-duration mode a listing must support"""
    ALL = "all"
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"


class ItemCondition(str, Enum):
    """Physical condition of a listed item"""
    ALL = "all"
    NEW = "new"
    LIKE_NEW = "like_new"
    GOOD = "good"
    FAIR = "fair"


class RejectionReason(str, Enum):
    """Why a proposed rental window cannot be booked"""
    END_BEFORE_START = "end-before-start"
    STARTS_IN_PAST = "starts-in-past"
    BELOW_MINIMUM_DURATION = "below-minimum-duration"
    ABOVE_MAXIMUM_DURATION = "above-maximum-duration"
    OVERLAPS_BLOCKED_RANGE = "overlaps-blocked-range"


ACTIVE_STATUS = "active"
VERIFIED_STATUS = "verified"


@dataclass(frozen=True)
class Coordinates:
    """A WGS84 point in decimal degrees."""
    latitude: float
    longitude: float

    def to_dict(self) -> dict:
        return {'latitude': self.latitude, 'longitude': self.longitude}

    @classmethod
    def from_dict(cls, data: dict) -> 'Coordinates':
        """Accepts either latitude/longitude or lat/lng keys."""
        latitude = data.get('latitude', data.get('lat'))
        longitude = data.get('longitude', data.get('lng'))
        return cls(latitude=float(latitude), longitude=float(longitude))


@dataclass
class OwnerSummary:
    """Owner quality signals used by the verified-owner and instant-book gates."""
    rating: float = 0.0
    verification_status: str = "unverified"

    @property
    def is_verified(self) -> bool:
        return self.verification_status == VERIFIED_STATUS


@dataclass
class RateSchedule:
    """Pricing and rental-policy attributes of a listing.

    Attributes:
        daily_rate: Price per started day
        hourly_rate: Price per hour, None or 0 when hourly rental is not offered
        security_deposit: Refundable deposit added to every booking
        delivery_fee: Flat fee charged when delivery is requested
        min_rental_duration: Shortest allowed rental in hours
        max_rental_duration: Longest allowed rental in hours, None for unbounded
    """
    daily_rate: float
    hourly_rate: Optional[float] = None
    security_deposit: float = 0.0
    delivery_fee: float = 0.0
    min_rental_duration: int = 1
    max_rental_duration: Optional[int] = None

    @property
    def offers_hourly(self) -> bool:
        return bool(self.hourly_rate) and self.hourly_rate > 0

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'RateSchedule':
        return cls(**known_fields(cls, data))


@dataclass
class ListingSummary:
    """A rentable item as supplied by the item repository.

    Attributes:
        id: Listing identifier
        title: Listing title
        daily_rate: Price per day, always positive
        created_at: When the listing was published
        description: Free-text description
        category_id: Category identifier used by the category filter
        category_name: Category display name used by text matching
        rating: Average review rating between 0 and 5
        review_count: Number of reviews
        view_count: Number of detail-page views
        favorite_count: Number of users who favorited the listing
        hourly_rate: Price per hour, None or 0 when not offered
        coordinates: Pickup location, None when unknown
        status: Listing status, "active" when bookable
        delivery_available: Whether the owner offers delivery
        owner: Owner quality signals
        min_rental_duration: Shortest allowed rental in hours
        max_rental_duration: Longest allowed rental in hours, None for unbounded
        condition: Item condition, None when not recorded
        security_deposit: Refundable deposit
        delivery_fee: Flat delivery fee
    """
    id: str
    title: str
    daily_rate: float
    created_at: datetime
    description: str = ""
    category_id: Optional[str] = None
    category_name: Optional[str] = None
    rating: float = 0.0
    review_count: int = 0
    view_count: int = 0
    favorite_count: int = 0
    hourly_rate: Optional[float] = None
    coordinates: Optional[Coordinates] = None
    status: str = ACTIVE_STATUS
    delivery_available: bool = False
    owner: OwnerSummary = field(default_factory=OwnerSummary)
    min_rental_duration: int = 1
    max_rental_duration: Optional[int] = None
    condition: Optional[str] = None
    security_deposit: float = 0.0
    delivery_fee: float = 0.0

    @property
    def offers_hourly(self) -> bool:
        return bool(self.hourly_rate) and self.hourly_rate > 0

    @property
    def is_active(self) -> bool:
        return self.status == ACTIVE_STATUS

    def to_rate_schedule(self) -> RateSchedule:
        """Extract the pricing attributes needed to quote a rental."""
        return RateSchedule(
            daily_rate=self.daily_rate,
            hourly_rate=self.hourly_rate,
            security_deposit=self.security_deposit,
            delivery_fee=self.delivery_fee,
            min_rental_duration=self.min_rental_duration,
            max_rental_duration=self.max_rental_duration,
        )

    def to_dict(self) -> dict:
        """Convert listing to dictionary for JSON serialization.

        Returns:
            Dictionary representation with datetime converted to ISO format
        """
        data = asdict(self)
        data['created_at'] = self.created_at.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'ListingSummary':
        """Create ListingSummary instance from dictionary.

        Args:
            data: Dictionary containing listing data, as produced by to_dict
                or read from a listing export file

        Returns:
            ListingSummary instance
        """
        data = known_fields(cls, data)
        data['created_at'] = parse_datetime(data['created_at'])
        if isinstance(data.get('coordinates'), dict):
            data['coordinates'] = Coordinates.from_dict(data['coordinates'])
        if isinstance(data.get('owner'), dict):
            data['owner'] = OwnerSummary(**known_fields(OwnerSummary, data['owner']))
        return cls(**data)


@dataclass
class SearchFilters:
    """User search parameters.

    Every field is optional except ``sort_by``, which defaults to relevance.
    Enum-typed fields also accept their string values.

    Raises:
        InvalidFiltersError: If a bound is out of range or inverted
    """
    query: str = ""
    category_id: Optional[str] = None
    location: Optional[str] = None
    coordinates: Optional[Coordinates] = None
    radius_miles: Optional[float] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    min_rating: float = 0.0
    availability: AvailabilityFilter = AvailabilityFilter.ALL
    delivery_available: bool = False
    item_condition: ItemCondition = ItemCondition.ALL
    duration_mode: DurationMode = DurationMode.ALL
    min_duration: int = 1
    max_duration: Optional[int] = None
    instant_book: bool = False
    verified_owners_only: bool = False
    sort_by: SortStrategy = SortStrategy.RELEVANCE

    def __post_init__(self):
        try:
            self.availability = AvailabilityFilter(self.availability)
            self.item_condition = ItemCondition(self.item_condition)
            self.duration_mode = DurationMode(self.duration_mode)
            self.sort_by = SortStrategy(self.sort_by)
        except ValueError as e:
            raise InvalidFiltersError(str(e)) from e

        if self.query is None:
            self.query = ""

        if self.min_price is not None and self.min_price < 0:
            raise InvalidFiltersError(f"min_price must be >= 0, got {self.min_price}")
        if (
            self.min_price is not None
            and self.max_price is not None
            and self.max_price < self.min_price
        ):
            raise InvalidFiltersError(
                f"max_price ({self.max_price}) must be >= min_price ({self.min_price})"
            )
        if not 0 <= self.min_rating <= 5:
            raise InvalidFiltersError(f"min_rating must be between 0 and 5, got {self.min_rating}")
        if self.min_duration < 1:
            raise InvalidFiltersError(f"min_duration must be >= 1, got {self.min_duration}")
        if self.max_duration is not None and self.max_duration < self.min_duration:
            raise InvalidFiltersError(
                f"max_duration ({self.max_duration}) must be >= min_duration ({self.min_duration})"
            )
        if self.radius_miles is not None and self.radius_miles <= 0:
            raise InvalidFiltersError(f"radius_miles must be positive, got {self.radius_miles}")

    @property
    def normalized_query(self) -> str:
        return self.query.strip().lower()

    def to_dict(self) -> dict:
        data = asdict(self)
        for key in ('availability', 'item_condition', 'duration_mode', 'sort_by'):
            data[key] = getattr(self, key).value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'SearchFilters':
        data = dict(data)
        if isinstance(data.get('coordinates'), dict):
            data['coordinates'] = Coordinates.from_dict(data['coordinates'])
        return cls(**data)


@dataclass
class RankedResult:
    """A listing with its computed score and 1-based rank.

    Attributes:
        listing: The ranked listing
        score: Strategy-specific score (price for price sorts, miles for distance)
        rank: 1-based position in the full ranked sequence
        distance_miles: Distance from the search coordinates, when both are known
    """
    listing: ListingSummary
    score: float
    rank: int
    distance_miles: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            'listing': self.listing.to_dict(),
            'score': self.score,
            'rank': self.rank,
            'distance_miles': self.distance_miles,
        }


@dataclass(frozen=True)
class RentalWindow:
    """A proposed rental from start to end. end > start is checked, not assumed."""
    start: datetime
    end: datetime

    @property
    def elapsed_hours(self) -> float:
        return (ensure_utc(self.end) - ensure_utc(self.start)).total_seconds() / 3600


@dataclass(frozen=True)
class BlockedRange:
    """A half-open interval during which a listing is booked or blocked."""
    start: datetime
    end: datetime
    reason: Optional[str] = None

    def overlaps(self, window: RentalWindow) -> bool:
        return (
            ensure_utc(window.start) < ensure_utc(self.end)
            and ensure_utc(self.start) < ensure_utc(window.end)
        )

    @classmethod
    def from_dict(cls, data: dict) -> 'BlockedRange':
        return cls(
            start=parse_datetime(data['start']),
            end=parse_datetime(data['end']),
            reason=data.get('reason'),
        )


@dataclass
class AvailabilityResult:
    """Outcome of validating a rental window.

    Exactly one of total_hours (valid window) or rejection is meaningful;
    total_hours is also reported for duration rejections so the caller can
    show how long the requested rental was.
    """
    total_hours: Optional[int] = None
    rejection: Optional[RejectionReason] = None

    @property
    def is_valid(self) -> bool:
        return self.rejection is None


@dataclass
class PricingBreakdown:
    """Itemized cost of a validated rental."""
    total_hours: int
    subtotal: float
    service_fee: float
    delivery_fee: float
    security_deposit: float
    total_amount: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
