"""Request and response models for the rental engine API"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from rental_engine.geo import format_distance
from rental_engine.models import (
    AvailabilityFilter,
    BlockedRange,
    Coordinates,
    DurationMode,
    ItemCondition,
    ListingSummary,
    OwnerSummary,
    PricingBreakdown,
    RankedResult,
    RateSchedule,
    RentalWindow,
    SearchFilters,
    SortStrategy,
)


class CoordinatesSchema(BaseModel):
    """WGS84 point"""
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)

    def to_domain(self) -> Coordinates:
        return Coordinates(latitude=self.latitude, longitude=self.longitude)


class OwnerSchema(BaseModel):
    """Owner quality signals"""
    rating: float = Field(0.0, ge=0, le=5)
    verification_status: str = "unverified"


class ListingSchema(BaseModel):
    """Listing as supplied by the item repository"""
    id: str
    title: str
    daily_rate: float = Field(gt=0)
    created_at: datetime
    description: str = ""
    category_id: Optional[str] = None
    category_name: Optional[str] = None
    rating: float = Field(0.0, ge=0, le=5)
    review_count: int = Field(0, ge=0)
    view_count: int = Field(0, ge=0)
    favorite_count: int = Field(0, ge=0)
    hourly_rate: Optional[float] = Field(None, ge=0)
    coordinates: Optional[CoordinatesSchema] = None
    status: str = "active"
    delivery_available: bool = False
    owner: OwnerSchema = Field(default_factory=OwnerSchema)
    min_rental_duration: int = Field(1, ge=1)
    max_rental_duration: Optional[int] = Field(None, ge=1)
    condition: Optional[str] = None
    security_deposit: float = Field(0.0, ge=0)
    delivery_fee: float = Field(0.0, ge=0)

    class Config:
        from_attributes = True

    def to_domain(self) -> ListingSummary:
        data = self.model_dump(exclude={'coordinates', 'owner'})
        return ListingSummary(
            **data,
            coordinates=self.coordinates.to_domain() if self.coordinates else None,
            owner=OwnerSummary(**self.owner.model_dump()),
        )


class SearchFiltersSchema(BaseModel):
    """Search filters; bounds are checked when converted to the domain model"""
    query: str = ""
    category_id: Optional[str] = None
    location: Optional[str] = None
    coordinates: Optional[CoordinatesSchema] = None
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

    def to_domain(self) -> SearchFilters:
        data = self.model_dump(exclude={'coordinates'})
        return SearchFilters(
            **data,
            coordinates=self.coordinates.to_domain() if self.coordinates else None,
        )


class SearchRequest(BaseModel):
    """Search request body"""
    listings: List[ListingSchema]
    filters: SearchFiltersSchema = Field(default_factory=SearchFiltersSchema)
    user_coordinates: Optional[CoordinatesSchema] = None
    limit: Optional[int] = Field(None, ge=1)
    offset: int = Field(0, ge=0)


class RankedResultSchema(BaseModel):
    """One ranked listing"""
    listing: ListingSchema
    score: Optional[float] = None
    rank: int
    distance_miles: Optional[float] = None
    distance_text: Optional[str] = None

    @classmethod
    def from_domain(cls, result: RankedResult) -> 'RankedResultSchema':
        listing = result.listing
        data = listing.to_dict()
        data['created_at'] = listing.created_at
        # Infinite scores (listings without coordinates in a distance sort) are not valid JSON
        score = result.score if result.score != float('inf') else None
        return cls(
            listing=ListingSchema(**data),
            score=score,
            rank=result.rank,
            distance_miles=result.distance_miles,
            distance_text=(
                format_distance(result.distance_miles)
                if result.distance_miles is not None else None
            ),
        )


class SearchResponse(BaseModel):
    """Search results with metadata"""
    results: List[RankedResultSchema]
    total_count: int
    coordinates_available: bool = False
    search_time_ms: Optional[float] = None


class RateScheduleSchema(BaseModel):
    """Listing rates and rental policy"""
    daily_rate: float = Field(gt=0)
    hourly_rate: Optional[float] = Field(None, ge=0)
    security_deposit: float = Field(0.0, ge=0)
    delivery_fee: float = Field(0.0, ge=0)
    min_rental_duration: int = Field(1, ge=1)
    max_rental_duration: Optional[int] = Field(None, ge=1)

    def to_domain(self) -> RateSchedule:
        return RateSchedule.from_dict(self.model_dump())


class BlockedRangeSchema(BaseModel):
    """Booked or owner-blocked interval"""
    start: datetime
    end: datetime
    reason: Optional[str] = None

    def to_domain(self) -> BlockedRange:
        return BlockedRange(start=self.start, end=self.end, reason=self.reason)


class QuoteRequest(BaseModel):
    """Pricing quote request body"""
    schedule: RateScheduleSchema
    start: datetime
    end: datetime
    delivery_requested: bool = False
    blocked_ranges: List[BlockedRangeSchema] = []

    def window(self) -> RentalWindow:
        return RentalWindow(start=self.start, end=self.end)


class PricingBreakdownSchema(BaseModel):
    """Itemized rental price"""
    total_hours: int
    subtotal: float
    service_fee: float
    delivery_fee: float
    security_deposit: float
    total_amount: float

    @classmethod
    def from_domain(cls, breakdown: PricingBreakdown) -> 'PricingBreakdownSchema':
        return cls(**breakdown.to_dict())


class QuoteResponse(BaseModel):
    """Pricing quote with display text"""
    breakdown: PricingBreakdownSchema
    duration_text: str


class RejectionDetail(BaseModel):
    """Why a quote was refused"""
    reason: str
    message: str
