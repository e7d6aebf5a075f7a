"""
Search ranking and rental pricing for a peer-to-peer rental marketplace.
"""

from .engine import RentalEngine, price_rental, search
from .models import (
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
    RejectionReason,
    RentalWindow,
    SearchFilters,
    SortStrategy,
)

__version__ = "0.1.0"

__all__ = [
    'RentalEngine',
    'search',
    'price_rental',
    'AvailabilityFilter',
    'BlockedRange',
    'Coordinates',
    'DurationMode',
    'ItemCondition',
    'ListingSummary',
    'OwnerSummary',
    'PricingBreakdown',
    'RankedResult',
    'RateSchedule',
    'RejectionReason',
    'RentalWindow',
    'SearchFilters',
    'SortStrategy',
]
