"""
Geographic helpers for distance sorting and radius filtering.
"""

from .distance import (
    EARTH_RADIUS_MILES,
    LocationBounds,
    format_distance,
    get_bounds,
    haversine_miles,
    is_within_radius,
)

__all__ = [
    'EARTH_RADIUS_MILES',
    'LocationBounds',
    'format_distance',
    'get_bounds',
    'haversine_miles',
    'is_within_radius',
]
