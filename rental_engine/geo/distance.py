"""
Great-circle distance between coordinates.

Coordinate ranges are not validated here; callers pass WGS84 decimal degrees.
"""

import math
from dataclasses import dataclass

from rental_engine.models import Coordinates


EARTH_RADIUS_MILES = 3959
MILES_PER_DEGREE_LATITUDE = 69
FEET_PER_MILE = 5280


@dataclass(frozen=True)
class LocationBounds:
    """Axis-aligned bounding box around a search center."""
    northeast: Coordinates
    southwest: Coordinates

    def contains(self, point: Coordinates) -> bool:
        return (
            self.southwest.latitude <= point.latitude <= self.northeast.latitude
            and self.southwest.longitude <= point.longitude <= self.northeast.longitude
        )


def haversine_miles(origin: Coordinates, destination: Coordinates) -> float:
    """Distance in miles between two points using the haversine formula.

    Args:
        origin: First point
        destination: Second point

    Returns:
        Great-circle distance in miles on a sphere of radius 3959 miles
    """
    d_lat = math.radians(destination.latitude - origin.latitude)
    d_lon = math.radians(destination.longitude - origin.longitude)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(origin.latitude))
        * math.cos(math.radians(destination.latitude))
        * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_MILES * c


def is_within_radius(center: Coordinates, point: Coordinates, radius_miles: float) -> bool:
    """True when point lies within radius_miles of center (inclusive)."""
    return haversine_miles(center, point) <= radius_miles


def get_bounds(center: Coordinates, radius_miles: float) -> LocationBounds:
    """Approximate bounding box for a radius search.

    Useful as a cheap pre-filter before exact haversine checks; the box always
    contains the circle.
    """
    lat_offset = radius_miles / MILES_PER_DEGREE_LATITUDE
    lng_offset = radius_miles / (
        MILES_PER_DEGREE_LATITUDE * math.cos(math.radians(center.latitude))
    )
    return LocationBounds(
        northeast=Coordinates(center.latitude + lat_offset, center.longitude + lng_offset),
        southwest=Coordinates(center.latitude - lat_offset, center.longitude - lng_offset),
    )


def format_distance(miles: float) -> str:
    """Human-readable distance: feet under a mile, one decimal under ten miles."""
    if miles < 1:
        return f"{miles * FEET_PER_MILE:.0f} ft"
    if miles < 10:
        return f"{miles:.1f} mi"
    return f"{round(miles)} mi"
