"""Geocoding client for free-text search locations."""

from .geocoder import LocationResult, NominatimGeocoder

__all__ = ['LocationResult', 'NominatimGeocoder']
