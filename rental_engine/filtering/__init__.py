"""
Filtering module for rental listings.

This module provides the candidate filter that excludes listings failing any
active search criterion before ranking.
"""

from .listing_filter import ListingFilter

__all__ = ['ListingFilter']
