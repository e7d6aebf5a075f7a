"""
Error handling module for the rental engine.

Provides the exception taxonomy, retry logic, and diagnostic capabilities.
"""

from .error_handler import ErrorHandler, RetryConfig
from .exceptions import (
    GeocodingError,
    GeocodingUnavailableError,
    InvalidFiltersError,
    RentalEngineError,
)

__all__ = [
    'ErrorHandler',
    'RetryConfig',
    'GeocodingError',
    'GeocodingUnavailableError',
    'InvalidFiltersError',
    'RentalEngineError',
]
