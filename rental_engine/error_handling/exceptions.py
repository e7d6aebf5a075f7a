"""
Exception types raised by the rental engine.

Ranking and pricing never raise for expected outcomes (empty results,
rejected rental windows); these exceptions cover invalid input and failures
of external collaborators.
"""


class RentalEngineError(Exception):
    """Base class for all rental engine errors."""


class InvalidFiltersError(RentalEngineError, ValueError):
    """Search filters violate their documented bounds."""


class GeocodingError(RentalEngineError):
    """The geocoding service could not resolve a location.

    Attributes:
        address: The free-text location that failed to resolve
    """

    def __init__(self, message: str, address: str = ""):
        super().__init__(message)
        self.address = address


class GeocodingUnavailableError(GeocodingError):
    """The geocoding service failed to answer; the lookup may be retried."""
