"""Request pacing for external services."""

from .rate_limiter import RateLimiter

__all__ = ['RateLimiter']
