"""
Property-based tests for error handling.

These tests verify retry, backoff and recovery behaviour of the error handler
used around geocoding lookups.
"""

import pytest
import asyncio
from unittest.mock import patch
from hypothesis import given, settings, strategies as st

from rental_engine.error_handling import (
    ErrorHandler,
    GeocodingError,
    GeocodingUnavailableError,
    InvalidFiltersError,
    RentalEngineError,
    RetryConfig,
)


# Strategy for generating retry configuration values
retry_counts = st.integers(min_value=1, max_value=10)
timeout_values = st.integers(min_value=1000, max_value=60000)
multiplier_values = st.floats(min_value=1.1, max_value=3.0)
attempt_numbers = st.integers(min_value=0, max_value=9)


@given(
    initial_timeout=timeout_values,
    multiplier=multiplier_values,
    attempt=attempt_numbers
)
@settings(max_examples=100)
def test_retry_timeout_escalation(initial_timeout, multiplier, attempt):
    """
    **Feature: rental-search, Property 20: Retry timeout escalation**

    Each retry of a timed-out lookup uses a longer timeout than the attempt
    before it.
    """
    config = RetryConfig(
        initial_timeout_ms=initial_timeout,
        timeout_multiplier=multiplier
    )

    current_timeout = config.get_timeout(attempt)
    assert current_timeout == int(initial_timeout * (multiplier ** attempt))

    next_timeout = config.get_timeout(attempt + 1)
    assert next_timeout > current_timeout, \
        f"Timeout should escalate: attempt {attempt + 1} timeout ({next_timeout}ms) " \
        f"should be > attempt {attempt} timeout ({current_timeout}ms)"


@given(
    max_retries=retry_counts,
    multiplier=multiplier_values
)
@settings(max_examples=100, deadline=None)
def test_retry_exhaustion_termination(max_retries, multiplier):
    """
    **Feature: rental-search, Property 21: Retry exhaustion termination**

    An operation that keeps failing is attempted exactly max_retries times
    and the last failure is raised.
    """
    handler = ErrorHandler(RetryConfig(max_retries=max_retries, timeout_multiplier=multiplier))

    call_count = 0

    async def always_fails():
        nonlocal call_count
        call_count += 1
        raise ValueError(f"Simulated failure #{call_count}")

    with patch('asyncio.sleep', return_value=None):
        with pytest.raises(ValueError) as exc_info:
            asyncio.run(handler.retry_with_backoff(always_fails))

    assert call_count == max_retries, \
        f"Operation should be attempted exactly {max_retries} times, was attempted {call_count} times"
    assert f"#{max_retries}" in str(exc_info.value), \
        f"Should raise the last failure (#{max_retries})"


@given(
    max_retries=retry_counts,
    success_on_attempt=st.integers(min_value=1, max_value=10)
)
@settings(max_examples=100, deadline=None)
def test_retry_succeeds_before_exhaustion(max_retries, success_on_attempt):
    """
    An operation that succeeds on attempt N <= max_retries returns its result
    without further attempts.
    """
    if success_on_attempt > max_retries:
        return

    handler = ErrorHandler(RetryConfig(max_retries=max_retries))

    call_count = 0

    async def fails_then_succeeds():
        nonlocal call_count
        call_count += 1
        if call_count < success_on_attempt:
            raise ValueError(f"Failure #{call_count}")
        return f"Success on attempt {call_count}"

    with patch('asyncio.sleep', return_value=None):
        result = asyncio.run(handler.retry_with_backoff(fails_then_succeeds))

    assert call_count == success_on_attempt
    assert result == f"Success on attempt {success_on_attempt}"


def test_unlisted_exceptions_are_not_retried():
    """Only exception types in retry_on trigger another attempt."""
    handler = ErrorHandler(RetryConfig(max_retries=5), retry_on=(GeocodingUnavailableError,))

    call_count = 0

    async def not_found():
        nonlocal call_count
        call_count += 1
        raise GeocodingError("Address not found: Atlantis", "Atlantis")

    with patch('asyncio.sleep', return_value=None):
        with pytest.raises(GeocodingError):
            asyncio.run(handler.retry_with_backoff(not_found))

    assert call_count == 1


def test_timeout_keyword_is_escalated_per_attempt():
    """Operations taking timeout_ms receive the escalated value on each attempt."""
    config = RetryConfig(max_retries=3, initial_timeout_ms=1000, timeout_multiplier=2.0)
    handler = ErrorHandler(config)
    seen = []

    async def lookup(address, timeout_ms=0):
        seen.append(timeout_ms)
        if len(seen) < 3:
            raise GeocodingUnavailableError("Geocoding service unavailable (status 503)", address)
        return address

    with patch('asyncio.sleep', return_value=None):
        assert asyncio.run(handler.retry_with_backoff(lookup, "Austin, TX", timeout_ms=1000)) == "Austin, TX"

    assert seen == [1000, 2000, 4000]


@given(attempt=attempt_numbers)
@settings(max_examples=100)
def test_backoff_delay_exponential_growth(attempt):
    """
    Backoff delays follow delay = base * (2 ^ attempt).
    """
    config = RetryConfig()

    delay = config.get_backoff_delay(attempt)
    assert delay == 1.0 * (2 ** attempt)
    assert config.get_backoff_delay(attempt + 1) == delay * 2


@given(
    initial_timeout=timeout_values,
    multiplier=multiplier_values,
    max_retries=retry_counts
)
@settings(max_examples=100)
def test_timeout_always_positive(initial_timeout, multiplier, max_retries):
    """
    Calculated timeouts are always positive integers.
    """
    config = RetryConfig(
        initial_timeout_ms=initial_timeout,
        timeout_multiplier=multiplier,
        max_retries=max_retries
    )

    for attempt in range(max_retries):
        timeout = config.get_timeout(attempt)
        assert timeout > 0
        assert isinstance(timeout, int)


@pytest.mark.parametrize("message, expected", [
    ("Address not found: Atlantis", "Check the spelling of the city or state"),
    ("Geocoding request failed: TimeoutError: timed out", "Increase GEOCODER_TIMEOUT_MS"),
    ("Geocoding service unavailable (status 429)", "Raise GEOCODER_MIN_DELAY_SECONDS to slow down lookups"),
    ("Something odd", "Provide latitude and longitude directly"),
])
def test_geocoding_failure_suggestions(message, expected):
    handler = ErrorHandler()
    report = handler.handle_geocoding_failure(GeocodingError(message, "Atlantis"), "Atlantis")

    assert report['error_type'] == 'Geocoding Failure'
    assert report['address'] == "Atlantis"
    assert expected in report['recovery_suggestions']


def test_exception_hierarchy():
    assert issubclass(InvalidFiltersError, RentalEngineError)
    assert issubclass(InvalidFiltersError, ValueError)
    assert issubclass(GeocodingUnavailableError, GeocodingError)
    assert GeocodingError("boom", "Austin").address == "Austin"
