"""
Availability validation for proposed rental windows.

Checks a window against the listing's rental policy and its blocked ranges.
Rejections are returned as values; nothing here raises for an invalid window.
"""

import logging
import math
from datetime import datetime
from typing import Iterable, Optional

from rental_engine.models import (
    AvailabilityResult,
    BlockedRange,
    RejectionReason,
    RentalWindow,
    ensure_utc,
)


logger = logging.getLogger(__name__)

HOURS_PER_DAY = 24


def format_duration(hours: int) -> str:
    """Render a duration the way booking forms show it.

    Examples: "1 hour", "5 hours", "2 days", "1 day 3 hours".
    """
    if hours < HOURS_PER_DAY:
        return f"{hours} hour{'s' if hours != 1 else ''}"
    days, remaining_hours = divmod(hours, HOURS_PER_DAY)
    day_text = f"{days} day{'s' if days != 1 else ''}"
    if remaining_hours == 0:
        return day_text
    return f"{day_text} {remaining_hours} hour{'s' if remaining_hours != 1 else ''}"


def rejection_message(
    reason: RejectionReason,
    min_rental_duration: int = 1,
    max_rental_duration: Optional[int] = None
) -> str:
    """User-facing validation message for a rejection reason."""
    if reason == RejectionReason.END_BEFORE_START:
        return "End date and time must be after the start date and time"
    if reason == RejectionReason.STARTS_IN_PAST:
        return "Rental cannot start in the past"
    if reason == RejectionReason.BELOW_MINIMUM_DURATION:
        return f"Minimum rental duration is {format_duration(min_rental_duration)}"
    if reason == RejectionReason.ABOVE_MAXIMUM_DURATION:
        if max_rental_duration is None:
            return "Rental exceeds the maximum duration"
        return f"Maximum rental duration is {format_duration(max_rental_duration)}"
    return "Selected date range contains unavailable dates"


class AvailabilityValidator:
    """Validates rental windows against a listing's duration policy."""

    def validate(
        self,
        window: RentalWindow,
        now: datetime,
        min_rental_duration: int = 1,
        max_rental_duration: Optional[int] = None,
        blocked_ranges: Iterable[BlockedRange] = ()
    ) -> AvailabilityResult:
        """Check a proposed window.

        Checks run in order and the first failure is reported: end before
        start, start in the past, below minimum duration, above maximum
        duration, overlap with a blocked range. Duration bounds are inclusive.

        Args:
            window: Proposed start and end
            now: Current time from the injected clock
            min_rental_duration: Shortest allowed rental in hours
            max_rental_duration: Longest allowed rental in hours, None for unbounded
            blocked_ranges: Booked or owner-blocked intervals

        Returns:
            AvailabilityResult with total_hours = ceil(elapsed hours) when the
            window could be measured, and the rejection reason if any
        """
        start = ensure_utc(window.start)
        end = ensure_utc(window.end)

        if end <= start:
            return self._reject(RejectionReason.END_BEFORE_START)

        if start < ensure_utc(now):
            return self._reject(RejectionReason.STARTS_IN_PAST)

        total_hours = self.total_hours(window)

        if total_hours < min_rental_duration:
            return self._reject(RejectionReason.BELOW_MINIMUM_DURATION, total_hours)

        if max_rental_duration is not None and total_hours > max_rental_duration:
            return self._reject(RejectionReason.ABOVE_MAXIMUM_DURATION, total_hours)

        for blocked in blocked_ranges:
            if blocked.overlaps(window):
                logger.debug(f"Window overlaps blocked range {blocked.start} - {blocked.end}")
                return self._reject(RejectionReason.OVERLAPS_BLOCKED_RANGE, total_hours)

        return AvailabilityResult(total_hours=total_hours)

    @staticmethod
    def total_hours(window: RentalWindow) -> int:
        """Elapsed hours of the window, rounded up to a whole hour."""
        return math.ceil(window.elapsed_hours)

    @staticmethod
    def _reject(reason: RejectionReason, total_hours: Optional[int] = None) -> AvailabilityResult:
        logger.debug(f"Rental window rejected: {reason.value}")
        return AvailabilityResult(total_hours=total_hours, rejection=reason)
