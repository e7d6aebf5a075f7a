"""
Rental pricing calculator.

Turns a validated rental duration into an itemized cost breakdown. Only the
service fee is rounded; subtotal and total are left as computed.
"""

import logging
import math
from decimal import Decimal, ROUND_HALF_UP

from rental_engine.models import PricingBreakdown, RateSchedule


logger = logging.getLogger(__name__)

HOURS_PER_DAY = 24
CENT = Decimal("0.01")


def round_currency(amount: float) -> float:
    """Round to two decimals, halves away from zero."""
    return float(Decimal(str(amount)).quantize(CENT, rounding=ROUND_HALF_UP))


class PricingCalculator:
    """Computes rental price breakdowns.

    Attributes:
        service_fee_rate: Fraction of the subtotal charged as a service fee
    """

    def __init__(self, service_fee_rate: float = 0.10):
        self.service_fee_rate = service_fee_rate

    def subtotal(self, schedule: RateSchedule, total_hours: int) -> float:
        """Rental charge before fees.

        Rentals shorter than a day use the hourly rate when one is offered;
        everything else is charged per started day.
        """
        if schedule.offers_hourly and total_hours < HOURS_PER_DAY:
            return total_hours * schedule.hourly_rate
        days = math.ceil(total_hours / HOURS_PER_DAY)
        return days * schedule.daily_rate

    def calculate(
        self,
        schedule: RateSchedule,
        total_hours: int,
        delivery_requested: bool = False
    ) -> PricingBreakdown:
        """Build the price breakdown for a validated rental.

        Args:
            schedule: Listing rates, fees and deposit
            total_hours: Validated rental length in whole hours
            delivery_requested: Whether the renter asked for delivery

        Returns:
            PricingBreakdown with total = subtotal + service fee + delivery fee + deposit
        """
        subtotal = self.subtotal(schedule, total_hours)
        service_fee = round_currency(subtotal * self.service_fee_rate)
        delivery_fee = schedule.delivery_fee if delivery_requested else 0
        total_amount = subtotal + service_fee + delivery_fee + schedule.security_deposit

        logger.debug(
            f"Priced {total_hours}h rental: subtotal={subtotal} fee={service_fee} "
            f"delivery={delivery_fee} deposit={schedule.security_deposit}"
        )

        return PricingBreakdown(
            total_hours=total_hours,
            subtotal=subtotal,
            service_fee=service_fee,
            delivery_fee=delivery_fee,
            security_deposit=schedule.security_deposit,
            total_amount=total_amount,
        )
