"""
Property-based tests for rental pricing.
"""

import math

import pytest
from hypothesis import given, settings, strategies as st

from rental_engine.models import RateSchedule
from rental_engine.pricing import PricingCalculator, round_currency


calculator = PricingCalculator()


def test_hourly_rate_applies_below_one_day():
    schedule = RateSchedule(daily_rate=25, hourly_rate=5)
    assert calculator.calculate(schedule, 23).subtotal == 115


def test_daily_rate_applies_at_exactly_one_day():
    schedule = RateSchedule(daily_rate=25, hourly_rate=5)
    assert calculator.calculate(schedule, 24).subtotal == 25


def test_partial_day_rounds_up_to_full_day():
    schedule = RateSchedule(daily_rate=25, hourly_rate=None)
    assert calculator.calculate(schedule, 25).subtotal == 50


def test_short_rental_without_hourly_rate_is_one_day():
    schedule = RateSchedule(daily_rate=25, hourly_rate=0)
    assert calculator.calculate(schedule, 3).subtotal == 25


def test_full_breakdown_with_delivery():
    schedule = RateSchedule(daily_rate=25, delivery_fee=10, security_deposit=50)
    breakdown = calculator.calculate(schedule, 48, delivery_requested=True)

    assert breakdown.total_hours == 48
    assert breakdown.subtotal == 50
    assert breakdown.service_fee == 5.00
    assert breakdown.delivery_fee == 10
    assert breakdown.security_deposit == 50
    assert breakdown.total_amount == 115.00


def test_delivery_fee_only_when_requested():
    schedule = RateSchedule(daily_rate=25, delivery_fee=10, security_deposit=50)
    breakdown = calculator.calculate(schedule, 48, delivery_requested=False)

    assert breakdown.delivery_fee == 0
    assert breakdown.total_amount == 105.00


def test_service_fee_rounds_half_up():
    schedule = RateSchedule(daily_rate=10, hourly_rate=0.45)
    # subtotal 1 * 0.45 -> fee 0.045 rounds to 0.05
    assert calculator.calculate(schedule, 1).service_fee == 0.05


def test_service_fee_rate_is_configurable():
    schedule = RateSchedule(daily_rate=40)
    assert PricingCalculator(service_fee_rate=0.15).calculate(schedule, 24).service_fee == 6.00


@pytest.mark.parametrize("amount,expected", [
    (1.005, 1.01),
    (2.675, 2.68),
    (3.333, 3.33),
    (0, 0),
])
def test_round_currency(amount, expected):
    assert round_currency(amount) == expected


@given(
    daily_rate=st.floats(min_value=1, max_value=1000, allow_nan=False),
    hourly_rate=st.one_of(st.none(), st.floats(min_value=0.5, max_value=100, allow_nan=False)),
    deposit=st.floats(min_value=0, max_value=500, allow_nan=False),
    delivery_fee=st.floats(min_value=0, max_value=100, allow_nan=False),
    total_hours=st.integers(min_value=1, max_value=24 * 60),
    delivery_requested=st.booleans(),
)
@settings(max_examples=100)
def test_total_is_sum_of_components(
    daily_rate, hourly_rate, deposit, delivery_fee, total_hours, delivery_requested
):
    """
    **Feature: rental-pricing, Property 2: Itemized total**

    The total is exactly subtotal + service fee + delivery fee + deposit, the
    fee is within half a cent of 10% of the subtotal, and every amount is
    non-negative.
    """
    schedule = RateSchedule(
        daily_rate=daily_rate,
        hourly_rate=hourly_rate,
        security_deposit=deposit,
        delivery_fee=delivery_fee,
    )
    breakdown = calculator.calculate(schedule, total_hours, delivery_requested)

    assert breakdown.total_amount == (
        breakdown.subtotal + breakdown.service_fee + breakdown.delivery_fee + breakdown.security_deposit
    )
    assert abs(breakdown.service_fee - breakdown.subtotal * 0.10) <= 0.005 + 1e-9
    for amount in (breakdown.subtotal, breakdown.service_fee, breakdown.delivery_fee, breakdown.total_amount):
        assert amount >= 0


@given(
    daily_rate=st.floats(min_value=1, max_value=1000, allow_nan=False),
    total_hours=st.integers(min_value=24, max_value=24 * 60),
)
@settings(max_examples=100)
def test_daily_pricing_charges_started_days(daily_rate, total_hours):
    """
    **Feature: rental-pricing, Property 3: Started days**

    From one day up, the subtotal is the daily rate times the started days,
    whether or not an hourly rate exists.
    """
    schedule = RateSchedule(daily_rate=daily_rate, hourly_rate=5)
    assert calculator.calculate(schedule, total_hours).subtotal == math.ceil(total_hours / 24) * daily_rate
