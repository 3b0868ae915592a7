"""
Tiered pricing for parking bookings.

Short stays are charged by the hour. When the space also has a daily
rate, every full 24-hour block of a stay of 24 hours or more is charged
at the daily rate and the remainder at the hourly rate.

The price is stored on the booking once and never recomputed, so the
calculation works on Decimal end to end and rounds half-up to cents.
"""

from decimal import Decimal, ROUND_HALF_UP

from shared.domain.value_objects import CENT, to_decimal
from apps.bookings.domain.exceptions import NonPositiveDuration

HOURS_PER_DAY = Decimal(24)


def calculate_price(duration_hours, price_per_hour, price_per_day=None) -> Decimal:
    """
    >>> calculate_price(2, Decimal("50"))
    Decimal('100.00')
    >>> calculate_price(30, Decimal("50"), Decimal("400"))
    Decimal('700.00')
    """
    hours = to_decimal(duration_hours)
    if hours <= 0:
        raise NonPositiveDuration("Booking duration must be positive", field="end_time")

    hourly = to_decimal(price_per_hour)
    if price_per_day is None or hours < HOURS_PER_DAY:
        amount = hours * hourly
    else:
        full_days = hours // HOURS_PER_DAY
        remainder_hours = hours % HOURS_PER_DAY
        amount = full_days * to_decimal(price_per_day) + remainder_hours * hourly

    return amount.quantize(CENT, rounding=ROUND_HALF_UP)
