from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from shared.domain.value_objects import Money, TimeWindow


def test_money_rounds_half_up_to_cents():
    assert Money("10.005").amount == Decimal("10.01")
    assert Money(Decimal("10.004")).amount == Decimal("10.00")
    assert Money(2.675).amount == Decimal("2.68")


def test_money_equality_and_addition():
    assert Money("1.10") + Money("2.20") == Money("3.30")
    with pytest.raises(ValueError):
        Money("1", "INR") + Money("1", "USD")


def test_money_rejects_negative_and_unknown_currency():
    with pytest.raises(ValueError):
        Money("-1")
    with pytest.raises(ValueError):
        Money("1", "XYZ")


def test_time_window_requires_start_before_end():
    start = datetime(2025, 1, 10, 9, tzinfo=timezone.utc)
    with pytest.raises(ValueError):
        TimeWindow(start, start)


def test_time_window_duration_is_exact():
    start = datetime(2025, 1, 10, 9, tzinfo=timezone.utc)
    window = TimeWindow(start, start + timedelta(hours=30, minutes=15))
    assert window.duration_hours == Decimal("30.25")


def test_adjacent_windows_do_not_overlap():
    start = datetime(2025, 1, 10, 9, tzinfo=timezone.utc)
    first = TimeWindow(start, start + timedelta(hours=2))
    second = TimeWindow(start + timedelta(hours=2), start + timedelta(hours=3))
    third = TimeWindow(start + timedelta(hours=1), start + timedelta(hours=3))
    assert not first.overlaps_with(second)
    assert first.overlaps_with(third)
