from datetime import date, datetime, time, timedelta

import pytest

from apps.bookings.domain.availability import AvailabilityWindow, format_time_am_pm, parse_window_date
from apps.bookings.domain.exceptions import InvalidOrder, OutOfRangeDate, OutOfRangeTime


@pytest.fixture
def window():
    return AvailabilityWindow(
        date_from="2025-01-01",
        date_to="2025-01-31T00:00:00",
        time_from="08:00",
        time_to="20:00",
    )


def test_stored_dates_with_time_component_are_truncated(window):
    assert window.date_to == date(2025, 1, 31)
    assert parse_window_date("2025-01-31T23:59:59") == date(2025, 1, 31)


def test_window_rejects_inverted_dates():
    with pytest.raises(ValueError):
        AvailabilityWindow(date(2025, 2, 1), date(2025, 1, 1), time(8), time(20))


def test_request_inside_window_passes(window):
    window.check_request(datetime(2025, 1, 10, 9), datetime(2025, 1, 10, 11))


def test_date_bounds_are_inclusive(window):
    window.check_request(datetime(2025, 1, 1, 8), datetime(2025, 1, 31, 20))


def test_date_after_window(window):
    with pytest.raises(OutOfRangeDate) as exc_info:
        window.check_request(datetime(2025, 2, 1, 9), datetime(2025, 2, 1, 11))
    assert exc_info.value.field == "start_date"
    assert exc_info.value.detail == "Booking date cannot be after 2025-01-31"


def test_date_before_window(window):
    with pytest.raises(OutOfRangeDate) as exc_info:
        window.check_request(datetime(2024, 12, 31, 9), datetime(2025, 1, 1, 11))
    assert exc_info.value.detail == "Booking date cannot be before 2025-01-01"


def test_start_at_time_from_is_admissible(window):
    window.check_request(datetime(2025, 1, 10, 8, 0, 0), datetime(2025, 1, 10, 9))


def test_start_one_second_early_is_rejected(window):
    start = datetime(2025, 1, 10, 8) - timedelta(seconds=1)
    with pytest.raises(OutOfRangeTime) as exc_info:
        window.check_request(start, datetime(2025, 1, 10, 9))
    assert exc_info.value.field == "start_time"
    assert exc_info.value.detail == "Booking time must be at or after 08:00 AM"


def test_end_after_time_to_is_rejected(window):
    with pytest.raises(OutOfRangeTime) as exc_info:
        window.check_request(datetime(2025, 1, 10, 18), datetime(2025, 1, 10, 20, 30))
    assert exc_info.value.field == "end_time"
    assert exc_info.value.detail == "Booking end time must be at or before 08:00 PM"


def test_start_is_not_bounded_by_time_to(window):
    # Only the end of a booking is checked against time_to.
    window.check_field(date(2025, 1, 10), time(21), is_end=False)


def test_end_before_start_is_rejected(window):
    with pytest.raises(InvalidOrder) as exc_info:
        window.check_request(datetime(2025, 1, 10, 11), datetime(2025, 1, 10, 9))
    assert exc_info.value.detail == "End time must be after start time"


def test_equal_start_and_end_is_rejected(window):
    with pytest.raises(InvalidOrder):
        window.check_request(datetime(2025, 1, 10, 11), datetime(2025, 1, 10, 11))


def test_partial_field_is_not_checked(window):
    window.check_field(date(2030, 1, 1), None)
    window.check_field(None, time(3), is_end=True)


@pytest.mark.parametrize(
    "value, expected",
    [(time(8), "08:00 AM"), (time(20, 30), "08:30 PM"), (time(0, 5), "12:05 AM"), (time(12), "12:00 PM")],
)
def test_format_time_am_pm(value, expected):
    assert format_time_am_pm(value) == expected


def test_to_dict(window):
    assert window.to_dict() == {
        "date_from": "2025-01-01",
        "date_to": "2025-01-31",
        "time_from": "08:00",
        "time_to": "20:00",
    }
