"""
Availability Window

The date and time-of-day range a space owner declares for bookings.
A requested booking must start and end inside it:

- both dates within [date_from, date_to] (inclusive, day granularity)
- both times at or after time_from
- the end time at or before time_to
- the end instant strictly after the start instant

The booking form checks each field as it is filled in (check_field);
submission re-checks the whole request at once (check_request).
"""

from dataclasses import dataclass
from datetime import date, datetime, time

from shared.domain.base import ValueObject
from apps.bookings.domain.exceptions import InvalidOrder, OutOfRangeDate, OutOfRangeTime


def parse_window_date(value) -> date:
    """
    Accept a date, a datetime or an ISO string.

    Stored values sometimes carry a time component
    ("2025-01-31T00:00:00"); only the calendar date counts.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).split("T")[0])


def parse_window_time(value) -> time:
    if isinstance(value, time):
        return value
    return time.fromisoformat(str(value))


def format_time_am_pm(value: time) -> str:
    """08:00 -> '08:00 AM', 20:30 -> '08:30 PM'"""
    hour12 = value.hour % 12 or 12
    suffix = "PM" if value.hour >= 12 else "AM"
    return f"{hour12:02d}:{value.minute:02d} {suffix}"


@dataclass(frozen=True)
class AvailabilityWindow(ValueObject):
    date_from: date
    date_to: date
    time_from: time
    time_to: time

    def __post_init__(self):
        object.__setattr__(self, "date_from", parse_window_date(self.date_from))
        object.__setattr__(self, "date_to", parse_window_date(self.date_to))
        object.__setattr__(self, "time_from", parse_window_time(self.time_from))
        object.__setattr__(self, "time_to", parse_window_time(self.time_to))
        if self.date_to < self.date_from:
            raise ValueError(f"Window end date ({self.date_to}) precedes start date ({self.date_from})")

    def check_date(self, candidate: date, *, field: str = "date") -> None:
        candidate = parse_window_date(candidate)
        if candidate < self.date_from:
            raise OutOfRangeDate(
                f"Booking date cannot be before {self.date_from.isoformat()}", field=field
            )
        if candidate > self.date_to:
            raise OutOfRangeDate(
                f"Booking date cannot be after {self.date_to.isoformat()}", field=field
            )

    def check_time(self, candidate: time, *, is_end: bool = False, field: str = "time") -> None:
        if candidate < self.time_from:
            raise OutOfRangeTime(
                f"Booking time must be at or after {format_time_am_pm(self.time_from)}", field=field
            )
        if is_end and candidate > self.time_to:
            raise OutOfRangeTime(
                f"Booking end time must be at or before {format_time_am_pm(self.time_to)}", field=field
            )

    def check_field(
        self,
        candidate_date: date | None,
        candidate_time: time | None,
        *,
        is_end: bool = False,
    ) -> None:
        """
        Advisory check for one endpoint while the form is being filled.

        Nothing is checked until both the date and the time are known.
        """
        if candidate_date is None or candidate_time is None:
            return
        prefix = "end" if is_end else "start"
        self.check_date(candidate_date, field=f"{prefix}_date")
        self.check_time(candidate_time, is_end=is_end, field=f"{prefix}_time")

    @staticmethod
    def check_order(start: datetime, end: datetime) -> None:
        if end <= start:
            raise InvalidOrder("End time must be after start time", field="end_time")

    def check_request(self, start: datetime, end: datetime) -> None:
        """
        Full admission check; start and end are wall-clock instants in
        the space's local time.
        """
        self.check_field(start.date(), start.time(), is_end=False)
        self.check_field(end.date(), end.time(), is_end=True)
        self.check_order(start, end)

    def to_dict(self) -> dict:
        return {
            "date_from": self.date_from.isoformat(),
            "date_to": self.date_to.isoformat(),
            "time_from": self.time_from.isoformat(timespec="minutes"),
            "time_to": self.time_to.isoformat(timespec="minutes"),
        }
