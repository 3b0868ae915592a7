from datetime import datetime, timedelta, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from apps.bookings.domain.availability import AvailabilityWindow
from apps.bookings.domain.entities import (
    ALLOWED_TRANSITIONS,
    Booking,
    BookingDecision,
    BookingStatus,
    SpaceTerms,
)
from apps.bookings.domain.events import BookingApproved, BookingRejected, BookingRequested
from apps.bookings.domain.exceptions import Forbidden, InvalidState, OutOfRangeDate

OWNER_ID = 1
SEEKER_ID = 2


def at(day, hour, minute=0):
    return datetime(2025, 1, day, hour, minute, tzinfo=timezone.utc)


@pytest.fixture
def terms():
    return SpaceTerms(
        space_id=uuid4(),
        owner_id=OWNER_ID,
        availability=AvailabilityWindow("2025-01-01", "2025-01-31", "08:00", "20:00"),
        price_per_hour=Decimal("50"),
    )


@pytest.fixture
def booking(terms):
    return Booking.request(space=terms, seeker_id=SEEKER_ID, start=at(10, 9), end=at(10, 11))


def test_transition_table_covers_every_status():
    assert set(ALLOWED_TRANSITIONS) == set(BookingStatus)


def test_request_creates_pending_priced_booking(booking, terms):
    assert booking.status is BookingStatus.PENDING
    assert booking.total_price.amount == Decimal("100.00")
    assert booking.total_price.currency == "INR"
    assert booking.owner_id == OWNER_ID
    assert booking.space_id == terms.space_id

    [event] = booking.events
    assert isinstance(event, BookingRequested)
    assert event.booking_id == booking.id
    assert event.to_dict()["total_price"] == {"amount": "100.00", "currency": "INR"}


def test_request_uses_daily_rate_for_long_stays(terms):
    daily_terms = SpaceTerms(
        space_id=terms.space_id,
        owner_id=OWNER_ID,
        availability=terms.availability,
        price_per_hour=Decimal("50"),
        price_per_day=Decimal("400"),
    )
    # 2025-01-10 09:00 -> 2025-01-11 15:00 is 30 hours
    booking = Booking.request(space=daily_terms, seeker_id=SEEKER_ID, start=at(10, 9), end=at(11, 15))
    assert booking.total_price.amount == Decimal("700.00")


def test_request_outside_window_is_rejected(terms):
    start = datetime(2025, 2, 1, 9, tzinfo=timezone.utc)
    with pytest.raises(OutOfRangeDate):
        Booking.request(space=terms, seeker_id=SEEKER_ID, start=start, end=start + timedelta(hours=2))


def test_request_checks_local_wall_clock_time():
    ist = timezone(timedelta(hours=5, minutes=30))
    terms = SpaceTerms(
        space_id=uuid4(),
        owner_id=OWNER_ID,
        availability=AvailabilityWindow("2025-01-01", "2025-01-31", "08:00", "20:00"),
        price_per_hour=Decimal("50"),
        tz=ist,
    )
    # 03:30 UTC is 09:00 in IST
    booking = Booking.request(
        space=terms,
        seeker_id=SEEKER_ID,
        start=datetime(2025, 1, 10, 3, 30, tzinfo=timezone.utc),
        end=datetime(2025, 1, 10, 5, 30, tzinfo=timezone.utc),
    )
    assert booking.total_price.amount == Decimal("100.00")


def test_owner_approves(booking):
    booking.clear_events()
    booking.approve(OWNER_ID)

    assert booking.status is BookingStatus.CONFIRMED
    assert booking.decided_at is not None
    [event] = booking.events
    assert isinstance(event, BookingApproved)


def test_owner_rejects(booking):
    booking.clear_events()
    booking.decide(OWNER_ID, BookingDecision.REJECT)

    assert booking.status is BookingStatus.CANCELLED
    [event] = booking.events
    assert isinstance(event, BookingRejected)


def test_only_owner_may_decide(booking):
    with pytest.raises(Forbidden):
        booking.approve(SEEKER_ID)
    assert booking.status is BookingStatus.PENDING


@pytest.mark.parametrize("first", [BookingDecision.APPROVE, BookingDecision.REJECT])
@pytest.mark.parametrize("second", [BookingDecision.APPROVE, BookingDecision.REJECT])
def test_decided_booking_is_final(booking, first, second):
    booking.decide(OWNER_ID, first)
    status = booking.status

    with pytest.raises(InvalidState):
        booking.decide(OWNER_ID, second)
    assert booking.status is status


def test_confirmed_booking_reads_completed_after_end(booking):
    booking.approve(OWNER_ID)

    assert booking.effective_status(now=at(10, 10)) is BookingStatus.CONFIRMED
    assert booking.effective_status(now=at(10, 11)) is BookingStatus.CONFIRMED
    assert booking.effective_status(now=at(10, 12)) is BookingStatus.COMPLETED
    assert booking.status is BookingStatus.CONFIRMED


def test_pending_booking_never_reads_completed(booking):
    assert booking.effective_status(now=at(20, 12)) is BookingStatus.PENDING
