from datetime import datetime
from decimal import Decimal
from unittest import mock
from uuid import uuid4

import pytest
from django.contrib.auth import get_user_model
from django.db import IntegrityError, OperationalError
from django.test import override_settings
from django.utils import timezone

from apps.bookings.domain.entities import BookingDecision, BookingStatus
from apps.bookings.domain.exceptions import (
    Forbidden,
    InvalidState,
    NotFound,
    OutOfRangeDate,
    StorageUnavailable,
    ValidationFailure,
)
from apps.bookings.models import Booking as BookingModel
from apps.bookings.models import BookingSlot
from apps.bookings.repositories import BookingRepository, storage_errors
from apps.bookings.services import BookingAdmissionService
from apps.spaces.models import ParkingSpace


@pytest.fixture
def service():
    return BookingAdmissionService()


def request_booking(service, space, seeker, start, end):
    return service.submit_request(space.id, seeker.id, start, end)


@pytest.mark.django_db
def test_scenario_a_hourly_request_is_pending(service, space, seeker):
    booking = request_booking(service, space, seeker, datetime(2025, 1, 10, 9), datetime(2025, 1, 10, 11))

    assert booking.status is BookingStatus.PENDING
    stored = BookingModel.objects.get(pk=booking.id)
    assert stored.total_price == Decimal("100.00")
    assert stored.status == "pending"
    assert stored.owner_id == space.owner_id
    assert stored.start_time == timezone.make_aware(datetime(2025, 1, 10, 9))
    assert not BookingSlot.objects.exists()


@pytest.mark.django_db
def test_scenario_b_daily_rate_for_thirty_hours(service, make_space, seeker):
    space = make_space(price_per_day=Decimal("400.00"))

    booking = request_booking(service, space, seeker, datetime(2025, 1, 10, 9), datetime(2025, 1, 11, 15))

    assert BookingModel.objects.get(pk=booking.id).total_price == Decimal("700.00")


@pytest.mark.django_db
def test_scenario_c_approval_takes_space_off_the_market(service, space, owner, seeker):
    booking = request_booking(service, space, seeker, datetime(2025, 1, 10, 9), datetime(2025, 1, 10, 11))

    decided = service.decide(booking.id, owner.id, "approve")

    assert decided.status is BookingStatus.CONFIRMED
    assert BookingModel.objects.get(pk=booking.id).status == "confirmed"
    slot = BookingSlot.objects.get()
    assert slot.booking_id == booking.id
    assert (slot.start_time, slot.end_time) == (decided.window.start, decided.window.end)
    assert not service.offerable_spaces(ParkingSpace.objects.all()).exists()

    with pytest.raises(InvalidState):
        request_booking(service, space, seeker, datetime(2025, 1, 25, 9), datetime(2025, 1, 25, 10))


@pytest.mark.django_db
def test_scenario_d_date_outside_window(service, space, seeker):
    with pytest.raises(OutOfRangeDate):
        request_booking(service, space, seeker, datetime(2025, 2, 1, 9), datetime(2025, 2, 1, 11))
    assert not BookingModel.objects.exists()


@pytest.mark.django_db
def test_overlapping_requests_are_all_pending(service, space, seeker):
    other = get_user_model().objects.create_user(username="other", password="OtherPass123")

    first = request_booking(service, space, seeker, datetime(2025, 1, 10, 9), datetime(2025, 1, 10, 11))
    second = request_booking(service, space, other, datetime(2025, 1, 10, 10), datetime(2025, 1, 10, 12))

    assert first.status is second.status is BookingStatus.PENDING
    assert BookingModel.objects.filter(status="pending").count() == 2


@pytest.mark.django_db
def test_second_approval_fails_and_leaves_one_slot(service, space, owner, seeker):
    booking = request_booking(service, space, seeker, datetime(2025, 1, 10, 9), datetime(2025, 1, 10, 11))
    service.decide(booking.id, owner.id, BookingDecision.APPROVE)

    with pytest.raises(InvalidState):
        service.decide(booking.id, owner.id, BookingDecision.APPROVE)

    assert BookingModel.objects.get(pk=booking.id).status == "confirmed"
    assert BookingSlot.objects.count() == 1


@pytest.mark.django_db
def test_approving_a_competing_request_fails_once_space_is_committed(service, space, owner, seeker):
    other = get_user_model().objects.create_user(username="other", password="OtherPass123")
    first = request_booking(service, space, seeker, datetime(2025, 1, 10, 9), datetime(2025, 1, 10, 11))
    second = request_booking(service, space, other, datetime(2025, 1, 20, 9), datetime(2025, 1, 20, 11))
    service.decide(first.id, owner.id, "approve")

    with pytest.raises(InvalidState):
        service.decide(second.id, owner.id, "approve")

    assert BookingModel.objects.get(pk=second.id).status == "pending"
    assert BookingSlot.objects.count() == 1


@pytest.mark.django_db
@override_settings(BOOKING_LEDGER_POLICY="capacity")
def test_capacity_policy_allows_overlaps_up_to_capacity(make_space, owner, seeker):
    service = BookingAdmissionService()
    space = make_space(capacity=2)
    bookings = [
        request_booking(service, space, seeker, datetime(2025, 1, 10, 9), datetime(2025, 1, 10, 11))
        for _ in range(3)
    ]

    service.decide(bookings[0].id, owner.id, "approve")
    service.decide(bookings[1].id, owner.id, "approve")
    with pytest.raises(InvalidState):
        service.decide(bookings[2].id, owner.id, "approve")

    assert BookingSlot.objects.count() == 2


@pytest.mark.django_db
def test_reject_cancels_without_slot(service, space, owner, seeker):
    booking = request_booking(service, space, seeker, datetime(2025, 1, 10, 9), datetime(2025, 1, 10, 11))

    decided = service.decide(booking.id, owner.id, "reject")

    assert decided.status is BookingStatus.CANCELLED
    stored = BookingModel.objects.get(pk=booking.id)
    assert stored.status == "cancelled"
    assert stored.decided_at is not None
    assert not BookingSlot.objects.exists()
    assert service.offerable_spaces(ParkingSpace.objects.all()).count() == 1


@pytest.mark.django_db
def test_only_owner_decides(service, space, seeker):
    booking = request_booking(service, space, seeker, datetime(2025, 1, 10, 9), datetime(2025, 1, 10, 11))

    with pytest.raises(Forbidden):
        service.decide(booking.id, seeker.id, "approve")

    assert BookingModel.objects.get(pk=booking.id).status == "pending"


@pytest.mark.django_db
def test_unknown_decision_is_a_client_error(service, space, owner, seeker):
    booking = request_booking(service, space, seeker, datetime(2025, 1, 10, 9), datetime(2025, 1, 10, 11))

    with pytest.raises(ValidationFailure) as exc_info:
        service.decide(booking.id, owner.id, "maybe")
    assert exc_info.value.field == "decision"


@pytest.mark.django_db
def test_unknown_space_and_booking(service, seeker, owner):
    with pytest.raises(NotFound):
        service.submit_request(uuid4(), seeker.id, datetime(2025, 1, 10, 9), datetime(2025, 1, 10, 11))
    with pytest.raises(NotFound):
        service.decide(uuid4(), owner.id, "approve")
    with pytest.raises(NotFound):
        service.get_availability("not-a-uuid")


@pytest.mark.django_db
def test_unlisted_space_is_not_offered(service, make_space, seeker):
    space = make_space(is_available=False)

    with pytest.raises(InvalidState):
        request_booking(service, space, seeker, datetime(2025, 1, 10, 9), datetime(2025, 1, 10, 11))
    assert not service.offerable_spaces(ParkingSpace.objects.all()).exists()
    assert list(service.uncommitted_spaces(ParkingSpace.objects.all())) == [space]


@pytest.mark.django_db
def test_status_update_is_compare_and_set(service, space, owner, seeker):
    booking = request_booking(service, space, seeker, datetime(2025, 1, 10, 9), datetime(2025, 1, 10, 11))
    repo = BookingRepository()
    loaded = repo.get_by_id(booking.id)
    loaded.approve(owner.id)

    # Another worker decided first.
    BookingModel.objects.filter(pk=booking.id).update(status="cancelled")

    with pytest.raises(InvalidState):
        repo.save_transition(loaded, expected=BookingStatus.PENDING)
    assert BookingModel.objects.get(pk=booking.id).status == "cancelled"


@pytest.mark.django_db
def test_quote_prices_without_persisting(service, make_space):
    space = make_space(price_per_day=Decimal("400.00"))

    window, price = service.quote(space.id, datetime(2025, 1, 10, 9), datetime(2025, 1, 11, 15))

    assert price.amount == Decimal("700.00")
    assert window.duration_hours == Decimal(30)
    assert not BookingModel.objects.exists()


@pytest.mark.django_db
def test_dashboards(service, space, owner, seeker):
    first = request_booking(service, space, seeker, datetime(2025, 1, 10, 9), datetime(2025, 1, 10, 11))
    second = request_booking(service, space, seeker, datetime(2025, 1, 5, 9), datetime(2025, 1, 5, 11))
    third = request_booking(service, space, seeker, datetime(2025, 1, 7, 9), datetime(2025, 1, 7, 11))
    service.decide(second.id, owner.id, "reject")
    service.decide(third.id, owner.id, "approve")

    assert [b.pk for b in service.list_seeker_bookings(seeker.id)] == [third.id, first.id]
    assert [b.pk for b in service.list_seeker_history(seeker.id)] == [third.id, second.id, first.id]
    assert BookingModel.objects.get(pk=second.id).status == "cancelled"
    assert [b.pk for b in service.list_owner_bookings(owner.id, "pending")] == [first.id]
    assert [b.pk for b in service.list_owner_bookings(owner.id, "confirmed")] == [third.id]
    with pytest.raises(ValidationFailure):
        service.list_owner_bookings(owner.id, "cancelled")
    with pytest.raises(ValidationFailure):
        service.list_owner_bookings(owner.id, "bogus")


@pytest.mark.django_db(transaction=True)
def test_reads_are_retried_once_then_reported_unavailable(service, space):
    with mock.patch.object(
        ParkingSpace.objects, "get", side_effect=OperationalError("connection lost")
    ) as get:
        with pytest.raises(StorageUnavailable):
            service.get_availability(space.id)
    assert get.call_count == 2


@pytest.mark.django_db(transaction=True)
def test_transient_read_failure_recovers(service, space):
    real_get = ParkingSpace.objects.get
    with mock.patch.object(
        ParkingSpace.objects, "get", side_effect=[OperationalError("connection lost"), real_get(pk=space.pk)]
    ):
        window = service.get_availability(space.id)
    assert window.to_dict()["time_from"] == "08:00"


def test_storage_errors_leave_integrity_errors_alone():
    with pytest.raises(StorageUnavailable):
        with storage_errors():
            raise OperationalError("down")
    with pytest.raises(IntegrityError):
        with storage_errors():
            raise IntegrityError("duplicate")


@pytest.mark.django_db
def test_notifications_follow_commit(service, space, owner, seeker, mailoutbox, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=True):
        booking = request_booking(service, space, seeker, datetime(2025, 1, 10, 9), datetime(2025, 1, 10, 11))

    assert [m.to for m in mailoutbox] == [["owner@example.com"]]
    assert "New booking request" in mailoutbox[0].subject

    with django_capture_on_commit_callbacks(execute=True):
        service.decide(booking.id, owner.id, "approve")

    assert mailoutbox[-1].to == ["seeker@example.com"]
    assert "confirmed" in mailoutbox[-1].subject


@pytest.mark.django_db
def test_no_notifications_when_validation_fails(service, space, seeker, mailoutbox, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=True) as callbacks:
        with pytest.raises(OutOfRangeDate):
            request_booking(service, space, seeker, datetime(2025, 2, 1, 9), datetime(2025, 2, 1, 11))

    assert callbacks == []
    assert mailoutbox == []


@pytest.mark.django_db
@override_settings(BOOKING_NOTIFICATIONS_ENABLED=False)
def test_notifications_can_be_switched_off(service, space, seeker, mailoutbox, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=True):
        request_booking(service, space, seeker, datetime(2025, 1, 10, 9), datetime(2025, 1, 10, 11))

    assert mailoutbox == []
