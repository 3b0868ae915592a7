"""Booking admission service.

Single entry point used by the API views. Actors are passed in
explicitly; nothing here reads the request or the session.
"""

from __future__ import annotations

from datetime import datetime
import logging

from django.utils import timezone  # type: ignore

from shared.domain.value_objects import Money, TimeWindow
from apps.bookings.application.command_handlers import (
    DecideBookingCommand,
    DecideBookingHandler,
    SubmitBookingRequestCommand,
    SubmitBookingRequestHandler,
)
from apps.bookings.domain.availability import AvailabilityWindow
from apps.bookings.domain.entities import Booking, BookingDecision, BookingStatus
from apps.bookings.domain.exceptions import ValidationFailure
from apps.bookings.repositories import BookingRepository, SlotLedgerRepository, SpaceRepository

logger = logging.getLogger(__name__)

OWNER_DASHBOARD_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED)


def make_aware(value: datetime) -> datetime:
    """Naive datetimes are taken as wall-clock time in settings.TIME_ZONE."""

    if timezone.is_naive(value):
        return timezone.make_aware(value, timezone.get_default_timezone())
    return value


def parse_decision(outcome) -> BookingDecision:
    if isinstance(outcome, BookingDecision):
        return outcome
    try:
        return BookingDecision(outcome)
    except ValueError:
        raise ValidationFailure(f"Unknown decision: {outcome}", field="decision") from None


class BookingAdmissionService:
    """Validates, prices and drives booking requests through the owner's decision."""

    def __init__(self, space_repo=None, booking_repo=None, ledger_repo=None):
        self.space_repo = space_repo or SpaceRepository()
        self.booking_repo = booking_repo or BookingRepository()
        self.ledger_repo = ledger_repo or SlotLedgerRepository()

    def get_availability(self, space_id) -> AvailabilityWindow:
        return self.space_repo.get_terms(space_id).availability

    def quote(self, space_id, start: datetime, end: datetime) -> tuple[TimeWindow, Money]:
        """Price a window without persisting anything."""

        terms = self.space_repo.get_terms(space_id)
        return terms.admit(make_aware(start), make_aware(end))

    def submit_request(self, space_id, seeker_id, start: datetime, end: datetime) -> Booking:
        handler = SubmitBookingRequestHandler(self.space_repo, self.booking_repo, self.ledger_repo)
        return handler.handle(
            SubmitBookingRequestCommand(
                space_id=space_id,
                seeker_id=seeker_id,
                start=make_aware(start),
                end=make_aware(end),
            )
        )

    def decide(self, booking_id, owner_id, outcome) -> Booking:
        decision = parse_decision(outcome)
        handler = DecideBookingHandler(self.booking_repo, self.ledger_repo)
        return handler.handle(
            DecideBookingCommand(booking_id=booking_id, owner_id=owner_id, decision=decision)
        )

    def list_seeker_bookings(self, seeker_id) -> list:
        """Pending and confirmed bookings of a seeker, newest first."""

        return self.booking_repo.list_for_seeker(seeker_id)

    def list_seeker_history(self, seeker_id) -> list:
        """Every booking of a seeker, rejected ones included, newest first."""

        return self.booking_repo.list_for_seeker(seeker_id, include_closed=True)

    def list_owner_bookings(self, owner_id, status=BookingStatus.PENDING) -> list:
        """Pending requests (newest first) or confirmed bookings (by start time)."""

        try:
            status = BookingStatus(status)
        except ValueError:
            raise ValidationFailure(f"Unsupported status: {status}", field="status") from None
        if status not in OWNER_DASHBOARD_STATUSES:
            raise ValidationFailure(f"Unsupported status: {status.value}", field="status")
        return self.booking_repo.list_for_owner(owner_id, status)

    def offerable_spaces(self, queryset, now=None):
        """Listed spaces that the slot ledger still offers to seekers."""

        return self.ledger_repo.offerable_spaces(queryset.filter(is_available=True), now=now)

    def uncommitted_spaces(self, queryset, now=None):
        """Spaces the ledger still offers, whether or not the owner has them listed."""

        return self.ledger_repo.offerable_spaces(queryset, now=now)
