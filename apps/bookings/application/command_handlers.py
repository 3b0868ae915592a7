"""
Booking Command Handlers

These are the use cases of the booking engine.
They orchestrate domain operations within transactions.

Commands:
- SubmitBookingRequestCommand: A seeker asks for a space over a window
- DecideBookingCommand: The owner approves or rejects a pending request
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID
import logging

from shared.application.uow import DjangoUnitOfWork
from apps.bookings.domain.entities import Booking, BookingDecision
from apps.bookings.domain.exceptions import InvalidState

logger = logging.getLogger(__name__)


# ===== Commands =====

@dataclass
class SubmitBookingRequestCommand:
    """
    Command to request a booking

    start and end must be timezone-aware.
    """
    space_id: UUID
    seeker_id: int
    start: datetime
    end: datetime


@dataclass
class DecideBookingCommand:
    """Command to approve or reject a pending booking"""
    booking_id: UUID
    owner_id: int
    decision: BookingDecision


# ===== Command Handlers =====

class SubmitBookingRequestHandler:
    """
    Handler for SubmitBookingRequest command

    Overlapping requests are all accepted as pending; no slot is taken
    until the owner approves one of them.
    """

    def __init__(self, space_repo, booking_repo, ledger_repo):
        self.space_repo = space_repo
        self.booking_repo = booking_repo
        self.ledger_repo = ledger_repo

    def handle(self, command: SubmitBookingRequestCommand) -> Booking:
        """
        Returns: the pending Booking aggregate

        Raises:
            NotFound: unknown space
            InvalidState: the space is no longer offered
            ValidationFailure: the window is outside availability or empty
        """
        logger.info(
            f"Booking request for space {command.space_id} by seeker {command.seeker_id}, "
            f"window {command.start.isoformat()} - {command.end.isoformat()}"
        )

        terms = self.space_repo.get_terms(command.space_id)

        with DjangoUnitOfWork() as uow:
            ledger = self.ledger_repo.get_for_space(command.space_id)
            if not terms.is_available or not ledger.is_offerable():
                raise InvalidState(f"Space {command.space_id} is not offered for booking")

            booking = Booking.request(
                space=terms,
                seeker_id=command.seeker_id,
                start=command.start,
                end=command.end,
            )

            uow.collect_events(booking)
            self.booking_repo.add(booking)

        logger.info(f"Booking {booking.id} requested, total {booking.total_price}")

        return booking


class DecideBookingHandler:
    """
    Handler for DecideBooking command

    Strategy:
    1. Lock the booking row (SELECT FOR UPDATE)
    2. Run the transition in the domain (owner and state guards)
    3. On approve, lock the space's ledger and record the slot
    4. Compare-and-set the status (WHERE status = 'pending')
    5. Insert the slot in the same transaction
    6. Publish events after commit

    Never retried: a failed write rolls back and surfaces to the caller.
    """

    def __init__(self, booking_repo, ledger_repo):
        self.booking_repo = booking_repo
        self.ledger_repo = ledger_repo

    def handle(self, command: DecideBookingCommand) -> Booking:
        logger.info(
            f"Owner {command.owner_id} decides {command.decision.value} "
            f"on booking {command.booking_id}"
        )

        with DjangoUnitOfWork() as uow:
            booking = self.booking_repo.get_by_id(command.booking_id, lock=True)
            expected = booking.status

            booking.decide(command.owner_id, command.decision)

            ledger = None
            if command.decision is BookingDecision.APPROVE:
                ledger = self.ledger_repo.get_for_space(booking.space_id, lock=True)
                ledger.record(booking)

            self.booking_repo.save_transition(booking, expected=expected)
            uow.collect_events(booking)

            if ledger is not None:
                self.ledger_repo.save(ledger)
                uow.collect_events(ledger)

        logger.info(f"Booking {booking.id} is now {booking.status.value}")

        return booking
