"""
Booking Domain Entities

- SpaceTerms: the booking-relevant, read-only view of a parking space
- BookingStatus: closed set of booking states
- BookingDecision: the owner's answer to a request
- Booking: aggregate root driving request -> decision
"""

from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from decimal import Decimal
from enum import Enum
from uuid import UUID

from shared.domain.base import Aggregate, utc_now
from shared.domain.value_objects import Money, TimeWindow
from apps.bookings.domain.availability import AvailabilityWindow
from apps.bookings.domain.exceptions import Forbidden, InvalidOrder, InvalidState
from apps.bookings.domain.pricing import calculate_price


class BookingStatus(Enum):
    """
    Booking Status Finite State Machine

    State transitions:
    - PENDING -> CONFIRMED (owner approved; a slot is committed)
    - PENDING -> CANCELLED (owner rejected)

    CONFIRMED and CANCELLED are terminal. COMPLETED is never stored: it
    is how a CONFIRMED booking reads once its end time has passed.
    """
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    CANCELLED = 'cancelled'
    COMPLETED = 'completed'


# Every status must appear here; tests assert the mapping is exhaustive.
ALLOWED_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
    BookingStatus.COMPLETED: frozenset(),
}

STORED_STATUSES = frozenset({BookingStatus.PENDING, BookingStatus.CONFIRMED, BookingStatus.CANCELLED})


class BookingDecision(Enum):
    APPROVE = 'approve'
    REJECT = 'reject'

    @property
    def target_status(self) -> BookingStatus:
        if self is BookingDecision.APPROVE:
            return BookingStatus.CONFIRMED
        return BookingStatus.CANCELLED


@dataclass(frozen=True)
class SpaceTerms:
    """
    What the booking engine needs to know about a parking space.

    Owned by the listing side; the engine never changes it.
    """
    space_id: UUID
    owner_id: int
    availability: AvailabilityWindow
    price_per_hour: Decimal
    price_per_day: Decimal | None = None
    capacity: int = 1
    currency: str = 'INR'
    tz: tzinfo | None = None
    is_available: bool = True

    def local(self, instant: datetime) -> datetime:
        """Wall-clock time at the space; naive values are taken as already local"""
        if instant.tzinfo is None or self.tz is None:
            return instant
        return instant.astimezone(self.tz)

    def admit(self, start: datetime, end: datetime) -> tuple[TimeWindow, Money]:
        """
        Validate a requested window against the availability window and
        price it. Raises a ValidationFailure subclass on bad input.
        """
        self.availability.check_request(self.local(start), self.local(end))
        try:
            window = TimeWindow(start, end)
        except ValueError as exc:
            raise InvalidOrder("End time must be after start time", field="end_time") from exc
        amount = calculate_price(window.duration_hours, self.price_per_hour, self.price_per_day)
        return window, Money(amount, self.currency)


@dataclass(kw_only=True, eq=False)
class Booking(Aggregate):
    """
    Booking Aggregate Root

    A seeker's request for a space over a time window.

    Key invariants:
    - window.start < window.end
    - total_price is fixed at request time and never recomputed
    - only the space owner decides, and only while the booking is pending
    """

    space_id: UUID
    seeker_id: int
    owner_id: int
    window: TimeWindow
    total_price: Money
    status: BookingStatus = BookingStatus.PENDING
    decided_at: datetime | None = None
    updated_at: datetime = field(default_factory=utc_now)

    @classmethod
    def request(cls, *, space: SpaceTerms, seeker_id: int, start: datetime, end: datetime) -> 'Booking':
        """
        Create a pending booking (initial transition)

        No slot is reserved: other seekers can still request
        overlapping windows until the owner approves one of them.
        Events: BookingRequested
        """
        window, total_price = space.admit(start, end)

        from apps.bookings.domain.events import BookingRequested

        booking = cls(
            space_id=space.space_id,
            seeker_id=seeker_id,
            owner_id=space.owner_id,
            window=window,
            total_price=total_price,
        )
        booking.add_event(BookingRequested(
            aggregate_id=booking.id,
            booking_id=booking.id,
            space_id=booking.space_id,
            seeker_id=seeker_id,
            owner_id=booking.owner_id,
            window=window,
            total_price=total_price,
        ))
        return booking

    def approve(self, actor_id: int):
        """
        Approve the request (PENDING -> CONFIRMED)

        The caller commits the slot in the same transaction.
        Events: BookingApproved
        """
        self._transition(actor_id, BookingStatus.CONFIRMED)

        from apps.bookings.domain.events import BookingApproved

        self.add_event(BookingApproved(
            aggregate_id=self.id,
            booking_id=self.id,
            space_id=self.space_id,
            seeker_id=self.seeker_id,
            owner_id=self.owner_id,
            window=self.window,
        ))

    def reject(self, actor_id: int):
        """
        Reject the request (PENDING -> CANCELLED)

        Events: BookingRejected
        """
        self._transition(actor_id, BookingStatus.CANCELLED)

        from apps.bookings.domain.events import BookingRejected

        self.add_event(BookingRejected(
            aggregate_id=self.id,
            booking_id=self.id,
            space_id=self.space_id,
            seeker_id=self.seeker_id,
            owner_id=self.owner_id,
        ))

    def decide(self, actor_id: int, decision: BookingDecision):
        if decision is BookingDecision.APPROVE:
            self.approve(actor_id)
        elif decision is BookingDecision.REJECT:
            self.reject(actor_id)
        else:
            raise ValueError(f"Unknown decision: {decision!r}")

    def _transition(self, actor_id: int, target: BookingStatus):
        if actor_id != self.owner_id:
            raise Forbidden(f"User {actor_id} does not own booking {self.id}")
        if target not in ALLOWED_TRANSITIONS[self.status]:
            raise InvalidState(
                f"Cannot move booking {self.id} from {self.status.value} to {target.value}"
            )
        self.status = target
        self.decided_at = utc_now()
        self.updated_at = self.decided_at

    def effective_status(self, now: datetime | None = None) -> BookingStatus:
        """Status as shown to users; confirmed bookings read as completed once over"""
        now = now or utc_now()
        if self.status is BookingStatus.CONFIRMED and self.window.has_ended(now):
            return BookingStatus.COMPLETED
        return self.status

    def __str__(self):
        return f"Booking {self.id} ({self.status.value})"

    def __repr__(self):
        return (
            f"Booking(id={self.id}, space_id={self.space_id}, "
            f"status={self.status.value}, window={self.window!r})"
        )
