"""
Booking Domain Events

Published on the message bus after the transaction that produced them
has committed.
"""

from dataclasses import dataclass
from uuid import UUID

from shared.domain.base import DomainEvent
from shared.domain.value_objects import Money, TimeWindow


@dataclass(kw_only=True)
class BookingRequested(DomainEvent):
    """
    Event: A seeker requested a booking (status pending)

    Triggers:
    - Notify the space owner that a request awaits a decision
    """
    booking_id: UUID
    space_id: UUID
    seeker_id: int
    owner_id: int
    window: TimeWindow
    total_price: Money


@dataclass(kw_only=True)
class BookingApproved(DomainEvent):
    """
    Event: The owner approved a request (pending -> confirmed)

    Triggers:
    - Notify the seeker
    """
    booking_id: UUID
    space_id: UUID
    seeker_id: int
    owner_id: int
    window: TimeWindow


@dataclass(kw_only=True)
class BookingRejected(DomainEvent):
    """
    Event: The owner rejected a request (pending -> cancelled)

    Triggers:
    - Notify the seeker
    """
    booking_id: UUID
    space_id: UUID
    seeker_id: int
    owner_id: int


@dataclass(kw_only=True)
class SlotRecorded(DomainEvent):
    """
    Event: A confirmed booking was committed to the slot ledger

    From this point on the space is no longer offered to seekers.
    """
    slot_id: UUID
    space_id: UUID
    booking_id: UUID
    window: TimeWindow
