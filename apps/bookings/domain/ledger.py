"""
Slot Ledger Aggregate

The set of committed (confirmed) slots of one parking space. It is the
consistency boundary that keeps a space from being committed twice.

Two policies exist:

- WholeSpaceSlotLedger (default): one confirmed slot takes the whole
  space off the market, whatever the dates of later requests and
  whatever its capacity.
- CapacityAwareSlotLedger (opt-in through BOOKING_LEDGER_POLICY =
  "capacity"): a new slot is accepted while fewer than `capacity`
  committed slots overlap it, and the space stays offered while fewer
  than `capacity` slots are still running.

Slots are append-only. Releasing a slot is not supported.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List
from uuid import UUID, uuid4

from shared.domain.base import Aggregate, utc_now
from shared.domain.value_objects import TimeWindow
from apps.bookings.domain.exceptions import InvalidState

WHOLE_SPACE_POLICY = "whole_space"
CAPACITY_POLICY = "capacity"


@dataclass(frozen=True)
class Slot:
    """A committed reservation mirroring a confirmed booking's window"""
    booking_id: UUID
    window: TimeWindow
    id: UUID = field(default_factory=uuid4)


@dataclass(kw_only=True, eq=False)
class WholeSpaceSlotLedger(Aggregate):
    """
    Usage:
        ledger = ledger_repo.get_for_space(space_id, lock=True)
        ledger.record(booking)
        ledger_repo.save(ledger)
    """

    space_id: UUID
    capacity: int = 1
    slots: List[Slot] = field(default_factory=list)
    _new_slots: List[Slot] = field(default_factory=list, repr=False, init=False)

    def __post_init__(self):
        if self.capacity < 1:
            raise ValueError("Capacity must be at least 1")

    def is_offerable(self, now: datetime | None = None) -> bool:
        return not self.slots

    def can_commit(self, window: TimeWindow) -> bool:
        return not self.slots

    def record(self, booking) -> Slot:
        """
        Commit the window of a just-confirmed booking

        Raises:
            InvalidState: the booking already has a slot, or the space
                cannot take another one under this policy
        """
        if self.slot_for(booking.id) is not None:
            raise InvalidState(f"Booking {booking.id} already has a slot")
        if not self.can_commit(booking.window):
            raise InvalidState(f"Space {self.space_id} is already committed")

        slot = Slot(booking_id=booking.id, window=booking.window)
        self.slots.append(slot)
        self._new_slots.append(slot)

        from apps.bookings.domain.events import SlotRecorded

        self.add_event(SlotRecorded(
            aggregate_id=self.id,
            slot_id=slot.id,
            space_id=self.space_id,
            booking_id=booking.id,
            window=slot.window,
        ))
        return slot

    def slot_for(self, booking_id: UUID) -> Slot | None:
        return next((s for s in self.slots if s.booking_id == booking_id), None)

    def pop_new_slots(self) -> List[Slot]:
        """Slots recorded since load, for the repository to insert"""
        new_slots = self._new_slots.copy()
        self._new_slots.clear()
        return new_slots

    @property
    def total_slots(self) -> int:
        return len(self.slots)

    def __str__(self):
        return f"SlotLedger(space={self.space_id}, slots={len(self.slots)})"


@dataclass(kw_only=True, eq=False)
class CapacityAwareSlotLedger(WholeSpaceSlotLedger):

    def is_offerable(self, now: datetime | None = None) -> bool:
        now = now or utc_now()
        running = [s for s in self.slots if not s.window.has_ended(now)]
        return len(running) < self.capacity

    def can_commit(self, window: TimeWindow) -> bool:
        overlapping = [s for s in self.slots if s.window.overlaps_with(window)]
        return len(overlapping) < self.capacity


LEDGER_POLICIES = {
    WHOLE_SPACE_POLICY: WholeSpaceSlotLedger,
    CAPACITY_POLICY: CapacityAwareSlotLedger,
}


def ledger_class(policy: str) -> type[WholeSpaceSlotLedger]:
    try:
        return LEDGER_POLICIES[policy]
    except KeyError:
        raise ValueError(f"Unknown slot ledger policy: {policy!r}") from None
