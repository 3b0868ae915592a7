"""
Booking Repositories

Translate between the Django models and the booking aggregates. Also the
only place where database failures are turned into StorageUnavailable:

- reads issued outside a transaction are retried once
- writes are never retried; the caller's transaction is rolled back
"""

from __future__ import annotations

from contextlib import contextmanager
from functools import wraps
import logging

from django.conf import settings  # type: ignore
from django.core.exceptions import ValidationError as DjangoValidationError  # type: ignore
from django.db import DatabaseError, IntegrityError, transaction  # type: ignore
from django.db.models import Count, Exists, F, OuterRef, Q  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore
from django.utils import timezone  # type: ignore

from shared.domain.value_objects import Money, TimeWindow
from apps.bookings.domain.availability import AvailabilityWindow
from apps.bookings.domain.entities import Booking, BookingStatus, SpaceTerms, STORED_STATUSES
from apps.bookings.domain.exceptions import InvalidState, NotFound, StorageUnavailable
from apps.bookings.domain.ledger import Slot, WHOLE_SPACE_POLICY, ledger_class

logger = logging.getLogger(__name__)


def _lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


@contextmanager
def storage_errors():
    """Map driver-level failures to StorageUnavailable; constraint violations pass through."""
    try:
        yield
    except IntegrityError:
        raise
    except DatabaseError as exc:
        logger.error(f"Database unavailable: {exc}", exc_info=True)
        raise StorageUnavailable(str(exc)) from exc


def retry_read(func):
    """Retry an idempotent read once, unless it runs inside a transaction"""

    @wraps(func)
    def wrapper(*args, **kwargs):
        attempts = 1 if transaction.get_connection().in_atomic_block else 2
        for attempt in range(1, attempts + 1):
            try:
                return func(*args, **kwargs)
            except IntegrityError:
                raise
            except DatabaseError as exc:
                if attempt < attempts:
                    logger.warning(f"Read {func.__name__} failed ({exc}), retrying once")
                    continue
                logger.error(f"Read {func.__name__} failed: {exc}", exc_info=True)
                raise StorageUnavailable(str(exc)) from exc

    return wrapper


def booking_from_model(model) -> Booking:
    """Rebuild the aggregate from a row; unknown or unstorable statuses fail loudly"""
    status = BookingStatus(model.status)
    if status not in STORED_STATUSES:
        raise ValueError(f"Booking {model.pk} has non-stored status {model.status!r}")
    return Booking(
        id=model.pk,
        created_at=model.created_at,
        updated_at=model.updated_at,
        space_id=model.space_id,
        seeker_id=model.seeker_id,
        owner_id=model.owner_id,
        window=TimeWindow(model.start_time, model.end_time),
        total_price=Money(model.total_price, settings.BOOKING_CURRENCY),
        status=status,
        decided_at=model.decided_at,
    )


def space_terms_from_model(space) -> SpaceTerms:
    return SpaceTerms(
        space_id=space.pk,
        owner_id=space.owner_id,
        availability=AvailabilityWindow(
            date_from=space.availability_date_from,
            date_to=space.availability_date_to,
            time_from=space.availability_time_from,
            time_to=space.availability_time_to,
        ),
        price_per_hour=space.price_per_hour,
        price_per_day=space.price_per_day,
        capacity=space.capacity,
        currency=settings.BOOKING_CURRENCY,
        tz=timezone.get_default_timezone(),
        is_available=space.is_available,
    )


class SpaceRepository:
    """Read-only access to the booking terms of parking spaces"""

    @retry_read
    def get_terms(self, space_id) -> SpaceTerms:
        from apps.spaces.models import ParkingSpace

        try:
            space = ParkingSpace.objects.get(pk=space_id)
        except (ParkingSpace.DoesNotExist, ValueError, DjangoValidationError):
            raise NotFound(f"Space {space_id} not found")
        return space_terms_from_model(space)


class BookingRepository:

    @retry_read
    def get_by_id(self, booking_id, lock: bool = False) -> Booking:
        from apps.bookings.models import Booking as BookingModel

        queryset = BookingModel.objects.filter(pk=booking_id)
        if lock:
            queryset = _lock_queryset_if_possible(queryset)
        try:
            model = queryset.get()
        except (BookingModel.DoesNotExist, ValueError, DjangoValidationError):
            raise NotFound(f"Booking {booking_id} not found")
        return booking_from_model(model)

    def add(self, booking: Booking) -> None:
        from apps.bookings.models import Booking as BookingModel

        with storage_errors():
            BookingModel.objects.create(
                id=booking.id,
                space_id=booking.space_id,
                seeker_id=booking.seeker_id,
                owner_id=booking.owner_id,
                start_time=booking.window.start,
                end_time=booking.window.end,
                total_price=booking.total_price.amount,
                status=booking.status.value,
                decided_at=booking.decided_at,
                created_at=booking.created_at,
                updated_at=booking.updated_at,
            )

    def save_transition(self, booking: Booking, *, expected: BookingStatus) -> None:
        """
        Compare-and-set the status: only a row still in `expected` is
        updated. Zero rows means another decision got there first.
        """
        from apps.bookings.models import Booking as BookingModel

        with storage_errors():
            updated = BookingModel.objects.filter(
                pk=booking.id,
                status=expected.value,
            ).update(
                status=booking.status.value,
                decided_at=booking.decided_at,
                updated_at=booking.updated_at,
            )
        if updated == 0:
            raise InvalidState(f"Booking {booking.id} is no longer {expected.value}")

    @retry_read
    def list_for_seeker(self, seeker_id, *, include_closed: bool = False) -> list:
        from apps.bookings.models import Booking as BookingModel

        qs = BookingModel.objects.filter(seeker_id=seeker_id)
        if not include_closed:
            qs = qs.filter(status__in=[BookingModel.Status.PENDING, BookingModel.Status.CONFIRMED])
        return list(qs.select_related("space").order_by("-created_at"))

    @retry_read
    def list_for_owner(self, owner_id, status: BookingStatus) -> list:
        from apps.bookings.models import Booking as BookingModel

        ordering = "start_time" if status is BookingStatus.CONFIRMED else "-created_at"
        return list(
            BookingModel.objects.filter(owner_id=owner_id, status=status.value)
            .select_related("space", "seeker")
            .order_by(ordering)
        )


class SlotLedgerRepository:
    """
    Loads and saves the slot ledger of a space under the configured policy.

    Locking the ledger locks the space row, which serializes approvals
    for the same space.
    """

    def __init__(self, policy: str | None = None):
        self.policy = policy or getattr(settings, "BOOKING_LEDGER_POLICY", WHOLE_SPACE_POLICY)
        self.ledger_cls = ledger_class(self.policy)

    @retry_read
    def get_for_space(self, space_id, lock: bool = False):
        from apps.bookings.models import BookingSlot
        from apps.spaces.models import ParkingSpace

        queryset = ParkingSpace.objects.filter(pk=space_id)
        if lock:
            queryset = _lock_queryset_if_possible(queryset)
        try:
            space = queryset.get()
        except (ParkingSpace.DoesNotExist, ValueError, DjangoValidationError):
            raise NotFound(f"Space {space_id} not found")

        slots = [
            Slot(
                id=row.id,
                booking_id=row.booking_id,
                window=TimeWindow(row.start_time, row.end_time),
            )
            for row in BookingSlot.objects.filter(space_id=space.pk).order_by("start_time")
        ]
        return self.ledger_cls(id=space.pk, space_id=space.pk, capacity=space.capacity, slots=slots)

    def save(self, ledger) -> None:
        """Insert the slots recorded since load; existing slots are never touched"""
        from apps.bookings.models import BookingSlot

        for slot in ledger.pop_new_slots():
            try:
                with storage_errors(), transaction.atomic():
                    BookingSlot.objects.create(
                        id=slot.id,
                        space_id=ledger.space_id,
                        booking_id=slot.booking_id,
                        start_time=slot.window.start,
                        end_time=slot.window.end,
                    )
            except IntegrityError as exc:
                raise InvalidState(f"Booking {slot.booking_id} already has a slot") from exc
            logger.debug(f"Recorded slot {slot.id} for booking {slot.booking_id}")

    def offerable_spaces(self, queryset, now=None):
        """Narrow a ParkingSpace queryset to spaces the ledger still offers"""
        from apps.bookings.models import BookingSlot

        if self.policy == WHOLE_SPACE_POLICY:
            return queryset.filter(~Exists(BookingSlot.objects.filter(space_id=OuterRef("pk"))))

        now = now or timezone.now()
        return queryset.annotate(
            running_slots=Count("slots", filter=Q(slots__end_time__gte=now)),
        ).filter(running_slots__lt=F("capacity"))
