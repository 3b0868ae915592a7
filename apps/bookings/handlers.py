"""Event handlers that turn committed booking events into notification tasks."""

from __future__ import annotations

import logging

from django.conf import settings  # type: ignore

from shared.application.message_bus import MessageBus
from .domain.events import BookingApproved, BookingRejected, BookingRequested

logger = logging.getLogger(__name__)


def _notifications_enabled() -> bool:
    return getattr(settings, "BOOKING_NOTIFICATIONS_ENABLED", True)


def on_booking_requested(event: BookingRequested) -> None:
    if not _notifications_enabled():
        return
    from .tasks import notify_owner_of_request

    notify_owner_of_request.delay(str(event.booking_id))


def on_booking_decided(event: BookingApproved | BookingRejected) -> None:
    if not _notifications_enabled():
        return
    from .tasks import notify_seeker_of_decision

    notify_seeker_of_decision.delay(str(event.booking_id))


def register_handlers(bus: MessageBus) -> None:
    bus.register_event_handler(BookingRequested, on_booking_requested)
    bus.register_event_handler(BookingApproved, on_booking_decided)
    bus.register_event_handler(BookingRejected, on_booking_decided)
    logger.debug("Booking event handlers registered")
