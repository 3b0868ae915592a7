"""Celery tasks for booking notifications."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore
from django.conf import settings  # type: ignore
from django.core.mail import send_mail  # type: ignore

from .models import Booking

logger = logging.getLogger(__name__)


def send_email_notification(recipient_email: str, subject: str, message: str) -> bool:
    """Send a plain-text email; failures are logged and reported as False."""

    if not recipient_email:
        logger.warning(f"No email address for notification '{subject}'")
        return False

    try:
        send_mail(
            subject=subject,
            message=message,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[recipient_email],
            fail_silently=False,
        )
    except Exception as e:
        logger.error(f"Failed to send email to {recipient_email}: {e}", exc_info=True)
        return False

    logger.info(f"Email sent to {recipient_email}: {subject}")
    return True


def _describe(booking: Booking) -> str:
    return (
        f"{booking.space.title}, {booking.start_time:%Y-%m-%d %H:%M} - "
        f"{booking.end_time:%Y-%m-%d %H:%M}, total {booking.total_price} {settings.BOOKING_CURRENCY}"
    )


@shared_task(name="bookings.notify_owner_of_request")
def notify_owner_of_request(booking_id: str) -> bool:
    """Tell the space owner that a request awaits their decision."""
    try:
        booking = Booking.objects.select_related("space", "owner", "seeker").get(pk=booking_id)
    except Booking.DoesNotExist:
        logger.error(f"Booking {booking_id} not found for request notification")
        return False

    seeker_name = booking.seeker.get_full_name() or booking.seeker.get_username()
    sent = send_email_notification(
        booking.owner.email,
        f"New booking request for {booking.space.title}",
        f"{seeker_name} requested {_describe(booking)}. Approve or reject it from your dashboard.",
    )
    logger.info(f"[NOTIFICATION] Booking request {booking.pk} to owner {booking.owner_id}: sent={sent}")
    return sent


@shared_task(name="bookings.notify_seeker_of_decision")
def notify_seeker_of_decision(booking_id: str) -> bool:
    """Tell the seeker whether the owner approved or rejected the request."""
    try:
        booking = Booking.objects.select_related("space", "seeker").get(pk=booking_id)
    except Booking.DoesNotExist:
        logger.error(f"Booking {booking_id} not found for decision notification")
        return False

    if booking.status == Booking.Status.CONFIRMED:
        subject = f"Your booking for {booking.space.title} is confirmed"
    elif booking.status == Booking.Status.CANCELLED:
        subject = f"Your booking request for {booking.space.title} was declined"
    else:
        logger.warning(f"Booking {booking.pk} is still {booking.status}, no decision to report")
        return False

    sent = send_email_notification(booking.seeker.email, subject, _describe(booking))
    logger.info(f"[NOTIFICATION] Decision on {booking.pk} to seeker {booking.seeker_id}: sent={sent}")
    return sent
