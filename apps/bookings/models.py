"""Booking persistence models for the parking marketplace."""

from __future__ import annotations

import uuid

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Booking(models.Model):
    """A seeker's request for a parking space over a time window."""

    class Status(models.TextChoices):
        PENDING = "pending", _("Awaiting owner decision")
        CONFIRMED = "confirmed", _("Confirmed")
        CANCELLED = "cancelled", _("Cancelled")
        # Read-time projection of a confirmed booking that has ended; never stored.
        COMPLETED = "completed", _("Completed")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    space = models.ForeignKey(
        "spaces.ParkingSpace",
        on_delete=models.PROTECT,
        related_name="bookings",
    )
    seeker = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="received_bookings",
        help_text=_("Owner of the space at the time the booking was requested."),
    )
    start_time = models.DateTimeField()
    end_time = models.DateTimeField()
    total_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text=_("Price fixed at request time."),
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
    )
    decided_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField()

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_time__gt=models.F("start_time")),
                name="booking_valid_window",
            ),
            models.CheckConstraint(
                condition=models.Q(status__in=["pending", "confirmed", "cancelled"]),
                name="booking_stored_status",
            ),
        ]
        indexes = [
            models.Index(fields=["owner", "status"], name="bookings_bo_owner_i_5d0b7e_idx"),
            models.Index(fields=["seeker", "status"], name="bookings_bo_seeker__8a41c2_idx"),
            models.Index(fields=["space", "start_time", "end_time"], name="bookings_bo_space_i_e3f9a4_idx"),
        ]

    def __str__(self) -> str:
        return f"Booking {self.pk} for {self.space_id}"


class BookingSlot(models.Model):
    """Committed reservation recorded when the owner approves a booking."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    space = models.ForeignKey(
        "spaces.ParkingSpace",
        on_delete=models.PROTECT,
        related_name="slots",
    )
    booking = models.OneToOneField(
        Booking,
        on_delete=models.CASCADE,
        related_name="slot",
    )
    start_time = models.DateTimeField()
    end_time = models.DateTimeField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Booking slot")
        verbose_name_plural = _("Booking slots")
        ordering = ["start_time"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_time__gt=models.F("start_time")),
                name="booking_slot_valid_window",
            ),
        ]
        indexes = [
            models.Index(fields=["space", "start_time"], name="bookings_bo_space_i_1b7c5f_idx"),
        ]

    def __str__(self) -> str:
        return f"Slot {self.start_time:%Y-%m-%d %H:%M} - {self.end_time:%H:%M} ({self.space_id})"
