"""Parking space listings.

A space is owned by one user for its whole life and declares the
availability window and rates that bookings are admitted and priced
against.
"""

from __future__ import annotations

import uuid

from django.conf import settings  # type: ignore
from django.core.exceptions import ValidationError  # type: ignore
from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class ParkingSpace(models.Model):
    """Parking space an owner offers for hourly or daily rent."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="parking_spaces",
    )
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    address = models.CharField(max_length=255)
    google_maps_link = models.URLField(max_length=500, blank=True)
    contact_number = models.CharField(max_length=20, blank=True)
    latitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    longitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)

    availability_date_from = models.DateField()
    availability_date_to = models.DateField()
    availability_time_from = models.TimeField()
    availability_time_to = models.TimeField()

    price_per_hour = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(0)],
    )
    price_per_day = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        help_text=_("Flat rate for each full 24 hours; empty means hourly pricing only."),
    )
    capacity = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    is_available = models.BooleanField(
        default=True,
        help_text=_("Listing switch controlled by the owner."),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Parking space")
        verbose_name_plural = _("Parking spaces")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(capacity__gte=1),
                name="parking_space_capacity_positive",
            ),
            models.CheckConstraint(
                condition=models.Q(price_per_hour__gt=0),
                name="parking_space_price_per_hour_positive",
            ),
            models.CheckConstraint(
                condition=models.Q(availability_date_to__gte=models.F("availability_date_from")),
                name="parking_space_valid_dates",
            ),
        ]
        indexes = [
            models.Index(fields=["owner", "is_available"], name="spaces_park_owner_i_2c6e1d_idx"),
        ]

    def __str__(self) -> str:
        return self.title

    def clean(self) -> None:
        errors = {}
        if (
            self.availability_date_from
            and self.availability_date_to
            and self.availability_date_to < self.availability_date_from
        ):
            errors["availability_date_to"] = _("End date cannot be before start date.")
        if (
            self.availability_time_from
            and self.availability_time_to
            and self.availability_time_to <= self.availability_time_from
        ):
            errors["availability_time_to"] = _("End time must be after start time.")
        if self.price_per_hour is not None and self.price_per_hour <= 0:
            errors["price_per_hour"] = _("Hourly price must be positive.")
        if self.price_per_day is not None and self.price_per_day <= 0:
            errors["price_per_day"] = _("Daily price must be positive.")
        if self.capacity is not None and self.capacity < 1:
            errors["capacity"] = _("Capacity must be at least 1.")
        if errors:
            raise ValidationError(errors)
