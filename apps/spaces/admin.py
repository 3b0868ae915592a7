"""Admin registration for parking spaces."""

from __future__ import annotations

from django.contrib import admin

from .models import ParkingSpace


@admin.register(ParkingSpace)
class ParkingSpaceAdmin(admin.ModelAdmin):
    list_display = (
        "title",
        "owner",
        "address",
        "price_per_hour",
        "price_per_day",
        "capacity",
        "is_available",
        "created_at",
    )
    list_filter = ("is_available", "availability_date_from")
    search_fields = ("title", "address", "owner__email")
    readonly_fields = ("created_at", "updated_at")
