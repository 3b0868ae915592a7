"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking, BookingSlot


class BookingSlotInline(admin.StackedInline):
    model = BookingSlot
    extra = 0
    can_delete = False
    readonly_fields = ("space", "start_time", "end_time", "created_at")


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "space",
        "seeker",
        "owner",
        "status",
        "start_time",
        "end_time",
        "total_price",
        "created_at",
    )
    list_filter = ("status", "start_time")
    search_fields = ("space__title", "seeker__email", "owner__email")
    readonly_fields = (
        "space",
        "seeker",
        "owner",
        "start_time",
        "end_time",
        "total_price",
        "status",
        "decided_at",
        "created_at",
        "updated_at",
    )
    inlines = [BookingSlotInline]


@admin.register(BookingSlot)
class BookingSlotAdmin(admin.ModelAdmin):
    list_display = ("space", "booking", "start_time", "end_time", "created_at")
    list_filter = ("start_time",)
    search_fields = ("space__title",)
    readonly_fields = ("space", "booking", "start_time", "end_time", "created_at")
