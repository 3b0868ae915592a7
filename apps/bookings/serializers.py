"""Serializers for the booking API."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from shared.domain.value_objects import CENT

from .models import Booking
from .repositories import booking_from_model


class BookingRequestSerializer(serializers.Serializer):
    """Input of a booking request or a price quote; the seeker comes from the session."""

    space = serializers.UUIDField()
    start_time = serializers.DateTimeField()
    end_time = serializers.DateTimeField()


class QuoteSerializer(serializers.Serializer):
    """Price preview for a window; nothing is persisted."""

    def to_representation(self, instance):  # type: ignore
        window, price = instance["window"], instance["price"]
        field = serializers.DateTimeField()
        return {
            "space": str(instance["space_id"]),
            "start_time": field.to_representation(window.start),
            "end_time": field.to_representation(window.end),
            "duration_hours": str(window.duration_hours.quantize(CENT)),
            "total_price": f"{price.amount:.2f}",
            "currency": price.currency,
        }


class BookingAggregateSerializer(serializers.Serializer):
    """Response body for a booking just created or decided; reports the stored status."""

    def to_representation(self, booking):  # type: ignore
        field = serializers.DateTimeField()
        return {
            "id": str(booking.id),
            "space": str(booking.space_id),
            "seeker": booking.seeker_id,
            "owner": booking.owner_id,
            "start_time": field.to_representation(booking.window.start),
            "end_time": field.to_representation(booking.window.end),
            "total_price": f"{booking.total_price.amount:.2f}",
            "status": booking.status.value,
            "decided_at": field.to_representation(booking.decided_at) if booking.decided_at else None,
            "created_at": field.to_representation(booking.created_at),
        }


class BookingSerializer(serializers.ModelSerializer):
    """Booking as listed on the seeker dashboard."""

    space_title = serializers.ReadOnlyField(source="space.title")
    space_address = serializers.ReadOnlyField(source="space.address")
    status = serializers.SerializerMethodField()

    class Meta:
        model = Booking
        fields = [
            "id",
            "space",
            "space_title",
            "space_address",
            "start_time",
            "end_time",
            "total_price",
            "status",
            "decided_at",
            "created_at",
        ]
        read_only_fields = fields

    def get_status(self, obj: Booking) -> str:
        return booking_from_model(obj).effective_status().value


class OwnerBookingSerializer(BookingSerializer):
    """Booking as listed on the owner dashboard, with the seeker's details."""

    seeker_id = serializers.ReadOnlyField(source="seeker.id")
    seeker_name = serializers.SerializerMethodField()
    seeker_email = serializers.ReadOnlyField(source="seeker.email")

    class Meta(BookingSerializer.Meta):
        fields = BookingSerializer.Meta.fields + ["seeker_id", "seeker_name", "seeker_email"]
        read_only_fields = fields

    def get_seeker_name(self, obj: Booking) -> str:
        return obj.seeker.get_full_name() or obj.seeker.get_username()
