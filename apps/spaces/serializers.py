"""Serializers for parking space listings."""

from __future__ import annotations

from django.core.exceptions import ValidationError as DjangoValidationError  # type: ignore
from rest_framework import serializers  # type: ignore

from .models import ParkingSpace


class ParkingSpaceSerializer(serializers.ModelSerializer):
    """Space as shown to seekers and owners."""

    owner_id = serializers.ReadOnlyField(source="owner.id")

    class Meta:
        model = ParkingSpace
        fields = [
            "id",
            "owner_id",
            "title",
            "description",
            "address",
            "google_maps_link",
            "contact_number",
            "latitude",
            "longitude",
            "availability_date_from",
            "availability_date_to",
            "availability_time_from",
            "availability_time_to",
            "price_per_hour",
            "price_per_day",
            "capacity",
            "is_available",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "owner_id", "created_at", "updated_at"]


class ParkingSpaceWriteSerializer(ParkingSpaceSerializer):
    """Create or edit a space; the model's clean() is the single source of rules."""

    def validate(self, attrs):  # type: ignore
        instance = ParkingSpace(**attrs) if self.instance is None else self.instance
        if self.instance is not None:
            snapshot = {field: getattr(instance, field) for field in attrs}
            for field, value in attrs.items():
                setattr(instance, field, value)
        try:
            instance.clean()
        except DjangoValidationError as exc:
            raise serializers.ValidationError(exc.message_dict) from exc
        finally:
            if self.instance is not None:
                for field, value in snapshot.items():
                    setattr(instance, field, value)
        return attrs


class AvailabilitySerializer(serializers.Serializer):
    """Availability window of a space, as used by the booking form."""

    def to_representation(self, window):  # type: ignore
        return window.to_dict()
