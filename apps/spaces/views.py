"""Parking space API views."""

from __future__ import annotations

from django.db.models import ProtectedError  # type: ignore
from rest_framework import permissions, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.bookings.domain.exceptions import InvalidState
from apps.bookings.services import BookingAdmissionService

from .models import ParkingSpace
from .serializers import AvailabilitySerializer, ParkingSpaceSerializer, ParkingSpaceWriteSerializer


class IsSpaceOwnerOrReadOnly(permissions.BasePermission):
    """Only the owner edits or removes a space; anyone may read it."""

    def has_object_permission(self, request, view, obj: ParkingSpace):  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        return obj.owner_id == request.user.id


class ParkingSpaceViewSet(viewsets.ModelViewSet):
    """Browse offerable spaces; owners create and manage their own."""

    queryset = ParkingSpace.objects.select_related("owner").order_by("-created_at")
    permission_classes = [permissions.IsAuthenticatedOrReadOnly, IsSpaceOwnerOrReadOnly]
    filterset_fields = ["capacity"]
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]

    def get_service(self) -> BookingAdmissionService:
        return BookingAdmissionService()

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        if self.action == "list":
            return self.get_service().offerable_spaces(qs)
        return qs

    def get_serializer_class(self):  # type: ignore
        if self.action in {"create", "partial_update"}:
            return ParkingSpaceWriteSerializer
        return ParkingSpaceSerializer

    def perform_create(self, serializer):  # type: ignore
        serializer.save(owner=self.request.user)

    def perform_destroy(self, instance):  # type: ignore
        # Bookings are never deleted; a space with bookings is protected.
        try:
            instance.delete()
        except ProtectedError as exc:
            raise InvalidState(f"Space {instance.pk} has bookings") from exc

    @action(detail=True, methods=["get"], permission_classes=[permissions.AllowAny])
    def availability(self, request, pk=None):  # type: ignore
        window = self.get_service().get_availability(pk)
        return Response(AvailabilitySerializer(window).data)

    @action(detail=False, methods=["get"], permission_classes=[permissions.IsAuthenticated])
    def mine(self, request):  # type: ignore
        """The owner's spaces without a committed booking, listed or paused."""
        qs = ParkingSpace.objects.filter(owner=request.user).order_by("-created_at")
        qs = self.get_service().uncommitted_spaces(qs)
        serializer = ParkingSpaceSerializer(qs, many=True, context=self.get_serializer_context())
        return Response(serializer.data)
