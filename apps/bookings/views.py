"""API views for booking requests and owner decisions."""

from __future__ import annotations

from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from .domain.entities import BookingDecision
from .serializers import (
    BookingAggregateSerializer,
    BookingRequestSerializer,
    BookingSerializer,
    OwnerBookingSerializer,
    QuoteSerializer,
)
from .services import BookingAdmissionService


class BookingViewSet(viewsets.GenericViewSet):
    """Seekers request bookings and owners decide on them.

    The acting user is read from the request once and passed to the
    admission service; ownership checks happen in the domain.
    """

    permission_classes = [permissions.IsAuthenticated]
    serializer_class = BookingSerializer

    def get_service(self) -> BookingAdmissionService:
        return BookingAdmissionService()

    def list(self, request):  # type: ignore
        bookings = self.get_service().list_seeker_bookings(request.user.id)
        serializer = BookingSerializer(bookings, many=True, context=self.get_serializer_context())
        return Response(serializer.data)

    @action(detail=False, methods=["get"])
    def history(self, request):  # type: ignore
        bookings = self.get_service().list_seeker_history(request.user.id)
        serializer = BookingSerializer(bookings, many=True, context=self.get_serializer_context())
        return Response(serializer.data)

    def create(self, request):  # type: ignore
        serializer = BookingRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        booking = self.get_service().submit_request(
            data["space"],
            request.user.id,
            data["start_time"],
            data["end_time"],
        )
        return Response(BookingAggregateSerializer(booking).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["post"])
    def quote(self, request):  # type: ignore
        serializer = BookingRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        window, price = self.get_service().quote(data["space"], data["start_time"], data["end_time"])
        payload = {"space_id": data["space"], "window": window, "price": price}
        return Response(QuoteSerializer(payload).data)

    @action(detail=True, methods=["post"])
    def approve(self, request, pk=None):  # type: ignore
        booking = self.get_service().decide(pk, request.user.id, BookingDecision.APPROVE)
        return Response(BookingAggregateSerializer(booking).data)

    @action(detail=True, methods=["post"])
    def reject(self, request, pk=None):  # type: ignore
        booking = self.get_service().decide(pk, request.user.id, BookingDecision.REJECT)
        return Response(BookingAggregateSerializer(booking).data)

    @action(detail=False, methods=["get"], url_path="owner")
    def owner(self, request):  # type: ignore
        booking_status = request.query_params.get("status", "pending")
        bookings = self.get_service().list_owner_bookings(request.user.id, booking_status)
        serializer = OwnerBookingSerializer(bookings, many=True, context=self.get_serializer_context())
        return Response(serializer.data)
