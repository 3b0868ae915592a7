"""DRF exception handler for booking engine errors."""

from __future__ import annotations

import logging

from rest_framework import status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler  # type: ignore

from apps.bookings.domain.exceptions import (
    BookingError,
    Forbidden,
    InvalidState,
    NotFound,
    StorageUnavailable,
    ValidationFailure,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = (
    (ValidationFailure, status.HTTP_400_BAD_REQUEST),
    (NotFound, status.HTTP_404_NOT_FOUND),
    (Forbidden, status.HTTP_403_FORBIDDEN),
    (InvalidState, status.HTTP_409_CONFLICT),
    (StorageUnavailable, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def status_for(exc: BookingError) -> int:
    for error_cls, http_status in STATUS_BY_ERROR:
        if isinstance(exc, error_cls):
            return http_status
    return status.HTTP_400_BAD_REQUEST


def booking_exception_handler(exc, context):
    """Render BookingError as {code, field, detail}; everything else goes to DRF."""

    if not isinstance(exc, BookingError):
        return exception_handler(exc, context)

    http_status = status_for(exc)
    view = context.get("view")
    logger.info(
        f"{exc.__class__.__name__} in {view.__class__.__name__ if view else 'unknown view'}: "
        f"{exc.message}"
    )

    data = {"code": exc.code, "field": exc.field, "detail": exc.detail}
    return Response(data, status=http_status)
