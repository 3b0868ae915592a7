"""URL routing for parking spaces."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import ParkingSpaceViewSet

router = DefaultRouter()
router.register(r"", ParkingSpaceViewSet, basename="space")

urlpatterns = [
    path("", include(router.urls)),
]
