"""URL routing for the booking domain."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import SimpleRouter  # type: ignore

from .views import AvailableSlotsView, BookingViewSet, PublicScheduleView

router = SimpleRouter()
router.register(r"", BookingViewSet, basename="booking")

urlpatterns = [
    path("rooms/<uuid:room_id>/schedule/", PublicScheduleView.as_view(), name="room-schedule"),
    path("rooms/<uuid:room_id>/slots/", AvailableSlotsView.as_view(), name="room-slots"),
    path("", include(router.urls)),
]
