"""django-filter filter sets for booking lists."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Booking


class BookingFilter(django_filters.FilterSet):
    status = django_filters.MultipleChoiceFilter(choices=Booking.Status.choices)
    room = django_filters.UUIDFilter(field_name="room_id")
    start_after = django_filters.IsoDateTimeFilter(field_name="start_time", lookup_expr="gte")
    end_before = django_filters.IsoDateTimeFilter(field_name="end_time", lookup_expr="lte")

    class Meta:
        model = Booking
        fields = ["status", "room", "start_after", "end_before"]
