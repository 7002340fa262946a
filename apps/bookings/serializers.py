"""Serializers for the booking domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.rooms.models import Room

from .conf import get_booking_policy
from .models import Booking
from .services import is_within_operating_hours


class BookingCreateSerializer(serializers.Serializer):
    """Booking request from any authenticated user."""

    room = serializers.PrimaryKeyRelatedField(queryset=Room.objects.all())
    purpose = serializers.CharField()
    audience_count = serializers.IntegerField(min_value=1)
    start_time = serializers.DateTimeField()
    end_time = serializers.DateTimeField()

    def validate_room(self, room: Room) -> Room:
        if get_booking_policy().reject_maintenance_rooms and room.is_under_maintenance:
            raise serializers.ValidationError("Room is under maintenance and cannot be booked.")
        return room


class CheckinRecordSerializer(serializers.Serializer):
    checked_in_at = serializers.DateTimeField()
    checked_in_by = serializers.ReadOnlyField(source="checked_in_by_id")


class BookingSerializer(serializers.ModelSerializer):
    """Booking with joined room and requester display data."""

    room_code = serializers.ReadOnlyField(source="room.code")
    room_name = serializers.ReadOnlyField(source="room.name")
    requester_id = serializers.ReadOnlyField(source="requester.id")
    requester_name = serializers.ReadOnlyField(source="requester.display_name")
    requester_email = serializers.ReadOnlyField(source="requester.email")
    within_operating_hours = serializers.SerializerMethodField()
    checkin = serializers.SerializerMethodField()

    class Meta:
        model = Booking
        fields = [
            "id",
            "room",
            "room_code",
            "room_name",
            "requester_id",
            "requester_name",
            "requester_email",
            "purpose",
            "audience_count",
            "start_time",
            "end_time",
            "status",
            "rejection_reason",
            "qr_token",
            "within_operating_hours",
            "checkin",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_within_operating_hours(self, obj: Booking) -> bool:
        return is_within_operating_hours(obj.start_time, obj.end_time)

    def get_checkin(self, obj: Booking) -> dict | None:
        if not hasattr(obj, "checkin"):
            return None
        return CheckinRecordSerializer(obj.checkin).data


class ProcessBookingSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=[
            Booking.Status.APPROVED,
            Booking.Status.REJECTED,
            Booking.Status.CANCELLED,
        ]
    )
    rejection_reason = serializers.CharField(required=False, allow_blank=True, default="")


class CheckInSerializer(serializers.Serializer):
    qr_token = serializers.CharField()


class SlotQuerySerializer(serializers.Serializer):
    date = serializers.DateField()
    duration = serializers.IntegerField(required=False, default=60)
    include_blocked = serializers.BooleanField(required=False, allow_null=True, default=None)


class SlotSerializer(serializers.Serializer):
    time = serializers.CharField()
    start = serializers.DateTimeField()
    end = serializers.DateTimeField()
    available = serializers.BooleanField()


class ScheduleQuerySerializer(serializers.Serializer):
    """Either ``date`` for a single day or ``start``/``end`` for a range of days."""

    date = serializers.DateField(required=False)
    start = serializers.DateField(required=False)
    end = serializers.DateField(required=False)

    def validate(self, attrs):  # type: ignore
        start = attrs.get("start") or attrs.get("date")
        if start is None:
            raise serializers.ValidationError("Provide either 'date' or 'start'.")
        end = attrs.get("end") or start
        if end < start:
            raise serializers.ValidationError("'end' must not be before 'start'.")
        return {"start": start, "end": end}


class ScheduleEntrySerializer(serializers.Serializer):
    id = serializers.UUIDField()
    title = serializers.CharField()
    start = serializers.DateTimeField()
    end = serializers.DateTimeField()
    status = serializers.CharField()
    organizer = serializers.CharField(required=False)
