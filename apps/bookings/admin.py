"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking, CheckinRecord


class CheckinRecordInline(admin.StackedInline):
    model = CheckinRecord
    extra = 0
    can_delete = False
    readonly_fields = ("checked_in_at", "checked_in_by")


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    """Read-only view; status changes go through the booking API."""

    list_display = (
        "id",
        "room",
        "requester",
        "status",
        "start_time",
        "end_time",
        "created_at",
    )
    list_filter = ("status", "room__building", "start_time")
    search_fields = ("room__code", "room__name", "requester__email", "purpose")
    readonly_fields = (
        "room",
        "requester",
        "purpose",
        "audience_count",
        "start_time",
        "end_time",
        "status",
        "rejection_reason",
        "qr_token",
        "created_at",
        "updated_at",
    )
    inlines = [CheckinRecordInline]

    def has_add_permission(self, request):  # type: ignore
        return False

    def has_delete_permission(self, request, obj=None):  # type: ignore
        return False
