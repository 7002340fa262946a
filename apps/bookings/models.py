"""Booking domain models."""

from __future__ import annotations

import secrets
import uuid

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Booking(models.Model):
    """A request to use a room during the half-open window [start_time, end_time).

    Rows are never deleted; terminal bookings stay as the audit trail.
    Status changes go exclusively through the lifecycle command handlers.
    """

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending approval")
        APPROVED = "approved", _("Approved")
        REJECTED = "rejected", _("Rejected")
        CANCELLED = "cancelled", _("Cancelled")
        CHECKED_IN = "checked_in", _("Checked in")
        COMPLETED = "completed", _("Completed")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    room = models.ForeignKey(
        "rooms.Room",
        on_delete=models.PROTECT,
        related_name="bookings",
    )
    requester = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="room_bookings",
    )
    purpose = models.TextField(_("Purpose"))
    audience_count = models.PositiveIntegerField(_("Audience count"))
    start_time = models.DateTimeField(_("Start time"))
    end_time = models.DateTimeField(_("End time"))
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
    )
    rejection_reason = models.TextField(blank=True)
    qr_token = models.CharField(max_length=64, unique=True, null=True, blank=True, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_time__gt=models.F("start_time")),
                name="booking_start_before_end",
            ),
        ]
        indexes = [
            models.Index(fields=["room", "start_time", "end_time"], name="booking_room_window_idx"),
            models.Index(fields=["status"], name="booking_status_idx"),
        ]

    def __str__(self) -> str:
        return f"Booking {self.id} for room {self.room_id} ({self.status})"

    @staticmethod
    def generate_qr_token() -> str:
        """Opaque single-use secret; unrelated to the booking id."""
        return secrets.token_urlsafe(32)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def can_transition_to(self, new_status: str) -> bool:
        return new_status in ALLOWED_TRANSITIONS.get(str(self.status), ())


# Statuses that still hold the room for their window
BLOCKING_STATUSES = (
    Booking.Status.PENDING,
    Booking.Status.APPROVED,
    Booking.Status.CHECKED_IN,
)

TERMINAL_STATUSES = (
    Booking.Status.REJECTED,
    Booking.Status.CANCELLED,
    Booking.Status.COMPLETED,
)

ALLOWED_TRANSITIONS = {
    Booking.Status.PENDING.value: (
        Booking.Status.APPROVED,
        Booking.Status.REJECTED,
        Booking.Status.CANCELLED,
    ),
    Booking.Status.APPROVED.value: (
        Booking.Status.CHECKED_IN,
        Booking.Status.CANCELLED,
    ),
    Booking.Status.CHECKED_IN.value: (
        Booking.Status.COMPLETED,
    ),
}


class CheckinRecord(models.Model):
    """Audit row written by a successful check-in. Never updated."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    booking = models.OneToOneField(
        Booking,
        on_delete=models.PROTECT,
        related_name="checkin",
    )
    checked_in_at = models.DateTimeField(default=timezone.now)
    checked_in_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="scanned_checkins",
    )

    class Meta:
        verbose_name = _("Check-in record")
        verbose_name_plural = _("Check-in records")
        ordering = ["-checked_in_at"]

    def __str__(self) -> str:
        return f"Check-in of {self.booking_id} at {self.checked_in_at.isoformat()}"
