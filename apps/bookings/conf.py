"""Booking policy read from ``settings.ROOM_BOOKING``."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import time

from django.conf import settings  # type: ignore
from django.core.exceptions import ImproperlyConfigured  # type: ignore

DEFAULTS = {
    "OPENING_TIME": "08:00",
    "CLOSING_TIME": "16:00",
    "SLOT_GRANULARITY_MINUTES": 60,
    "SHOW_BLOCKED_SLOTS": False,
    "HIDE_STARTED_SLOTS": False,
    "SCHEDULE_SHOW_ORGANIZER": True,
    "REJECT_MAINTENANCE_ROOMS": False,
    "DEFAULT_REJECTION_REASON": "No reason provided",
    "QR_CODE_IMAGE_URL": "https://api.qrserver.com/v1/create-qr-code/?size=150x150&data={token}",
}


@dataclass(frozen=True)
class BookingPolicy:
    opening_time: time
    closing_time: time
    slot_granularity_minutes: int
    show_blocked_slots: bool
    hide_started_slots: bool
    schedule_show_organizer: bool
    reject_maintenance_rooms: bool
    default_rejection_reason: str
    qr_code_image_url: str


def _parse_time(name: str, value) -> time:
    if isinstance(value, time):
        return value
    try:
        return time.fromisoformat(str(value))
    except ValueError as exc:
        raise ImproperlyConfigured(f"ROOM_BOOKING[{name!r}] must be HH:MM, got {value!r}") from exc


def get_booking_policy() -> BookingPolicy:
    """Return the policy in effect; settings are re-read on each call."""

    raw = {**DEFAULTS, **getattr(settings, "ROOM_BOOKING", {})}
    opening = _parse_time("OPENING_TIME", raw["OPENING_TIME"])
    closing = _parse_time("CLOSING_TIME", raw["CLOSING_TIME"])
    if opening >= closing:
        raise ImproperlyConfigured("ROOM_BOOKING closing time must be after opening time")

    granularity = int(raw["SLOT_GRANULARITY_MINUTES"])
    if granularity <= 0:
        raise ImproperlyConfigured("ROOM_BOOKING['SLOT_GRANULARITY_MINUTES'] must be positive")

    return BookingPolicy(
        opening_time=opening,
        closing_time=closing,
        slot_granularity_minutes=granularity,
        show_blocked_slots=bool(raw["SHOW_BLOCKED_SLOTS"]),
        hide_started_slots=bool(raw["HIDE_STARTED_SLOTS"]),
        schedule_show_organizer=bool(raw["SCHEDULE_SHOW_ORGANIZER"]),
        reject_maintenance_rooms=bool(raw["REJECT_MAINTENANCE_ROOMS"]),
        default_rejection_reason=str(raw["DEFAULT_REJECTION_REASON"]),
        qr_code_image_url=str(raw["QR_CODE_IMAGE_URL"]),
    )
