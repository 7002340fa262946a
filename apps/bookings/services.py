"""Availability checks, slot generation and the public room schedule.

All reads; nothing here changes state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from django.utils import timezone  # type: ignore

from shared.domain.value_objects import TimeRange

from .conf import BookingPolicy, get_booking_policy
from .exceptions import InvalidDuration, InvalidRange, SlotConflict
from .models import Booking
from .store import BookingIntervalStore

logger = logging.getLogger(__name__)

SCHEDULE_STATUSES = (Booking.Status.APPROVED, Booking.Status.CHECKED_IN)


def to_time_range(start: datetime, end: datetime) -> TimeRange:
    """Validate a requested window; raises :class:`InvalidRange`."""

    if start is None or end is None:
        raise InvalidRange("Start and end time are required.")
    if timezone.is_naive(start) or timezone.is_naive(end):
        raise InvalidRange("Start and end time must include a timezone offset.")
    if start >= end:
        raise InvalidRange()
    return TimeRange(start, end)


def is_available(
    room_id,
    start: datetime,
    end: datetime,
    *,
    exclude_booking_id=None,
    store: BookingIntervalStore | None = None,
) -> bool:
    """True when no pending/approved/checked-in booking of the room overlaps [start, end)."""

    window = to_time_range(start, end)
    store = store or BookingIntervalStore()
    return not store.find_overlapping(room_id, window, exclude_booking_id=exclude_booking_id).exists()


def ensure_room_is_available(
    room_id,
    start: datetime,
    end: datetime,
    *,
    exclude_booking_id=None,
    store: BookingIntervalStore | None = None,
) -> None:
    if not is_available(room_id, start, end, exclude_booking_id=exclude_booking_id, store=store):
        logger.info("Slot conflict for room %s in %s - %s", room_id, start.isoformat(), end.isoformat())
        raise SlotConflict()


def _local_bounds(day: date, policy: BookingPolicy) -> tuple[datetime, datetime]:
    tz = timezone.get_default_timezone()
    return (
        datetime.combine(day, policy.opening_time, tzinfo=tz),
        datetime.combine(day, policy.closing_time, tzinfo=tz),
    )


def is_within_operating_hours(start: datetime, end: datetime, policy: BookingPolicy | None = None) -> bool:
    """Soft check: does [start, end) fit inside the operating hours of its local day?

    Requests outside operating hours are still accepted as by-request
    bookings; callers only use this to flag them.
    """

    policy = policy or get_booking_policy()
    local_start = timezone.localtime(start, timezone.get_default_timezone())
    opening, closing = _local_bounds(local_start.date(), policy)
    return opening <= start and end <= closing


@dataclass(frozen=True)
class Slot:
    time: str
    start: datetime
    end: datetime
    available: bool


def generate_slots(
    room_id,
    day: date,
    duration_minutes: int,
    *,
    include_blocked: bool | None = None,
    now: datetime | None = None,
    policy: BookingPolicy | None = None,
    store: BookingIntervalStore | None = None,
) -> list[Slot]:
    """Candidate start times for ``day`` at the policy granularity.

    A candidate is produced only if ``[start, start + duration)`` ends by
    closing time. Blocked candidates are omitted unless ``include_blocked``
    (or the ``SHOW_BLOCKED_SLOTS`` policy) asks for them, in which case they
    come back with ``available=False``. Past days yield an empty list.
    """

    if isinstance(duration_minutes, bool) or not isinstance(duration_minutes, int) or duration_minutes <= 0:
        raise InvalidDuration()

    policy = policy or get_booking_policy()
    store = store or BookingIntervalStore()
    store.get_room(room_id)

    now = now or timezone.now()
    today = timezone.localtime(now, timezone.get_default_timezone()).date()
    if day < today:
        return []

    show_blocked = policy.show_blocked_slots if include_blocked is None else include_blocked
    opening, closing = _local_bounds(day, policy)
    duration = timedelta(minutes=duration_minutes)
    step = timedelta(minutes=policy.slot_granularity_minutes)

    slots: list[Slot] = []
    candidate = opening
    while candidate + duration <= closing:
        end = candidate + duration
        if policy.hide_started_slots and candidate < now:
            candidate += step
            continue
        available = is_available(room_id, candidate, end, store=store)
        if available or show_blocked:
            slots.append(Slot(time=candidate.strftime("%H:%M"), start=candidate, end=end, available=available))
        candidate += step
    return slots


def room_schedule(
    room_id,
    start_date: date,
    end_date: date | None = None,
    *,
    policy: BookingPolicy | None = None,
    store: BookingIntervalStore | None = None,
) -> list[dict]:
    """Approved and checked-in bookings of a room over whole local days.

    Purpose and audience are never exposed; the organizer's name is
    included only when ``SCHEDULE_SHOW_ORGANIZER`` is on.
    """

    policy = policy or get_booking_policy()
    store = store or BookingIntervalStore()
    store.get_room(room_id)

    end_date = end_date or start_date
    if end_date < start_date:
        raise InvalidRange("End date must not be before start date.")

    tz = timezone.get_default_timezone()
    window = TimeRange(
        datetime.combine(start_date, time.min, tzinfo=tz),
        datetime.combine(end_date + timedelta(days=1), time.min, tzinfo=tz),
    )
    bookings = (
        store.find_overlapping(room_id, window, statuses=SCHEDULE_STATUSES)
        .select_related("requester")
        .order_by("start_time")
    )

    schedule = []
    for booking in bookings:
        entry = {
            "id": booking.id,
            "title": "Booked",
            "start": booking.start_time,
            "end": booking.end_time,
            "status": booking.status,
        }
        if policy.schedule_show_organizer:
            entry["organizer"] = booking.requester.display_name
        schedule.append(entry)
    return schedule
