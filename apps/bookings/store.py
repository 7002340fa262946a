"""Interval store for bookings.

The only place that reads or writes booking rows. Every overlap query in
the engine goes through :meth:`BookingIntervalStore.find_overlapping`, so
the half-open overlap rule ``existing.start < end AND existing.end > start``
is written exactly once.
"""

from __future__ import annotations

import uuid
from typing import Iterable

from django.db import transaction  # type: ignore
from django.db.models import QuerySet  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore
from django.utils import timezone  # type: ignore

from apps.rooms.models import Room
from shared.domain.value_objects import TimeRange

from .exceptions import NotFound
from .models import BLOCKING_STATUSES, Booking, CheckinRecord


def _lock_queryset_if_possible(queryset, using=None):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection(using).in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


def _as_uuid(value, what: str) -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        raise NotFound(f"{what} {value} not found.") from None


class BookingIntervalStore:
    """Django ORM implementation of the booking interval store."""

    def __init__(self, using: str | None = None):
        self.using = using

    def _bookings(self) -> QuerySet:
        return Booking.objects.db_manager(self.using).all()

    # --- rooms --------------------------------------------------------------
    def get_room(self, room_id) -> Room:
        room = Room.objects.db_manager(self.using).filter(pk=_as_uuid(room_id, "Room")).first()
        if room is None:
            raise NotFound(f"Room {room_id} not found.")
        return room

    def lock_room(self, room_id) -> Room:
        """Lock the room row for the rest of the current transaction.

        Concurrent creates for the same room queue up behind this lock, so
        the overlap check and the insert that follows see a stable set of rows.
        """
        qs = Room.objects.db_manager(self.using).filter(pk=_as_uuid(room_id, "Room"))
        room = _lock_queryset_if_possible(qs, self.using).first()
        if room is None:
            raise NotFound(f"Room {room_id} not found.")
        return room

    # --- reads --------------------------------------------------------------
    def find_overlapping(
        self,
        room_id,
        window: TimeRange,
        *,
        statuses: Iterable[str] = BLOCKING_STATUSES,
        exclude_booking_id=None,
    ) -> QuerySet:
        qs = self._bookings().filter(
            room_id=room_id,
            status__in=list(statuses),
            start_time__lt=window.end,
            end_time__gt=window.start,
        )
        if exclude_booking_id is not None:
            qs = qs.exclude(pk=exclude_booking_id)
        return qs

    def get(self, booking_id, *, lock: bool = False) -> Booking:
        qs = self._bookings().filter(pk=_as_uuid(booking_id, "Booking"))
        if lock:
            qs = _lock_queryset_if_possible(qs, self.using)
        booking = qs.select_related("room", "requester").first()
        if booking is None:
            raise NotFound(f"Booking {booking_id} not found.")
        return booking

    def get_by_token(self, token: str, *, lock: bool = False) -> Booking | None:
        if not token:
            return None
        qs = self._bookings().filter(qr_token=token)
        if lock:
            qs = _lock_queryset_if_possible(qs, self.using)
        return qs.select_related("room", "requester").first()

    # --- writes -------------------------------------------------------------
    def insert(
        self,
        *,
        room: Room,
        requester_id,
        purpose: str,
        audience_count: int,
        window: TimeRange,
    ) -> Booking:
        return self._bookings().create(
            room=room,
            requester_id=requester_id,
            purpose=purpose,
            audience_count=audience_count,
            start_time=window.start,
            end_time=window.end,
            status=Booking.Status.PENDING,
        )

    def update_status(self, booking_id, *, expected: str, new: str, **changes) -> bool:
        """Compare-and-swap the status; returns False if it was not ``expected``."""

        changes["updated_at"] = timezone.now()
        updated = self._bookings().filter(pk=booking_id, status=expected).update(status=new, **changes)
        return updated == 1

    def insert_checkin(self, booking: Booking, *, checked_in_by_id=None) -> CheckinRecord:
        return CheckinRecord.objects.db_manager(self.using).create(
            booking=booking,
            checked_in_by_id=checked_in_by_id,
            checked_in_at=timezone.now(),
        )
