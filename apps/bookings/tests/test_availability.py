"""Availability checks against the interval store."""

from __future__ import annotations

from datetime import datetime

import pytest

from apps.bookings.exceptions import InvalidRange, SlotConflict
from apps.bookings.models import Booking
from apps.bookings.services import ensure_room_is_available, is_available, is_within_operating_hours
from apps.bookings.tests.utils import local_dt

pytestmark = pytest.mark.django_db


def test_free_room_is_available(room, booking_day):
    assert is_available(room.id, local_dt(booking_day, 9), local_dt(booking_day, 10))


def test_touching_windows_do_not_overlap(room, booking_day, make_booking):
    make_booking(booking_day, 10, 12, Booking.Status.APPROVED)

    assert is_available(room.id, local_dt(booking_day, 8), local_dt(booking_day, 10))
    assert is_available(room.id, local_dt(booking_day, 12), local_dt(booking_day, 13))


@pytest.mark.parametrize(
    "start_hour,end_hour",
    [(9, 11), (11, 13), (10, 12), (10, 11), (9, 13)],
)
def test_overlapping_windows_are_blocked(room, booking_day, make_booking, start_hour, end_hour):
    make_booking(booking_day, 10, 12, Booking.Status.APPROVED)

    assert not is_available(room.id, local_dt(booking_day, start_hour), local_dt(booking_day, end_hour))


@pytest.mark.parametrize(
    "status,blocks",
    [
        (Booking.Status.PENDING, True),
        (Booking.Status.APPROVED, True),
        (Booking.Status.CHECKED_IN, True),
        (Booking.Status.REJECTED, False),
        (Booking.Status.CANCELLED, False),
        (Booking.Status.COMPLETED, False),
    ],
)
def test_only_reserving_statuses_block(room, booking_day, make_booking, status, blocks):
    make_booking(booking_day, 10, 12, status)

    assert is_available(room.id, local_dt(booking_day, 10), local_dt(booking_day, 12)) is not blocks


def test_bookings_of_other_rooms_are_ignored(room, other_room, booking_day, make_booking):
    make_booking(booking_day, 10, 12, Booking.Status.APPROVED, booking_room=other_room)

    assert is_available(room.id, local_dt(booking_day, 10), local_dt(booking_day, 12))


def test_excluded_booking_does_not_block_itself(room, booking_day, make_booking):
    booking = make_booking(booking_day, 10, 12, Booking.Status.APPROVED)

    assert is_available(
        room.id, local_dt(booking_day, 10), local_dt(booking_day, 12), exclude_booking_id=booking.id
    )


def test_empty_or_inverted_window_is_rejected(room, booking_day):
    with pytest.raises(InvalidRange):
        is_available(room.id, local_dt(booking_day, 10), local_dt(booking_day, 10))
    with pytest.raises(InvalidRange):
        is_available(room.id, local_dt(booking_day, 12), local_dt(booking_day, 10))


def test_naive_datetimes_are_rejected(room):
    with pytest.raises(InvalidRange):
        is_available(room.id, datetime(2030, 1, 7, 10), datetime(2030, 1, 7, 12))


def test_ensure_room_is_available_raises_conflict(room, booking_day, make_booking):
    make_booking(booking_day, 10, 12)

    with pytest.raises(SlotConflict):
        ensure_room_is_available(room.id, local_dt(booking_day, 11), local_dt(booking_day, 13))


def test_operating_hours_flag(booking_day):
    assert is_within_operating_hours(local_dt(booking_day, 8), local_dt(booking_day, 16))
    assert not is_within_operating_hours(local_dt(booking_day, 7), local_dt(booking_day, 9))
    assert not is_within_operating_hours(local_dt(booking_day, 15), local_dt(booking_day, 17))
