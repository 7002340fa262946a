"""Celery tasks of the booking domain, run inline."""

from __future__ import annotations

from datetime import timedelta

import pytest
from django.core import mail
from django.utils import timezone

from apps.bookings.models import Booking
from apps.bookings.tasks import complete_finished_bookings, notify_booking_status_changed
from apps.bookings.tests.utils import local_dt

pytestmark = pytest.mark.django_db

Status = Booking.Status


def test_finished_check_ins_are_completed(make_booking):
    yesterday = timezone.localdate() - timedelta(days=1)
    finished = make_booking(yesterday, 8, 10, Status.CHECKED_IN)
    ongoing = make_booking(timezone.localdate() + timedelta(days=1), 8, 10, Status.CHECKED_IN)
    approved = make_booking(yesterday, 10, 12, Status.APPROVED, qr_token=Booking.generate_qr_token())

    result = complete_finished_bookings.delay().get()

    assert result == {"completed": 1}
    finished.refresh_from_db()
    ongoing.refresh_from_db()
    approved.refresh_from_db()
    assert finished.status == Status.COMPLETED
    assert ongoing.status == Status.CHECKED_IN
    assert approved.status == Status.APPROVED


def test_nothing_to_complete():
    assert complete_finished_bookings() == {"completed": 0}


def test_notification_for_pending_booking_is_skipped(make_booking, booking_day):
    booking = make_booking(booking_day, 8, 9)

    assert notify_booking_status_changed(str(booking.id)) is False
    assert mail.outbox == []


def test_notification_for_missing_booking_is_skipped():
    assert notify_booking_status_changed("00000000-0000-4000-8000-000000000003") is False


def test_approved_notification_renders_qr_link(settings, make_booking, booking_day):
    settings.ROOM_BOOKING = {"QR_CODE_IMAGE_URL": "https://qr.campus.test/{token}.png"}
    booking = make_booking(booking_day, 8, 9, Status.APPROVED, qr_token="tok-123")

    assert notify_booking_status_changed(str(booking.id)) is True
    html, _ = mail.outbox[0].alternatives[0]
    assert "https://qr.campus.test/tok-123.png" in html
    assert local_dt(booking_day, 8).strftime("%d %b %Y") in mail.outbox[0].body
