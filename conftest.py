"""Shared pytest fixtures for the booking engine tests."""

from __future__ import annotations

from datetime import timedelta

import pytest
from django.utils import timezone

from apps.bookings.models import Booking
from apps.bookings.tests.utils import local_dt
from apps.rooms.models import Room
from apps.users.identity import CallerIdentity
from apps.users.models import User


@pytest.fixture
def booking_day():
    """A day far enough ahead that no slot has started yet."""
    return timezone.localdate(timezone.now(), timezone.get_default_timezone()) + timedelta(days=7)


@pytest.fixture
def room(db):
    return Room.objects.create(code="A.2.1", name="Seminar Room", building="A", floor=2, capacity=40)


@pytest.fixture
def other_room(db):
    return Room.objects.create(code="B.1.3", name="Lab Komputer", building="B", floor=1, capacity=30)


@pytest.fixture
def student(db):
    return User.objects.create_user(
        email="student@campus.test",
        password="StudentPass123",
        full_name="Siti Rahma",
        role=User.RoleChoices.MAHASISWA,
    )


@pytest.fixture
def lecturer(db):
    return User.objects.create_user(
        email="lecturer@campus.test",
        password="LecturerPass123",
        full_name="Budi Santoso",
        role=User.RoleChoices.DOSEN,
    )


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        email="admin@campus.test",
        password="AdminPass123",
        full_name="Room Admin",
        role=User.RoleChoices.ADMIN,
    )


@pytest.fixture
def student_caller(student):
    return CallerIdentity.from_user(student)


@pytest.fixture
def lecturer_caller(lecturer):
    return CallerIdentity.from_user(lecturer)


@pytest.fixture
def admin_caller(admin_user):
    return CallerIdentity.from_user(admin_user)


@pytest.fixture
def make_booking(room, student):
    """Insert a booking row directly, bypassing the lifecycle commands."""

    def _make(day, start_hour, end_hour, status=Booking.Status.PENDING, *, booking_room=None, requester=None, **extra):
        return Booking.objects.create(
            room=booking_room or room,
            requester=requester or student,
            purpose="Weekly study group",
            audience_count=12,
            start_time=local_dt(day, start_hour),
            end_time=local_dt(day, end_hour),
            status=status,
            **extra,
        )

    return _make
