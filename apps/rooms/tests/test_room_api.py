"""Integration tests for room API endpoints."""

from __future__ import annotations

from datetime import timedelta

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.bookings.tests.utils import local_dt
from apps.rooms.models import Room
from apps.users.models import User


class RoomAPITests(APITestCase):
    def setUp(self) -> None:
        self.admin = User.objects.create_user(
            email="admin@campus.test", password="AdminPass123", role=User.RoleChoices.ADMIN
        )
        self.student = User.objects.create_user(email="student@campus.test", password="StudentPass123")
        self.room = Room.objects.create(code="A.2.1", name="Seminar Room", building="A", capacity=40)
        Room.objects.create(code="B.1.1", name="Lab Jaringan", building="B", capacity=25)
        self.list_url = reverse("room-list")

    def test_anyone_can_list_rooms(self) -> None:
        response = self.client.get(self.list_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([room["code"] for room in response.data], ["A.2.1", "B.1.1"])

    def test_search_and_filter(self) -> None:
        response = self.client.get(self.list_url, {"search": "lab"})
        self.assertEqual([room["code"] for room in response.data], ["B.1.1"])

        response = self.client.get(self.list_url, {"building": "A"})
        self.assertEqual([room["code"] for room in response.data], ["A.2.1"])

    def test_admin_creates_room(self) -> None:
        self.client.force_authenticate(self.admin)

        response = self.client.post(
            self.list_url,
            {"code": "C.1.1", "name": "Aula", "building": "C", "capacity": 200},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["status"], Room.Status.AVAILABLE)

    def test_capacity_must_be_positive(self) -> None:
        self.client.force_authenticate(self.admin)

        response = self.client.post(self.list_url, {"code": "C.1.2", "name": "Closet", "capacity": 0}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("capacity", response.data)

    def test_student_cannot_create_room(self) -> None:
        self.client.force_authenticate(self.student)

        response = self.client.post(self.list_url, {"code": "C.1.3", "name": "Nope", "capacity": 5}, format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_sets_maintenance(self) -> None:
        self.client.force_authenticate(self.admin)

        response = self.client.patch(
            reverse("room-detail", args=[self.room.id]), {"status": "maintenance"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.room.refresh_from_db()
        self.assertTrue(self.room.is_under_maintenance)

    def test_room_with_bookings_cannot_be_deleted(self) -> None:
        day = timezone.localdate() + timedelta(days=1)
        Booking.objects.create(
            room=self.room,
            requester=self.student,
            purpose="Seminar",
            audience_count=10,
            start_time=local_dt(day, 9),
            end_time=local_dt(day, 10),
        )
        self.client.force_authenticate(self.admin)

        response = self.client.delete(reverse("room-detail", args=[self.room.id]))

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertTrue(Room.objects.filter(pk=self.room.pk).exists())

    def test_unused_room_can_be_deleted(self) -> None:
        self.client.force_authenticate(self.admin)

        response = self.client.delete(reverse("room-detail", args=[self.room.id]))

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
