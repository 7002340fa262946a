"""Integration tests for booking API endpoints."""

from __future__ import annotations

from datetime import timedelta

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking, CheckinRecord
from apps.bookings.tests.utils import local_dt
from apps.rooms.models import Room
from apps.users.models import User


class BookingAPITestCase(APITestCase):
    def setUp(self) -> None:
        self.room = Room.objects.create(code="A.1.4", name="Ruang Rapat", building="A", floor=1, capacity=20)
        self.student = User.objects.create_user(
            email="student@campus.test",
            password="StudentPass123",
            full_name="Andi Wijaya",
        )
        self.lecturer = User.objects.create_user(
            email="lecturer@campus.test",
            password="LecturerPass123",
            full_name="Dr. Rina",
            role=User.RoleChoices.DOSEN,
        )
        self.admin = User.objects.create_user(
            email="admin@campus.test",
            password="AdminPass123",
            role=User.RoleChoices.ADMIN,
        )
        self.day = timezone.localdate() + timedelta(days=5)
        self.list_url = reverse("booking-list")
        self.client.force_authenticate(self.student)

    def _payload(self, start_hour: int, end_hour: int, **overrides) -> dict:
        payload = {
            "room": str(self.room.id),
            "purpose": "Thesis defence rehearsal",
            "audience_count": 8,
            "start_time": local_dt(self.day, start_hour).isoformat(),
            "end_time": local_dt(self.day, end_hour).isoformat(),
        }
        payload.update(overrides)
        return payload

    def _create(self, start_hour: int = 10, end_hour: int = 12) -> dict:
        response = self.client.post(self.list_url, self._payload(start_hour, end_hour), format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        return response.data

    def _process(self, booking_id, decision: str, **extra):
        self.client.force_authenticate(self.admin)
        url = reverse("booking-process", args=[booking_id])
        return self.client.post(url, {"status": decision, **extra}, format="json")


class BookingCreateAPITests(BookingAPITestCase):
    def test_create_returns_pending_booking(self) -> None:
        data = self._create()

        self.assertEqual(data["status"], Booking.Status.PENDING)
        self.assertEqual(data["room_code"], "A.1.4")
        self.assertEqual(data["requester_name"], "Andi Wijaya")
        self.assertTrue(data["within_operating_hours"])
        self.assertIsNone(data["qr_token"])
        self.assertIsNone(data["checkin"])

    def test_overlapping_request_conflicts(self) -> None:
        self._create(10, 12)

        self.client.force_authenticate(self.lecturer)
        response = self.client.post(self.list_url, self._payload(11, 13), format="json")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT, response.data)
        self.assertEqual(response.data["code"], "slot_conflict")
        self.assertEqual(Booking.objects.count(), 1)

    def test_inverted_window_is_bad_request(self) -> None:
        response = self.client.post(self.list_url, self._payload(12, 10), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["code"], "invalid_range")

    def test_request_outside_operating_hours_is_flagged(self) -> None:
        data = self._create(17, 19)

        self.assertFalse(data["within_operating_hours"])

    def test_audience_must_be_positive(self) -> None:
        response = self.client.post(self.list_url, self._payload(10, 12, audience_count=0), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("audience_count", response.data)

    def test_maintenance_room_policy(self) -> None:
        self.room.status = Room.Status.MAINTENANCE
        self.room.save()

        self._create(8, 9)

        with self.settings(ROOM_BOOKING={"REJECT_MAINTENANCE_ROOMS": True}):
            response = self.client.post(self.list_url, self._payload(10, 12), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("room", response.data)

    def test_anonymous_cannot_create(self) -> None:
        self.client.force_authenticate(None)

        response = self.client.post(self.list_url, self._payload(10, 12), format="json")

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class BookingListAPITests(BookingAPITestCase):
    def test_list_returns_only_own_bookings(self) -> None:
        own = self._create(8, 9)
        self.client.force_authenticate(self.lecturer)
        self._create(10, 11)

        self.client.force_authenticate(self.student)
        response = self.client.get(self.list_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item["id"] for item in response.data], [own["id"]])

    def test_manage_lists_everything_for_admin(self) -> None:
        self._create(8, 9)
        self.client.force_authenticate(self.lecturer)
        self._create(10, 11)

        self.client.force_authenticate(self.admin)
        response = self.client.get(reverse("booking-manage"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)

    def test_manage_filters_by_status(self) -> None:
        first = self._create(8, 9)
        self._create(10, 11)
        self._process(first["id"], Booking.Status.APPROVED)

        response = self.client.get(reverse("booking-manage"), {"status": Booking.Status.APPROVED})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item["id"] for item in response.data], [first["id"]])

    def test_manage_is_admin_only(self) -> None:
        response = self.client.get(reverse("booking-manage"))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_other_users_booking_is_not_visible(self) -> None:
        booking = self._create()

        self.client.force_authenticate(self.lecturer)
        response = self.client.get(reverse("booking-detail", args=[booking["id"]]))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class BookingLifecycleAPITests(BookingAPITestCase):
    def test_approve_then_check_in(self) -> None:
        booking = self._create()

        response = self._process(booking["id"], Booking.Status.APPROVED)
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        token = response.data["qr_token"]
        self.assertTrue(token)

        self.client.force_authenticate(self.student)
        check_in_url = reverse("booking-check-in")
        response = self.client.post(check_in_url, {"qr_token": token}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["booking"]["status"], Booking.Status.CHECKED_IN)
        self.assertIn("checked_in_at", response.data)

        response = self.client.post(check_in_url, {"qr_token": token}, format="json")
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["code"], "already_checked_in")
        self.assertEqual(CheckinRecord.objects.count(), 1)

    def test_check_in_with_unknown_token(self) -> None:
        response = self.client.post(reverse("booking-check-in"), {"qr_token": "nope"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["code"], "invalid_token")

    def test_reject_with_reason(self) -> None:
        booking = self._create()

        response = self._process(booking["id"], Booking.Status.REJECTED, rejection_reason="Exam week")

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], Booking.Status.REJECTED)
        self.assertEqual(response.data["rejection_reason"], "Exam week")

    def test_second_decision_is_conflict(self) -> None:
        booking = self._create()
        self._process(booking["id"], Booking.Status.APPROVED)

        response = self._process(booking["id"], Booking.Status.REJECTED)

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["code"], "invalid_transition")

    def test_unknown_decision_is_bad_request(self) -> None:
        booking = self._create()

        response = self._process(booking["id"], Booking.Status.COMPLETED)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_student_cannot_process(self) -> None:
        booking = self._create()

        response = self.client.post(
            reverse("booking-process", args=[booking["id"]]), {"status": "approved"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_requester_cancels(self) -> None:
        booking = self._create()

        response = self.client.post(reverse("booking-cancel", args=[booking["id"]]))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], Booking.Status.CANCELLED)

        response = self.client.post(reverse("booking-cancel", args=[booking["id"]]))
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)


class RoomAvailabilityAPITests(BookingAPITestCase):
    def test_slots_skip_booked_hours(self) -> None:
        self._create(10, 12)
        self.client.force_authenticate(None)

        url = reverse("room-slots", args=[self.room.id])
        response = self.client.get(url, {"date": self.day.isoformat(), "duration": 60})

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(
            [slot["time"] for slot in response.data],
            ["08:00", "09:00", "12:00", "13:00", "14:00", "15:00"],
        )

    def test_slots_can_include_blocked(self) -> None:
        self._create(10, 12)

        url = reverse("room-slots", args=[self.room.id])
        response = self.client.get(url, {"date": self.day.isoformat(), "include_blocked": "true"})

        self.assertEqual(len(response.data), 8)
        self.assertFalse(response.data[2]["available"])

    def test_slots_reject_bad_duration(self) -> None:
        url = reverse("room-slots", args=[self.room.id])
        response = self.client.get(url, {"date": self.day.isoformat(), "duration": 0})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "invalid_duration")

    def test_public_schedule_hides_private_details(self) -> None:
        pending = self._create(8, 9)
        approved = self._create(10, 12)
        self._process(approved["id"], Booking.Status.APPROVED)
        self.client.force_authenticate(None)

        url = reverse("room-schedule", args=[self.room.id])
        response = self.client.get(url, {"date": self.day.isoformat()})

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual([entry["id"] for entry in response.data], [approved["id"]])
        entry = response.data[0]
        self.assertEqual(entry["title"], "Booked")
        self.assertEqual(entry["organizer"], "Andi Wijaya")
        self.assertNotIn("purpose", entry)
        self.assertNotIn(pending["id"], [item["id"] for item in response.data])

    def test_schedule_without_organizer(self) -> None:
        approved = self._create(10, 12)
        self._process(approved["id"], Booking.Status.APPROVED)

        with self.settings(ROOM_BOOKING={"SCHEDULE_SHOW_ORGANIZER": False}):
            response = self.client.get(
                reverse("room-schedule", args=[self.room.id]), {"date": self.day.isoformat()}
            )

        self.assertNotIn("organizer", response.data[0])

    def test_schedule_requires_a_date(self) -> None:
        response = self.client.get(reverse("room-schedule", args=[self.room.id]))

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
