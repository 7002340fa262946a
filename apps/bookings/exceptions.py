"""Errors raised by the booking engine.

All of them are local, recoverable and caller-facing. The DRF exception
handler at the bottom maps them to 4xx/5xx responses.
"""

from __future__ import annotations

from rest_framework import status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler  # type: ignore


class BookingError(Exception):
    """Base class for booking engine errors."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "booking_error"
    default_message = "Booking request failed."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class InvalidRange(BookingError):
    """Start is not strictly before end, or a bound is not timezone-aware."""

    code = "invalid_range"
    default_message = "Start time must be before end time."


class InvalidDuration(BookingError):
    code = "invalid_duration"
    default_message = "Duration must be a positive number of minutes."


class InvalidAudience(BookingError):
    code = "invalid_audience"
    default_message = "Audience count must be at least 1."


class SlotConflict(BookingError):
    """The requested window overlaps a booking that still reserves the room."""

    status_code = status.HTTP_409_CONFLICT
    code = "slot_conflict"
    default_message = "Room is already booked for the selected time slot."


class InvalidTransition(BookingError):
    status_code = status.HTTP_409_CONFLICT
    code = "invalid_transition"
    default_message = "Booking cannot change to the requested status."


class InvalidToken(BookingError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "invalid_token"
    default_message = "Invalid QR token."


class AlreadyCheckedIn(BookingError):
    status_code = status.HTTP_409_CONFLICT
    code = "already_checked_in"
    default_message = "Booking is already checked in."


class NotFound(BookingError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    default_message = "Not found."


class TransientStoreError(BookingError):
    """The store failed (connection loss, aborted transaction). Safe to retry."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "transient_store_error"
    default_message = "Booking store is temporarily unavailable, please retry."


def booking_exception_handler(exc, context):
    """DRF exception handler that understands :class:`BookingError`."""

    if isinstance(exc, BookingError):
        response = Response({"detail": str(exc), "code": exc.code}, status=exc.status_code)
        if isinstance(exc, TransientStoreError):
            response["Retry-After"] = "1"
        return response
    return exception_handler(exc, context)
