"""Celery tasks for the booking domain."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore
from django.utils import timezone  # type: ignore

from apps.notifications.services import (
    send_booking_approved_email,
    send_booking_cancelled_email,
    send_booking_rejected_email,
)

from .conf import get_booking_policy
from .exceptions import BookingError
from .models import Booking

logger = logging.getLogger(__name__)


@shared_task(name="bookings.notify_booking_status_changed")
def notify_booking_status_changed(booking_id: str) -> bool:
    """
    Email the requester about the current status of a booking.

    Runs after the status change committed, so the email always describes
    the stored state. Returns whether an email was sent.
    """
    try:
        booking = Booking.objects.select_related("room", "requester").get(pk=booking_id)
    except Booking.DoesNotExist:
        logger.warning("Booking %s not found, notification skipped", booking_id)
        return False

    if booking.status == Booking.Status.APPROVED:
        return send_booking_approved_email(booking, get_booking_policy().qr_code_image_url)
    if booking.status == Booking.Status.REJECTED:
        return send_booking_rejected_email(booking)
    if booking.status == Booking.Status.CANCELLED:
        return send_booking_cancelled_email(booking)

    logger.info("No notification for booking %s in status %s", booking_id, booking.status)
    return False


# ============================================================================
# PERIODIC TASKS (run by Celery Beat)
# ============================================================================

@shared_task(name="bookings.complete_finished_bookings")
def complete_finished_bookings() -> dict[str, int]:
    """
    Close checked-in bookings whose end time has passed.

    Each booking goes through CompleteBookingCommand in its own transaction;
    a failing booking is logged and skipped.

    Runs every 15 minutes via Celery Beat.

    Returns:
        dict: {"completed": number of completed bookings}
    """
    from shared.application.message_bus import message_bus

    from .application.command_handlers import CompleteBookingCommand

    finished_ids = list(
        Booking.objects.filter(
            status=Booking.Status.CHECKED_IN,
            end_time__lte=timezone.now(),
        ).values_list("id", flat=True)
    )

    completed = 0
    for booking_id in finished_ids:
        try:
            message_bus.handle_command(CompleteBookingCommand(booking_id=booking_id))
        except BookingError as exc:
            logger.warning("Booking %s not completed: %s", booking_id, exc)
            continue
        completed += 1

    if completed:
        logger.info("Completed %d finished bookings", completed)

    return {"completed": completed}
