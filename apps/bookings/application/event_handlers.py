"""
Booking Event Handlers

Subscribers run after the transaction that produced the event committed.
Emails are sent from a Celery task; a failure to enqueue it is logged
and never reaches the caller.
"""

import logging

from apps.bookings.domain.events import (
    BookingApproved,
    BookingCancelled,
    BookingCheckedIn,
    BookingCompleted,
    BookingEvent,
    BookingRejected,
    BookingRequested,
)

logger = logging.getLogger(__name__)


def enqueue_status_notification(event: BookingEvent) -> None:
    """Queue the requester's email for an approved, rejected or cancelled booking"""
    from apps.bookings.tasks import notify_booking_status_changed

    try:
        notify_booking_status_changed.delay(str(event.booking_id))
    except Exception:
        logger.error(
            "Could not enqueue notification for booking %s (%s)",
            event.booking_id,
            type(event).__name__,
            exc_info=True,
        )


def log_booking_event(event: BookingEvent) -> None:
    logger.info("Booking event %s: %s", type(event).__name__, event.to_dict())


NOTIFIED_EVENTS = (BookingApproved, BookingRejected, BookingCancelled)
AUDITED_EVENTS = (
    BookingRequested,
    BookingApproved,
    BookingRejected,
    BookingCancelled,
    BookingCheckedIn,
    BookingCompleted,
)


def register_event_handlers(bus) -> None:
    for event_type in AUDITED_EVENTS:
        bus.register_event_handler(event_type, log_booking_event)
    for event_type in NOTIFIED_EVENTS:
        bus.register_event_handler(event_type, enqueue_status_notification)
