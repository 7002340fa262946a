"""Email notifications for booking status changes.

Sending is best-effort: every function here returns ``True``/``False`` and
logs failures instead of raising them.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.conf import settings  # type: ignore
from django.core.mail import send_mail  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.html import escape, strip_tags  # type: ignore

if TYPE_CHECKING:  # pragma: no cover
    from apps.bookings.models import Booking

logger = logging.getLogger(__name__)


# ============================================================================
# EMAIL NOTIFICATIONS
# ============================================================================

def send_email_notification(recipient_email: str, subject: str, html_message: str) -> bool:
    """
    Send one HTML email with a plain-text alternative.

    Args:
        recipient_email: Recipient address
        subject: Subject line
        html_message: HTML body; the text part is derived from it

    Returns:
        bool: True if the email was handed to the mail backend
    """
    if not recipient_email:
        logger.warning("Email '%s' not sent: recipient has no address", subject)
        return False

    try:
        send_mail(
            subject=subject,
            message=strip_tags(html_message),
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[recipient_email],
            html_message=html_message,
            fail_silently=False,
        )
    except Exception:
        logger.error("Failed to send email to %s: %s", recipient_email, subject, exc_info=True)
        return False

    logger.info("Email sent to %s: %s", recipient_email, subject)
    return True


def _window(booking: "Booking") -> str:
    start = timezone.localtime(booking.start_time)
    end = timezone.localtime(booking.end_time)
    if start.date() == end.date():
        return f"{start:%d %b %Y, %H:%M} - {end:%H:%M}"
    return f"{start:%d %b %Y, %H:%M} - {end:%d %b %Y, %H:%M}"


def _greeting(booking: "Booking") -> str:
    return f"<p>Hello {escape(booking.requester.display_name)},</p>"


def _details(booking: "Booking") -> str:
    room = booking.room
    return (
        "<ul>"
        f"<li>Room: {escape(room.code)} - {escape(room.name)}</li>"
        f"<li>Time: {_window(booking)}</li>"
        f"<li>Purpose: {escape(booking.purpose)}</li>"
        "</ul>"
    )


def send_booking_approved_email(booking: "Booking", qr_code_image_url: str) -> bool:
    """Approval email with the QR token used for check-in."""
    subject = f"Room booking approved: {booking.room.code}"
    image_url = qr_code_image_url.format(token=booking.qr_token)
    html_message = (
        f"{_greeting(booking)}"
        "<p>Your room booking has been approved.</p>"
        f"{_details(booking)}"
        "<p>Show this QR code at the room to check in:</p>"
        f'<p><img src="{escape(image_url)}" alt="Check-in QR code"></p>'
        f"<p>Check-in code: <code>{escape(booking.qr_token)}</code></p>"
    )
    return send_email_notification(booking.requester.email, subject, html_message)


def send_booking_rejected_email(booking: "Booking") -> bool:
    subject = f"Room booking rejected: {booking.room.code}"
    html_message = (
        f"{_greeting(booking)}"
        "<p>Unfortunately your room booking has been rejected.</p>"
        f"{_details(booking)}"
        f"<p>Reason: {escape(booking.rejection_reason)}</p>"
    )
    return send_email_notification(booking.requester.email, subject, html_message)


def send_booking_cancelled_email(booking: "Booking") -> bool:
    subject = f"Room booking cancelled: {booking.room.code}"
    html_message = (
        f"{_greeting(booking)}"
        "<p>Your room booking has been cancelled and the room is free again.</p>"
        f"{_details(booking)}"
    )
    return send_email_notification(booking.requester.email, subject, html_message)
