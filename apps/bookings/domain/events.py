"""
Booking Domain Events

Events that represent things that have happened to a room booking.
These are published after successful transaction commits.
"""

from dataclasses import dataclass
from uuid import UUID

from shared.domain.base import DomainEvent


@dataclass
class BookingEvent(DomainEvent):
    booking_id: UUID
    room_id: UUID
    requester_id: int

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update(
            booking_id=str(self.booking_id),
            room_id=str(self.room_id),
            requester_id=self.requester_id,
        )
        return data


@dataclass
class BookingRequested(BookingEvent):
    """
    Event: A new booking request was stored as pending

    Triggers:
    - Audit log entry
    """


@dataclass
class BookingApproved(BookingEvent):
    """
    Event: An administrator approved a booking (PENDING -> APPROVED)

    Triggers:
    - Approval email with the check-in QR code
    """


@dataclass
class BookingRejected(BookingEvent):
    """
    Event: An administrator rejected a booking (PENDING -> REJECTED)

    Triggers:
    - Rejection email with the reason
    """
    reason: str = ''


@dataclass
class BookingCancelled(BookingEvent):
    """
    Event: A booking was cancelled by its requester or an administrator

    Triggers:
    - Cancellation email
    """
    cancelled_by: int | None = None


@dataclass
class BookingCheckedIn(BookingEvent):
    """Event: The QR code of an approved booking was scanned (APPROVED -> CHECKED_IN)"""
    checked_in_by: int | None = None


@dataclass
class BookingCompleted(BookingEvent):
    """Event: A checked-in booking ended (CHECKED_IN -> COMPLETED)"""
