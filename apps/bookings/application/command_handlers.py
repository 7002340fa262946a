"""
Booking Command Handlers

These are the use cases of the room booking lifecycle.
They orchestrate store operations within transactions.

Commands:
- CreateBookingCommand: Request a room for a time window (-> PENDING)
- ProcessBookingCommand: Approve, reject or cancel a pending request (admin)
- CancelBookingCommand: Cancel a pending or approved booking
- CheckInBookingCommand: Consume the QR token of an approved booking
- CompleteBookingCommand: Close a checked-in booking after it ended
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID
import logging

from django.core.exceptions import PermissionDenied
from django.db import DatabaseError, IntegrityError

from shared.application.uow import DjangoUnitOfWork
from apps.users.identity import CallerIdentity
from apps.bookings.conf import get_booking_policy
from apps.bookings.domain.events import (
    BookingApproved,
    BookingCancelled,
    BookingCheckedIn,
    BookingCompleted,
    BookingRejected,
    BookingRequested,
)
from apps.bookings.exceptions import (
    AlreadyCheckedIn,
    BookingError,
    InvalidAudience,
    InvalidToken,
    InvalidTransition,
    TransientStoreError,
)
from apps.bookings.models import ALLOWED_TRANSITIONS, Booking, CheckinRecord
from apps.bookings.services import ensure_room_is_available, to_time_range
from apps.bookings.store import BookingIntervalStore

logger = logging.getLogger(__name__)

Status = Booking.Status

# Admin decisions are exactly the ways out of PENDING
PROCESS_DECISIONS = ALLOWED_TRANSITIONS[Status.PENDING.value]


# ===== Commands =====

@dataclass
class CreateBookingCommand:
    """
    Command to request a room

    This is the primary entry point for creating bookings.
    """
    caller: CallerIdentity
    room_id: UUID
    start_time: datetime
    end_time: datetime
    purpose: str
    audience_count: int


@dataclass
class ProcessBookingCommand:
    """Command to decide on a pending booking (admin only)"""
    caller: CallerIdentity
    booking_id: UUID
    decision: str
    rejection_reason: str = ''


@dataclass
class CancelBookingCommand:
    """Command to cancel a booking (its requester or an admin)"""
    caller: CallerIdentity
    booking_id: UUID


@dataclass
class CheckInBookingCommand:
    """Command to check in with a scanned QR token"""
    caller: CallerIdentity
    token: str


@dataclass
class CompleteBookingCommand:
    """Command to complete a checked-in booking"""
    booking_id: UUID


@dataclass
class CheckInResult:
    booking: Booking
    checkin: CheckinRecord


# ===== Command Handlers =====

class BookingCommandHandler:
    """
    Base handler

    Store failures other than integrity violations are surfaced as
    TransientStoreError so callers can retry them.
    """

    def __init__(self, store: BookingIntervalStore | None = None):
        self.store = store or BookingIntervalStore()

    def __call__(self, command):
        try:
            return self.handle(command)
        except (BookingError, IntegrityError):
            raise
        except DatabaseError as exc:
            logger.error("Store failure while handling %s", type(command).__name__, exc_info=True)
            raise TransientStoreError() from exc

    def handle(self, command):
        raise NotImplementedError

    def _event_ids(self, booking: Booking):
        return dict(
            aggregate_id=booking.id,
            booking_id=booking.id,
            room_id=booking.room_id,
            requester_id=booking.requester_id,
        )

    def _swap(self, booking: Booking, new_status, **changes) -> None:
        """Move ``booking`` to ``new_status`` if the transition table allows it.

        The compare-and-swap on the stored status loses against a concurrent
        change; both cases raise InvalidTransition.
        """
        if not booking.can_transition_to(new_status):
            self._fail_transition(booking.id, new_status)
        if not self.store.update_status(booking.id, expected=booking.status, new=new_status, **changes):
            self._fail_transition(booking.id, new_status)

    def _fail_transition(self, booking_id, new_status) -> None:
        current = self.store.get(booking_id)
        logger.warning(
            "Rejected transition of booking %s from %s to %s",
            booking_id, current.status, new_status,
        )
        raise InvalidTransition(
            f"Booking cannot change from {current.status} to {new_status}."
        )


class CreateBookingHandler(BookingCommandHandler):
    """
    Handler for CreateBooking command

    Prevents double booking of a room:
    1. Start database transaction (atomic)
    2. Lock the room row (SELECT FOR UPDATE)
    3. Check the window against pending/approved/checked-in bookings
    4. Insert the PENDING booking
    5. Commit; BookingRequested is published after commit
    """

    def handle(self, command: CreateBookingCommand) -> Booking:
        window = to_time_range(command.start_time, command.end_time)
        if not isinstance(command.audience_count, int) or command.audience_count < 1:
            raise InvalidAudience()

        logger.info(
            "Creating booking for room %s, requester %s, window %s",
            command.room_id, command.caller.id, window,
        )

        with DjangoUnitOfWork(using=self.store.using) as uow:
            room = self.store.lock_room(command.room_id)
            ensure_room_is_available(room.id, window.start, window.end, store=self.store)

            booking = self.store.insert(
                room=room,
                requester_id=command.caller.id,
                purpose=command.purpose,
                audience_count=command.audience_count,
                window=window,
            )
            uow.add_event(BookingRequested(**self._event_ids(booking)))

        logger.info("Booking %s created with status %s", booking.id, booking.status)
        return booking


class ProcessBookingHandler(BookingCommandHandler):
    """Handler for the admin decision on a pending booking"""

    def handle(self, command: ProcessBookingCommand) -> Booking:
        if not command.caller.is_admin:
            raise PermissionDenied("Only administrators can process bookings.")

        decision = str(command.decision)
        if decision not in PROCESS_DECISIONS:
            raise InvalidTransition(f"Unknown decision {decision!r}.")

        changes = {}
        if decision == Status.APPROVED:
            changes["qr_token"] = Booking.generate_qr_token()
        elif decision == Status.REJECTED:
            changes["rejection_reason"] = (
                command.rejection_reason or get_booking_policy().default_rejection_reason
            )

        with DjangoUnitOfWork(using=self.store.using) as uow:
            booking = self.store.get(command.booking_id)
            if booking.status != Status.PENDING:
                self._fail_transition(booking.id, decision)
            self._swap(booking, decision, **changes)

            booking = self.store.get(booking.id)
            ids = self._event_ids(booking)
            if decision == Status.APPROVED:
                uow.add_event(BookingApproved(**ids))
            elif decision == Status.REJECTED:
                uow.add_event(BookingRejected(reason=booking.rejection_reason, **ids))
            else:
                uow.add_event(BookingCancelled(cancelled_by=command.caller.id, **ids))

        logger.info("Booking %s processed by %s: %s", booking.id, command.caller.id, decision)
        return booking


class CancelBookingHandler(BookingCommandHandler):
    """Handler for cancelling a booking"""

    def handle(self, command: CancelBookingCommand) -> Booking:
        with DjangoUnitOfWork(using=self.store.using) as uow:
            booking = self.store.get(command.booking_id)
            if not command.caller.is_admin and booking.requester_id != command.caller.id:
                raise PermissionDenied("You can only cancel your own bookings.")

            self._swap(booking, Status.CANCELLED)

            booking = self.store.get(booking.id)
            uow.add_event(BookingCancelled(cancelled_by=command.caller.id, **self._event_ids(booking)))

        logger.info("Booking %s cancelled by %s", booking.id, command.caller.id)
        return booking


class CheckInBookingHandler(BookingCommandHandler):
    """
    Handler for QR check-in

    The token stays on the booking after use; a second scan is refused by
    the status guard and by the unique check-in record.
    """

    def handle(self, command: CheckInBookingCommand) -> CheckInResult:
        booking = self.store.get_by_token(command.token)
        if booking is None:
            logger.info("Check-in with unknown token")
            raise InvalidToken()

        self._guard(booking)

        try:
            with DjangoUnitOfWork(using=self.store.using) as uow:
                swapped = self.store.update_status(
                    booking.id, expected=Status.APPROVED, new=Status.CHECKED_IN
                )
                if not swapped:
                    self._guard(self.store.get(booking.id))
                    self._fail_transition(booking.id, Status.CHECKED_IN)

                checkin = self.store.insert_checkin(booking, checked_in_by_id=command.caller.id)
                uow.add_event(BookingCheckedIn(checked_in_by=command.caller.id, **self._event_ids(booking)))
        except IntegrityError:
            raise AlreadyCheckedIn() from None

        booking = self.store.get(booking.id)
        logger.info("Booking %s checked in by %s", booking.id, command.caller.id)
        return CheckInResult(booking=booking, checkin=checkin)

    def _guard(self, booking: Booking) -> None:
        if booking.status == Status.CHECKED_IN:
            raise AlreadyCheckedIn()
        if not booking.can_transition_to(Status.CHECKED_IN):
            raise InvalidTransition(
                f"Booking with status {booking.status} cannot be checked in."
            )


class CompleteBookingHandler(BookingCommandHandler):
    """Handler for completing a checked-in booking"""

    def handle(self, command: CompleteBookingCommand) -> Booking:
        with DjangoUnitOfWork(using=self.store.using) as uow:
            booking = self.store.get(command.booking_id)
            self._swap(booking, Status.COMPLETED)

            booking = self.store.get(booking.id)
            uow.add_event(BookingCompleted(**self._event_ids(booking)))

        logger.info("Booking %s completed", booking.id)
        return booking


HANDLERS = {
    CreateBookingCommand: CreateBookingHandler,
    ProcessBookingCommand: ProcessBookingHandler,
    CancelBookingCommand: CancelBookingHandler,
    CheckInBookingCommand: CheckInBookingHandler,
    CompleteBookingCommand: CompleteBookingHandler,
}


def register_command_handlers(bus) -> None:
    """Register the lifecycle handlers on ``bus``; safe to call more than once."""
    for command_type, handler_class in HANDLERS.items():
        if not bus.has_command_handler(command_type):
            bus.register_command_handler(command_type, handler_class())
