"""Booking status transition table."""

from __future__ import annotations

import pytest

from apps.bookings.application.command_handlers import PROCESS_DECISIONS
from apps.bookings.models import Booking

Status = Booking.Status


@pytest.mark.parametrize(
    "current,allowed",
    [
        (Status.PENDING, {Status.APPROVED, Status.REJECTED, Status.CANCELLED}),
        (Status.APPROVED, {Status.CHECKED_IN, Status.CANCELLED}),
        (Status.CHECKED_IN, {Status.COMPLETED}),
        (Status.REJECTED, set()),
        (Status.CANCELLED, set()),
        (Status.COMPLETED, set()),
    ],
)
def test_transition_table(current, allowed):
    booking = Booking(status=current)

    assert {target for target in Status if booking.can_transition_to(target)} == allowed
    assert booking.is_terminal is (not allowed)


def test_status_loaded_as_plain_string_uses_same_table():
    assert Booking(status="approved").can_transition_to(Status.CHECKED_IN)
    assert not Booking(status="approved").can_transition_to("approved")


def test_admin_decisions_are_the_exits_from_pending():
    assert set(PROCESS_DECISIONS) == {Status.APPROVED, Status.REJECTED, Status.CANCELLED}
