"""
Booking Queries

Read side of the booking lifecycle (FindAll). Pure reads, no state change.
"""

from django.core.exceptions import PermissionDenied
from django.db.models import QuerySet

from apps.users.identity import CallerIdentity
from apps.bookings.models import Booking

SCOPE_OWN = "own"
SCOPE_ALL = "all"


def list_bookings(caller: CallerIdentity, scope: str = SCOPE_OWN) -> QuerySet:
    """
    Bookings visible to ``caller``

    ``own`` returns the caller's bookings; ``all`` (admins only) returns
    every booking. Room, requester and check-in record are joined in.
    """
    queryset = Booking.objects.select_related("room", "requester", "checkin", "checkin__checked_in_by")

    if scope == SCOPE_ALL:
        if not caller.is_admin:
            raise PermissionDenied("Only administrators can list all bookings.")
        return queryset.order_by("-created_at")

    if scope != SCOPE_OWN:
        raise ValueError(f"Unknown booking scope {scope!r}")

    return queryset.filter(requester_id=caller.id).order_by("-created_at")
