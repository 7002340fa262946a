"""Typed caller identity passed into every booking lifecycle operation."""

from __future__ import annotations

from dataclasses import dataclass

from .models import CustomUser

ADMIN_ROLE = CustomUser.RoleChoices.ADMIN.value


@dataclass(frozen=True)
class CallerIdentity:
    """The authenticated caller as seen by the booking engine."""

    id: int
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE

    @classmethod
    def from_user(cls, user) -> "CallerIdentity":
        """Build the identity from an authenticated Django user.

        Superusers are treated as administrators regardless of their
        stored role.
        """
        if user is None or not getattr(user, "is_authenticated", False):
            raise ValueError("An authenticated user is required.")
        role = ADMIN_ROLE if user.is_superuser else user.role
        return cls(id=user.pk, role=role)
