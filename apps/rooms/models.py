"""Room master data."""

from __future__ import annotations

import uuid

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Room(models.Model):
    """A physical room that can be booked."""

    class Status(models.TextChoices):
        AVAILABLE = "available", _("Available")
        MAINTENANCE = "maintenance", _("Under maintenance")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    code = models.CharField(_("Code"), max_length=20, unique=True, help_text=_("E.g. A.2.1"))
    name = models.CharField(_("Name"), max_length=100)
    floor = models.IntegerField(_("Floor"), default=1)
    building = models.CharField(_("Building"), max_length=50, blank=True)
    capacity = models.PositiveIntegerField(_("Capacity"))
    facilities = models.TextField(_("Facilities"), blank=True, help_text=_("E.g. AC, projector, sound system"))
    status = models.CharField(
        _("Status"),
        max_length=20,
        choices=Status.choices,
        default=Status.AVAILABLE,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Room")
        verbose_name_plural = _("Rooms")
        ordering = ["code"]
        indexes = [
            models.Index(fields=["status"], name="rooms_room_status_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.code} {self.name}"

    @property
    def is_under_maintenance(self) -> bool:
        return self.status == self.Status.MAINTENANCE
