from __future__ import annotations

from datetime import datetime, time

from django.utils import timezone


def local_dt(day, hour: int, minute: int = 0) -> datetime:
    """Aware datetime in the project time zone."""
    return datetime.combine(day, time(hour, minute), tzinfo=timezone.get_default_timezone())
