"""
Unit of Work Pattern

Wraps a lifecycle command in a database transaction and makes sure
domain events leave the process only after that transaction commits.
"""

from typing import List
import logging

from django.db import transaction

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)


class DjangoUnitOfWork:
    """
    Django implementation of Unit of Work

    Usage:
        with DjangoUnitOfWork() as uow:
            booking = store.get(booking_id, lock=True)
            ...
            uow.add_event(BookingApproved(...))
        # Events are published after commit

    Nested units of work join the outer transaction; their events are
    published when the outermost transaction commits.
    """

    def __init__(self, using: str | None = None):
        self.using = using
        self._events: List[DomainEvent] = []
        self._atomic = None

    def __enter__(self):
        """Start database transaction"""
        self._atomic = transaction.atomic(using=self.using)
        self._atomic.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Complete or rollback transaction"""
        try:
            if exc_type is None:
                self.commit()
            else:
                self.rollback()
        finally:
            self._atomic.__exit__(exc_type, exc_val, exc_tb)

    def add_event(self, event: DomainEvent):
        self._events.append(event)

    def commit(self):
        """
        Schedule event publishing

        Events are handed to Django's ``transaction.on_commit`` so a
        rolled back transaction never produces side effects.
        """
        events = self._events.copy()
        self._events.clear()

        if events:
            logger.debug("Scheduling %d events for publication after commit", len(events))
            transaction.on_commit(lambda: self._publish_events(events), using=self.using)

    def rollback(self):
        """Discard events of a failed unit of work"""
        if self._events:
            logger.warning("Rolling back transaction, discarding %d events", len(self._events))
        self._events.clear()

    def _publish_events(self, events: List[DomainEvent]):
        from shared.application.message_bus import message_bus

        logger.info("Publishing %d domain events after commit", len(events))

        try:
            message_bus.publish_events(events)
        except Exception:
            # State is already committed; publication is best-effort
            logger.error("Error publishing events", exc_info=True)
