"""
Message Bus

Routes lifecycle commands to their single handler and fans domain
events out to any number of subscribers.
"""

from typing import Any, Callable, Dict, Iterable, List, Type
import logging

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)


class MessageBus:
    """
    Message bus for commands and events

    Commands: One handler per command (1:1). Errors propagate to the caller.
    Events: Multiple subscribers per event (1:N). Errors are logged and swallowed,
    events are side effects of an already committed state change.
    """

    def __init__(self):
        self._event_handlers: Dict[Type[DomainEvent], List[Callable[[DomainEvent], None]]] = {}
        self._command_handlers: Dict[Type, Callable[[Any], Any]] = {}

    def register_event_handler(
        self,
        event_type: Type[DomainEvent],
        handler: Callable[[DomainEvent], None]
    ):
        """Subscribe ``handler`` to ``event_type``. Duplicate subscriptions are ignored."""
        handlers = self._event_handlers.setdefault(event_type, [])
        if handler in handlers:
            return
        handlers.append(handler)
        logger.debug("Registered event handler %s for %s", _name(handler), event_type.__name__)

    def register_command_handler(
        self,
        command_type: Type,
        handler: Callable[[Any], Any]
    ):
        """
        Register a command handler

        Only one handler can be registered per command type.
        """
        if command_type in self._command_handlers:
            raise ValueError(
                f"Handler for {command_type.__name__} is already registered. "
                "Commands can have only one handler."
            )
        self._command_handlers[command_type] = handler
        logger.debug("Registered command handler for %s", command_type.__name__)

    def has_command_handler(self, command_type: Type) -> bool:
        return command_type in self._command_handlers

    def handle_command(self, command: Any) -> Any:
        """
        Handle a command

        Returns the result from the command handler.
        Raises LookupError if no handler is registered.
        """
        command_type = type(command)
        handler = self._command_handlers.get(command_type)

        if handler is None:
            raise LookupError(
                f"No handler registered for command {command_type.__name__}"
            )

        logger.debug("Handling command: %s", command_type.__name__)
        return handler(command)

    def publish_events(self, events: Iterable[DomainEvent]):
        """
        Publish domain events

        Every subscriber of each event type is called; a failing subscriber
        does not stop the others.
        """
        for event in events:
            event_type = type(event)
            handlers = self._event_handlers.get(event_type, [])

            if not handlers:
                logger.debug("No handlers registered for event %s", event_type.__name__)
                continue

            logger.info("Publishing event: %s (ID: %s)", event_type.__name__, event.event_id)

            for handler in handlers:
                try:
                    handler(event)
                except Exception:
                    logger.error(
                        "Error in event handler %s for event %s",
                        _name(handler),
                        event_type.__name__,
                        exc_info=True,
                    )


def _name(handler: Callable) -> str:
    return getattr(handler, "__name__", handler.__class__.__name__)


# Global message bus instance
message_bus = MessageBus()
