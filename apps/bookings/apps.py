from django.apps import AppConfig


class BookingsConfig(AppConfig):
    name = "apps.bookings"
    label = "bookings"
    verbose_name = "Room bookings"

    def ready(self):
        from shared.application.message_bus import message_bus

        from .application.command_handlers import register_command_handlers
        from .application.event_handlers import register_event_handlers

        register_command_handlers(message_bus)
        register_event_handlers(message_bus)
