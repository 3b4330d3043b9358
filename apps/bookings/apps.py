from django.apps import AppConfig


class BookingsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.bookings"

    def ready(self) -> None:
        from shared.application.message_bus import message_bus

        from .domain.events import BookingCreated
        from .handlers import on_booking_created

        message_bus.register_event_handler(BookingCreated, on_booking_created)
