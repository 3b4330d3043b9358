from django.apps import AppConfig


class PaymentsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.payments"

    def ready(self) -> None:
        from shared.application.message_bus import message_bus

        from apps.bookings.domain.events import BookingPaid

        from .handlers import on_booking_paid

        message_bus.register_event_handler(BookingPaid, on_booking_paid)
