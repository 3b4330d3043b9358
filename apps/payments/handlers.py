"""Message bus handlers for payment-driven booking events."""

from __future__ import annotations

import logging

from apps.bookings.domain.events import BookingPaid

logger = logging.getLogger(__name__)


def on_booking_paid(event: BookingPaid) -> None:
    from .tasks import notify_booking_paid

    logger.info(f"Queueing payment confirmation for booking {event.booking_id}")
    notify_booking_paid.delay(str(event.booking_id))
