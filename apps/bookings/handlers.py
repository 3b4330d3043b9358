"""Message bus handlers for booking events."""

from __future__ import annotations

import logging

from .domain.events import BookingCreated

logger = logging.getLogger(__name__)


def on_booking_created(event: BookingCreated) -> None:
    from .tasks import notify_booking_created

    logger.info(f"Queueing notification for booking {event.booking_id}")
    notify_booking_created.delay(str(event.booking_id))
