"""Celery tasks for the booking domain."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

from apps.vendors.domain.slots import format_instant

from .models import Booking

logger = logging.getLogger(__name__)


@shared_task(name="bookings.notify_booking_created")
def notify_booking_created(booking_id: str) -> bool:
    """
    Announce a new pending booking.

    Delivery channels are not wired yet; the notification is logged.

    Returns:
        bool: False when the booking no longer exists
    """
    try:
        booking = Booking.objects.select_related("vendor").get(pk=booking_id)
    except Booking.DoesNotExist:
        logger.warning(f"Booking {booking_id} not found for created notification")
        return False

    logger.info(
        f"[NOTIFICATION] Booking {booking.id} with {booking.vendor.name} at "
        f"{format_instant(booking.start_time_utc)} awaits payment {booking.payment_reference}"
    )
    return True
