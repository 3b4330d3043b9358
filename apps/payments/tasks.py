"""Celery tasks for payments."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

from .models import Payment

logger = logging.getLogger(__name__)


@shared_task(name="payments.notify_booking_paid")
def notify_booking_paid(booking_id: str) -> bool:
    """Confirm a settled booking to its buyer (logged until a channel exists)."""

    payment = (
        Payment.objects.select_related("booking", "booking__vendor")
        .filter(booking_id=booking_id)
        .first()
    )
    if payment is None:
        logger.warning(f"No payment found for paid booking {booking_id}")
        return False

    booking = payment.booking
    logger.info(
        f"[NOTIFICATION] Booking {booking.id} with {booking.vendor.name} is paid "
        f"({payment.amount} {payment.currency}, ref {payment.reference})"
    )
    return True
