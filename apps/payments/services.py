"""Payment initialization and the payment notification handler."""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

import structlog
from django.conf import settings  # type: ignore
from django.core.exceptions import ValidationError  # type: ignore
from django.db import IntegrityError, transaction  # type: ignore

from apps.bookings.domain.events import BookingPaid
from apps.bookings.models import Booking
from shared.application.uow import DjangoUnitOfWork
from shared.domain.errors import InvalidRequest, NotFound, Unsupported
from shared.domain.value_objects import Money

from .models import Payment, PaymentNotification

logger = structlog.get_logger(__name__)

CHARGE_SUCCESS = "charge.success"
SUPPORTED_EVENTS = frozenset({CHARGE_SUCCESS})


@dataclass(frozen=True)
class PaymentEventResult:
    already_processed: bool
    booking_id: UUID | None = None

    def as_dict(self) -> dict:
        if self.already_processed:
            return {"message": "Webhook already processed"}
        return {
            "message": "Payment processed successfully",
            "booking_id": str(self.booking_id),
            "status": Booking.Status.PAID.value,
        }


def default_price() -> Money:
    return Money(settings.PAYMENT_DEFAULT_AMOUNT, settings.PAYMENT_CURRENCY)


def ensure_payment(booking: Booking) -> Payment:
    """Return the booking's payment, creating the pending row if it is missing."""

    price = default_price()
    payment, created = Payment.objects.get_or_create(
        booking=booking,
        defaults={
            "reference": booking.payment_reference,
            "amount": price.amount,
            "currency": price.currency,
        },
    )
    if created:
        logger.info("payment.opened", booking_id=str(booking.id), reference=payment.reference)
    return payment


def initialize_payment(booking_id) -> dict:
    """
    Payment details for a booking. Repeated calls return the same reference;
    a booking whose payment row was never written gets it now.
    """
    if not booking_id:
        raise InvalidRequest("bookingId is required")

    try:
        booking = Booking.objects.get(pk=booking_id)
    except (Booking.DoesNotExist, ValidationError, ValueError):
        raise NotFound("Booking not found")

    payment = ensure_payment(booking)
    return {
        "ref": payment.reference,
        "booking_id": str(booking.id),
        "amount": str(payment.amount),
        "currency": payment.currency,
    }


def handle_payment_event(event_type: str | None, reference: str | None, raw_payload: dict | None) -> PaymentEventResult:
    """
    Apply a gateway notification at most once per reference.

    The PaymentNotification row is the processed marker. It is written in
    the same transaction that settles the payment and the booking, so a
    concurrent duplicate either sees the marker or loses on its unique
    constraint; in both cases nothing is mutated.
    """
    if event_type not in SUPPORTED_EVENTS:
        logger.info("payment.event_unsupported", event_type=event_type, reference=reference)
        raise Unsupported(f"Unsupported event type: {event_type}")
    if not reference:
        raise InvalidRequest("Payment reference is required")

    if PaymentNotification.objects.filter(reference=reference).exists():
        logger.info("payment.redelivery_ignored", reference=reference)
        return PaymentEventResult(already_processed=True)

    try:
        payment = Payment.objects.select_related("booking").get(reference=reference)
    except Payment.DoesNotExist:
        logger.warning("payment.reference_unknown", reference=reference)
        raise NotFound("Payment not found")

    with DjangoUnitOfWork() as uow:
        try:
            with transaction.atomic():
                PaymentNotification.objects.create(
                    reference=reference,
                    event_type=event_type,
                    payment=payment,
                    payload=raw_payload,
                )
        except IntegrityError:
            logger.info("payment.redelivery_ignored", reference=reference, concurrent=True)
            return PaymentEventResult(already_processed=True)

        payment.mark_success(raw_payload)
        payment.booking.mark_paid()

        uow.add_event(BookingPaid(
            aggregate_id=payment.booking.id,
            booking_id=payment.booking.id,
            payment_reference=reference,
        ))

    logger.info("payment.processed", reference=reference, booking_id=str(payment.booking.id))
    return PaymentEventResult(already_processed=False, booking_id=payment.booking.id)
