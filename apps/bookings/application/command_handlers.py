"""
Booking Command Handlers

These are the use cases for the booking domain.
They orchestrate domain operations within transactions.

Commands:
- CreateBookingCommand: Claim a vendor slot and open a pending booking

Creation protocol:
1. Idempotency gate: a key already answered replays the stored response
2. Validate payload, resolve vendor, apply the same-day buffer policy
3. Start database transaction (atomic)
4. Insert Booking, then insert SlotClaim in a savepoint; the unique
   (vendor, slot_start_utc) constraint decides who wins the slot
5. Record the success response under the idempotency key in the same
   transaction, so the claim and its replayable answer commit together
6. Commit, publish BookingCreated, open the Payment (best effort)

Recordable failures (400/404/409/422) are stored under the key as well;
internal errors are not, so a retry may try again.
"""

from dataclasses import dataclass, field
from datetime import timedelta
from uuid import uuid4
import logging

from django.conf import settings
from django.db import DatabaseError, IntegrityError, transaction
from django.utils import timezone

from shared.application.uow import DjangoUnitOfWork
from shared.domain.errors import Conflict, Internal, InvalidRequest, PolicyViolation, ServiceError
from shared.domain.value_objects import InstantRange
from apps.bookings.domain.events import BookingCreated
from apps.bookings.models import Booking, SlotClaim
from apps.bookings.serializers import BookingCreateSerializer
from apps.idempotency.ledger import IdempotencyLedger, KeyAlreadyRecorded, StoredResponse, fingerprint
from apps.vendors.domain.slots import format_instant, local_date_of
from apps.vendors.models import Vendor
from apps.vendors.services import get_vendor

logger = logging.getLogger(__name__)

CREATE_BOOKING_SCOPE = "bookings.create"
REQUEST_FIELDS = ("vendorId", "startISO", "endISO")
MAX_KEY_LENGTH = 255


# ===== Commands =====

@dataclass
class CreateBookingCommand:
    """
    Command to create a new booking

    `payload` is the raw request body; it is validated by the handler so
    that validation failures are recorded under the idempotency key.
    """
    idempotency_key: str | None
    buyer_reference: str
    payload: dict = field(default_factory=dict)


# ===== Command Handlers =====

class CreateBookingHandler:
    """
    Handler for CreateBooking command

    Double booking is prevented by the database alone: no lock is taken
    and no availability read happens before the insert. Two requests for
    the same slot both attempt the SlotClaim insert and exactly one commits.
    """

    def __init__(self, ledger=None, gateway=None, clock=None):
        self.ledger = ledger or IdempotencyLedger(CREATE_BOOKING_SCOPE)
        self._gateway = gateway
        self.clock = clock or timezone.now

    @property
    def gateway(self):
        if self._gateway is None:
            from apps.payments.gateway import get_payment_gateway

            self._gateway = get_payment_gateway()
        return self._gateway

    def handle(self, command: CreateBookingCommand) -> StoredResponse:
        """
        Handle booking creation

        Returns: the StoredResponse to send, replayed or freshly produced

        Raises:
            InvalidRequest: missing or oversized Idempotency-Key (not recorded)
            IdempotencyKeyReused: key spent on another payload (not recorded)
            Internal: unexpected failure (not recorded)
        """
        key = (command.idempotency_key or "").strip()
        if not key:
            raise InvalidRequest("Idempotency-Key header is required")
        if len(key) > MAX_KEY_LENGTH:
            raise InvalidRequest(f"Idempotency-Key must be at most {MAX_KEY_LENGTH} characters")

        request_fingerprint = self._fingerprint(command.payload)

        replay = self.ledger.lookup(key, request_fingerprint)
        if replay is not None:
            return replay

        try:
            return self._create(key, request_fingerprint, command)
        except KeyAlreadyRecorded:
            # A concurrent request with the same key committed first; our
            # transaction (including any slot claim) was rolled back.
            winner = self.ledger.lookup(key, request_fingerprint)
            if winner is None:
                raise Internal("Failed to create booking")
            logger.info(f"Idempotency key {key} answered concurrently, replaying")
            return winner
        except ServiceError as error:
            if not error.recordable:
                raise
            logger.info(
                f"Booking rejected for key {key}: {error.code} ({error.message})"
            )
            return self.ledger.record(key, request_fingerprint, error.status_code, error.as_body())
        except DatabaseError as exc:
            logger.error(f"Database error while creating booking for key {key}: {exc}", exc_info=True)
            raise Internal("Failed to create booking") from exc

    def _create(self, key: str, request_fingerprint: str, command: CreateBookingCommand) -> StoredResponse:
        vendor_id, slot = self._validate(command.payload)
        vendor = get_vendor(vendor_id)
        self._check_same_day_buffer(vendor, slot)

        booking_id = uuid4()
        payment_reference = self.gateway.new_reference(booking_id)
        body = {
            "booking_id": str(booking_id),
            "vendor": vendor.name,
            "start_time_utc": format_instant(slot.start),
            "end_time_utc": format_instant(slot.end),
            "status": Booking.Status.PENDING.value,
            "payment_reference": payment_reference,
        }

        logger.info(
            f"Claiming slot {body['start_time_utc']} of vendor {vendor.pk} "
            f"for buyer {command.buyer_reference}"
        )

        with DjangoUnitOfWork() as uow:
            booking = Booking.objects.create(
                id=booking_id,
                vendor=vendor,
                buyer_reference=command.buyer_reference,
                start_time_utc=slot.start,
                end_time_utc=slot.end,
                status=Booking.Status.PENDING,
                payment_reference=payment_reference,
            )

            try:
                with transaction.atomic():
                    SlotClaim.objects.create(
                        booking=booking,
                        vendor=vendor,
                        slot_start_utc=slot.start,
                    )
            except IntegrityError:
                # Leaving the unit of work with an exception rolls the booking back too.
                logger.info(f"Slot {body['start_time_utc']} of vendor {vendor.pk} already claimed")
                raise Conflict()

            response = self.ledger.insert(key, request_fingerprint, 201, body)

            uow.add_event(BookingCreated(
                aggregate_id=booking.id,
                booking_id=booking.id,
                vendor_id=vendor.pk,
                buyer_reference=booking.buyer_reference,
                slot=slot,
                payment_reference=payment_reference,
            ))

        logger.info(f"Booking created successfully: {booking.id} (payment {payment_reference})")

        self._open_payment(booking)
        return response

    def _fingerprint(self, payload: dict) -> str:
        """
        Fingerprint of the booking request by meaning, not by encoding:
        "1" and 1, or "...T09:00:00Z" and "...T09:00:00.000Z", match.
        Payloads that do not validate are fingerprinted as sent.
        """
        serializer = BookingCreateSerializer(data=payload)
        if serializer.is_valid():
            data = serializer.validated_data
            basis = {
                "vendorId": data["vendorId"],
                "startISO": format_instant(data["startISO"]),
                "endISO": format_instant(data["endISO"]),
            }
        else:
            basis = {name: payload.get(name) for name in REQUEST_FIELDS}
        return fingerprint(basis)

    def _validate(self, payload: dict) -> tuple[int, InstantRange]:
        missing = [name for name in REQUEST_FIELDS if payload.get(name) in (None, "")]
        if missing:
            raise InvalidRequest("vendorId, startISO and endISO are required")

        serializer = BookingCreateSerializer(data=payload)
        if not serializer.is_valid():
            raise InvalidRequest(_first_error(serializer.errors))

        data = serializer.validated_data
        return data["vendorId"], InstantRange(data["startISO"], data["endISO"])

    def _check_same_day_buffer(self, vendor: Vendor, slot: InstantRange) -> None:
        """
        Bookings starting on the vendor's current local date must start at
        least BOOKING_SAME_DAY_BUFFER_HOURS from now. Other dates, past ones
        included, are not restricted.
        """
        now = self.clock()
        offset = vendor.utc_offset_minutes
        if local_date_of(slot.start, offset) != local_date_of(now, offset):
            return

        buffer_hours = settings.BOOKING_SAME_DAY_BUFFER_HOURS
        if slot.start < now + timedelta(hours=buffer_hours):
            raise PolicyViolation(
                f"Bookings for today must be made at least {buffer_hours} hours in advance"
            )

    def _open_payment(self, booking: Booking) -> None:
        """
        Create the pending Payment for a committed booking.

        Failure leaves a booking without a payment row; payment
        initialization repairs it from booking.payment_reference.
        """
        from apps.payments.services import ensure_payment

        try:
            ensure_payment(booking)
        except DatabaseError as exc:
            logger.error(
                f"Could not open payment {booking.payment_reference} for booking {booking.id}: {exc}",
                exc_info=True,
            )


def _first_error(errors) -> str:
    """Flatten DRF serializer errors into one readable message."""
    for name, messages in errors.items():
        message = messages[0] if isinstance(messages, list) else messages
        if name == "non_field_errors":
            return str(message)
        return f"{name}: {message}"
    return InvalidRequest.default_message
