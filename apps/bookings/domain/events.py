"""
Booking Domain Events

Events that represent things that have happened in the booking domain.
These are published after successful transaction commits.
"""

from dataclasses import dataclass
from uuid import UUID

from shared.domain.base import DomainEvent
from shared.domain.value_objects import InstantRange


@dataclass(kw_only=True)
class BookingCreated(DomainEvent):
    """
    Event: A booking claimed its slot and is awaiting payment

    Triggers:
    - Notify vendor and buyer (Celery task)
    """
    booking_id: UUID
    vendor_id: int
    buyer_reference: str
    slot: InstantRange
    payment_reference: str


@dataclass(kw_only=True)
class BookingPaid(DomainEvent):
    """
    Event: A payment notification confirmed the booking (pending -> paid)

    Triggers:
    - Send payment confirmation (Celery task)
    """
    booking_id: UUID
    payment_reference: str
