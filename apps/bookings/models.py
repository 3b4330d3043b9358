"""Booking domain models."""

from __future__ import annotations

import uuid

from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore


class Booking(models.Model):
    """A buyer's reservation of one vendor slot."""

    class Status(models.TextChoices):
        PENDING = "pending", "Pending payment"
        PAID = "paid", "Paid"
        CANCELLED = "cancelled", "Cancelled"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    vendor = models.ForeignKey(
        "vendors.Vendor",
        on_delete=models.PROTECT,
        related_name="bookings",
    )
    buyer_reference = models.CharField(max_length=64)
    start_time_utc = models.DateTimeField()
    end_time_utc = models.DateTimeField()
    status = models.CharField(
        max_length=16,
        choices=Status.choices,
        default=Status.PENDING,
    )
    payment_reference = models.CharField(
        max_length=100,
        unique=True,
        help_text="Reference of the payment issued with the booking; used to repair a missing payment.",
    )
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_time_utc__gt=models.F("start_time_utc")),
                name="booking_valid_instants",
            ),
        ]
        indexes = [
            models.Index(fields=["vendor", "start_time_utc"], name="booking_vendor_start_idx"),
            models.Index(fields=["status"], name="booking_status_idx"),
        ]

    def __str__(self) -> str:
        return f"Booking {self.id} for vendor {self.vendor_id}"

    def mark_paid(self) -> None:
        # Unconditional: paid is terminal and re-applying it changes nothing.
        self.status = self.Status.PAID
        self.save(update_fields=["status", "updated_at"])


class SlotClaim(models.Model):
    """Exclusive hold of a vendor slot start instant by one booking."""

    booking = models.OneToOneField(
        Booking,
        on_delete=models.CASCADE,
        related_name="slot_claim",
    )
    vendor = models.ForeignKey(
        "vendors.Vendor",
        on_delete=models.PROTECT,
        related_name="slot_claims",
    )
    slot_start_utc = models.DateTimeField()
    claimed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["vendor", "slot_start_utc"],
                name="unique_vendor_slot_claim",
            ),
        ]

    def __str__(self) -> str:
        return f"Claim {self.vendor_id}@{self.slot_start_utc.isoformat()} by {self.booking_id}"
