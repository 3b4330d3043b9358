"""Payment models."""

from __future__ import annotations

from decimal import Decimal

from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore


class Payment(models.Model):
    """Payment opened for a booking; settled by a gateway notification."""

    class Status(models.TextChoices):
        PENDING = "pending", "Awaiting payment"
        SUCCESS = "success", "Paid"
        FAILED = "failed", "Failed"

    booking = models.OneToOneField(
        "bookings.Booking",
        on_delete=models.CASCADE,
        related_name="payment",
    )
    reference = models.CharField(max_length=100, unique=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    currency = models.CharField(max_length=3, default="NGN")
    raw_event = models.JSONField(null=True, blank=True, help_text="Payload of the notification that settled the payment")
    paid_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"Payment {self.reference} ({self.status})"

    def mark_success(self, raw_event: dict | None) -> None:
        self.status = self.Status.SUCCESS
        self.raw_event = raw_event
        self.paid_at = timezone.now()
        self.save(update_fields=["status", "raw_event", "paid_at", "updated_at"])


class PaymentNotification(models.Model):
    """
    Durable marker of a processed payment notification.

    One row per reference; its presence means the notification was applied
    and redeliveries must not touch the payment or booking again.
    """

    reference = models.CharField(max_length=100, unique=True)
    event_type = models.CharField(max_length=64)
    payment = models.ForeignKey(Payment, on_delete=models.CASCADE, related_name="notifications")
    payload = models.JSONField(null=True, blank=True)
    processed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-processed_at"]

    def __str__(self) -> str:
        return f"{self.event_type} for {self.reference}"
