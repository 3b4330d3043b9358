"""Integration tests for payment initialization and notifications."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from unittest import mock

from django.test import override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.application.command_handlers import CreateBookingCommand, CreateBookingHandler
from apps.bookings.models import Booking
from apps.payments.gateway import StubPaymentGateway
from apps.payments.models import Payment, PaymentNotification
from apps.payments.tasks import notify_booking_paid
from apps.vendors.models import Vendor


class PaymentTestMixin:
    def _book(self, key: str = "key-1") -> Booking:
        result = CreateBookingHandler().handle(
            CreateBookingCommand(
                idempotency_key=key,
                buyer_reference="1",
                payload={
                    "vendorId": self.vendor.pk,
                    "startISO": "2030-03-15T09:00:00Z",
                    "endISO": "2030-03-15T09:30:00Z",
                },
            )
        )
        return Booking.objects.get(pk=result.body["booking_id"])

    def _event(self, reference: str, event: str = "charge.success", **data) -> dict:
        return {"event": event, "data": {"reference": reference, **data}}


class PaymentInitializeTests(PaymentTestMixin, APITestCase):
    def setUp(self) -> None:
        self.vendor = Vendor.objects.create(name="Tech Solutions Pro", utc_offset_minutes=60)
        self.booking = self._book()
        self.url = reverse("payment-initialize")

    def test_initialize_returns_booking_payment(self) -> None:
        response = self.client.post(self.url, {"bookingId": str(self.booking.pk)}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            response.data,
            {
                "ref": self.booking.payment_reference,
                "booking_id": str(self.booking.pk),
                "amount": "45.00",
                "currency": "NGN",
            },
        )

    def test_initialize_is_idempotent(self) -> None:
        first = self.client.post(self.url, {"bookingId": str(self.booking.pk)}, format="json")
        second = self.client.post(self.url, {"bookingId": str(self.booking.pk)}, format="json")

        self.assertEqual(first.data["ref"], second.data["ref"])
        self.assertEqual(Payment.objects.count(), 1)

    def test_initialize_repairs_missing_payment(self) -> None:
        Payment.objects.all().delete()

        response = self.client.post(self.url, {"bookingId": str(self.booking.pk)}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        payment = Payment.objects.get(booking=self.booking)
        self.assertEqual(payment.reference, self.booking.payment_reference)
        self.assertEqual(payment.status, Payment.Status.PENDING)

    def test_initialize_unknown_booking_is_not_found(self) -> None:
        for booking_id in ("00000000-0000-0000-0000-000000000000", "not-a-uuid"):
            response = self.client.post(self.url, {"bookingId": booking_id}, format="json")
            self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
            self.assertEqual(response.data, {"error": "not_found", "message": "Booking not found"})

    def test_initialize_without_booking_id_is_invalid(self) -> None:
        response = self.client.post(self.url, {}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "invalid_request")


class PaymentWebhookTests(PaymentTestMixin, APITestCase):
    def setUp(self) -> None:
        self.vendor = Vendor.objects.create(name="Tech Solutions Pro", utc_offset_minutes=60)
        self.booking = self._book()
        self.reference = self.booking.payment_reference
        self.url = reverse("payment-webhook")

    def test_success_event_marks_payment_and_booking(self) -> None:
        response = self.client.post(self.url, self._event(self.reference, amount=4500000), format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            response.data,
            {"message": "Payment processed successfully", "booking_id": str(self.booking.pk), "status": "paid"},
        )
        self.booking.refresh_from_db()
        self.assertEqual(self.booking.status, Booking.Status.PAID)
        payment = Payment.objects.get(reference=self.reference)
        self.assertEqual(payment.status, Payment.Status.SUCCESS)
        self.assertIsNotNone(payment.paid_at)
        self.assertEqual(payment.raw_event["data"]["amount"], 4500000)

    def test_redelivery_is_acknowledged_without_mutation(self) -> None:
        self.client.post(self.url, self._event(self.reference, attempt=1), format="json")
        paid_at = Payment.objects.get(reference=self.reference).paid_at

        response = self.client.post(self.url, self._event(self.reference, attempt=2), format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {"message": "Webhook already processed"})
        payment = Payment.objects.get(reference=self.reference)
        self.assertEqual(payment.raw_event["data"]["attempt"], 1)
        self.assertEqual(payment.paid_at, paid_at)
        self.assertEqual(PaymentNotification.objects.count(), 1)

    def test_unsupported_event_changes_nothing(self) -> None:
        response = self.client.post(self.url, self._event(self.reference, event="charge.failed"), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "unsupported_event")
        self.booking.refresh_from_db()
        self.assertEqual(self.booking.status, Booking.Status.PENDING)
        self.assertFalse(PaymentNotification.objects.exists())

    def test_unknown_reference_is_not_found(self) -> None:
        response = self.client.post(self.url, self._event("PAY_unknown"), format="json")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data, {"error": "not_found", "message": "Payment not found"})

    def test_missing_reference_is_invalid(self) -> None:
        response = self.client.post(self.url, {"event": "charge.success", "data": {}}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "invalid_request")

    def test_already_paid_booking_stays_paid(self) -> None:
        self.booking.mark_paid()

        response = self.client.post(self.url, self._event(self.reference), format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.booking.refresh_from_db()
        self.assertEqual(self.booking.status, Booking.Status.PAID)

    def test_paid_event_enqueues_confirmation(self) -> None:
        with mock.patch.object(notify_booking_paid, "delay") as delay:
            with self.captureOnCommitCallbacks(execute=True):
                self.client.post(self.url, self._event(self.reference), format="json")

        delay.assert_called_once_with(str(self.booking.pk))

    def test_paid_notification_task_logs_confirmation(self) -> None:
        self.assertTrue(notify_booking_paid(str(self.booking.pk)))
        self.assertFalse(notify_booking_paid("00000000-0000-0000-0000-000000000000"))


@override_settings(PAYMENT_WEBHOOK_SECRET="whsec_test")
class PaymentWebhookSignatureTests(PaymentTestMixin, APITestCase):
    def setUp(self) -> None:
        self.vendor = Vendor.objects.create(name="Tech Solutions Pro", utc_offset_minutes=60)
        self.booking = self._book()
        self.url = reverse("payment-webhook")
        self.body = json.dumps(self._event(self.booking.payment_reference)).encode("utf-8")

    def _post(self, signature: str | None):
        extra = {"HTTP_X_PAYMENT_SIGNATURE": signature} if signature else {}
        return self.client.post(self.url, self.body, content_type="application/json", **extra)

    def test_unsigned_notification_is_forbidden(self) -> None:
        response = self._post(None)

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["error"], "forbidden")
        self.assertFalse(PaymentNotification.objects.exists())

    def test_wrong_signature_is_forbidden(self) -> None:
        response = self._post(StubPaymentGateway(secret="other").sign(self.body))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_valid_signature_is_processed(self) -> None:
        response = self._post(StubPaymentGateway(secret="whsec_test").sign(self.body))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], "paid")


class StubGatewayTests(APITestCase):
    def test_reference_embeds_booking_id(self) -> None:
        booking_id = "3f2c1a9e-0000-4000-8000-000000000000"
        reference = StubPaymentGateway(secret="").new_reference(booking_id)

        self.assertTrue(reference.startswith(f"PAY_{booking_id}_"))

    def test_without_secret_every_signature_is_accepted(self) -> None:
        self.assertTrue(StubPaymentGateway(secret="").verify_signature(b"{}", None))
