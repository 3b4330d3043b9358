"""Integration tests for vendor listing and availability."""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone

from django.core.management import call_command
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.application.command_handlers import CreateBookingCommand, CreateBookingHandler
from apps.bookings.models import Booking, SlotClaim
from apps.vendors.models import Vendor


class VendorAPITests(APITestCase):
    def setUp(self) -> None:
        self.vendor = Vendor.objects.create(name="Tech Solutions Pro", timezone="Africa/Lagos", utc_offset_minutes=60)
        self.other_vendor = Vendor.objects.create(name="Creative Design Studio")
        self.url = reverse("vendor-availability", args=[self.vendor.pk])

    def _claim(self, vendor: Vendor, start: datetime) -> None:
        booking = Booking.objects.create(
            vendor=vendor,
            buyer_reference="1",
            start_time_utc=start,
            end_time_utc=start + timedelta(minutes=30),
            payment_reference=f"PAY_{uuid.uuid4()}",
        )
        SlotClaim.objects.create(booking=booking, vendor=vendor, slot_start_utc=start)

    def test_list_vendors(self) -> None:
        response = self.client.get(reverse("vendor-list"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([v["name"] for v in response.data], ["Tech Solutions Pro", "Creative Design Studio"])
        self.assertEqual(response.data[0]["utc_offset"], "+01:00")

    def test_unknown_vendor_detail_is_not_found(self) -> None:
        response = self.client.get(reverse("vendor-detail", args=[9999]))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["error"], "not_found")

    def test_all_slots_available_without_claims(self) -> None:
        response = self.client.get(self.url, {"date": "2030-03-15"})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["date"], "2030-03-15")
        self.assertEqual(response.data["vendor_id"], self.vendor.pk)
        self.assertEqual(len(response.data["slots"]), 16)
        self.assertTrue(all(slot["is_available"] for slot in response.data["slots"]))
        self.assertEqual(response.data["slots"][0]["local_time"], "09:00")
        self.assertEqual(response.data["slots"][0]["utc_time"], "2030-03-15T08:00:00.000Z")

    def test_claimed_slot_is_reported_unavailable(self) -> None:
        self._claim(self.vendor, datetime(2030, 3, 15, 9, 0, tzinfo=timezone.utc))

        response = self.client.get(self.url, {"date": "2030-03-15"})

        unavailable = [slot["local_time"] for slot in response.data["slots"] if not slot["is_available"]]
        self.assertEqual(unavailable, ["10:00"])
        self.assertEqual(len(response.data["available_slots"]), 15)

    def test_booked_slot_is_reported_unavailable(self) -> None:
        result = CreateBookingHandler().handle(
            CreateBookingCommand(
                idempotency_key="key-1",
                buyer_reference="1",
                payload={
                    "vendorId": self.vendor.pk,
                    "startISO": "2030-03-15T13:30:00Z",
                    "endISO": "2030-03-15T14:00:00Z",
                },
            )
        )
        self.assertEqual(result.status_code, 201)

        response = self.client.get(self.url, {"date": "2030-03-15"})

        slot = next(s for s in response.data["slots"] if s["local_time"] == "14:30")
        self.assertFalse(slot["is_available"])
        self.assertEqual(slot["utc_time"], result.body["start_time_utc"])
        self.assertNotIn("14:30", [s["local_time"] for s in response.data["available_slots"]])
        self.assertEqual(len(response.data["available_slots"]), 15)

    def test_claims_of_other_vendors_and_dates_are_ignored(self) -> None:
        self._claim(self.other_vendor, datetime(2030, 3, 15, 9, 0, tzinfo=timezone.utc))
        self._claim(self.vendor, datetime(2030, 3, 16, 9, 0, tzinfo=timezone.utc))

        response = self.client.get(self.url, {"date": "2030-03-15"})

        self.assertTrue(all(slot["is_available"] for slot in response.data["slots"]))

    def test_missing_date_is_invalid(self) -> None:
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "invalid_request")

    def test_malformed_date_is_invalid(self) -> None:
        response = self.client.get(self.url, {"date": "15/03/2030"})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "invalid_request")

    def test_unknown_vendor_availability_is_not_found(self) -> None:
        response = self.client.get(reverse("vendor-availability", args=[9999]), {"date": "2030-03-15"})

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data, {"error": "not_found", "message": "Vendor not found"})


class SeedVendorsCommandTests(APITestCase):
    def test_seeds_once(self) -> None:
        call_command("seed_vendors")
        call_command("seed_vendors")

        self.assertEqual(Vendor.objects.count(), 3)
        self.assertTrue(all(v.utc_offset_minutes == 60 for v in Vendor.objects.all()))
