"""Unit tests for the time-slot generator."""

from __future__ import annotations

from datetime import date, datetime, time, timezone

from django.test import SimpleTestCase

from apps.vendors.domain.slots import (
    SlotPolicy,
    daily_window,
    format_instant,
    generate_slots,
    local_date_of,
    local_to_utc,
)


class GenerateSlotsTests(SimpleTestCase):
    def test_default_grid_has_sixteen_half_hour_slots(self) -> None:
        slots = generate_slots(date(2030, 3, 15), 60)

        self.assertEqual(len(slots), 16)
        self.assertEqual(slots[0].local_label, "09:00")
        self.assertEqual(slots[-1].local_label, "16:30")
        self.assertEqual([s.index for s in slots], list(range(16)))

    def test_slots_convert_to_utc_with_vendor_offset(self) -> None:
        slots = generate_slots(date(2030, 3, 15), 60)

        self.assertEqual(slots[0].start_utc, datetime(2030, 3, 15, 8, 0, tzinfo=timezone.utc))
        self.assertEqual(slots[0].end_utc, datetime(2030, 3, 15, 8, 30, tzinfo=timezone.utc))
        self.assertEqual(format_instant(slots[0].start_utc), "2030-03-15T08:00:00.000Z")

    def test_slots_are_contiguous(self) -> None:
        slots = generate_slots(date(2030, 3, 15), 60)
        for previous, current in zip(slots, slots[1:]):
            self.assertEqual(previous.end_utc, current.start_utc)

    def test_custom_policy(self) -> None:
        policy = SlotPolicy(day_start_hour=10, day_end_hour=12, slot_minutes=60)
        slots = generate_slots(date(2030, 3, 15), 0, policy)

        self.assertEqual([s.local_label for s in slots], ["10:00", "11:00"])

    def test_policy_rejects_uneven_slot_length(self) -> None:
        with self.assertRaises(ValueError):
            SlotPolicy(day_start_hour=9, day_end_hour=10, slot_minutes=45)


class ConversionTests(SimpleTestCase):
    def test_local_to_utc_with_negative_offset(self) -> None:
        instant = local_to_utc(date(2030, 1, 1), time(9, 0), -300)
        self.assertEqual(instant, datetime(2030, 1, 1, 14, 0, tzinfo=timezone.utc))

    def test_local_date_of_crosses_midnight(self) -> None:
        instant = datetime(2030, 1, 1, 23, 30, tzinfo=timezone.utc)
        self.assertEqual(local_date_of(instant, 60), date(2030, 1, 2))
        self.assertEqual(local_date_of(instant, 0), date(2030, 1, 1))

    def test_daily_window_spans_opening_hours(self) -> None:
        window = daily_window(date(2030, 3, 15), 60)

        self.assertEqual(window.start, datetime(2030, 3, 15, 8, 0, tzinfo=timezone.utc))
        self.assertEqual(window.end, datetime(2030, 3, 15, 16, 0, tzinfo=timezone.utc))
