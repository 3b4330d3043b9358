"""Availability Reader: the generated slot grid overlaid with slot claims."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import List

import structlog
from django.utils.dateparse import parse_date  # type: ignore

from shared.domain.errors import InvalidRequest, NotFound

from .domain.slots import Slot, SlotPolicy, daily_window, format_instant, generate_slots
from .models import Vendor

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SlotAvailability:
    slot: Slot
    is_available: bool

    def as_dict(self) -> dict:
        return {
            "local_time": self.slot.local_label,
            "utc_time": format_instant(self.slot.start_utc),
            "is_available": self.is_available,
        }


@dataclass(frozen=True)
class DayAvailability:
    vendor: Vendor
    local_date: date
    slots: List[SlotAvailability]

    @property
    def available(self) -> List[SlotAvailability]:
        return [s for s in self.slots if s.is_available]


def get_vendor(vendor_id) -> Vendor:
    try:
        return Vendor.objects.get(pk=int(vendor_id))
    except (TypeError, ValueError, Vendor.DoesNotExist):
        raise NotFound("Vendor not found")


def parse_local_date(raw: str | None) -> date:
    if not raw:
        raise InvalidRequest("Date parameter is required")
    try:
        parsed = parse_date(raw)
    except ValueError:
        parsed = None
    if parsed is None:
        raise InvalidRequest("Date must be a calendar date in YYYY-MM-DD format")
    return parsed


def get_availability(vendor_id, raw_date: str | None, policy: SlotPolicy | None = None) -> DayAvailability:
    """
    Annotate each candidate slot of the date with whether it is claimed.

    Read-only and unlocked. The answer may be stale by the time the client
    books; the unique slot claim settles that at write time.
    """
    from apps.bookings.models import SlotClaim  # Local import to prevent circular dependency

    local_date = parse_local_date(raw_date)
    vendor = get_vendor(vendor_id)
    policy = policy or SlotPolicy.from_settings()

    candidates = generate_slots(local_date, vendor.utc_offset_minutes, policy)
    window = daily_window(local_date, vendor.utc_offset_minutes, policy)

    claimed = set(
        SlotClaim.objects.filter(
            vendor=vendor,
            slot_start_utc__gte=window.start,
            slot_start_utc__lt=window.end,
        ).values_list("slot_start_utc", flat=True)
    )

    logger.debug(
        "availability.read",
        vendor_id=vendor.pk,
        date=local_date.isoformat(),
        claimed=len(claimed),
    )

    return DayAvailability(
        vendor=vendor,
        local_date=local_date,
        slots=[SlotAvailability(slot, slot.start_utc not in claimed) for slot in candidates],
    )
