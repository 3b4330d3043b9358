"""
Time-Slot Generator

Pure functions producing the bookable slots of a vendor-local calendar date
and converting between the vendor's wall clock and absolute instants.

The grid is fixed: every vendor sells the same daily window (09:00-17:00
local by default) cut into equal slots (30 minutes by default, 16 slots).
Vendors use a fixed UTC offset, so no daylight saving rules apply.

Nothing here touches the database or the clock.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import List

from shared.domain.base import ValueObject
from shared.domain.value_objects import InstantRange


@dataclass(frozen=True)
class SlotPolicy(ValueObject):
    """Shape of the daily grid: local opening hours and slot length."""

    day_start_hour: int = 9
    day_end_hour: int = 17
    slot_minutes: int = 30

    def __post_init__(self):
        if not 0 <= self.day_start_hour < self.day_end_hour <= 24:
            raise ValueError(
                f"Invalid daily window {self.day_start_hour}:00-{self.day_end_hour}:00"
            )
        if self.slot_minutes <= 0 or self.window_minutes % self.slot_minutes:
            raise ValueError(
                f"Slot length {self.slot_minutes} min must divide the {self.window_minutes} min window"
            )

    @classmethod
    def from_settings(cls) -> "SlotPolicy":
        from django.conf import settings

        return cls(
            day_start_hour=settings.SLOT_DAY_START_HOUR,
            day_end_hour=settings.SLOT_DAY_END_HOUR,
            slot_minutes=settings.SLOT_LENGTH_MINUTES,
        )

    @property
    def window_minutes(self) -> int:
        return (self.day_end_hour - self.day_start_hour) * 60

    @property
    def slots_per_day(self) -> int:
        return self.window_minutes // self.slot_minutes


@dataclass(frozen=True)
class Slot(ValueObject):
    """
    One bookable slot: (local date, index in the daily grid) plus its
    absolute instants. Slots are derived, never stored.
    """

    local_date: date
    index: int
    local_start: datetime
    window: InstantRange

    @property
    def local_label(self) -> str:
        return self.local_start.strftime("%H:%M")

    @property
    def start_utc(self) -> datetime:
        return self.window.start

    @property
    def end_utc(self) -> datetime:
        return self.window.end


def fixed_offset(utc_offset_minutes: int) -> timezone:
    return timezone(timedelta(minutes=utc_offset_minutes))


def local_to_utc(local_date: date, local_time: time, utc_offset_minutes: int) -> datetime:
    """Combine a vendor wall-clock date and time into an absolute UTC instant."""

    local = datetime.combine(local_date, local_time, tzinfo=fixed_offset(utc_offset_minutes))
    return local.astimezone(timezone.utc)


def utc_to_local(instant: datetime, utc_offset_minutes: int) -> datetime:
    if instant.tzinfo is None:
        raise ValueError("Instant must be timezone-aware")
    return instant.astimezone(fixed_offset(utc_offset_minutes))


def local_date_of(instant: datetime, utc_offset_minutes: int) -> date:
    """Calendar date of an instant on the vendor's wall clock."""

    return utc_to_local(instant, utc_offset_minutes).date()


def daily_window(local_date: date, utc_offset_minutes: int, policy: SlotPolicy | None = None) -> InstantRange:
    """Absolute [open, close) range of the vendor's grid on a local date."""

    policy = policy or SlotPolicy()
    start = local_to_utc(local_date, time(hour=policy.day_start_hour), utc_offset_minutes)
    return InstantRange(start, start + timedelta(minutes=policy.window_minutes))


def generate_slots(local_date: date, utc_offset_minutes: int, policy: SlotPolicy | None = None) -> List[Slot]:
    """
    Ordered slots for a vendor-local date.

    Example: the default policy yields 16 slots labelled "09:00" .. "16:30".
    """

    policy = policy or SlotPolicy()
    tz = fixed_offset(utc_offset_minutes)
    opening = datetime.combine(local_date, time(hour=policy.day_start_hour), tzinfo=tz)
    length = timedelta(minutes=policy.slot_minutes)

    slots = []
    for index in range(policy.slots_per_day):
        local_start = opening + index * length
        start_utc = local_start.astimezone(timezone.utc)
        slots.append(
            Slot(
                local_date=local_date,
                index=index,
                local_start=local_start,
                window=InstantRange(start_utc, start_utc + length),
            )
        )
    return slots


def format_instant(instant: datetime) -> str:
    """UTC ISO-8601 with millisecond precision and a Z suffix."""

    return instant.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
