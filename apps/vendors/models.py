"""Vendor model."""

from __future__ import annotations

from django.core.validators import MaxValueValidator, MinValueValidator  # type: ignore
from django.db import models  # type: ignore


class Vendor(models.Model):
    """A seller of half-hour slots operating in a fixed UTC offset."""

    name = models.CharField(max_length=200)
    timezone = models.CharField(
        max_length=64,
        default="Africa/Lagos",
        help_text="Display name of the vendor's zone. Slot maths uses utc_offset_minutes.",
    )
    utc_offset_minutes = models.SmallIntegerField(
        default=60,
        validators=[MinValueValidator(-12 * 60), MaxValueValidator(14 * 60)],
        help_text="Fixed offset from UTC in minutes, no daylight saving.",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]

    def __str__(self) -> str:
        return self.name

    @property
    def utc_offset_label(self) -> str:
        sign = "+" if self.utc_offset_minutes >= 0 else "-"
        hours, minutes = divmod(abs(self.utc_offset_minutes), 60)
        return f"{sign}{hours:02d}:{minutes:02d}"
