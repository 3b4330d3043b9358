"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking, SlotClaim


class SlotClaimInline(admin.TabularInline):
    model = SlotClaim
    can_delete = False
    extra = 0
    readonly_fields = ("vendor", "slot_start_utc", "claimed_at")


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "vendor",
        "buyer_reference",
        "status",
        "start_time_utc",
        "payment_reference",
        "created_at",
    )
    list_filter = ("status", "vendor")
    search_fields = ("id", "payment_reference", "buyer_reference", "vendor__name")
    readonly_fields = (
        "id",
        "vendor",
        "start_time_utc",
        "end_time_utc",
        "payment_reference",
        "created_at",
        "updated_at",
    )
    inlines = [SlotClaimInline]


@admin.register(SlotClaim)
class SlotClaimAdmin(admin.ModelAdmin):
    list_display = ("vendor", "slot_start_utc", "booking", "claimed_at")
    list_filter = ("vendor",)
    readonly_fields = ("booking", "vendor", "slot_start_utc", "claimed_at")
