"""Admin registration for payments."""

from __future__ import annotations

from django.contrib import admin

from .models import Payment, PaymentNotification


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ("reference", "booking", "status", "amount", "currency", "paid_at", "created_at")
    list_filter = ("status", "currency")
    search_fields = ("reference", "booking__id")
    readonly_fields = ("booking", "reference", "raw_event", "paid_at", "created_at", "updated_at")


@admin.register(PaymentNotification)
class PaymentNotificationAdmin(admin.ModelAdmin):
    list_display = ("reference", "event_type", "payment", "processed_at")
    list_filter = ("event_type",)
    search_fields = ("reference",)
    readonly_fields = ("reference", "event_type", "payment", "payload", "processed_at")

    def has_add_permission(self, request):  # type: ignore
        return False
