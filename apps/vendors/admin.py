"""Admin registration for vendors."""

from __future__ import annotations

from django.contrib import admin

from .models import Vendor


@admin.register(Vendor)
class VendorAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "timezone", "utc_offset_minutes", "created_at")
    search_fields = ("name",)

    def get_readonly_fields(self, request, obj=None):  # type: ignore
        # Existing claims are keyed on instants computed with the offset.
        if obj is not None:
            return ("utc_offset_minutes", "created_at")
        return ("created_at",)
