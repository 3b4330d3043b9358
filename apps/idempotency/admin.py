"""Admin registration for idempotency records."""

from __future__ import annotations

from django.contrib import admin

from .models import IdempotencyRecord


@admin.register(IdempotencyRecord)
class IdempotencyRecordAdmin(admin.ModelAdmin):
    list_display = ("key", "scope", "status_code", "created_at")
    list_filter = ("scope", "status_code")
    search_fields = ("key",)
    readonly_fields = ("key", "scope", "request_fingerprint", "status_code", "response_body", "created_at")

    def has_add_permission(self, request):  # type: ignore
        return False

    def has_change_permission(self, request, obj=None):  # type: ignore
        return False
