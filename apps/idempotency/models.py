"""Idempotency ledger model."""

from __future__ import annotations

from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore


class IdempotencyRecord(models.Model):
    """Response recorded for the first completed request carrying a key."""

    key = models.CharField(max_length=255, primary_key=True)
    scope = models.CharField(max_length=64, help_text="Logical operation the key was spent on.")
    request_fingerprint = models.CharField(max_length=64)
    status_code = models.PositiveSmallIntegerField()
    response_body = models.JSONField()
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.scope}:{self.key} -> {self.status_code}"
