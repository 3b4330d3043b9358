"""Celery tasks for the idempotency ledger."""

from __future__ import annotations

import logging
from datetime import timedelta

from celery import shared_task  # type: ignore
from django.conf import settings  # type: ignore
from django.utils import timezone  # type: ignore

from .models import IdempotencyRecord

logger = logging.getLogger(__name__)


@shared_task(name="idempotency.purge_expired_records")
def purge_expired_records() -> dict[str, int]:
    """
    Delete idempotency records older than IDEMPOTENCY_RECORD_TTL_HOURS.

    Retention is unbounded when the setting is empty; a purged key can be
    replayed by a client and would execute again.
    """
    ttl_hours = settings.IDEMPOTENCY_RECORD_TTL_HOURS
    if not ttl_hours:
        return {"purged": 0}

    cutoff = timezone.now() - timedelta(hours=ttl_hours)
    purged, _ = IdempotencyRecord.objects.filter(created_at__lt=cutoff).delete()
    if purged:
        logger.info(f"Purged {purged} idempotency records older than {ttl_hours}h")
    return {"purged": purged}
