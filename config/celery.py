import os

from celery import Celery
from celery.schedules import crontab  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("slot_booking")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

app.conf.beat_schedule = {
    # No-op unless IDEMPOTENCY_RECORD_TTL_HOURS is configured
    "purge-expired-idempotency-records": {
        "task": "idempotency.purge_expired_records",
        "schedule": crontab(minute=30),
    },
}

app.conf.timezone = "UTC"
