"""
Celery Application Configuration
"""

from celery import Celery
from celery.schedules import crontab

from ..config.settings import get_settings
from ..vendor.importer import SYNC_HOUR_UTC

settings = get_settings()

# Create Celery app
app = Celery(
    "kct_admin",
    broker=settings.broker_url,
    backend=settings.result_backend,
    include=[
        "kct_admin.tasks.vendor",
        "kct_admin.tasks.ingestion",
    ],
)

# Celery configuration
app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=30 * 60,  # 30 minutes
    task_soft_time_limit=25 * 60,  # 25 minutes
    worker_prefetch_multiplier=1,
    worker_max_tasks_per_child=1000,
    result_expires=7 * 24 * 3600,
)

# Configure periodic tasks with Celery Beat
app.conf.beat_schedule = {
    # Vendor inventory sync (Tuesdays and Fridays, 06:00 UTC)
    "refresh-vendor-inventory": {
        "task": "tasks.refresh_vendor_inventory",
        "schedule": crontab(hour=SYNC_HOUR_UTC, minute=0, day_of_week="tue,fri"),
        "kwargs": {"product_ids": None},
    },
}

if __name__ == "__main__":
    app.start()
