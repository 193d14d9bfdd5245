import os

from celery import Celery
from celery.schedules import crontab

os.environ.setdefault(
    "DJANGO_SETTINGS_MODULE", os.getenv("DJANGO_SETTINGS_MODULE", "core.settings")
)

app = Celery("core")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


app.conf.beat_schedule = {
    "bigbuy-stock-sync-hourly": {
        "task": "providers.tasks.scheduled_stock_sync",
        "schedule": crontab(minute=0),
    },
    "bigbuy-stock-sync-daily": {
        "task": "providers.tasks.scheduled_full_stock_sync",
        "schedule": crontab(hour=0, minute=0),
    },
    "bigbuy-catalog-refresh-6h": {
        "task": "providers.tasks.scheduled_catalog_refresh",
        "schedule": crontab(hour="*/6", minute=0),
    },
    "bigbuy-low-stock-30m": {
        "task": "providers.tasks.scheduled_low_stock_check",
        "schedule": crontab(minute="*/30"),
    },
}
