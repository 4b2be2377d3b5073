# app/celery_worker.py
from celery import Celery
from celery.schedules import crontab

from app.utils.settings import CELERY_BROKER_URL, CELERY_RESULT_BACKEND

celery_app = Celery(
    "storefront",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# tasks must be imported explicitly so the worker registers them
celery_app.conf.imports = (
    "app.tasks.inventory",
    "app.tasks.carts",
    "app.services.notification_service",
)

celery_app.conf.beat_schedule = {
    "report-low-stock-hourly": {
        "task": "app.tasks.inventory.report_low_stock_task",
        "schedule": crontab(minute=0),
    },
    "purge-abandoned-carts-daily": {
        "task": "app.tasks.carts.purge_abandoned_carts_task",
        "schedule": crontab(hour=3, minute=30),
    },
}

celery_app.conf.timezone = "UTC"
