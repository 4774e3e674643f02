# storefront/celery_worker.py
from celery import Celery

from storefront.utils.settings import CELERY_BROKER_URL, CELERY_RESULT_BACKEND

celery_app = Celery(
    "storefront",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# explicit imports so the worker registers the tasks
celery_app.conf.imports = (
    "storefront.tasks.orphans",
    "storefront.services.notification_service",
)

celery_app.conf.beat_schedule = {
    "sweep-orphan-orders-every-10-minutes": {
        "task": "storefront.tasks.orphans.sweep_orphan_orders_task",
        "schedule": 600.0,
    },
}

celery_app.conf.timezone = "UTC"
