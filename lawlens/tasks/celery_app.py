"""
Celery App Configuration
"""

from celery import Celery
from lawlens.config.settings import settings

celery_app = Celery(
    "lawlens",
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL,
    include=[
        "lawlens.tasks.notification_tasks",
    ]
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=5 * 60,
    task_soft_time_limit=4 * 60,
    worker_prefetch_multiplier=1,
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    task_routes={
        "lawlens.tasks.notification_tasks.*": {"queue": "notification"},
    },
    # inline execution for tests and single-process setups
    task_always_eager=settings.CELERY_TASK_ALWAYS_EAGER,
    task_eager_propagates=False,
    task_store_eager_result=False,
)
