"""Celery application for background tasks (push notifications, mail)."""
from celery import Celery

from socialconnect.core.config import settings

celery_app = Celery(
    "socialconnect",
    broker=settings.CELERY_BROKER_URL,
    include=["socialconnect.workers.notifications", "socialconnect.workers.mail"],
)
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_always_eager=settings.CELERY_TASK_ALWAYS_EAGER,
)
