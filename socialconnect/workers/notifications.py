"""Celery tasks for push notifications."""
import logging

from socialconnect.core.celery_app import celery_app

logger = logging.getLogger(__name__)


@celery_app.task
def send_push_notification(user_id: str, title: str, body: str) -> None:
    # No push provider is wired up yet; delivery is recorded in the worker log.
    logger.info("Push to %s: %s - %s", user_id, title, body)
