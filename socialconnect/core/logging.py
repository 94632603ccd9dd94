"""Logging setup shared by the API process and the Celery workers."""
import logging
import sys

from socialconnect.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def configure_logging(level: str | None = None) -> None:
    global _configured
    if _configured:
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel((level or settings.LOG_LEVEL).upper())
    _configured = True


def mask_database_url(url: str) -> str:
    """Hide credentials, keep only host/db part."""
    if "@" not in url:
        return "configured"
    return "...@" + url.split("@")[-1].split("?")[0]
