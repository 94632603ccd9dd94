"""Storage service for uploaded images.

Uses local disk behind the StorageBackend protocol. Files are organized per
bucket and owner: {bucket}/{user_id}/{filename}
"""
import logging
import uuid
from pathlib import Path
from typing import Protocol

from socialconnect.core.config import settings

logger = logging.getLogger(__name__)


class StorageBackend(Protocol):
    """Protocol for storage backends."""

    def save(self, bucket: str, user_id: str, data: bytes, ext: str) -> str:
        """Save file and return public URL."""
        ...

    def delete(self, url: str, owner_id: str | None = None) -> bool:
        """Delete file by URL. With owner_id, only files stored under that owner are removed."""
        ...


class LocalStorage:
    """Store files on local disk. Path: uploads/{bucket}/{user_id}/{uuid}{ext}"""

    def __init__(self, base_dir: str | None = None, base_url: str | None = None):
        self.base_dir = Path(base_dir or settings.UPLOAD_DIR).resolve()
        self.base_url = (base_url or settings.MEDIA_BASE_URL).rstrip("/")

    def _owner_path(self, bucket: str, user_id: str) -> Path:
        path = self.base_dir / bucket / str(user_id)
        path.mkdir(parents=True, exist_ok=True)
        return path

    def save(self, bucket: str, user_id: str, data: bytes, ext: str) -> str:
        path = self._owner_path(bucket, user_id)
        filename = f"{uuid.uuid4().hex}{ext}"
        (path / filename).write_bytes(data)
        rel = f"{bucket}/{user_id}/{filename}"
        logger.info("Stored upload %s (%d bytes)", rel, len(data))
        return f"{self.base_url}/uploads/{rel}"

    def delete(self, url: str, owner_id: str | None = None) -> bool:
        if "/uploads/" not in url:
            return False
        rel = url.split("/uploads/", 1)[1]
        filepath = (self.base_dir / rel).resolve()
        if self.base_dir not in filepath.parents or not filepath.is_file():
            return False
        # Layout is {bucket}/{user_id}/{filename}
        parts = filepath.relative_to(self.base_dir).parts
        if owner_id is not None and (len(parts) != 3 or parts[1] != str(owner_id)):
            logger.warning("Refusing to delete %s: not owned by %s", rel, owner_id)
            return False
        try:
            filepath.unlink()
        except OSError:
            logger.warning("Could not delete %s", filepath, exc_info=True)
            return False
        return True


_storage: StorageBackend | None = None


def get_storage() -> StorageBackend:
    global _storage
    if _storage is None:
        _storage = LocalStorage()
    return _storage
