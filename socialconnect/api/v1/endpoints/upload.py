"""Image upload endpoint. Files are stored per bucket and per user."""
import logging
from pathlib import PurePath

from fastapi import APIRouter, Depends, File, Form, UploadFile

from socialconnect.api.deps import get_current_user
from socialconnect.core.config import settings
from socialconnect.core.exceptions import ValidationException
from socialconnect.models.user import User
from socialconnect.services.storage_service import get_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/upload", tags=["upload"])

EXT_MAP = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "image/gif": ".gif",
}


def _get_ext(file: UploadFile) -> str:
    content_type = file.content_type or ""
    if content_type in EXT_MAP:
        return EXT_MAP[content_type]
    suffix = PurePath(file.filename or "").suffix.lower()
    return suffix if suffix.isascii() and 1 < len(suffix) <= 6 else ".img"


def _validate_image(file: UploadFile) -> str:
    content_type = file.content_type or ""
    if not content_type.startswith("image/"):
        raise ValidationException("Only image files are allowed")
    return _get_ext(file)


async def _read_and_validate_size(file: UploadFile, max_bytes: int) -> bytes:
    data = await file.read(max_bytes + 1)
    if len(data) > max_bytes:
        raise ValidationException(f"File size must be less than {max_bytes // (1024 * 1024)}MB")
    if not data:
        raise ValidationException("No file provided")
    return data


@router.post("")
async def upload_image(
    file: UploadFile | None = File(None),
    bucket: str = Form("posts"),
    current_user: User = Depends(get_current_user),
):
    """Upload an avatar or post image. Returns the public URL to store on the profile or post."""
    if file is None:
        raise ValidationException("No file provided")
    if bucket not in settings.UPLOAD_BUCKETS:
        raise ValidationException(f"Unknown bucket: {bucket}")
    ext = _validate_image(file)
    data = await _read_and_validate_size(file, settings.UPLOAD_MAX_BYTES)
    url = get_storage().save(bucket, str(current_user.id), data, ext)
    logger.info("Upload by %s to %s", current_user.id, bucket)
    return {"url": url}
