"""Validate inspection photos before anything is stored."""
import logging
import os
from dataclasses import dataclass

from app.config import settings
from app.utils.exceptions import InvalidPhotoFile

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = "jpg"


@dataclass
class PhotoUpload:
    """An image received from the client, fully read into memory."""

    filename: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def extension(self) -> str:
        ext = os.path.splitext(self.filename or "")[1].lstrip(".").lower()
        return ext or DEFAULT_EXTENSION


def validate_photo(photo: PhotoUpload, label: str) -> None:
    """Raise InvalidPhotoFile unless the upload is a non-empty image within the size limit."""
    if photo.size == 0:
        raise InvalidPhotoFile(f"{label}: the photo file is empty")

    if not (photo.content_type or "").lower().startswith("image/"):
        logger.info("Rejected %s upload with content type %r", label, photo.content_type)
        raise InvalidPhotoFile(f"{label}: only image files can be uploaded")

    if photo.size > settings.max_photo_size_bytes:
        limit_mb = settings.max_photo_size_bytes / (1024 * 1024)
        raise InvalidPhotoFile(f"{label}: the photo is larger than {limit_mb:.0f} MB")
