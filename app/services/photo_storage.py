"""Binary object store for inspection photos.

Objects live under ``<data_dir>/<bucket>/<key>`` and are published at
``<public_base_url>/<bucket>/<key>`` (see the ``/media`` mount in main).
"""
import logging
import os
import time

from app.config import settings

logger = logging.getLogger(__name__)


class StorageError(Exception):
    pass


def build_object_key(user_id: str, entry_id: str, slot: str, extension: str) -> str:
    """Key unique per owner, entry and slot, disambiguated by the upload time in ms."""
    return f"{user_id}-{entry_id}-{slot}-{int(time.time() * 1000)}.{extension}"


class PhotoStorage:
    def __init__(self, root_dir: str, bucket: str, public_base_url: str):
        self.root_dir = root_dir
        self.bucket = bucket
        self.public_base_url = public_base_url.rstrip("/")

    @property
    def bucket_dir(self) -> str:
        return os.path.join(self.root_dir, self.bucket)

    def is_available(self) -> bool:
        try:
            os.makedirs(self.bucket_dir, exist_ok=True)
        except OSError:
            logger.warning("Photo storage directory %s cannot be created", self.bucket_dir)
            return False
        return os.access(self.bucket_dir, os.W_OK)

    def _path(self, key: str) -> str:
        if os.path.basename(key) != key or key in ("", ".", ".."):
            raise StorageError(f"Invalid object key: {key!r}")
        return os.path.join(self.bucket_dir, key)

    def save(self, key: str, content: bytes) -> None:
        """Store a new object; existing keys are never overwritten."""
        path = self._path(key)
        try:
            os.makedirs(self.bucket_dir, exist_ok=True)
            with open(path, "xb") as f:
                f.write(content)
        except FileExistsError as e:
            raise StorageError(f"Object {key} already exists") from e
        except OSError as e:
            raise StorageError(f"Could not write object {key}: {e}") from e
        logger.debug("Stored %s (%d bytes)", key, len(content))

    def public_url(self, key: str) -> str:
        return f"{self.public_base_url}/{self.bucket}/{key}"

    def exists(self, key: str) -> bool:
        return os.path.exists(self._path(key))

    def delete(self, key: str) -> None:
        try:
            os.remove(self._path(key))
        except FileNotFoundError:
            pass


def get_photo_storage() -> PhotoStorage:
    return PhotoStorage(settings.data_dir, settings.photo_bucket, settings.public_base_url)
