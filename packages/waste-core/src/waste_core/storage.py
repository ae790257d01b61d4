from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
import logging
import re

from waste_core.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

DEFAULT_MAX_IMAGES = 3
DEFAULT_MAX_IMAGE_BYTES = 5 * 1024 * 1024
_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


@dataclass(frozen=True)
class FileUpload:
    filename: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


class ObjectStorage(ABC):
    @abstractmethod
    async def upload(self, bucket: str, path: str, content: bytes, content_type: str) -> str:
        """Store ``content`` and return its public URL."""
        raise NotImplementedError


class InMemoryObjectStorage(ObjectStorage):
    def __init__(self, public_base_url: str = "http://localhost:8100/storage") -> None:
        self._public_base_url = public_base_url.rstrip("/")
        self.objects: dict[tuple[str, str], tuple[bytes, str]] = {}

    async def upload(self, bucket: str, path: str, content: bytes, content_type: str) -> str:
        self.objects[(bucket, path)] = (content, content_type)
        logger.info("object_uploaded", extra={"component": "waste_core", "bucket": bucket, "size": len(content)})
        return f"{self._public_base_url}/{bucket}/{path}"


def validate_photo_uploads(
    files: Sequence[FileUpload],
    *,
    max_images: int = DEFAULT_MAX_IMAGES,
    max_bytes: int = DEFAULT_MAX_IMAGE_BYTES,
) -> list[FileUpload]:
    if len(files) > max_images:
        raise ValidationError(f"at most {max_images} images can be uploaded")
    for upload in files:
        if not upload.content_type.startswith("image/"):
            raise ValidationError(f"{upload.filename} is not an image")
        if upload.size > max_bytes:
            raise ValidationError(f"{upload.filename} exceeds {max_bytes // (1024 * 1024)}MB")
    return list(files)


def build_object_path(user_id: str, filename: str, now: datetime, index: int | None = None) -> str:
    """`{user_id}/{epoch_ms}-{name}`; files of one batch add their position so equal names never collide."""
    safe_name = _UNSAFE_FILENAME_CHARS.sub("_", filename.rsplit("/", 1)[-1]) or "upload"
    stamp = int(now.timestamp() * 1000)
    if index is None:
        return f"{user_id}/{stamp}-{safe_name}"
    return f"{user_id}/{stamp}-{index}-{safe_name}"


async def upload_photos(
    storage: ObjectStorage,
    bucket: str,
    user_id: str,
    files: Sequence[FileUpload],
    now: datetime,
) -> list[str]:
    urls: list[str] = []
    for index, upload in enumerate(files):
        path = build_object_path(user_id, upload.filename, now, index)
        urls.append(await storage.upload(bucket, path, upload.content, upload.content_type))
    return urls
