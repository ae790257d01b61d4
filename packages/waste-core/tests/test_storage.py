from datetime import datetime, timezone

import pytest

from waste_core.core.exceptions import ValidationError
from waste_core.core.tables import REPORT_PHOTOS_BUCKET
from waste_core.storage import (
    InMemoryObjectStorage,
    FileUpload,
    build_object_path,
    upload_photos,
    validate_photo_uploads,
)

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _photo(name: str = "bin.jpg", content_type: str = "image/jpeg", size: int = 10) -> FileUpload:
    return FileUpload(filename=name, content_type=content_type, content=b"x" * size)


def test_validation_limits() -> None:
    assert len(validate_photo_uploads([_photo(), _photo("b.png", "image/png")])) == 2

    with pytest.raises(ValidationError, match="at most 3"):
        validate_photo_uploads([_photo() for _ in range(4)])
    with pytest.raises(ValidationError, match="not an image"):
        validate_photo_uploads([_photo("notes.pdf", "application/pdf")])
    with pytest.raises(ValidationError, match="exceeds"):
        validate_photo_uploads([_photo(size=11)], max_bytes=10)


def test_object_path_uses_user_folder_and_epoch_millis() -> None:
    path = build_object_path("user-1", "my photo.jpg", NOW)

    assert path == f"user-1/{int(NOW.timestamp() * 1000)}-my_photo.jpg"


@pytest.mark.asyncio
async def test_upload_returns_public_urls() -> None:
    storage = InMemoryObjectStorage("https://cdn.test/storage/")

    urls = await upload_photos(storage, REPORT_PHOTOS_BUCKET, "user-1", [_photo()], NOW)

    assert urls == [f"https://cdn.test/storage/report-photos/user-1/{int(NOW.timestamp() * 1000)}-0-bin.jpg"]
    assert len(storage.objects) == 1


@pytest.mark.asyncio
async def test_same_named_photos_in_one_batch_are_all_kept() -> None:
    storage = InMemoryObjectStorage("https://cdn.test/storage")
    front = FileUpload(filename="photo.jpg", content_type="image/jpeg", content=b"front")
    side = FileUpload(filename="photo.jpg", content_type="image/jpeg", content=b"side")

    urls = await upload_photos(storage, REPORT_PHOTOS_BUCKET, "user-1", [front, side], NOW)

    assert len(set(urls)) == 2
    assert sorted(content for content, _ in storage.objects.values()) == [b"front", b"side"]
