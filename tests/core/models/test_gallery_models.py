import pytest
from pydantic import ValidationError as PydanticValidationError

from core.models.gallery import (
    GalleryAction,
    GalleryEntry,
    GalleryResponse,
    RawImageFile,
    UploadPayload,
)


def _entry_item(**overrides) -> dict:
    item = {
        "gallery_id": "vendor_123#prod_1",
        "vendor_id": "vendor_123",
        "product_id": "prod_1",
        "product_name": "Aloha Shirt",
        "brand_name": "nike",
        "image_key": "products/vendor_123/nike/prod_1/1-abc.webp",
        "recorded_at": "2024-01-01T10:00:00.000000+00:00",
    }
    item.update(overrides)
    return item


class TestGalleryAction:
    def test_wire_values(self) -> None:
        assert GalleryAction("upload") is GalleryAction.UPLOAD
        assert GalleryAction("setThumbnail") is GalleryAction.SET_THUMBNAIL
        assert GalleryAction("batchUpdate") is GalleryAction.BATCH_UPDATE

    def test_unknown_action(self) -> None:
        with pytest.raises(ValueError):
            GalleryAction("rename")


class TestGalleryEntry:
    def test_from_item_ignores_storage_attributes(self) -> None:
        entry = GalleryEntry.from_item(_entry_item())

        assert entry.image_key.endswith("1-abc.webp")
        assert "gallery_id" not in entry.model_dump()

    def test_entries_are_immutable(self) -> None:
        entry = GalleryEntry.from_item(_entry_item())

        with pytest.raises(PydanticValidationError):
            entry.recorded_at = "2030-01-01T00:00:00.000000+00:00"

    def test_empty_key_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            GalleryEntry.from_item(_entry_item(image_key=""))


class TestPayloads:
    def test_upload_requires_files(self) -> None:
        with pytest.raises(PydanticValidationError):
            UploadPayload(files=[])

    def test_raw_file_requires_bytes(self) -> None:
        with pytest.raises(PydanticValidationError):
            RawImageFile(data=b"")

    def test_negative_thumbnail_index_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            UploadPayload(files=[RawImageFile(data=b"x")], thumbnail_index=-1)


class TestGalleryResponse:
    def test_first_url_is_cover(self) -> None:
        response = GalleryResponse.from_urls(["u1", "u2"])

        assert response.cover_image_url == "u1"
        assert response.image_count == 2

    def test_empty_gallery(self) -> None:
        response = GalleryResponse.from_urls([])

        assert response.model_dump() == {"images": [], "cover_image_url": None, "image_count": 0}
