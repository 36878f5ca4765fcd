"""Shared gallery models."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr


class GalleryAction(str, Enum):
    """Mutations accepted by the gallery coordinator."""

    UPLOAD = "upload"
    DELETE = "delete"
    SET_THUMBNAIL = "setThumbnail"
    BATCH_UPDATE = "batchUpdate"


class GalleryEntry(BaseModel):
    """One stored image of a product gallery.

    Entries are ordered by `recorded_at` descending; the first one is the
    thumbnail. `recorded_at` is an ordering key, not a creation time.
    """

    model_config = ConfigDict(frozen=True)

    vendor_id: StrictStr = Field(..., description="Owning vendor identifier")
    product_id: StrictStr = Field(..., description="Owning product identifier")
    product_name: StrictStr = Field(..., description="Product name snapshot at upload time")
    brand_name: StrictStr = Field(..., description="Brand name snapshot at upload time")
    image_key: StrictStr = Field(..., min_length=1, description="Object store key")
    recorded_at: StrictStr = Field(..., description="ISO-8601 UTC ordering key")

    @classmethod
    def from_item(cls, item: dict[str, Any]) -> "GalleryEntry":
        """Build an entry from a raw index item, ignoring storage-only attributes."""
        return cls(
            vendor_id=item["vendor_id"],
            product_id=item["product_id"],
            product_name=item["product_name"],
            brand_name=item["brand_name"],
            image_key=item["image_key"],
            recorded_at=item["recorded_at"],
        )


class ProductInfo(BaseModel):
    """Catalog record for a vendor product."""

    model_config = ConfigDict(frozen=True)

    product_id: StrictStr
    name: StrictStr
    brand: StrictStr


class ProductStatus(BaseModel):
    """Gallery status of one catalog product."""

    product_id: StrictStr = Field(..., description="Product identifier")
    name: StrictStr = Field(..., description="Product name")
    brand: StrictStr = Field(..., description="Brand name")
    has_images: StrictBool = Field(..., description="Whether the gallery has any image")
    cover_url: StrictStr | None = Field(None, description="Signed URL of the thumbnail")
    image_count: StrictInt = Field(..., description="Number of images in the gallery")


class RawImageFile(BaseModel):
    """Uploaded file bytes before normalization."""

    data: bytes = Field(..., min_length=1)
    file_name: StrictStr = Field(default="image")


class UploadPayload(BaseModel):
    """Payload for the `upload` action."""

    files: list[RawImageFile] = Field(..., min_length=1)
    thumbnail_index: StrictInt | None = Field(None, ge=0)


class ImageKeyPayload(BaseModel):
    """Payload for the `delete` and `setThumbnail` actions.

    Either the storage key or a signed URL previously handed out for it.
    """

    image_key: StrictStr | None = None
    image_url: StrictStr | None = None


class BatchUpdatePayload(BaseModel):
    """Payload for the `batchUpdate` action: deletes, then uploads, then thumbnail."""

    delete_keys: list[StrictStr] = Field(default_factory=list)
    delete_urls: list[StrictStr] = Field(default_factory=list)
    files: list[RawImageFile] = Field(default_factory=list)
    thumbnail_index: StrictInt | None = Field(None, ge=0)
    thumbnail_key: StrictStr | None = None
    thumbnail_url: StrictStr | None = None


class GalleryResponse(BaseModel):
    """Ordered gallery view returned by list and mutate operations."""

    images: list[StrictStr] = Field(..., description="Signed URLs, thumbnail first")
    cover_image_url: StrictStr | None = Field(None, description="Signed URL of the thumbnail")
    image_count: StrictInt = Field(..., description="Number of images in the gallery")

    @classmethod
    def from_urls(cls, urls: list[str]) -> "GalleryResponse":
        return cls(
            images=urls,
            cover_image_url=urls[0] if urls else None,
            image_count=len(urls),
        )
