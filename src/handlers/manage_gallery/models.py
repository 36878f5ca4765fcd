"""Pydantic models for gallery mutation requests."""

import base64
import binascii

from aws_lambda_powertools import Logger
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    StrictStr,
    field_validator,
    model_validator,
)

from core.models.gallery import GalleryAction
from core.utils.constants import ID_PATTERN, MAX_FILE_SIZE, MAX_FILES_PER_REQUEST

logger = Logger(UTC=True)


class GalleryPathParams(BaseModel):
    """Vendor and product taken from the request path."""

    model_config = ConfigDict(str_strip_whitespace=True)

    vendor_id: StrictStr = Field(..., min_length=1, max_length=64, pattern=ID_PATTERN)
    product_id: StrictStr = Field(..., min_length=1, max_length=64, pattern=ID_PATTERN)


class UploadFile(BaseModel):
    """One base64-encoded file of an upload."""

    model_config = ConfigDict(str_strip_whitespace=True)

    file: StrictStr = Field(..., description="Base64 encoded image file")
    file_name: StrictStr = Field("image", min_length=1, max_length=255)

    @field_validator("file")
    @classmethod
    def validate_file(cls, value: str) -> str:
        """
        Validate base64 file:
        - may carry a data URI prefix, which is dropped
        - must decode correctly to a non-empty payload
        - must not exceed MAX_FILE_SIZE
        """
        if value.startswith("data:") and "," in value:
            value = value.split(",", 1)[1]

        if not value:
            raise ValueError("file must not be empty")

        try:
            file_data = base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError) as e:
            logger.error(f"File validation error: Invalid base64 - {e}")
            raise ValueError("Invalid base64 encoded file") from e

        if not file_data:
            raise ValueError("Decoded file is empty")

        if len(file_data) > MAX_FILE_SIZE:
            logger.error("File size validation error: File size exceeds limit")
            raise ValueError(f"File size exceeds {MAX_FILE_SIZE // (1024 * 1024)}MB limit")

        return value

    def decode(self) -> bytes:
        return base64.b64decode(self.file, validate=True)


class ManageGalleryRequest(BaseModel):
    """Validation model for a gallery mutation.

    Required fields depend on the action:
    - upload: files
    - delete / setThumbnail: image_key or image_url
    - batchUpdate: at least one delete, file or thumbnail change
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    action: GalleryAction = Field(..., description="Mutation to apply")
    files: list[UploadFile] = Field(default_factory=list, max_length=MAX_FILES_PER_REQUEST)
    thumbnail_index: StrictInt | None = Field(None, ge=0)
    image_key: StrictStr | None = Field(None, min_length=1)
    image_url: StrictStr | None = Field(None, min_length=1)
    delete_keys: list[StrictStr] = Field(default_factory=list)
    delete_urls: list[StrictStr] = Field(default_factory=list)
    thumbnail_key: StrictStr | None = Field(None, min_length=1)
    thumbnail_url: StrictStr | None = Field(None, min_length=1)

    @model_validator(mode="after")
    def validate_action_fields(self) -> "ManageGalleryRequest":
        if self.action is GalleryAction.UPLOAD and not self.files:
            raise ValueError("Missing files for upload")

        if self.action in (GalleryAction.DELETE, GalleryAction.SET_THUMBNAIL) and not (
            self.image_key or self.image_url
        ):
            raise ValueError(f"Missing image_key or image_url for {self.action.value}")

        if self.action is GalleryAction.BATCH_UPDATE and not (
            self.files
            or self.delete_keys
            or self.delete_urls
            or self.thumbnail_key
            or self.thumbnail_url
        ):
            raise ValueError("Missing changes for batchUpdate")

        return self
