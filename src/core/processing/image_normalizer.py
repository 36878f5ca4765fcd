"""
Image normalization for gallery uploads.

Every uploaded file is re-encoded to a single canonical format (WebP at a
fixed quality) with its EXIF orientation applied, so stored images render
the same way regardless of what the vendor's device produced.
"""

import io
from typing import Protocol

from aws_lambda_powertools import Logger
from PIL import Image, ImageOps, UnidentifiedImageError

from core.models.errors import ImageProcessingError
from core.utils.constants import (
    ERROR_CODE_UNSUPPORTED_IMAGE,
    NORMALIZED_FORMAT,
    NORMALIZED_QUALITY,
    SUPPORTED_SOURCE_MIME_TYPES,
)
from core.utils.mime import detect_mime_type

logger = Logger(UTC=True)


class ImageNormalizer(Protocol):
    """Opaque `normalize(bytes) -> encoded bytes` transform."""

    def normalize(self, data: bytes) -> bytes: ...


class PillowImageNormalizer:
    """Pillow-based normalizer producing WebP output."""

    def __init__(self, *, quality: int = NORMALIZED_QUALITY) -> None:
        self._quality = quality

    def normalize(self, data: bytes) -> bytes:
        """Decode, auto-rotate and re-encode image bytes.

        Raises:
            ImageProcessingError: If the bytes are not a supported image
        """
        try:
            mime_type = detect_mime_type(data)
        except ValueError as exc:
            raise ImageProcessingError(
                message="Unsupported image type",
                error_code=ERROR_CODE_UNSUPPORTED_IMAGE,
            ) from exc

        if mime_type not in SUPPORTED_SOURCE_MIME_TYPES:
            raise ImageProcessingError(
                message="Unsupported image type",
                error_code=ERROR_CODE_UNSUPPORTED_IMAGE,
                details={"mime_type": mime_type},
            )

        try:
            with Image.open(io.BytesIO(data)) as source:
                img = ImageOps.exif_transpose(source)

                if img.mode not in ("RGB", "RGBA"):
                    has_alpha = "A" in img.getbands() or "transparency" in img.info
                    img = img.convert("RGBA" if has_alpha else "RGB")

                output_buffer = io.BytesIO()
                img.save(
                    output_buffer,
                    format=NORMALIZED_FORMAT,
                    quality=self._quality,
                    method=6,
                )

        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
            logger.warning(
                "Image normalization failed",
                extra={"mime_type": mime_type, "size": len(data), "error": str(exc)},
            )
            raise ImageProcessingError(
                message="Unable to process image",
                details={"mime_type": mime_type},
            ) from exc

        encoded = output_buffer.getvalue()
        logger.debug(
            "Image normalized",
            extra={"mime_type": mime_type, "input_size": len(data), "output_size": len(encoded)},
        )
        return encoded
