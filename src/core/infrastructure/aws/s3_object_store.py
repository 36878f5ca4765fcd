"""S3-backed implementation of ImageStorageRepository."""

import os
from typing import Any

from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError

from core.infrastructure.adapters.s3_adapter import S3Adapter, S3AdapterProtocol
from core.models.errors import StoreError, ValidationError
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.constants import (
    ENV_APP_RUNTIME,
    ERROR_CODE_IMAGE_DELETE_FAILED,
    ERROR_CODE_IMAGE_UPLOAD_FAILED,
    ERROR_CODE_PRESIGNED_URL_FAILED,
    LOCALHOST_URL,
    LOCALSTACK_URL,
)
from core.utils.keys import key_from_signed_url

logger = Logger(UTC=True)


class S3ObjectStore(ImageStorageRepository):
    """Gallery object store backed by Amazon S3."""

    def __init__(self, adapter: S3AdapterProtocol | None = None) -> None:
        """Create storage using the provided S3 adapter."""
        self._s3: S3AdapterProtocol = adapter or S3Adapter()
        self._is_localstack = os.getenv(ENV_APP_RUNTIME) == "localstack"

    def put(self, *, key: str, data: bytes, content_type: str) -> None:
        """Upload image bytes to S3 under `key`."""
        if not key or not key.strip():
            raise ValidationError(message="Storage key must not be empty")

        logger.debug(
            "Uploading image",
            extra={"key": key, "size": len(data), "content_type": content_type},
        )

        try:
            self._s3.put_object(
                key=key,
                body=data,
                content_type=content_type,
                metadata={},
            )
            logger.info("Image stored", extra={"key": key})

        except ClientError as exc:
            logger.error("S3 upload failed", extra={"key": key})
            raise StoreError(
                message="Unable to upload image at this time",
                error_code=ERROR_CODE_IMAGE_UPLOAD_FAILED,
                details={"key": key},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error uploading image")
            raise StoreError(
                message="Unable to upload image at this time",
                error_code=ERROR_CODE_IMAGE_UPLOAD_FAILED,
                details={"key": key},
            ) from exc

    def delete(self, *, key: str) -> None:
        """Delete an image object from S3; absent objects count as deleted."""
        logger.debug("Deleting image", extra={"key": key})

        try:
            self._s3.delete_object(key=key)
            logger.info("Image object deleted", extra={"key": key})

        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") in ("NoSuchKey", "404"):
                logger.info("Image object already absent", extra={"key": key})
                return

            logger.error("S3 deletion failed", extra={"key": key})
            raise StoreError(
                message="Unable to delete image at this time",
                error_code=ERROR_CODE_IMAGE_DELETE_FAILED,
                details={"key": key},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error deleting image")
            raise StoreError(
                message="Unable to delete image at this time",
                error_code=ERROR_CODE_IMAGE_DELETE_FAILED,
                details={"key": key},
            ) from exc

    def signed_read_url(self, *, key: str, expires_in: int) -> str:
        """Generate a pre-signed S3 URL for reading an image object."""
        logger.debug(
            "Generating pre-signed S3 URL",
            extra={"key": key, "expires_in": expires_in},
        )

        try:
            params: dict[str, Any] = {"Key": key}
            url: str = self._s3.generate_presigned_url(
                method="get_object",
                params=params,
                expires_in=expires_in,
            )

        except Exception as exc:
            logger.exception("Failed to generate pre-signed URL", extra={"key": key})
            raise StoreError(
                message="Unable to generate image access URL",
                error_code=ERROR_CODE_PRESIGNED_URL_FAILED,
                details={"key": key},
            ) from exc

        if self._is_localstack:
            url = self._rewrite_localstack_url(url)

        return url

    def key_from_url(self, url: str) -> str | None:
        key = key_from_signed_url(url, bucket=self._s3.bucket)
        if key is None:
            logger.warning("Unable to extract storage key from URL", extra={"url": url})
        return key

    @staticmethod
    def _rewrite_localstack_url(url: str) -> str:
        """
        Replace internal LocalStack hostname with localhost
        so URLs are accessible from the host machine.
        """
        return url.replace(LOCALSTACK_URL, LOCALHOST_URL, 1)
