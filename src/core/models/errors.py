"""Custom exception classes for the gallery service."""

from typing import Any

from core.utils.constants import (
    ERROR_CODE_BATCH_UPLOAD_FAILED,
    ERROR_CODE_IMAGE_NOT_FOUND,
    ERROR_CODE_IMAGE_PROCESSING_FAILED,
    ERROR_CODE_INDEX,
    ERROR_CODE_PRODUCT_NOT_FOUND,
    ERROR_CODE_RESOURCE_NOT_FOUND,
    ERROR_CODE_STORE,
    ERROR_CODE_VALIDATION_FAILED,
    ERROR_CODE_VENDOR_NOT_FOUND,
)


class GalleryServiceError(Exception):
    """
    Base exception for all gallery service errors.

    All custom errors must inherit from this class.
    Callers must explicitly provide a message and error code.
    Optional contextual information can be supplied via `details`.
    """

    message: str
    error_code: str
    details: dict[str, Any]

    def __init__(
        self,
        *,
        message: str,
        error_code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}

        super().__init__(self.message)


class ValidationError(GalleryServiceError):
    """Raised when request or payload validation fails."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_VALIDATION_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class NotFoundError(GalleryServiceError):
    """Raised when a requested resource is not found."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_RESOURCE_NOT_FOUND,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class ProductNotFoundError(NotFoundError):
    """Raised when a (vendor, product) pair is unknown to the catalog."""

    def __init__(
        self,
        *,
        message: str = "Product not found",
        error_code: str = ERROR_CODE_PRODUCT_NOT_FOUND,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class VendorNotFoundError(NotFoundError):
    """Raised when a vendor has no catalog entry."""

    def __init__(
        self,
        *,
        message: str = "Vendor not found",
        error_code: str = ERROR_CODE_VENDOR_NOT_FOUND,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class ImageNotFoundError(NotFoundError):
    """Raised when an image key is not part of the gallery."""

    def __init__(
        self,
        *,
        message: str = "Image not found",
        error_code: str = ERROR_CODE_IMAGE_NOT_FOUND,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class StoreError(GalleryServiceError):
    """Raised when an object store operation fails."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_STORE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class GalleryIndexError(GalleryServiceError):
    """Raised when a gallery index operation fails."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_INDEX,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class ImageProcessingError(GalleryServiceError):
    """Raised when uploaded bytes cannot be normalized."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_IMAGE_PROCESSING_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class BatchUploadError(GalleryServiceError):
    """Raised when at least one file of an upload batch failed.

    `details` carries the uploaded/failed counts, the failed file names and
    the refreshed gallery so callers can see what did succeed.
    """

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_BATCH_UPLOAD_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )
