"""Global constants used throughout the application.

This module centralizes all magic numbers, string literals, and configuration
values that are used across multiple modules. Using constants prevents hardcoding
values and makes it easy to change them globally.
"""

from typing import Final

# ============================================================================
# Error Codes
# ============================================================================


# Validation Errors
ERROR_CODE_VALIDATION_FAILED = "VALIDATION_FAILED"
ERROR_CODE_UNSUPPORTED_ACTION = "UNSUPPORTED_ACTION"
ERROR_CODE_UNSUPPORTED_IMAGE = "UNSUPPORTED_IMAGE"

# Not Found Errors
ERROR_CODE_RESOURCE_NOT_FOUND = "NOT_FOUND"
ERROR_CODE_PRODUCT_NOT_FOUND = "PRODUCT_NOT_FOUND"
ERROR_CODE_VENDOR_NOT_FOUND = "VENDOR_NOT_FOUND"
ERROR_CODE_IMAGE_NOT_FOUND = "IMAGE_NOT_FOUND"

# Object Store Errors
ERROR_CODE_STORE = "STORE_ERROR"
ERROR_CODE_IMAGE_UPLOAD_FAILED = "IMAGE_UPLOAD_FAILED"
ERROR_CODE_IMAGE_DELETE_FAILED = "IMAGE_DELETE_FAILED"
ERROR_CODE_PRESIGNED_URL_FAILED = "PRESIGNED_URL_FAILED"

# Gallery Index Errors
ERROR_CODE_INDEX = "INDEX_ERROR"
ERROR_CODE_INDEX_INSERT_FAILED = "INDEX_INSERT_FAILED"
ERROR_CODE_INDEX_REMOVE_FAILED = "INDEX_REMOVE_FAILED"
ERROR_CODE_INDEX_TOUCH_FAILED = "INDEX_TOUCH_FAILED"
ERROR_CODE_INDEX_LIST_FAILED = "INDEX_LIST_FAILED"

# Processing Errors
ERROR_CODE_IMAGE_PROCESSING_FAILED = "IMAGE_PROCESSING_FAILED"
ERROR_CODE_BATCH_UPLOAD_FAILED = "BATCH_UPLOAD_FAILED"

# Internal / Unexpected
ERROR_CODE_INTERNAL_ERROR = "INTERNAL_ERROR"


# ============================================================================
# File Upload Constraints
# ============================================================================

MAX_FILE_SIZE = 4 * 1024 * 1024  # 4MB in bytes
MAX_FILES_PER_REQUEST = 10

SUPPORTED_SOURCE_MIME_TYPES: Final[frozenset[str]] = frozenset(
    {
        "image/jpeg",
        "image/png",
        "image/gif",
        "image/webp",
        "image/bmp",
        "image/tiff",
    }
)


# ============================================================================
# Normalization
# ============================================================================

NORMALIZED_FORMAT = "WEBP"
NORMALIZED_CONTENT_TYPE = "image/webp"
NORMALIZED_EXTENSION = "webp"
NORMALIZED_QUALITY = 80


# ============================================================================
# Gallery Ordering / Keys
# ============================================================================

# Spacing between synthetic timestamps of one upload batch
SYNTHETIC_TIMESTAMP_STEP_SECONDS = 1

MAX_INGEST_WORKERS = 4
MAX_STATUS_WORKERS = 8

IMAGE_KEY_ROOT = "products"
GALLERY_ID_SEPARATOR = "#"
GALLERY_RECORDED_INDEX = "gallery-recorded-index"

ID_PATTERN = r"^[a-zA-Z0-9_-]+$"


# ============================================================================
# Signed URLs
# ============================================================================

DEFAULT_SIGNED_URL_TTL_SECONDS = 3600


# ============================================================================
# API Gateway Configuration
# ============================================================================

CORS_ORIGIN = "*"
CORS_METHODS = "GET,POST,OPTIONS"
CORS_HEADERS = "Content-Type,Authorization,X-Api-Key"
EXPOSE_HEADERS = "Content-Type,Content-Length"
DEFAULT_CONTENT_TYPE = "application/json"

# ============================================================================
# Environment Variable Names
# ============================================================================

ENV_AWS_ENDPOINT_URL = "AWS_ENDPOINT_URL"
ENV_AWS_REGION = "AWS_REGION"
ENV_GALLERY_S3_BUCKET_NAME = "GALLERY_S3_BUCKET_NAME"
ENV_GALLERY_INDEX_TABLE_NAME = "GALLERY_INDEX_TABLE_NAME"
ENV_SIGNED_URL_TTL_SECONDS = "SIGNED_URL_TTL_SECONDS"
ENV_PRODUCT_CATALOG_FILE = "PRODUCT_CATALOG_FILE"
ENV_APP_RUNTIME = "APP_RUNTIME"
LOCALSTACK_URL = "http://localstack"
LOCALHOST_URL = "http://localhost"
