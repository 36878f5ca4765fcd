"""
Pytest configuration and fixtures for gallery service tests.
Provides AWS mocking, the gallery index table and bucket with proper cleanup,
in-memory repository doubles and Pillow-generated sample images.
"""

import io
import os
import threading
from collections.abc import Callable
from typing import Any

import boto3
import pytest
from botocore.exceptions import ClientError
from moto import mock_aws
from PIL import Image

os.environ.setdefault("AWS_REGION", "us-east-1")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("AWS_SECURITY_TOKEN", "testing")
os.environ.setdefault("AWS_SESSION_TOKEN", "testing")
os.environ.setdefault("GALLERY_S3_BUCKET_NAME", "test-gallery-bucket")
os.environ.setdefault("GALLERY_INDEX_TABLE_NAME", "test-gallery-index")
os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "true")
os.environ.setdefault("POWERTOOLS_METRICS_NAMESPACE", "ProductGallery")
os.environ.setdefault("POWERTOOLS_SERVICE_NAME", "product-gallery")

from core.infrastructure.catalog.static_catalog import StaticProductCatalog  # noqa: E402
from core.models.errors import ImageProcessingError  # noqa: E402
from core.models.gallery import GalleryEntry  # noqa: E402
from core.repositories.index_repository import GalleryIndexRepository  # noqa: E402
from core.repositories.storage_repository import ImageStorageRepository  # noqa: E402
from core.utils.keys import key_from_signed_url  # noqa: E402
from core.utils.time import utc_now_iso  # noqa: E402

# ---------------------------------------------------------------------------
# AWS (moto)
# ---------------------------------------------------------------------------


@pytest.fixture(scope="function")
def aws_mock():
    with mock_aws():
        yield


@pytest.fixture(scope="function")
def dynamodb_resource(aws_mock):
    return boto3.resource("dynamodb", region_name=os.getenv("AWS_REGION"))


def _create_gallery_table(dynamodb_resource):
    """Helper to create the gallery index table with its LSI."""
    return dynamodb_resource.create_table(
        TableName=os.getenv("GALLERY_INDEX_TABLE_NAME"),
        BillingMode="PAY_PER_REQUEST",
        KeySchema=[
            {"AttributeName": "gallery_id", "KeyType": "HASH"},
            {"AttributeName": "image_key", "KeyType": "RANGE"},
        ],
        AttributeDefinitions=[
            {"AttributeName": "gallery_id", "AttributeType": "S"},
            {"AttributeName": "image_key", "AttributeType": "S"},
            {"AttributeName": "recorded_at", "AttributeType": "S"},
        ],
        LocalSecondaryIndexes=[
            {
                "IndexName": "gallery-recorded-index",
                "KeySchema": [
                    {"AttributeName": "gallery_id", "KeyType": "HASH"},
                    {"AttributeName": "recorded_at", "KeyType": "RANGE"},
                ],
                "Projection": {"ProjectionType": "ALL"},
            },
        ],
    )


def _cleanup_gallery_items(table):
    """Helper to delete all items from the gallery table."""
    try:
        response = table.scan(ProjectionExpression="gallery_id, image_key")
        with table.batch_writer() as batch:
            for item in response.get("Items", []):
                batch.delete_item(
                    Key={"gallery_id": item["gallery_id"], "image_key": item["image_key"]}
                )
    except ClientError as e:
        if e.response["Error"]["Code"] != "ResourceNotFoundException":
            raise


@pytest.fixture(scope="function")
def gallery_table(dynamodb_resource):
    """
    Create and manage the gallery index table for testing.

    Items are deleted after each test; moto drops the table on context exit.
    """
    try:
        table = dynamodb_resource.Table(os.getenv("GALLERY_INDEX_TABLE_NAME"))
        table.load()
    except ClientError:
        table = _create_gallery_table(dynamodb_resource)
        table.wait_until_exists()

    yield table

    _cleanup_gallery_items(table)


@pytest.fixture
def gallery_put_item(gallery_table) -> Callable[[dict[str, Any]], dict[str, Any]]:
    """
    Helper to insert a raw index item.

    Usage:
        gallery_put_item({"gallery_id": "vendor_123#prod_1", "image_key": "...", ...})
    """

    def _put(item: dict[str, Any]) -> dict[str, Any]:
        gallery_table.put_item(Item=item)
        return item

    return _put


@pytest.fixture(scope="function")
def s3_client(aws_mock):
    """S3 client for bucket operations."""
    return boto3.client("s3", region_name=os.getenv("AWS_REGION"))


def _cleanup_s3_objects(s3_client, bucket_name):
    """Helper to delete all objects from S3 bucket efficiently."""
    try:
        paginator = s3_client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=bucket_name):
            objects = page.get("Contents", [])
            if objects:
                s3_client.delete_objects(
                    Bucket=bucket_name,
                    Delete={"Objects": [{"Key": obj["Key"]} for obj in objects]},
                )
    except ClientError as e:
        if e.response["Error"]["Code"] != "NoSuchBucket":
            raise


@pytest.fixture(scope="function")
def s3_bucket(s3_client):
    """
    Create and manage the gallery bucket for testing.

    Objects are deleted after each test; moto drops the bucket on context exit.
    """
    bucket_name = os.getenv("GALLERY_S3_BUCKET_NAME")

    try:
        s3_client.head_bucket(Bucket=bucket_name)
    except ClientError:
        s3_client.create_bucket(Bucket=bucket_name)

    yield s3_client

    _cleanup_s3_objects(s3_client, bucket_name)


@pytest.fixture
def s3_put_object(s3_client) -> Callable[..., dict[str, Any]]:
    """
    Helper to upload an object to S3.

    Usage:
        s3_put_object("products/vendor_123/nike/prod_1/a.webp", b"data", "image/webp")
    """

    def _put(key: str, body: bytes, content_type: str = "application/octet-stream"):
        return s3_client.put_object(
            Bucket=os.getenv("GALLERY_S3_BUCKET_NAME"),
            Key=key,
            Body=body,
            ContentType=content_type,
        )

    return _put


@pytest.fixture
def s3_list_keys(s3_client) -> Callable[[], list[str]]:
    """Helper returning every object key of the gallery bucket."""

    def _list() -> list[str]:
        response = s3_client.list_objects_v2(Bucket=os.getenv("GALLERY_S3_BUCKET_NAME"))
        return [obj["Key"] for obj in response.get("Contents", [])]

    return _list


# ---------------------------------------------------------------------------
# Sample images
# ---------------------------------------------------------------------------


def _render_image(fmt: str, *, size: tuple[int, int] = (8, 6), mode: str = "RGB", color: Any = "red") -> bytes:
    buffer = io.BytesIO()
    Image.new(mode, size, color).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def make_image() -> Callable[..., bytes]:
    """
    Factory rendering a small image with Pillow.

    Usage:
        data = make_image("PNG", size=(4, 4), mode="RGBA", color=(0, 0, 0, 0))
    """
    return _render_image


@pytest.fixture
def png_bytes() -> bytes:
    return _render_image("PNG")


@pytest.fixture
def jpeg_bytes() -> bytes:
    return _render_image("JPEG", color="blue")


# ---------------------------------------------------------------------------
# In-memory doubles
# ---------------------------------------------------------------------------

TEST_BUCKET = "memory-bucket"


class InMemoryObjectStore(ImageStorageRepository):
    """Dict-backed object store recording every call."""

    def __init__(self) -> None:
        self.objects: dict[str, bytes] = {}
        self.deleted: list[str] = []
        self._lock = threading.Lock()

    def put(self, *, key: str, data: bytes, content_type: str) -> None:
        with self._lock:
            self.objects[key] = data

    def delete(self, *, key: str) -> None:
        with self._lock:
            self.deleted.append(key)
            self.objects.pop(key, None)

    def signed_read_url(self, *, key: str, expires_in: int) -> str:
        return f"https://{TEST_BUCKET}.s3.amazonaws.com/{key}?X-Amz-Expires={expires_in}"

    def key_from_url(self, url: str) -> str | None:
        return key_from_signed_url(url, bucket=TEST_BUCKET)


class InMemoryGalleryIndex(GalleryIndexRepository):
    """Dict-backed gallery index ordered the same way as the real one."""

    def __init__(self) -> None:
        self.galleries: dict[tuple[str, str], dict[str, GalleryEntry]] = {}
        self._lock = threading.Lock()

    def insert(self, *, entry: GalleryEntry) -> None:
        with self._lock:
            gallery = self.galleries.setdefault((entry.vendor_id, entry.product_id), {})
            gallery[entry.image_key] = entry

    def remove(self, *, vendor_id: str, product_id: str, image_key: str) -> int:
        with self._lock:
            gallery = self.galleries.get((vendor_id, product_id), {})
            return 1 if gallery.pop(image_key, None) is not None else 0

    def touch(self, *, vendor_id: str, product_id: str, image_key: str) -> int:
        with self._lock:
            gallery = self.galleries.get((vendor_id, product_id), {})
            entry = gallery.get(image_key)
            if entry is None:
                return 0
            gallery[image_key] = entry.model_copy(update={"recorded_at": utc_now_iso()})
            return 1

    def list_entries(self, *, vendor_id: str, product_id: str) -> list[GalleryEntry]:
        with self._lock:
            entries = list(self.galleries.get((vendor_id, product_id), {}).values())
        return sorted(entries, key=lambda entry: entry.recorded_at, reverse=True)


class PassthroughNormalizer:
    """Returns input bytes unchanged; bytes starting with b"bad" are rejected."""

    def normalize(self, data: bytes) -> bytes:
        if data.startswith(b"bad"):
            raise ImageProcessingError(message="Unable to process image")
        return data


TEST_CATALOG = {
    "vendor_123": [
        {"id": "prod_1", "name": "Aloha Shirt", "brand": "nike"},
        {"id": "prod_2", "name": "Tie Dye Shirt", "brand": "puma"},
    ],
    "vendor_456": [
        {"id": "prod_14", "name": "Classic Leather Wallet", "brand": "gucci"},
    ],
    "vendor_empty": [],
}


@pytest.fixture
def memory_store() -> InMemoryObjectStore:
    return InMemoryObjectStore()


@pytest.fixture
def memory_index() -> InMemoryGalleryIndex:
    return InMemoryGalleryIndex()


@pytest.fixture
def passthrough_normalizer() -> PassthroughNormalizer:
    return PassthroughNormalizer()


@pytest.fixture
def test_catalog() -> StaticProductCatalog:
    return StaticProductCatalog(TEST_CATALOG)
