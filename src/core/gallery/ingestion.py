"""Image ingestion pipeline.

Turns a batch of uploaded files into gallery entries:

1. Assign each file its `recorded_at` ordering key (synchronously, before any I/O)
2. For every file, concurrently: normalize -> derive key -> store blob -> insert index row
3. Wait for the whole batch and report which files succeeded and which failed

Ordering keys are synthetic: batch position `i` is stamped `now - (i + 1)s`,
so the gallery shows the batch in the caller's order no matter which file
finishes first. A designated thumbnail is stamped `now`, putting it ahead of
the whole batch and of every older entry.
"""

from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime, timedelta

from aws_lambda_powertools import Logger
from pydantic import BaseModel, Field

from core.models.errors import GalleryServiceError
from core.models.gallery import GalleryEntry, ProductInfo, RawImageFile
from core.processing.image_normalizer import ImageNormalizer
from core.repositories.index_repository import GalleryIndexRepository
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.constants import (
    ERROR_CODE_INTERNAL_ERROR,
    MAX_INGEST_WORKERS,
    NORMALIZED_CONTENT_TYPE,
    SYNTHETIC_TIMESTAMP_STEP_SECONDS,
)
from core.utils.keys import build_image_key
from core.utils.time import to_iso, utc_now

logger = Logger(UTC=True)


class IngestionFailure(BaseModel):
    """A file of the batch that did not make it into the gallery."""

    position: int
    file_name: str
    error_code: str
    message: str


class IngestionResult(BaseModel):
    """Outcome of one ingestion batch."""

    image_keys: list[str] = Field(default_factory=list, description="Stored keys in batch order")
    failures: list[IngestionFailure] = Field(default_factory=list)

    @property
    def failed(self) -> bool:
        return bool(self.failures)


def assign_recorded_at(
    count: int,
    *,
    thumbnail_index: int | None,
    now: datetime,
) -> list[str]:
    """Compute the ordering key of every batch position.

    Example (now = 12:00:10, thumbnail_index = 1):
        [12:00:09, 12:00:10, 12:00:07]  ->  gallery order B, A, C
    """
    step = timedelta(seconds=SYNTHETIC_TIMESTAMP_STEP_SECONDS)
    stamps: list[str] = []

    for position in range(count):
        if position == thumbnail_index:
            stamps.append(to_iso(now))
        else:
            stamps.append(to_iso(now - step * (position + 1)))

    return stamps


class ImageIngestionPipeline:
    """Stores a batch of images and indexes them in a deterministic order.

    Files are independent units: one failing file never aborts the
    others, and nothing is rolled back for files that succeeded.
    """

    def __init__(
        self,
        *,
        storage: ImageStorageRepository,
        index: GalleryIndexRepository,
        normalizer: ImageNormalizer,
        max_workers: int = MAX_INGEST_WORKERS,
    ) -> None:
        self.storage = storage
        self.index = index
        self.normalizer = normalizer
        self._max_workers = max_workers

    def ingest(
        self,
        *,
        vendor_id: str,
        product: ProductInfo,
        files: Sequence[RawImageFile],
        thumbnail_index: int | None = None,
    ) -> IngestionResult:
        """Ingest a batch of files into one gallery.

        Args:
            vendor_id: Owning vendor
            product: Catalog info of the owning product (snapshotted into entries)
            files: Raw uploaded files, in intended gallery order
            thumbnail_index: Optional batch position to become the thumbnail

        Returns:
            Stored keys (batch order) and per-file failures
        """
        if not files:
            return IngestionResult()

        if thumbnail_index is not None and not 0 <= thumbnail_index < len(files):
            logger.warning(
                "Thumbnail index outside of batch, ignoring",
                extra={"thumbnail_index": thumbnail_index, "batch_size": len(files)},
            )
            thumbnail_index = None

        stamps = assign_recorded_at(len(files), thumbnail_index=thumbnail_index, now=utc_now())

        logger.info(
            "Starting ingestion batch",
            extra={
                "vendor_id": vendor_id,
                "product_id": product.product_id,
                "batch_size": len(files),
                "thumbnail_index": thumbnail_index,
            },
        )

        keys: list[str | None] = [None] * len(files)
        failures: list[IngestionFailure] = []

        with ThreadPoolExecutor(max_workers=min(self._max_workers, len(files))) as executor:
            futures = {
                executor.submit(
                    self._ingest_one,
                    vendor_id=vendor_id,
                    product=product,
                    raw_file=raw_file,
                    recorded_at=stamps[position],
                ): position
                for position, raw_file in enumerate(files)
            }

            for future in as_completed(futures):
                position = futures[future]
                try:
                    keys[position] = future.result()
                except GalleryServiceError as exc:
                    logger.warning(
                        "File ingestion failed",
                        extra={
                            "position": position,
                            "file_name": files[position].file_name,
                            "error_code": exc.error_code,
                        },
                    )
                    failures.append(
                        IngestionFailure(
                            position=position,
                            file_name=files[position].file_name,
                            error_code=exc.error_code,
                            message=exc.message,
                        )
                    )
                except Exception:
                    logger.exception(
                        "Unexpected error during file ingestion",
                        extra={"position": position, "file_name": files[position].file_name},
                    )
                    failures.append(
                        IngestionFailure(
                            position=position,
                            file_name=files[position].file_name,
                            error_code=ERROR_CODE_INTERNAL_ERROR,
                            message="Unable to process file",
                        )
                    )

        result = IngestionResult(
            image_keys=[key for key in keys if key is not None],
            failures=sorted(failures, key=lambda failure: failure.position),
        )

        logger.info(
            "Ingestion batch finished",
            extra={
                "vendor_id": vendor_id,
                "product_id": product.product_id,
                "stored": len(result.image_keys),
                "failed": len(result.failures),
            },
        )
        return result

    def _ingest_one(
        self,
        *,
        vendor_id: str,
        product: ProductInfo,
        raw_file: RawImageFile,
        recorded_at: str,
    ) -> str:
        encoded = self.normalizer.normalize(raw_file.data)

        image_key = build_image_key(
            vendor_id=vendor_id,
            brand=product.brand,
            product_id=product.product_id,
        )

        # Store first: an index row must never point at a missing object
        self.storage.put(key=image_key, data=encoded, content_type=NORMALIZED_CONTENT_TYPE)

        entry = GalleryEntry(
            vendor_id=vendor_id,
            product_id=product.product_id,
            product_name=product.name,
            brand_name=product.brand,
            image_key=image_key,
            recorded_at=recorded_at,
        )

        try:
            self.index.insert(entry=entry)
        except Exception:
            # Best-effort cleanup to avoid orphaned storage objects
            try:
                self.storage.delete(key=image_key)
            except GalleryServiceError:
                logger.warning(
                    "Failed to clean up stored image after index failure",
                    extra={"image_key": image_key, "drift": True},
                )
            raise

        return image_key
