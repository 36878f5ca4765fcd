"""Gallery mutation coordinator.

Single entry point for every gallery read and write. Each mutation resolves
the product through the catalog first, applies its steps against the object
store and the index, and answers with the refreshed gallery.
"""

from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor

from aws_lambda_powertools import Logger

from core.gallery.ingestion import ImageIngestionPipeline, IngestionResult
from core.gallery.projector import SignedUrlProjector
from core.infrastructure.aws.dynamodb_gallery_index import DynamoDBGalleryIndex
from core.infrastructure.aws.s3_object_store import S3ObjectStore
from core.infrastructure.catalog.static_catalog import StaticProductCatalog
from core.models.errors import (
    BatchUploadError,
    GalleryIndexError,
    ImageNotFoundError,
    ProductNotFoundError,
    ValidationError,
    VendorNotFoundError,
)
from core.models.gallery import (
    BatchUpdatePayload,
    GalleryAction,
    ImageKeyPayload,
    ProductInfo,
    ProductStatus,
    RawImageFile,
    UploadPayload,
)
from core.processing.image_normalizer import PillowImageNormalizer
from core.repositories.catalog_repository import ProductCatalogRepository
from core.repositories.index_repository import GalleryIndexRepository
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.constants import ERROR_CODE_UNSUPPORTED_ACTION, MAX_STATUS_WORKERS
from core.utils.keys import belongs_to_gallery

logger = Logger(UTC=True)

MutationPayload = UploadPayload | ImageKeyPayload | BatchUpdatePayload

_PAYLOAD_TYPES: dict[GalleryAction, type[MutationPayload]] = {
    GalleryAction.UPLOAD: UploadPayload,
    GalleryAction.DELETE: ImageKeyPayload,
    GalleryAction.SET_THUMBNAIL: ImageKeyPayload,
    GalleryAction.BATCH_UPDATE: BatchUpdatePayload,
}


class GalleryCoordinator:
    """Applies gallery mutations and serves ordered gallery views.

    Dependencies are injectable for tests; by default the coordinator talks
    to S3, the DynamoDB gallery index and the built-in product catalog.
    """

    def __init__(
        self,
        *,
        storage: ImageStorageRepository | None = None,
        index: GalleryIndexRepository | None = None,
        catalog: ProductCatalogRepository | None = None,
        pipeline: ImageIngestionPipeline | None = None,
        projector: SignedUrlProjector | None = None,
    ) -> None:
        self.storage = storage or S3ObjectStore()
        self.index = index or DynamoDBGalleryIndex()
        self.catalog = catalog or StaticProductCatalog()
        self.pipeline = pipeline or ImageIngestionPipeline(
            storage=self.storage,
            index=self.index,
            normalizer=PillowImageNormalizer(),
        )
        self.projector = projector or SignedUrlProjector(self.storage)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_gallery(self, *, vendor_id: str, product_id: str) -> list[str]:
        """Return signed URLs of the gallery, thumbnail first.

        The catalog is not consulted: an unknown gallery is simply empty.
        """
        entries = self.index.list_entries(vendor_id=vendor_id, product_id=product_id)
        return self.projector.project(entries)

    def list_products_with_status(self, *, vendor_id: str) -> list[ProductStatus]:
        """Return every catalog product of a vendor with its gallery status.

        Raises:
            VendorNotFoundError: If the vendor has no catalog entry
        """
        products = self.catalog.list_products(vendor_id=vendor_id)
        if products is None:
            raise VendorNotFoundError(details={"vendor_id": vendor_id})

        if not products:
            return []

        with ThreadPoolExecutor(max_workers=min(MAX_STATUS_WORKERS, len(products))) as executor:
            return list(
                executor.map(
                    lambda product: self._product_status(vendor_id=vendor_id, product=product),
                    products,
                )
            )

    def _product_status(self, *, vendor_id: str, product: ProductInfo) -> ProductStatus:
        entries = self.index.list_entries(vendor_id=vendor_id, product_id=product.product_id)
        cover_urls = self.projector.project(entries[:1])

        return ProductStatus(
            product_id=product.product_id,
            name=product.name,
            brand=product.brand,
            has_images=bool(entries),
            cover_url=cover_urls[0] if cover_urls else None,
            image_count=len(entries),
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def mutate(
        self,
        *,
        vendor_id: str,
        product_id: str,
        action: GalleryAction | str,
        payload: MutationPayload,
    ) -> list[str]:
        """Apply one mutation and return the refreshed gallery.

        Args:
            vendor_id: Owning vendor
            product_id: Owning product
            action: One of upload, delete, setThumbnail, batchUpdate
            payload: Action-specific payload model

        Returns:
            Signed URLs of the gallery after the mutation, thumbnail first

        Raises:
            ValidationError: If the action is unknown or the payload does not match it
            ProductNotFoundError: If the catalog does not know the product
            ImageNotFoundError: If setThumbnail targets a key not in the gallery
            BatchUploadError: If some files of an upload could not be ingested
            StoreError: If the object store fails outside of ingestion
            GalleryIndexError: If the index fails outside of ingestion
        """
        try:
            gallery_action = GalleryAction(action)
        except ValueError as exc:
            raise ValidationError(
                message=f"Unsupported action: {action}",
                error_code=ERROR_CODE_UNSUPPORTED_ACTION,
                details={"action": str(action)},
            ) from exc

        expected = _PAYLOAD_TYPES[gallery_action]
        if not isinstance(payload, expected):
            raise ValidationError(
                message=f"Invalid payload for action {gallery_action.value}",
                details={"expected": expected.__name__},
            )

        product = self.catalog.get_product(vendor_id=vendor_id, product_id=product_id)
        if product is None:
            raise ProductNotFoundError(
                details={"vendor_id": vendor_id, "product_id": product_id},
            )

        logger.info(
            "Applying gallery mutation",
            extra={
                "vendor_id": vendor_id,
                "product_id": product_id,
                "action": gallery_action.value,
            },
        )

        ingestion: IngestionResult | None = None

        if isinstance(payload, UploadPayload):
            ingestion = self._upload(
                vendor_id=vendor_id,
                product=product,
                files=payload.files,
                thumbnail_index=payload.thumbnail_index,
            )
        elif gallery_action is GalleryAction.DELETE:
            self._delete(
                vendor_id=vendor_id,
                product_id=product_id,
                image_key=self._resolve_key(payload.image_key, payload.image_url),
            )
        elif gallery_action is GalleryAction.SET_THUMBNAIL:
            self._set_thumbnail(
                vendor_id=vendor_id,
                product_id=product_id,
                image_key=self._resolve_key(payload.image_key, payload.image_url),
            )
        else:
            ingestion = self._batch_update(vendor_id=vendor_id, product=product, payload=payload)

        urls = self.list_gallery(vendor_id=vendor_id, product_id=product_id)

        if ingestion is not None and ingestion.failed:
            raise BatchUploadError(
                message="Some images could not be uploaded",
                details={
                    "uploaded_count": len(ingestion.image_keys),
                    "failed_count": len(ingestion.failures),
                    "failed_files": [failure.file_name for failure in ingestion.failures],
                    "images": urls,
                },
            )

        return urls

    def _upload(
        self,
        *,
        vendor_id: str,
        product: ProductInfo,
        files: Sequence[RawImageFile],
        thumbnail_index: int | None,
    ) -> IngestionResult:
        return self.pipeline.ingest(
            vendor_id=vendor_id,
            product=product,
            files=files,
            thumbnail_index=thumbnail_index,
        )

    def _delete(self, *, vendor_id: str, product_id: str, image_key: str | None) -> int:
        """Delete one image: object first, then its index row.

        Keys that do not belong to this gallery are ignored so that one
        product can never delete another product's objects.
        """
        if image_key is None or not belongs_to_gallery(
            image_key, vendor_id=vendor_id, product_id=product_id
        ):
            logger.info(
                "Image key outside gallery, nothing to delete",
                extra={"vendor_id": vendor_id, "product_id": product_id, "image_key": image_key},
            )
            return 0

        self.storage.delete(key=image_key)

        try:
            removed = self.index.remove(
                vendor_id=vendor_id,
                product_id=product_id,
                image_key=image_key,
            )
        except GalleryIndexError:
            logger.warning(
                "Image object deleted but index entry remains",
                extra={"image_key": image_key, "drift": True},
            )
            raise

        logger.info("Image deleted", extra={"image_key": image_key, "removed": removed})
        return removed

    def _set_thumbnail(self, *, vendor_id: str, product_id: str, image_key: str | None) -> None:
        touched = 0
        if image_key is not None:
            touched = self.index.touch(
                vendor_id=vendor_id,
                product_id=product_id,
                image_key=image_key,
            )

        if touched == 0:
            raise ImageNotFoundError(
                details={"vendor_id": vendor_id, "product_id": product_id, "image_key": image_key},
            )

        logger.info("Thumbnail changed", extra={"image_key": image_key})

    def _batch_update(
        self,
        *,
        vendor_id: str,
        product: ProductInfo,
        payload: BatchUpdatePayload,
    ) -> IngestionResult:
        """Deletes, then uploads, then the thumbnail. Earlier steps are kept on failure."""
        delete_keys: list[str | None] = list(payload.delete_keys)
        delete_keys.extend(self.storage.key_from_url(url) for url in payload.delete_urls)

        for image_key in dict.fromkeys(delete_keys):
            self._delete(vendor_id=vendor_id, product_id=product.product_id, image_key=image_key)

        ingestion = self._upload(
            vendor_id=vendor_id,
            product=product,
            files=payload.files,
            thumbnail_index=payload.thumbnail_index,
        )

        if payload.thumbnail_key is not None or payload.thumbnail_url is not None:
            self._set_thumbnail(
                vendor_id=vendor_id,
                product_id=product.product_id,
                image_key=self._resolve_key(payload.thumbnail_key, payload.thumbnail_url),
            )

        return ingestion

    def _resolve_key(self, image_key: str | None, image_url: str | None) -> str | None:
        if image_key:
            return image_key
        if image_url:
            return self.storage.key_from_url(image_url)
        return None
