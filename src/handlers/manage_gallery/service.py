"""Translation of gallery mutation requests into coordinator calls."""

from aws_lambda_powertools import Logger

from core.gallery.coordinator import GalleryCoordinator, MutationPayload
from core.models.gallery import (
    BatchUpdatePayload,
    GalleryAction,
    ImageKeyPayload,
    RawImageFile,
    UploadPayload,
)

from .models import ManageGalleryRequest, UploadFile

logger = Logger(UTC=True)


class ManageGalleryService:
    """Application service for gallery mutations."""

    def __init__(self, coordinator: GalleryCoordinator | None = None) -> None:
        self.coordinator = coordinator or GalleryCoordinator()

    @staticmethod
    def decode_files(files: list[UploadFile]) -> list[RawImageFile]:
        return [RawImageFile(data=f.decode(), file_name=f.file_name) for f in files]

    @classmethod
    def build_payload(cls, request: ManageGalleryRequest) -> MutationPayload:
        """Build the coordinator payload for the requested action."""
        if request.action is GalleryAction.UPLOAD:
            return UploadPayload(
                files=cls.decode_files(request.files),
                thumbnail_index=request.thumbnail_index,
            )

        if request.action in (GalleryAction.DELETE, GalleryAction.SET_THUMBNAIL):
            return ImageKeyPayload(image_key=request.image_key, image_url=request.image_url)

        return BatchUpdatePayload(
            delete_keys=request.delete_keys,
            delete_urls=request.delete_urls,
            files=cls.decode_files(request.files),
            thumbnail_index=request.thumbnail_index,
            thumbnail_key=request.thumbnail_key,
            thumbnail_url=request.thumbnail_url,
        )

    @staticmethod
    def mutation_counts(request: ManageGalleryRequest) -> dict[str, int]:
        """Count what the request asked for, keyed by metric name."""
        counts = {"ImagesUploaded": len(request.files), "ImagesDeleted": 0, "ThumbnailChanged": 0}

        if request.action is GalleryAction.DELETE:
            counts["ImagesDeleted"] = 1
        elif request.action is GalleryAction.SET_THUMBNAIL:
            counts["ThumbnailChanged"] = 1
        elif request.action is GalleryAction.BATCH_UPDATE:
            counts["ImagesDeleted"] = len(request.delete_keys) + len(request.delete_urls)
            counts["ThumbnailChanged"] = int(bool(request.thumbnail_key or request.thumbnail_url))

        return counts

    def apply(self, *, vendor_id: str, product_id: str, request: ManageGalleryRequest) -> list[str]:
        logger.debug(
            "Dispatching gallery mutation",
            extra={"vendor_id": vendor_id, "product_id": product_id, "action": request.action.value},
        )
        return self.coordinator.mutate(
            vendor_id=vendor_id,
            product_id=product_id,
            action=request.action,
            payload=self.build_payload(request),
        )
