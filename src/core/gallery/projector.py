"""Projection of gallery entries onto signed retrieval URLs."""

from collections.abc import Sequence
import os

from core.models.gallery import GalleryEntry
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.constants import DEFAULT_SIGNED_URL_TTL_SECONDS, ENV_SIGNED_URL_TTL_SECONDS


class SignedUrlProjector:
    """Maps entries to signed URLs, one per entry, preserving order.

    URLs are generated at read time and stay valid for a fixed window;
    expiry or later deletion of the object is the URL holder's concern.
    """

    def __init__(
        self,
        storage: ImageStorageRepository,
        *,
        expires_in: int | None = None,
    ) -> None:
        self._storage = storage
        if expires_in is None:
            expires_in = int(os.getenv(ENV_SIGNED_URL_TTL_SECONDS, str(DEFAULT_SIGNED_URL_TTL_SECONDS)))
        self._expires_in = expires_in

    @property
    def expires_in(self) -> int:
        return self._expires_in

    def project(self, entries: Sequence[GalleryEntry]) -> list[str]:
        return [
            self._storage.signed_read_url(key=entry.image_key, expires_in=self._expires_in)
            for entry in entries
        ]
