"""Abstract contract for gallery image object storage."""

from abc import ABC, abstractmethod


class ImageStorageRepository(ABC):
    """Contract for storing, deleting and exposing image blobs.

    Implementations could be S3, GCS, local disk, etc.
    Services depend on this interface, not the implementation.
    """

    @abstractmethod
    def put(self, *, key: str, data: bytes, content_type: str) -> None:
        """Store a blob under `key`, overwriting any previous object.

        Args:
            key: Non-empty storage key, unique per logical image
            data: Encoded image bytes
            content_type: MIME type (e.g., 'image/webp')

        Raises:
            ValidationError: If the key is empty
            StoreError: If the upload fails
        """

    @abstractmethod
    def delete(self, *, key: str) -> None:
        """Delete a blob. Deleting an absent key is not an error.

        Args:
            key: Storage key from `put`

        Raises:
            StoreError: If deletion fails
        """

    @abstractmethod
    def signed_read_url(self, *, key: str, expires_in: int) -> str:
        """Return a time-limited retrieval URL for `key`.

        The object's existence is not checked.

        Args:
            key: Storage key from `put`
            expires_in: URL validity in seconds

        Raises:
            StoreError: If the URL cannot be signed
        """

    @abstractmethod
    def key_from_url(self, url: str) -> str | None:
        """Recover the storage key from a URL produced by `signed_read_url`.

        Returns:
            The key, or None if the URL cannot be parsed
        """
