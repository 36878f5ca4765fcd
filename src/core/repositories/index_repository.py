"""Abstract contract for the gallery index."""

from abc import ABC, abstractmethod

from core.models.gallery import GalleryEntry


class GalleryIndexRepository(ABC):
    """Contract for the ordered record set of gallery entries.

    Implementations could be DynamoDB, PostgreSQL, etc.
    Thumbnail status is positional: the entry with the greatest
    `recorded_at` of a gallery is its thumbnail.
    """

    @abstractmethod
    def insert(self, *, entry: GalleryEntry) -> None:
        """Insert an entry with its caller-supplied `recorded_at`.

        Raises:
            GalleryIndexError: If the write fails
        """

    @abstractmethod
    def remove(self, *, vendor_id: str, product_id: str, image_key: str) -> int:
        """Delete the matching entry.

        Returns:
            Number of rows removed (0 or 1)

        Raises:
            GalleryIndexError: If the delete fails
        """

    @abstractmethod
    def touch(self, *, vendor_id: str, product_id: str, image_key: str) -> int:
        """Rewrite `recorded_at` of the matching entry to the current time.

        This promotes the entry to thumbnail. Absent entries are not created.

        Returns:
            Number of rows updated (0 or 1)

        Raises:
            GalleryIndexError: If the update fails
        """

    @abstractmethod
    def list_entries(self, *, vendor_id: str, product_id: str) -> list[GalleryEntry]:
        """List a gallery, newest `recorded_at` first.

        Returns:
            Ordered entries; empty list when the gallery has none

        Raises:
            GalleryIndexError: If the query fails
        """
