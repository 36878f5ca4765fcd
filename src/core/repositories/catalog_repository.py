"""Abstract contract for the vendor product catalog."""

from abc import ABC, abstractmethod

from core.models.gallery import ProductInfo


class ProductCatalogRepository(ABC):
    """Read-only lookup of vendor products.

    The catalog is process-wide reference data injected into the
    coordinator, so it can be swapped for a real data source.
    """

    @abstractmethod
    def get_product(self, *, vendor_id: str, product_id: str) -> ProductInfo | None:
        """Return product info, or None if the pair is unknown."""

    @abstractmethod
    def list_products(self, *, vendor_id: str) -> list[ProductInfo] | None:
        """Return the vendor's products in catalog order, or None if the vendor is unknown."""
