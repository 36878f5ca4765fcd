"""In-process product catalog.

Loads a vendor -> products mapping from the JSON file named by
PRODUCT_CATALOG_FILE, falling back to the built-in catalog.
"""

from collections.abc import Mapping, Sequence
import json
import os
from pathlib import Path
from typing import Any

from aws_lambda_powertools import Logger

from core.models.gallery import ProductInfo
from core.repositories.catalog_repository import ProductCatalogRepository
from core.utils.constants import ENV_PRODUCT_CATALOG_FILE

logger = Logger(UTC=True)

CatalogData = Mapping[str, Sequence[Mapping[str, Any]]]

DEFAULT_VENDOR_PRODUCTS: CatalogData = {
    "vendor_123": [
        {"id": "prod_1", "name": "White & Black Stroke Art Abstract Pattern Shirt", "brand": "nike"},
        {"id": "prod_2", "name": "Black Liquid Art Aloha Shirt", "brand": "nike"},
        {"id": "prod_3", "name": "Neon Tropical Pattern Aloha Shirt", "brand": "adidas"},
        {"id": "prod_4", "name": "Modern Abstract Art Aloha Shirt", "brand": "adidas"},
        {"id": "prod_5", "name": "Bright Tropical Print Aloha Shirt", "brand": "nike"},
        {"id": "prod_6", "name": "Multicoloured Geometric Pattern Aloha Shirt", "brand": "puma"},
        {"id": "prod_7", "name": "Blue & Black Abstract Art Pattern Aloha Shirt", "brand": "puma"},
        {"id": "prod_8", "name": "Abstract Pattern Aloha Shirt", "brand": "puma"},
        {"id": "prod_9", "name": "Green Abstract Pattern Aloha Shirt", "brand": "puma"},
        {"id": "prod_10", "name": "White & Sky Blue Tie Dye Pattern Aloha Shirt", "brand": "puma"},
        {"id": "prod_11", "name": "Plain Red & Black Tie Dye Pattern Aloha Shirt", "brand": "puma"},
        {"id": "prod_12", "name": "Black & White Tie Dye Pattern Aloha Shirt", "brand": "puma"},
        {"id": "prod_13", "name": "Grey & White Tie Dye Pattern Aloha Shirt", "brand": "puma"},
    ],
    "vendor_456": [
        {"id": "prod_14", "name": "Classic Leather Wallet", "brand": "gucci"},
        {"id": "prod_15", "name": "Stainless Steel Watch", "brand": "gucci"},
        {"id": "prod_16", "name": "Canvas Backpack", "brand": "gucci"},
        {"id": "prod_17", "name": "Sunglasses", "brand": "gucci"},
    ],
}


class StaticProductCatalog(ProductCatalogRepository):
    """Read-only catalog held in memory."""

    def __init__(self, data: CatalogData | None = None) -> None:
        source = data if data is not None else self._load_default()
        self._products: dict[str, list[ProductInfo]] = {
            vendor_id: [
                ProductInfo(
                    product_id=str(product["id"]),
                    name=str(product["name"]),
                    brand=str(product["brand"]),
                )
                for product in products
            ]
            for vendor_id, products in source.items()
        }

    @staticmethod
    def _load_default() -> CatalogData:
        catalog_file = os.getenv(ENV_PRODUCT_CATALOG_FILE)
        if not catalog_file:
            return DEFAULT_VENDOR_PRODUCTS

        logger.info("Loading product catalog", extra={"path": catalog_file})
        with open(Path(catalog_file), encoding="utf-8") as f:
            data: CatalogData = json.load(f)
        return data

    def get_product(self, *, vendor_id: str, product_id: str) -> ProductInfo | None:
        for product in self._products.get(vendor_id, []):
            if product.product_id == product_id:
                return product
        return None

    def list_products(self, *, vendor_id: str) -> list[ProductInfo] | None:
        products = self._products.get(vendor_id)
        return list(products) if products is not None else None
