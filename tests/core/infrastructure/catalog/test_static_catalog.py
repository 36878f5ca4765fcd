import json

import pytest

from core.infrastructure.catalog.static_catalog import StaticProductCatalog
from core.models.gallery import ProductInfo


class TestStaticProductCatalog:
    def test_builtin_catalog_is_used_by_default(self, monkeypatch) -> None:
        monkeypatch.delenv("PRODUCT_CATALOG_FILE", raising=False)
        catalog = StaticProductCatalog()

        product = catalog.get_product(vendor_id="vendor_456", product_id="prod_14")

        assert product == ProductInfo(product_id="prod_14", name="Classic Leather Wallet", brand="gucci")
        assert len(catalog.list_products(vendor_id="vendor_123")) == 13

    def test_catalog_file_overrides_builtin(self, monkeypatch, tmp_path) -> None:
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps({"vendor_x": [{"id": "p1", "name": "Cap", "brand": "acme"}]}))
        monkeypatch.setenv("PRODUCT_CATALOG_FILE", str(path))

        catalog = StaticProductCatalog()

        assert catalog.list_products(vendor_id="vendor_x") == [
            ProductInfo(product_id="p1", name="Cap", brand="acme")
        ]
        assert catalog.list_products(vendor_id="vendor_123") is None

    def test_missing_catalog_file_raises(self, monkeypatch, tmp_path) -> None:
        monkeypatch.setenv("PRODUCT_CATALOG_FILE", str(tmp_path / "missing.json"))

        with pytest.raises(FileNotFoundError):
            StaticProductCatalog()

    def test_unknown_product_and_vendor(self, test_catalog) -> None:
        assert test_catalog.get_product(vendor_id="vendor_123", product_id="prod_14") is None
        assert test_catalog.get_product(vendor_id="nobody", product_id="prod_1") is None
        assert test_catalog.list_products(vendor_id="nobody") is None

    def test_known_vendor_without_products(self, test_catalog) -> None:
        assert test_catalog.list_products(vendor_id="vendor_empty") == []

    def test_list_preserves_catalog_order_and_returns_copy(self, test_catalog) -> None:
        products = test_catalog.list_products(vendor_id="vendor_123")
        products.clear()

        assert [p.product_id for p in test_catalog.list_products(vendor_id="vendor_123")] == [
            "prod_1",
            "prod_2",
        ]
