import re

from core.utils.keys import (
    belongs_to_gallery,
    build_image_key,
    gallery_id,
    gallery_key_prefix,
    key_from_signed_url,
    slugify,
)

BUCKET = "gallery-bucket"


class TestSlugify:
    def test_lowercases_and_replaces_unsafe_characters(self) -> None:
        assert slugify("Louis Vuitton") == "louis-vuitton"
        assert slugify("A&B / C") == "a-b-c"

    def test_keeps_identifier_characters(self) -> None:
        assert slugify("vendor_123") == "vendor_123"
        assert slugify("prod-1") == "prod-1"

    def test_empty_value_falls_back(self) -> None:
        assert slugify("  ") == "unknown"
        assert slugify("///") == "unknown"


class TestBuildImageKey:
    def test_key_is_namespaced_by_vendor_brand_and_product(self) -> None:
        key = build_image_key(vendor_id="vendor_123", brand="Nike", product_id="prod_1")

        assert key.startswith("products/vendor_123/nike/prod_1/")
        assert re.fullmatch(r"products/vendor_123/nike/prod_1/\d+-[0-9a-f]{12}\.webp", key)

    def test_keys_are_unique(self) -> None:
        keys = {
            build_image_key(vendor_id="vendor_123", brand="nike", product_id="prod_1")
            for _ in range(50)
        }
        assert len(keys) == 50

    def test_prefix_matches_built_key(self) -> None:
        prefix = gallery_key_prefix(vendor_id="vendor_123", brand="nike", product_id="prod_1")
        key = build_image_key(vendor_id="vendor_123", brand="nike", product_id="prod_1")
        assert key.startswith(prefix)


class TestGalleryId:
    def test_joins_vendor_and_product(self) -> None:
        assert gallery_id("vendor_123", "prod_1") == "vendor_123#prod_1"


class TestBelongsToGallery:
    def test_key_of_same_gallery(self) -> None:
        key = build_image_key(vendor_id="vendor_123", brand="nike", product_id="prod_1")
        assert belongs_to_gallery(key, vendor_id="vendor_123", product_id="prod_1")

    def test_brand_segment_is_not_compared(self) -> None:
        key = "products/vendor_123/old-brand/prod_1/1700000000000-abcdef123456.webp"
        assert belongs_to_gallery(key, vendor_id="vendor_123", product_id="prod_1")

    def test_key_of_other_product(self) -> None:
        key = build_image_key(vendor_id="vendor_123", brand="nike", product_id="prod_2")
        assert not belongs_to_gallery(key, vendor_id="vendor_123", product_id="prod_1")

    def test_key_of_other_vendor(self) -> None:
        key = build_image_key(vendor_id="vendor_456", brand="nike", product_id="prod_1")
        assert not belongs_to_gallery(key, vendor_id="vendor_123", product_id="prod_1")

    def test_malformed_keys(self) -> None:
        assert not belongs_to_gallery("", vendor_id="vendor_123", product_id="prod_1")
        assert not belongs_to_gallery(
            "products/vendor_123/nike/prod_1/", vendor_id="vendor_123", product_id="prod_1"
        )
        assert not belongs_to_gallery(
            "other/vendor_123/nike/prod_1/a.webp", vendor_id="vendor_123", product_id="prod_1"
        )


class TestKeyFromSignedUrl:
    def test_virtual_hosted_url(self) -> None:
        url = (
            f"https://{BUCKET}.s3.amazonaws.com/products/vendor_123/nike/prod_1/1-abc.webp"
            "?X-Amz-Algorithm=AWS4-HMAC-SHA256&X-Amz-Expires=3600"
        )
        assert key_from_signed_url(url, bucket=BUCKET) == "products/vendor_123/nike/prod_1/1-abc.webp"

    def test_path_style_url(self) -> None:
        url = f"http://localhost:4566/{BUCKET}/products/vendor_123/nike/prod_1/1-abc.webp?sig=x"
        assert key_from_signed_url(url, bucket=BUCKET) == "products/vendor_123/nike/prod_1/1-abc.webp"

    def test_percent_encoded_path_is_decoded(self) -> None:
        url = f"https://{BUCKET}.s3.amazonaws.com/products/vendor_123/louis%20v/prod_1/a.webp"
        assert key_from_signed_url(url, bucket=BUCKET) == "products/vendor_123/louis v/prod_1/a.webp"

    def test_unusable_urls(self) -> None:
        assert key_from_signed_url("not a url", bucket=BUCKET) is None
        assert key_from_signed_url(f"https://{BUCKET}.s3.amazonaws.com/", bucket=BUCKET) is None
        assert key_from_signed_url("/relative/path", bucket=BUCKET) is None


class TestCaseSensitiveIds:
    def test_id_segments_keep_their_case(self) -> None:
        key = build_image_key(vendor_id="Vendor_A", brand="Nike", product_id="P1")

        assert key.startswith("products/Vendor_A/nike/P1/")

    def test_case_twin_products_do_not_share_a_namespace(self) -> None:
        key = build_image_key(vendor_id="v1", brand="b", product_id="p1")

        assert belongs_to_gallery(key, vendor_id="v1", product_id="p1")
        assert not belongs_to_gallery(key, vendor_id="v1", product_id="P1")

    def test_case_twin_vendors_do_not_share_a_namespace(self) -> None:
        key = build_image_key(vendor_id="v1", brand="b", product_id="p1")

        assert not belongs_to_gallery(key, vendor_id="V1", product_id="p1")
