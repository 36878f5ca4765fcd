"""Storage key derivation for gallery images.

Keys are namespaced as `products/{vendor}/{brand}/{product}/` so that one
product's images share a prefix, with a millisecond timestamp and random
suffix making each key unique under concurrent uploads.

Vendor and product segments are the validated IDs verbatim: IDs are case
sensitive, so `P1` and `p1` must not share a namespace. Only the brand,
which is free text from the catalog, is slugified.
"""

import re
import time
import uuid
from urllib.parse import unquote, urlsplit

from core.utils.constants import GALLERY_ID_SEPARATOR, IMAGE_KEY_ROOT, NORMALIZED_EXTENSION

_SLUG_PATTERN = re.compile(r"[^a-z0-9_-]+")


def slugify(value: str) -> str:
    """Lower-case a key segment and collapse anything unsafe to '-'."""
    slug = _SLUG_PATTERN.sub("-", value.strip().lower()).strip("-")
    return slug or "unknown"


def gallery_key_prefix(*, vendor_id: str, brand: str, product_id: str) -> str:
    """Return the key prefix shared by every image of one gallery."""
    return f"{IMAGE_KEY_ROOT}/{vendor_id}/{slugify(brand)}/{product_id}/"


def build_image_key(
    *,
    vendor_id: str,
    brand: str,
    product_id: str,
    extension: str = NORMALIZED_EXTENSION,
) -> str:
    """Derive a new unique storage key inside the gallery namespace."""
    prefix = gallery_key_prefix(vendor_id=vendor_id, brand=brand, product_id=product_id)
    return f"{prefix}{int(time.time() * 1000)}-{uuid.uuid4().hex[:12]}.{extension}"


def gallery_id(vendor_id: str, product_id: str) -> str:
    """Return the index partition value for a gallery."""
    return f"{vendor_id}{GALLERY_ID_SEPARATOR}{product_id}"


def key_from_signed_url(url: str, *, bucket: str) -> str | None:
    """Extract the object key from a signed URL.

    Handles both virtual-hosted (`https://bucket.s3.../key`) and
    path-style (`http://endpoint/bucket/key`) URLs.

    Returns:
        The decoded key, or None if the URL has no usable path
    """
    try:
        parts = urlsplit(url)
    except ValueError:
        return None

    if not parts.scheme or not parts.netloc:
        return None

    path = unquote(parts.path).lstrip("/")
    host = parts.hostname or ""

    if not host.startswith(f"{bucket}.") and path.startswith(f"{bucket}/"):
        path = path[len(bucket) + 1 :]

    return path or None


def belongs_to_gallery(image_key: str, *, vendor_id: str, product_id: str) -> bool:
    """Check that a key lives under the vendor/product namespace.

    The brand segment is not compared: entries keep the brand they were
    uploaded with even if the catalog later renames it.
    """
    parts = image_key.split("/")
    return (
        len(parts) == 5
        and parts[0] == IMAGE_KEY_ROOT
        and parts[1] == vendor_id
        and parts[3] == product_id
        and bool(parts[4])
    )
