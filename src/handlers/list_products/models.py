from pydantic import BaseModel, ConfigDict, Field, StrictStr

from core.models.gallery import ProductStatus
from core.utils.constants import ID_PATTERN


class ListProductsRequest(BaseModel):
    """Validation model for vendor product listing request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    vendor_id: StrictStr = Field(
        ...,
        min_length=1,
        max_length=64,
        pattern=ID_PATTERN,
        description="Vendor identifier",
    )


class ListProductsResponse(BaseModel):
    """Catalog products of a vendor with their gallery status."""

    vendor_id: str = Field(..., description="Vendor identifier")
    products: list[ProductStatus] = Field(default_factory=list)
