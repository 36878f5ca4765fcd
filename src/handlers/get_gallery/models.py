from pydantic import BaseModel, ConfigDict, Field, StrictStr

from core.utils.constants import ID_PATTERN


class GetGalleryRequest(BaseModel):
    """Validation model for gallery read request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    vendor_id: StrictStr = Field(
        ...,
        min_length=1,
        max_length=64,
        pattern=ID_PATTERN,
        description="Vendor identifier",
    )
    product_id: StrictStr = Field(
        ...,
        min_length=1,
        max_length=64,
        pattern=ID_PATTERN,
        description="Product identifier",
    )
