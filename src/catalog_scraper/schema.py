"""Schema-safe product record handed to the catalog store."""

from datetime import datetime
from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from catalog_scraper.constants import (
    DEFAULT_GST_RATE,
    DEFAULT_STOCK,
    MAX_BRAND_LENGTH,
    MAX_DESCRIPTION_LENGTH,
    MAX_FEATURES,
    MAX_IMAGES,
    MAX_NAME_LENGTH,
    MAX_SEO_KEYWORDS,
    MAX_SHORT_DESCRIPTION_LENGTH,
    MAX_SKU_LENGTH,
    MAX_SPECIFICATIONS,
    MAX_TAGS,
    MAX_TEXT_LENGTH,
)


class _RecordModel(BaseModel):
    # Serialized field names follow the catalog's camelCase schema
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProductImage(_RecordModel):
    url: str = Field(min_length=1)
    alt: str = Field(default="Product image", max_length=MAX_TEXT_LENGTH)
    is_primary: bool = False


class Specification(_RecordModel):
    name: str = Field(min_length=1, max_length=MAX_TEXT_LENGTH)
    value: str = Field(min_length=1, max_length=MAX_TEXT_LENGTH)


class GSTInfo(_RecordModel):
    rate: float = DEFAULT_GST_RATE
    hsn: str = ""


class SEOFields(_RecordModel):
    meta_title: str
    meta_description: str
    keywords: List[str] = Field(default_factory=list, max_length=MAX_SEO_KEYWORDS)


class SanitizedProductRecord(_RecordModel):
    """
    Product record that satisfies the catalog schema.

    Caps are enforced by DataSanitizer; the field constraints here reject
    any record that slipped past it. Prices are always zero and flagged
    for manual entry before publishing.
    """

    name: str = Field(max_length=MAX_NAME_LENGTH)
    description: str = Field(default="", max_length=MAX_DESCRIPTION_LENGTH)
    short_description: str = Field(default="", max_length=MAX_SHORT_DESCRIPTION_LENGTH)
    price: float = Field(default=0, ge=0, le=0)
    original_price: float = Field(default=0, ge=0, le=0)
    needs_price_entry: Literal[True] = True
    images: List[ProductImage] = Field(default_factory=list, max_length=MAX_IMAGES)
    category: str
    brand: str = Field(default="", max_length=MAX_BRAND_LENGTH)
    sku: str = Field(min_length=1, max_length=MAX_SKU_LENGTH)
    stock: int = Field(default=DEFAULT_STOCK, ge=0)
    is_featured: bool = False
    is_active: bool = True
    tags: List[str] = Field(default_factory=list, max_length=MAX_TAGS)
    specifications: List[Specification] = Field(
        default_factory=list, max_length=MAX_SPECIFICATIONS
    )
    features: List[str] = Field(default_factory=list, max_length=MAX_FEATURES)
    source_url: str
    scraped_at: datetime
    gst: GSTInfo = Field(default_factory=GSTInfo)
    seo: SEOFields

    @model_validator(mode="after")
    def _check_collections(self) -> "SanitizedProductRecord":
        if sum(1 for image in self.images if image.is_primary) > 1:
            raise ValueError("At most one image may be primary")
        if len({image.url for image in self.images}) != len(self.images):
            raise ValueError("Image URLs must be unique")
        if any(not feature for feature in self.features):
            raise ValueError("Features must be non-empty")
        return self

    @property
    def primary_image(self) -> ProductImage | None:
        for image in self.images:
            if image.is_primary:
                return image
        return None

    def to_dict(self) -> dict:
        """Serialize with the catalog's camelCase field names."""
        return self.model_dump(mode="json", by_alias=True)
