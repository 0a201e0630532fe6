"""
Normalization of raw extraction output into catalog records.

DataSanitizer is the only place record caps and defaults are applied.
Normalizing a record's own values again yields the same record, apart
from a synthesized SKU when none was scraped.
"""

import logging
import random
import re
import string
import time
from typing import Callable, Iterable, List, Optional

from catalog_scraper.config import CategoryTaxonomy
from catalog_scraper.constants import (
    DEFAULT_GST_RATE,
    DEFAULT_IMAGE_ALT,
    DEFAULT_META_DESCRIPTION,
    DEFAULT_PRODUCT_NAME,
    DEFAULT_SKU_PREFIX,
    DEFAULT_STOCK,
    DEFAULT_STORE_NAME,
    MAX_BRAND_LENGTH,
    MAX_DESCRIPTION_LENGTH,
    MAX_FEATURES,
    MAX_IMAGES,
    MAX_META_DESCRIPTION_LENGTH,
    MAX_META_TITLE_NAME_LENGTH,
    MAX_NAME_LENGTH,
    MAX_SEO_KEYWORDS,
    MAX_SHORT_DESCRIPTION_LENGTH,
    MAX_SKU_LENGTH,
    MAX_SPECIFICATIONS,
    MAX_TAGS,
    MAX_TEXT_LENGTH,
    MIN_TAG_LENGTH,
    SHORT_DESCRIPTION_FALLBACK_LENGTH,
    SKU_RANDOM_LENGTH,
    TAG_STOP_WORDS,
)
from catalog_scraper.models import RawExtraction, RawImage, RawSpecification
from catalog_scraper.schema import (
    GSTInfo,
    ProductImage,
    SanitizedProductRecord,
    SEOFields,
    Specification,
)

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")
_TAG_TOKEN = re.compile(r"\b\w{%d,}\b" % MIN_TAG_LENGTH)


def sanitize_string(value, max_length: int = MAX_TEXT_LENGTH) -> str:
    """Trim, collapse whitespace runs and truncate. Non-strings become ''."""
    if not value or not isinstance(value, str):
        return ""
    return _WHITESPACE.sub(" ", value).strip()[:max_length].rstrip()


def derive_short_description(description: str) -> str:
    """First sentence of a description, or its opening characters."""
    if not description:
        return ""
    sentences = [s.strip() for s in description.split(".") if s.strip()]
    if sentences:
        return f"{sentences[0]}."
    return description[:SHORT_DESCRIPTION_FALLBACK_LENGTH] + "..."


def generate_tags(text: str, limit: int = MAX_TAGS) -> List[str]:
    """Lower-cased word tokens without stop words, in first-seen order."""
    tags: List[str] = []
    for token in _TAG_TOKEN.findall(text.lower()):
        if token in TAG_STOP_WORDS or token in tags:
            continue
        tags.append(token)
        if len(tags) == limit:
            break
    return tags


def generate_sku(prefix: str = DEFAULT_SKU_PREFIX) -> str:
    """``{prefix}-{epoch millis}-{5 upper-case alphanumerics}``.

    Collisions are unlikely but possible; the catalog store enforces uniqueness.
    """
    suffix = "".join(
        random.choices(string.ascii_uppercase + string.digits, k=SKU_RANDOM_LENGTH)
    )
    return f"{prefix}-{int(time.time() * 1000)}-{suffix}"


class DataSanitizer:
    """Maps RawExtraction to SanitizedProductRecord."""

    def __init__(
        self,
        taxonomy: Optional[CategoryTaxonomy] = None,
        store_name: str = DEFAULT_STORE_NAME,
        sku_prefix: str = DEFAULT_SKU_PREFIX,
        sku_factory: Optional[Callable[[str], str]] = None,
    ):
        """
        Initialize the sanitizer.

        Args:
            taxonomy: Category taxonomy (defaults to the built-in one)
            store_name: Suffix for generated SEO titles
            sku_prefix: Prefix for synthesized SKUs
            sku_factory: Override for SKU synthesis (takes the prefix)
        """
        self.taxonomy = taxonomy or CategoryTaxonomy()
        self.store_name = store_name
        self.sku_prefix = sku_prefix
        self._sku_factory = sku_factory or generate_sku

    @classmethod
    def from_config(cls, config) -> "DataSanitizer":
        return cls(
            taxonomy=config.taxonomy,
            store_name=config.store_name,
            sku_prefix=config.sku_prefix,
        )

    def normalize(self, raw: RawExtraction) -> SanitizedProductRecord:
        """
        Build a schema-safe record.

        Args:
            raw: Extraction output

        Returns:
            SanitizedProductRecord with caps applied and prices zeroed
        """
        name = sanitize_string(raw.name, MAX_NAME_LENGTH) or DEFAULT_PRODUCT_NAME
        description = sanitize_string(raw.description, MAX_DESCRIPTION_LENGTH)
        short_description = sanitize_string(
            raw.short_description, MAX_SHORT_DESCRIPTION_LENGTH
        ) or sanitize_string(
            derive_short_description(description), MAX_SHORT_DESCRIPTION_LENGTH
        )

        sku = sanitize_string(raw.sku, MAX_SKU_LENGTH)
        if not sku:
            sku = self._sku_factory(self.sku_prefix)[:MAX_SKU_LENGTH]
            logger.debug(f"Synthesized SKU {sku} for {raw.source_url}")

        tags = generate_tags(f"{name} {description}")

        return SanitizedProductRecord(
            name=name,
            description=description,
            short_description=short_description,
            # Scraped prices are never published; an operator enters them
            price=0,
            original_price=0,
            needs_price_entry=True,
            images=self.clean_images(raw.images),
            category=self.taxonomy.resolve(raw.category_text),
            brand=sanitize_string(raw.brand, MAX_BRAND_LENGTH),
            sku=sku,
            stock=DEFAULT_STOCK,
            is_featured=False,
            is_active=True,
            tags=tags,
            specifications=self.clean_specifications(raw.specifications),
            features=self.clean_features(raw.features),
            source_url=raw.source_url,
            scraped_at=raw.scraped_at,
            gst=GSTInfo(
                rate=raw.gst_rate if raw.gst_rate and raw.gst_rate > 0 else DEFAULT_GST_RATE,
                hsn=sanitize_string(raw.hsn, MAX_SKU_LENGTH),
            ),
            seo=SEOFields(
                meta_title=self.meta_title(name),
                meta_description=self.meta_description(short_description or description),
                keywords=tags[:MAX_SEO_KEYWORDS],
            ),
        )

    def clean_images(self, images: Iterable[RawImage]) -> List[ProductImage]:
        """Drop URL-less and repeated images, cap, and settle one primary."""
        kept: List[RawImage] = []
        seen = set()
        for image in images or []:
            url = (image.url or "").strip() if image else ""
            if not url or url in seen:
                continue
            seen.add(url)
            kept.append(image)
            if len(kept) == MAX_IMAGES:
                break

        flagged = [index for index, image in enumerate(kept) if image.is_primary]
        primary_index = flagged[0] if len(flagged) == 1 else 0

        return [
            ProductImage(
                url=image.url.strip(),
                alt=(
                    sanitize_string(image.alt, MAX_TEXT_LENGTH)
                    or DEFAULT_IMAGE_ALT.format(index=index + 1)
                ),
                is_primary=index == primary_index,
            )
            for index, image in enumerate(kept)
        ]

    def clean_specifications(self, specs: Iterable[RawSpecification]) -> List[Specification]:
        cleaned = []
        for spec in specs or []:
            if spec is None:
                continue
            name = sanitize_string(spec.name, MAX_TEXT_LENGTH)
            value = sanitize_string(spec.value, MAX_TEXT_LENGTH)
            if name and value:
                cleaned.append(Specification(name=name, value=value))
            if len(cleaned) == MAX_SPECIFICATIONS:
                break
        return cleaned

    def clean_features(self, features: Iterable[str]) -> List[str]:
        cleaned = [sanitize_string(feature, MAX_TEXT_LENGTH) for feature in features or []]
        return [feature for feature in cleaned if feature][:MAX_FEATURES]

    def meta_title(self, name: str) -> str:
        return f"{name[:MAX_META_TITLE_NAME_LENGTH].rstrip()} | {self.store_name}"

    def meta_description(self, text: str) -> str:
        if not text:
            return DEFAULT_META_DESCRIPTION.format(store=self.store_name)
        if len(text) > MAX_META_DESCRIPTION_LENGTH:
            return text[:MAX_META_DESCRIPTION_LENGTH] + "..."
        return text
