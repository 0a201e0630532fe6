"""
Product field extraction.

ExtractionEngine turns a rendered product page into a RawExtraction. Each
text field has an ordered strategy chain (see selectors.py); list fields
(pricing, images, specifications, features) use dedicated scanners. A
field nobody can find is left unset for the sanitizer to default.
"""

import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence

from bs4 import BeautifulSoup

from catalog_scraper.constants import (
    CURRENCY_MARKERS,
    DEFAULT_IMAGE_HOST_HINTS,
    DEFAULT_SITE_NAME,
    MIN_DESCRIPTION_SCAN_LENGTH,
)
from catalog_scraper.exceptions import ExtractionError
from catalog_scraper.extraction import selectors
from catalog_scraper.extraction.images import ImageCollector
from catalog_scraper.extraction.pricing import extract_price_candidates
from catalog_scraper.extraction.strategies import (
    AttributeValue,
    JsonLdField,
    ParagraphScan,
    Strategy,
    TitleFallback,
    element_text,
    first_match,
    selector_chain,
)
from catalog_scraper.models import RawExtraction, RawSpecification, utcnow

logger = logging.getLogger(__name__)


def build_field_strategies(site_name: str) -> Dict[str, List[Strategy]]:
    """Ordered strategy chains for the single-valued text fields."""
    return {
        "name": [
            *selector_chain(selectors.NAME_SELECTORS),
            JsonLdField("name"),
            AttributeValue('meta[property="og:title"]'),
            TitleFallback(site_name),
        ],
        "description": [
            *selector_chain(selectors.DESCRIPTION_SELECTORS),
            ParagraphScan(
                containers=selectors.DESCRIPTION_CONTAINERS,
                min_length=MIN_DESCRIPTION_SCAN_LENGTH,
                excluded_markers=CURRENCY_MARKERS,
            ),
            JsonLdField("description"),
        ],
        "short_description": [
            *selector_chain(selectors.SHORT_DESCRIPTION_SELECTORS),
            AttributeValue('meta[name="description"]'),
        ],
        "brand": [
            *selector_chain(selectors.BRAND_SELECTORS),
            JsonLdField("brand.name"),
            JsonLdField("brand"),
        ],
        "sku": [
            *selector_chain(selectors.SKU_SELECTORS),
            JsonLdField("sku"),
            JsonLdField("mpn"),
        ],
        "category": [
            *selector_chain(selectors.CATEGORY_SELECTORS),
            JsonLdField("category"),
        ],
    }


class ExtractionEngine:
    """Extracts raw product facts from rendered HTML."""

    def __init__(
        self,
        site_name: str = DEFAULT_SITE_NAME,
        image_host_hints: Sequence[str] = DEFAULT_IMAGE_HOST_HINTS,
        parser: str = "html.parser",
    ):
        """
        Initialize the engine.

        Args:
            site_name: Source site name, stripped from page titles
            image_host_hints: Hosts whose images count as product images
            parser: BeautifulSoup parser name
        """
        self.site_name = site_name
        self.image_host_hints = tuple(image_host_hints)
        self.parser = parser
        self.field_strategies = build_field_strategies(site_name)

    @classmethod
    def from_config(cls, config) -> "ExtractionEngine":
        return cls(site_name=config.site_name, image_host_hints=config.image_host_hints)

    def parse(self, html: str) -> BeautifulSoup:
        if not isinstance(html, str):
            raise ExtractionError(f"Expected HTML text, got {type(html).__name__}")
        try:
            return BeautifulSoup(html, self.parser)
        except Exception as e:
            raise ExtractionError(f"Could not parse page HTML: {e}") from e

    def extract(
        self,
        html: str,
        source_url: str,
        scraped_at: Optional[datetime] = None,
    ) -> RawExtraction:
        """
        Extract every field from a page.

        Args:
            html: Rendered page HTML
            source_url: URL the page was loaded from
            scraped_at: Timestamp to record (defaults to now)

        Returns:
            RawExtraction with whatever could be found

        Raises:
            ExtractionError: If the page could not be processed at all
        """
        try:
            soup = self.parse(html)
            raw = RawExtraction(
                source_url=source_url,
                scraped_at=scraped_at or utcnow(),
                name=self.extract_field(soup, "name"),
                description=self.extract_field(soup, "description"),
                short_description=self.extract_field(soup, "short_description"),
                pricing_candidates=self._collect("pricing", extract_price_candidates, soup),
                images=self._collect(
                    "images",
                    ImageCollector(source_url, host_hints=self.image_host_hints).collect,
                    soup,
                ),
                specifications=self._collect("specifications", extract_specifications, soup),
                features=self._collect("features", extract_features, soup),
                brand=self.extract_field(soup, "brand"),
                sku=self.extract_field(soup, "sku"),
                category_text=self.extract_field(soup, "category"),
            )
        except ExtractionError as e:
            e.url = e.url or source_url
            raise
        except Exception as e:
            raise ExtractionError(f"Extraction failed: {e}", url=source_url) from e

        logger.debug(
            f"Extracted from {source_url}: name={raw.name!r}, "
            f"images={len(raw.images)}, specs={len(raw.specifications)}, "
            f"prices={raw.pricing_candidates}"
        )
        return raw

    def extract_field(self, soup: BeautifulSoup, field_name: str) -> Optional[str]:
        """Run a text field's strategy chain."""
        return first_match(self.field_strategies[field_name], soup, field_name)

    @staticmethod
    def _collect(field_name: str, collector: Callable[[BeautifulSoup], list], soup) -> list:
        try:
            return collector(soup) or []
        except Exception as e:
            logger.debug(f"Collector for '{field_name}' failed: {e}")
            return []


def _table_specifications(soup: BeautifulSoup) -> List[RawSpecification]:
    specs = []
    for selector in selectors.SPEC_ROW_SELECTORS:
        for row in soup.select(selector):
            cells = row.find_all(["th", "td"], recursive=False) or row.find_all(["th", "td"])
            if len(cells) < 2:
                continue
            name, value = element_text(cells[0]), element_text(cells[1])
            if name and value:
                specs.append(RawSpecification(name=name, value=value))
    return specs


def _definition_list_specifications(soup: BeautifulSoup) -> List[RawSpecification]:
    specs = []
    for selector in selectors.SPEC_LIST_SELECTORS:
        for definition_list in soup.select(selector):
            for term in definition_list.find_all("dt"):
                detail = term.find_next_sibling("dd")
                name, value = element_text(term), element_text(detail)
                if name and value:
                    specs.append(RawSpecification(name=name, value=value))
    return specs


def extract_specifications(soup: BeautifulSoup) -> List[RawSpecification]:
    """Name/value pairs from spec tables, or definition lists if there are none."""
    return first_match(
        [_table_specifications, _definition_list_specifications],
        soup,
        "specifications",
    ) or []


def extract_features(soup: BeautifulSoup) -> List[str]:
    """List items from feature/highlight containers."""
    features = []
    for selector in selectors.FEATURE_SELECTORS:
        for item in soup.select(selector):
            text = element_text(item)
            if text:
                features.append(text)
    return features
