"""Product image collection from gallery markup."""

import logging
import re
from typing import List, Optional, Sequence
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from catalog_scraper.constants import MAX_IMAGES, MIN_IMAGE_DIMENSION_PX
from catalog_scraper.extraction.selectors import IMAGE_SELECTORS, IMAGE_SOURCE_ATTRIBUTES
from catalog_scraper.extraction.strategies import clean_text
from catalog_scraper.models import RawImage

logger = logging.getLogger(__name__)

_LEADING_NUMBER = re.compile(r"^\s*(\d+)(?:\.\d+)?\s*(?:px)?\s*$", re.IGNORECASE)
_STYLE_DIMENSION = re.compile(r"(?<![-\w])(width|height)\s*:\s*([^;]+)", re.IGNORECASE)

PRODUCT_HINT = "product"


def parse_dimension(value: Optional[str]) -> Optional[int]:
    """Parse "120", "120px" or "120.5" to an int. Percentages and auto give None."""
    if value is None:
        return None
    match = _LEADING_NUMBER.match(str(value))
    return int(match.group(1)) if match else None


def declared_dimensions(element: Tag) -> tuple:
    """(width, height) from attributes, falling back to inline style."""
    width = parse_dimension(element.get("width"))
    height = parse_dimension(element.get("height"))

    style = element.get("style")
    if style and (width is None or height is None):
        for prop, raw in _STYLE_DIMENSION.findall(style):
            parsed = parse_dimension(raw)
            if prop.lower() == "width" and width is None:
                width = parsed
            elif prop.lower() == "height" and height is None:
                height = parsed

    return width, height


def resolve_image_url(src: str, page_url: str) -> str:
    """Make protocol-relative and relative image URLs absolute."""
    src = src.strip()
    if src.startswith("//"):
        return f"https:{src}"
    return urljoin(page_url, src)


def image_source(element: Tag) -> Optional[str]:
    for attribute in IMAGE_SOURCE_ATTRIBUTES:
        value = element.get(attribute)
        if value and value.strip() and not value.strip().startswith("data:"):
            return value.strip()
    return None


class ImageCollector:
    """
    Collects product images for a page.

    The selector pass walks likely gallery containers. If it finds nothing,
    every <img> on the page is considered and kept only when it looks like a
    product image (hint in filename or alt text, known image host, or inside
    a "product" container).
    """

    def __init__(
        self,
        page_url: str,
        host_hints: Sequence[str] = (),
        limit: int = MAX_IMAGES,
        min_dimension: int = MIN_IMAGE_DIMENSION_PX,
        selectors: Sequence[str] = IMAGE_SELECTORS,
    ):
        self.page_url = page_url
        self.host_hints = tuple(hint.lower() for hint in host_hints)
        self.limit = limit
        self.min_dimension = min_dimension
        self.selectors = tuple(selectors)

    def collect(self, soup: BeautifulSoup) -> List[RawImage]:
        """
        Collect de-duplicated images, first one primary.

        Returns:
            At most ``limit`` RawImage entries
        """
        images = self._collect_from_selectors(soup)
        if not images:
            logger.debug(f"No gallery images on {self.page_url}, scanning whole page")
            images = self._collect_from_page(soup)

        images = images[:self.limit]
        for index, image in enumerate(images):
            image.is_primary = index == 0
        return images

    def _collect_from_selectors(self, soup: BeautifulSoup) -> List[RawImage]:
        images: List[RawImage] = []
        seen = set()
        for selector in self.selectors:
            for element in soup.select(selector):
                image = self._build(element)
                if image and image.url not in seen:
                    seen.add(image.url)
                    images.append(image)
        return images

    def _collect_from_page(self, soup: BeautifulSoup) -> List[RawImage]:
        images: List[RawImage] = []
        seen = set()
        for element in soup.find_all("img"):
            if not self._looks_like_product(element):
                continue
            image = self._build(element)
            if image and image.url not in seen:
                seen.add(image.url)
                images.append(image)
        return images

    def _build(self, element: Tag) -> Optional[RawImage]:
        src = image_source(element)
        if not src:
            return None

        width, height = declared_dimensions(element)
        if self._is_icon(width, height):
            return None

        return RawImage(
            url=resolve_image_url(src, self.page_url),
            alt=clean_text(element.get("alt")),
            width_hint=width,
            height_hint=height,
        )

    def _is_icon(self, width: Optional[int], height: Optional[int]) -> bool:
        return (
            (width is not None and width < self.min_dimension)
            or (height is not None and height < self.min_dimension)
        )

    def _looks_like_product(self, element: Tag) -> bool:
        src = (image_source(element) or "").lower()
        alt = (element.get("alt") or "").lower()

        if PRODUCT_HINT in src or PRODUCT_HINT in alt:
            return True
        if any(hint in src for hint in self.host_hints):
            return True
        return element.find_parent(class_=_has_product_class) is not None


def _has_product_class(value) -> bool:
    return bool(value) and PRODUCT_HINT in value.lower()
