"""
Extraction strategies and the first-success combinator.

A strategy is any callable taking a parsed document and returning a value
or None. Strategies for a field are tried in order; the first non-empty
result wins. A strategy that raises is treated as a miss.
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator, Optional, Sequence, Tuple

from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)

Strategy = Callable[[BeautifulSoup], Optional[Any]]

_WHITESPACE = re.compile(r"\s+")


def clean_text(value: Optional[str]) -> Optional[str]:
    """Collapse whitespace runs and trim. Empty text becomes None."""
    if not value:
        return None
    text = _WHITESPACE.sub(" ", value).strip()
    return text or None


def element_text(element: Optional[Tag]) -> Optional[str]:
    if element is None:
        return None
    return clean_text(element.get_text(" ", strip=True))


def first_match(
    strategies: Iterable[Strategy],
    soup: BeautifulSoup,
    field_name: str = "",
) -> Optional[Any]:
    """
    Run strategies in order and return the first non-empty result.

    Args:
        strategies: Ordered strategies, most specific first
        soup: Parsed document
        field_name: Field label for debug logging

    Returns:
        First truthy value, or None if every strategy missed
    """
    for strategy in strategies:
        try:
            value = strategy(soup)
        except Exception as e:
            logger.debug(f"Strategy {strategy!r} for '{field_name}' failed: {e}")
            continue
        if value:
            return value
    return None


@dataclass(frozen=True)
class SelectorText:
    """Text of the first element matching a CSS selector."""
    selector: str

    def __call__(self, soup: BeautifulSoup) -> Optional[str]:
        return element_text(soup.select_one(self.selector))


@dataclass(frozen=True)
class AttributeValue:
    """An attribute of the first element matching a CSS selector."""
    selector: str
    attribute: str = "content"

    def __call__(self, soup: BeautifulSoup) -> Optional[str]:
        element = soup.select_one(self.selector)
        if element is None:
            return None
        value = element.get(self.attribute)
        if isinstance(value, list):
            value = " ".join(value)
        return clean_text(value)


@dataclass(frozen=True)
class TitleFallback:
    """Page <title> with a trailing "| SiteName" suffix removed.

    A title that is only the site name yields nothing.
    """
    site_name: str
    separator: str = "|"

    def __call__(self, soup: BeautifulSoup) -> Optional[str]:
        title = element_text(soup.find("title"))
        if not title:
            return None

        head, sep, _ = title.partition(self.separator)
        head = clean_text(head)
        if not sep and self.site_name and self.site_name.lower() in title.lower():
            return None
        if head and self.site_name and head.lower() == self.site_name.lower():
            return None
        return head


@dataclass(frozen=True)
class ParagraphScan:
    """First long paragraph/div inside a known container.

    Candidates must exceed ``min_length`` characters and contain none of
    ``excluded_markers`` (currency and price labels).
    """
    containers: Tuple[str, ...]
    min_length: int
    excluded_markers: Tuple[str, ...]

    def __call__(self, soup: BeautifulSoup) -> Optional[str]:
        for container in self.containers:
            root = soup.select_one(container)
            if root is None:
                continue
            for candidate in root.find_all(["p", "div"]):
                text = element_text(candidate)
                if not text or len(text) <= self.min_length:
                    continue
                if any(marker in text for marker in self.excluded_markers):
                    continue
                return text
        return None


def iter_jsonld_products(soup: BeautifulSoup) -> Iterator[dict]:
    """Yield schema.org Product objects from JSON-LD blocks."""
    for script in soup.find_all("script", type="application/ld+json"):
        if not script.string:
            continue
        try:
            data = json.loads(script.string)
        except (json.JSONDecodeError, ValueError):
            continue
        yield from _find_products(data)


def _find_products(data: Any) -> Iterator[dict]:
    if isinstance(data, list):
        for item in data:
            yield from _find_products(item)
    elif isinstance(data, dict):
        schema_type = data.get("@type")
        types = schema_type if isinstance(schema_type, list) else [schema_type]
        if "Product" in types:
            yield data
        if "@graph" in data:
            yield from _find_products(data["@graph"])


@dataclass(frozen=True)
class JsonLdField:
    """A field of the first JSON-LD Product, following a dotted path."""
    path: str

    def __call__(self, soup: BeautifulSoup) -> Optional[str]:
        for product in iter_jsonld_products(soup):
            value: Any = product
            for key in self.path.split("."):
                if isinstance(value, list):
                    value = value[0] if value else None
                if not isinstance(value, dict):
                    value = None
                    break
                value = value.get(key)
            if isinstance(value, (str, int, float)) and not isinstance(value, bool):
                text = clean_text(str(value))
                if text:
                    return text
        return None


def selector_chain(selectors: Sequence[str]) -> list:
    """Build SelectorText strategies from an ordered selector list."""
    return [SelectorText(selector) for selector in selectors]
