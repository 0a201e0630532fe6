"""
Price candidate extraction.

Promo badges, strikethrough prices and currency widgets make price markup
unreliable, so the whole page's text is scanned for currency-like figures.
After bounding to a plausible range, the smallest value is the sale price
candidate and the largest the pre-discount candidate.
"""

import re
from typing import List, Optional

from bs4 import BeautifulSoup, CData, Comment, Declaration, Doctype, ProcessingInstruction

from catalog_scraper.constants import MAX_PLAUSIBLE_PRICE, MIN_PLAUSIBLE_PRICE
from catalog_scraper.extraction.selectors import PRICE_SELECTORS
from catalog_scraper.extraction.strategies import element_text, first_match

# Symbol- or "Rs"-prefixed amounts: ₹499, Rs. 1,299.00, INR 250, $19.99
CURRENCY_AMOUNT = re.compile(
    r"(?:₹|\$|\bRs\.?|\bINR)\s*(\d[\d,]*(?:\.\d+)?)",
    re.IGNORECASE,
)

# Bare decimals with two fraction digits: 499.00, 1,299.50
BARE_DECIMAL = re.compile(r"(?<![\w.,])(\d[\d,]*\.\d{2})(?![\d.])")

_NON_NUMERIC = re.compile(r"[^\d.,]")
_NUMBER = re.compile(r"[\d,]+\.?\d*")

# Text inside these never holds a visible price
_SKIPPED_PARENTS = {"script", "style", "noscript", "template", "head", "title"}

# Markup nodes that are not rendered text
_SKIPPED_NODES = (Comment, CData, Declaration, Doctype, ProcessingInstruction)


def parse_price(text: Optional[str]) -> Optional[float]:
    """
    Parse the first number in a price-like string.

    Args:
        text: e.g. "₹1,299.00"

    Returns:
        The value as a float, or None when no number is present
    """
    if not text:
        return None
    match = _NUMBER.search(_NON_NUMERIC.sub("", text))
    if not match:
        return None
    try:
        return float(match.group(0).replace(",", ""))
    except ValueError:
        return None


def is_plausible_price(value: Optional[float]) -> bool:
    return value is not None and MIN_PLAUSIBLE_PRICE < value < MAX_PLAUSIBLE_PRICE


def find_price_values(text: str) -> List[float]:
    """All plausible price values in a piece of text."""
    values = []
    for match in CURRENCY_AMOUNT.finditer(text):
        values.append(parse_price(match.group(1)))

    remainder = CURRENCY_AMOUNT.sub(" ", text)
    for match in BARE_DECIMAL.finditer(remainder):
        values.append(parse_price(match.group(1)))

    return [value for value in values if is_plausible_price(value)]


def scan_page_prices(soup: BeautifulSoup) -> List[float]:
    """Scan every visible text node for price values.

    Returns:
        Distinct plausible values, ascending
    """
    values = set()
    for node in soup.find_all(string=True):
        if isinstance(node, _SKIPPED_NODES):
            continue
        if node.parent is not None and node.parent.name in _SKIPPED_PARENTS:
            continue
        text = str(node)
        if not text.strip():
            continue
        values.update(find_price_values(text))
    return sorted(values)


def selector_prices(soup: BeautifulSoup) -> List[float]:
    """First plausible price found through the price selector chain."""
    for selector in PRICE_SELECTORS:
        value = parse_price(element_text(soup.select_one(selector)))
        if is_plausible_price(value):
            return [value]
    return []


def extract_price_candidates(soup: BeautifulSoup) -> List[float]:
    """Page scan first, price selectors as a fallback."""
    return first_match([scan_page_prices, selector_prices], soup, "pricing") or []
