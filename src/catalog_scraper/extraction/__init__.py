"""
Extraction Package.

Strategy chains and scanners that recover product facts from rendered
pages without depending on the browser.
"""

from .engine import (
    ExtractionEngine,
    build_field_strategies,
    extract_features,
    extract_specifications,
)
from .images import ImageCollector, resolve_image_url
from .pricing import extract_price_candidates, parse_price, scan_page_prices
from .strategies import (
    AttributeValue,
    JsonLdField,
    ParagraphScan,
    SelectorText,
    TitleFallback,
    clean_text,
    first_match,
)

__all__ = [
    # Engine
    "ExtractionEngine",
    "build_field_strategies",
    "extract_features",
    "extract_specifications",
    # Images
    "ImageCollector",
    "resolve_image_url",
    # Pricing
    "extract_price_candidates",
    "parse_price",
    "scan_page_prices",
    # Strategies
    "AttributeValue",
    "JsonLdField",
    "ParagraphScan",
    "SelectorText",
    "TitleFallback",
    "clean_text",
    "first_match",
]
