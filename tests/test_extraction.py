"""Tests for the extraction engine against fixture product pages."""

import pytest
from bs4 import BeautifulSoup

from catalog_scraper.exceptions import ExtractionError
from catalog_scraper.extraction import ExtractionEngine
from catalog_scraper.extraction.engine import extract_features, extract_specifications

PAGE_URL = "https://deodap.in/products/steel-bottle"

PRODUCT_PAGE = """
<html>
    <head>
        <title>Steel Water Bottle 1L | DeoDap</title>
        <meta name="description" content="Leak-proof steel bottle for travel.">
    </head>
    <body>
        <nav class="breadcrumb">
            <a href="/">Home</a>
            <a href="/collections/kitchen">Kitchen Tools</a>
        </nav>
        <div class="product-single">
            <h1 class="product-single__title">  Steel   Water Bottle 1L </h1>
            <div class="product__vendor">DeoDap</div>
            <span class="product-sku">DD-1234</span>
            <div class="price">
                <span class="price-item--sale">₹499</span>
                <s class="price-item--regular">₹999</s>
            </div>
            <div class="product-single__media">
                <img src="//cdn.shopify.com/s/files/bottle-front.jpg" alt="Bottle front" width="600" height="600">
                <img src="/cdn/shop/products/bottle-side.jpg" alt="">
                <img src="https://cdn.shopify.com/s/files/bottle-front.jpg">
                <img src="/icons/zoom.png" width="24" height="24">
            </div>
            <div class="product-single__description">
                <p>Keeps drinks cold for 24 hours. Made from food grade stainless steel.</p>
            </div>
            <table class="specifications">
                <tr><td>Material</td><td>Stainless Steel</td></tr>
                <tr><td>Capacity</td><td>1 Litre</td></tr>
                <tr><td>Colour</td><td></td></tr>
            </table>
            <ul class="features">
                <li>Leak proof lid</li>
                <li>   </li>
                <li>BPA free</li>
            </ul>
        </div>
    </body>
</html>
"""

FALLBACK_PAGE = """
<html>
    <head><title>Magic Sponge | DeoDap</title></head>
    <body>
        <div class="product-info">
            <p>Short.</p>
            <p>This magic sponge cleans stubborn stains from every kitchen surface without scratching.</p>
            <p>Price: ₹149.00</p>
        </div>
        <div class="promo">
            <img src="/files/banner.jpg">
            <img src="/files/product-sponge.jpg" alt="Sponge">
        </div>
    </body>
</html>
"""

JSONLD_PAGE = """
<html>
    <head>
        <script type="application/ld+json">
        {"@context": "https://schema.org", "@graph": [
            {"@type": "BreadcrumbList", "name": "crumbs"},
            {"@type": "Product", "name": "LD Lamp", "sku": "LD-9",
             "brand": {"@type": "Brand", "name": "Lumo"},
             "category": "Home Decor", "description": "A warm desk lamp."}
        ]}
        </script>
    </head>
    <body><p>Nothing else here</p></body>
</html>
"""


class TestExtractionEngine:
    """Test cases for ExtractionEngine."""

    @pytest.fixture
    def engine(self):
        """Create an engine for the default source site."""
        return ExtractionEngine(site_name="DeoDap")

    def test_extracts_primary_fields(self, engine):
        """Test selector chains on a well-formed product page."""
        raw = engine.extract(PRODUCT_PAGE, PAGE_URL)

        assert raw.source_url == PAGE_URL
        assert raw.name == "Steel Water Bottle 1L"
        assert raw.description.startswith("Keeps drinks cold for 24 hours.")
        assert raw.short_description == "Leak-proof steel bottle for travel."
        assert raw.brand == "DeoDap"
        assert raw.sku == "DD-1234"
        assert raw.category_text == "Kitchen Tools"

    def test_price_bracket(self, engine):
        """Test lowest/highest plausible prices become sale/original candidates."""
        raw = engine.extract(PRODUCT_PAGE, PAGE_URL)

        assert raw.pricing_candidates == [499.0, 999.0]
        bracket = raw.price_bracket()
        assert bracket.minimum == 499
        assert bracket.maximum == 999

    def test_images_resolved_deduplicated_and_filtered(self, engine):
        """Test image URL resolution, de-duplication and icon filtering."""
        raw = engine.extract(PRODUCT_PAGE, PAGE_URL)
        urls = [image.url for image in raw.images]

        assert urls == [
            "https://cdn.shopify.com/s/files/bottle-front.jpg",
            "https://deodap.in/cdn/shop/products/bottle-side.jpg",
        ]
        assert raw.images[0].is_primary is True
        assert raw.images[1].is_primary is False
        assert raw.images[0].alt == "Bottle front"
        assert raw.images[1].alt is None

    def test_specifications_and_features(self, engine):
        """Test spec rows missing a value and blank features are dropped."""
        raw = engine.extract(PRODUCT_PAGE, PAGE_URL)

        assert [(s.name, s.value) for s in raw.specifications] == [
            ("Material", "Stainless Steel"),
            ("Capacity", "1 Litre"),
        ]
        assert raw.features == ["Leak proof lid", "BPA free"]

    def test_fallback_strategies(self, engine):
        """Test title, paragraph scan, price and image fallbacks."""
        raw = engine.extract(FALLBACK_PAGE, "https://deodap.in/products/sponge")

        assert raw.name == "Magic Sponge"
        assert raw.description == (
            "This magic sponge cleans stubborn stains from every kitchen surface "
            "without scratching."
        )
        assert raw.pricing_candidates == [149.0]
        assert [image.url for image in raw.images] == [
            "https://deodap.in/files/product-sponge.jpg"
        ]
        assert raw.images[0].is_primary is True

    def test_missing_fields_stay_absent(self, engine):
        """Test that a bare page yields absent fields rather than defaults."""
        raw = engine.extract("<html><body><p>hi</p></body></html>", PAGE_URL)

        assert raw.name is None
        assert raw.description is None
        assert raw.brand is None
        assert raw.sku is None
        assert raw.category_text is None
        assert raw.pricing_candidates == []
        assert raw.images == []
        assert raw.specifications == []
        assert raw.features == []
        assert raw.price_bracket() is None

    def test_jsonld_fallback(self, engine):
        """Test schema.org Product JSON-LD fills fields markup lacks."""
        raw = engine.extract(JSONLD_PAGE, PAGE_URL)

        assert raw.name == "LD Lamp"
        assert raw.sku == "LD-9"
        assert raw.brand == "Lumo"
        assert raw.category_text == "Home Decor"
        assert raw.description == "A warm desk lamp."

    def test_title_equal_to_site_name_is_ignored(self, engine):
        """Test that a title holding only the site name gives no product name."""
        raw = engine.extract("<html><head><title>DeoDap</title></head></html>", PAGE_URL)
        assert raw.name is None

    def test_non_text_input_raises(self, engine):
        """Test that a page that is not HTML text fails the whole stage."""
        with pytest.raises(ExtractionError) as exc_info:
            engine.extract(None, PAGE_URL)

        assert exc_info.value.url == PAGE_URL

    def test_failing_collector_is_swallowed(self, engine, monkeypatch):
        """Test that one broken scanner does not fail the extraction."""
        def boom(soup):
            raise RuntimeError("malformed table")

        monkeypatch.setattr(
            "catalog_scraper.extraction.engine.extract_specifications", boom
        )
        raw = engine.extract(PRODUCT_PAGE, PAGE_URL)

        assert raw.specifications == []
        assert raw.name == "Steel Water Bottle 1L"


class TestSpecificationScan:
    """Test cases for specification and feature scanners."""

    def test_definition_list_fallback(self):
        """Test dl/dt/dd pairs are used when no spec table exists."""
        soup = BeautifulSoup(
            """
            <div class="specs"><dl>
                <dt>Weight</dt><dd>200 g</dd>
                <dt>Size</dt><dd></dd>
            </dl></div>
            """,
            "html.parser",
        )
        specs = extract_specifications(soup)

        assert [(s.name, s.value) for s in specs] == [("Weight", "200 g")]

    def test_header_cells(self):
        """Test th/td rows pair the header with the value."""
        soup = BeautifulSoup(
            '<table class="product-specs"><tr><th>Brand</th><td>Acme</td></tr></table>',
            "html.parser",
        )
        specs = extract_specifications(soup)

        assert specs[0].name == "Brand"
        assert specs[0].value == "Acme"

    def test_features_from_highlights(self):
        """Test highlight list items are collected in order."""
        soup = BeautifulSoup(
            '<ul class="highlights"><li>One</li><li>Two</li></ul>', "html.parser"
        )
        assert extract_features(soup) == ["One", "Two"]
