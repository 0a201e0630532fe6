"""Unit tests for price candidate extraction."""

import pytest
from bs4 import BeautifulSoup

from catalog_scraper.extraction.pricing import (
    extract_price_candidates,
    find_price_values,
    is_plausible_price,
    parse_price,
    scan_page_prices,
    selector_prices,
)


def soup_of(html):
    return BeautifulSoup(html, "html.parser")


class TestParsePrice:
    """Tests for parse_price."""

    @pytest.mark.parametrize("text,expected", [
        ("₹499", 499.0),
        ("Rs. 1,299.00", 1299.0),
        ("INR 250", 250.0),
        ("  ₹ 89.50 ", 89.5),
    ])
    def test_parses_currency_strings(self, text, expected):
        """Test symbols, separators and whitespace are stripped."""
        assert parse_price(text) == expected

    @pytest.mark.parametrize("text", [None, "", "Sold out", "₹"])
    def test_no_number(self, text):
        """Test strings without digits give None."""
        assert parse_price(text) is None


class TestPlausibility:
    """Tests for the plausible price bounds."""

    def test_bounds_are_exclusive(self):
        """Test zero and the upper bound are rejected."""
        assert not is_plausible_price(0)
        assert not is_plausible_price(100000)
        assert is_plausible_price(0.5)
        assert is_plausible_price(99999)
        assert not is_plausible_price(None)


class TestFindPriceValues:
    """Tests for find_price_values."""

    def test_currency_amounts(self):
        """Test several prefixed amounts in one string."""
        assert find_price_values("Now ₹499 was Rs. 999") == [499.0, 999.0]

    def test_bare_decimal(self):
        """Test two-digit decimals without a currency marker."""
        assert find_price_values("Only 349.00 today") == [349.0]

    def test_ratings_and_counts_are_ignored(self):
        """Test numbers that do not look like prices."""
        assert find_price_values("Rated 4.5 by 1200 buyers") == []

    def test_implausible_values_dropped(self):
        """Test values outside the plausible range."""
        assert find_price_values("₹0 or ₹2,50,000") == []


class TestScanPagePrices:
    """Tests for the whole-page scan."""

    def test_distinct_sorted_values(self):
        """Test repeated prices collapse and results ascend."""
        soup = soup_of(
            "<div><span>₹999</span><span>₹499</span><span>₹499</span></div>"
        )
        assert scan_page_prices(soup) == [499.0, 999.0]

    def test_script_and_title_ignored(self):
        """Test non-visible text is skipped."""
        soup = soup_of(
            "<html><head><title>₹10 deals</title></head>"
            "<body><script>var p = '₹20';</script><p>₹30</p></body></html>"
        )
        assert scan_page_prices(soup) == [30.0]

    def test_comments_and_doctype_ignored(self):
        """Test commented-out markup does not add price candidates."""
        soup = soup_of(
            "<!DOCTYPE html><!-- was ₹5 --><span>₹499</span><span>₹999</span>"
        )
        assert scan_page_prices(soup) == [499.0, 999.0]

    def test_selector_fallback(self):
        """Test price selectors are used when the scan finds nothing."""
        soup = soup_of('<span class="price">1299</span>')

        assert scan_page_prices(soup) == []
        assert selector_prices(soup) == [1299.0]
        assert extract_price_candidates(soup) == [1299.0]

    def test_no_prices(self):
        """Test a page without prices gives an empty list."""
        assert extract_price_candidates(soup_of("<p>Coming soon</p>")) == []
