"""Tests for the JSON-lines product store."""

import json
from datetime import datetime, timezone

import pytest

from catalog_scraper.exceptions import DuplicateProductError
from catalog_scraper.models import RawExtraction
from catalog_scraper.sanitizer import DataSanitizer
from catalog_scraper.storage import JsonlProductStore


def make_record(url="https://deodap.in/products/fan", name="Desk Fan", brand="DeoDap", sku="DD-1"):
    raw = RawExtraction(
        source_url=url,
        scraped_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
        name=name,
        brand=brand,
        sku=sku,
    )
    return DataSanitizer().normalize(raw)


@pytest.fixture
def store(tmp_path):
    return JsonlProductStore(str(tmp_path / "catalog" / "products.jsonl"))


class TestJsonlProductStore:
    """Test cases for JsonlProductStore."""

    def test_insert_appends_document(self, store):
        """Test inserted records carry the actor and a timestamp."""
        document = store.insert(make_record(), "curator")

        assert document["createdBy"] == "curator"
        assert "createdAt" in document
        assert document["needsPriceEntry"] is True
        assert store.all() == [document]

    def test_empty_store(self, store):
        """Test a store whose file does not exist yet."""
        assert store.all() == []
        assert store.find_existing("https://deodap.in/x", "A", "B") is None

    def test_duplicate_source_url(self, store):
        """Test the same source URL is rejected."""
        store.insert(make_record(), "curator")

        with pytest.raises(DuplicateProductError) as exc_info:
            store.insert(make_record(name="Renamed Fan", sku="DD-2"), "curator")

        assert exc_info.value.existing == {
            "name": "Desk Fan",
            "sku": "DD-1",
            "sourceUrl": "https://deodap.in/products/fan",
        }
        assert exc_info.value.to_dict()["kind"] == "duplicate_product"

    def test_duplicate_name_and_brand(self, store):
        """Test the same name and brand under another URL is rejected."""
        store.insert(make_record(), "curator")

        with pytest.raises(DuplicateProductError):
            store.insert(make_record(url="https://deodap.in/products/fan-2"), "curator")

    def test_same_name_other_brand_allowed(self, store):
        """Test products sharing a name but not a brand are distinct."""
        store.insert(make_record(), "curator")
        store.insert(
            make_record(url="https://deodap.in/products/fan-2", brand="Acme"), "curator"
        )

        assert len(store.all()) == 2

    def test_corrupt_lines_skipped(self, store, caplog):
        """Test unreadable lines are skipped with a warning."""
        store.insert(make_record(), "curator")
        with open(store.path, "a", encoding="utf-8") as f:
            f.write("{truncated\n\n")

        assert len(store.all()) == 1
        assert "Skipping corrupt line 2" in caplog.text

    def test_file_is_json_lines(self, store):
        """Test one camelCase JSON document per line."""
        store.insert(make_record(), "curator")

        lines = store.path.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 1
        assert json.loads(lines[0])["sourceUrl"] == "https://deodap.in/products/fan"
