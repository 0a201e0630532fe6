"""
Persistence boundary for scraped records.

The pipeline never stores records itself. Callers hand a record and an
actor identity to a ProductStore, which rejects duplicates (same source
URL, or same name and brand). JsonlProductStore is a file-backed store
for command-line use.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, List, Optional, Protocol

from catalog_scraper.exceptions import DuplicateProductError
from catalog_scraper.schema import SanitizedProductRecord

logger = logging.getLogger(__name__)


class ProductStore(Protocol):
    """What the pipeline needs from a catalog store."""

    def find_existing(self, source_url: str, name: str, brand: str) -> Optional[dict]:
        ...

    def insert(self, record: SanitizedProductRecord, actor: str) -> dict:
        ...


class JsonlProductStore:
    """Append-only JSON-lines product store.

    Each line is the record's camelCase document plus ``createdBy`` and
    ``createdAt``.
    """

    def __init__(self, path: str):
        self.path = Path(path)

    def _documents(self) -> Iterator[dict]:
        if not self.path.exists():
            return
        with open(self.path, "r", encoding="utf-8") as f:
            for line_number, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    yield json.loads(line)
                except json.JSONDecodeError as e:
                    logger.warning(f"Skipping corrupt line {line_number} in {self.path}: {e}")

    def all(self) -> List[dict]:
        return list(self._documents())

    def find_existing(self, source_url: str, name: str, brand: str) -> Optional[dict]:
        """First stored product with the same source URL, or the same name and brand."""
        for document in self._documents():
            if document.get("sourceUrl") == source_url:
                return document
            if document.get("name") == name and document.get("brand") == brand:
                return document
        return None

    def insert(self, record: SanitizedProductRecord, actor: str) -> dict:
        """
        Append a record.

        Raises:
            DuplicateProductError: A matching product is already stored
        """
        existing = self.find_existing(record.source_url, record.name, record.brand)
        if existing:
            raise DuplicateProductError(
                "Product already exists in database",
                url=record.source_url,
                existing={
                    "name": existing.get("name"),
                    "sku": existing.get("sku"),
                    "sourceUrl": existing.get("sourceUrl"),
                },
            )

        document = record.to_dict()
        document["createdBy"] = actor
        document["createdAt"] = datetime.now(timezone.utc).isoformat()

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(json.dumps(document, ensure_ascii=False) + "\n")

        logger.debug(f"Stored {record.sku} in {self.path}")
        return document
