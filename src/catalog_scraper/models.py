"""Data models for the scraping pipeline."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class RawImage:
    """An image candidate found on a product page."""

    url: str
    alt: Optional[str] = None
    is_primary: bool = False
    width_hint: Optional[int] = None
    height_hint: Optional[int] = None


@dataclass
class RawSpecification:
    """A name/value pair from a specification table."""

    name: str
    value: str


@dataclass(frozen=True)
class PriceBracket:
    """Sale/original price candidates from the bracket heuristic."""

    minimum: float
    maximum: float

    @classmethod
    def from_values(cls, values: List[float]) -> Optional["PriceBracket"]:
        if not values:
            return None
        ordered = sorted(values)
        return cls(minimum=ordered[0], maximum=ordered[-1])


@dataclass
class RawExtraction:
    """Best-effort output of the extraction engine.

    Every field except ``source_url`` and ``scraped_at`` may be missing;
    the sanitizer owns the defaults.
    """

    source_url: str
    scraped_at: datetime = field(default_factory=utcnow)
    name: Optional[str] = None
    description: Optional[str] = None
    short_description: Optional[str] = None
    pricing_candidates: List[float] = field(default_factory=list)
    images: List[RawImage] = field(default_factory=list)
    specifications: List[RawSpecification] = field(default_factory=list)
    features: List[str] = field(default_factory=list)
    brand: Optional[str] = None
    sku: Optional[str] = None
    category_text: Optional[str] = None
    gst_rate: Optional[float] = None
    hsn: Optional[str] = None

    def price_bracket(self) -> Optional[PriceBracket]:
        """Lowest plausible value is the sale price, highest the original."""
        return PriceBracket.from_values(self.pricing_candidates)


@dataclass
class RenderedPage:
    """Result of loading a page in the browser session."""

    url: str
    html: str
    final_url: Optional[str] = None
    status_code: int = 0
    load_time: float = 0.0


@dataclass
class BatchItem:
    """A successfully scraped URL in a batch."""

    url: str
    record: Any  # SanitizedProductRecord

    def to_dict(self) -> Dict[str, Any]:
        return {"url": self.url, "success": True, "data": self.record.to_dict()}


@dataclass
class BatchError:
    """A failed URL in a batch."""

    url: str
    kind: str
    message: str
    details: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "url": self.url,
            "success": False,
            "error": self.message,
            "kind": self.kind,
        }
        if self.details:
            data["details"] = self.details
        return data


@dataclass
class BatchSummary:
    """Tally of a batch run."""

    total: int = 0
    successful: int = 0
    failed: int = 0


@dataclass
class BatchResult:
    """Ledger of a batch run."""

    results: List[BatchItem] = field(default_factory=list)
    errors: List[BatchError] = field(default_factory=list)
    summary: BatchSummary = field(default_factory=BatchSummary)
    started_at: datetime = field(default_factory=utcnow)
    finished_at: Optional[datetime] = None

    @property
    def message(self) -> str:
        return (
            f"Bulk scraping completed. {self.summary.successful} successful, "
            f"{self.summary.failed} failed."
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "results": [item.to_dict() for item in self.results],
            "errors": [error.to_dict() for error in self.errors],
            "summary": {
                "total": self.summary.total,
                "successful": self.summary.successful,
                "failed": self.summary.failed,
            },
        }


@dataclass
class SessionStatus:
    """Read-only view of the scraper session."""

    initialized: bool
    browser_active: bool
    last_activity: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "initialized": self.initialized,
            "browserActive": self.browser_active,
            "lastActivity": self.last_activity.isoformat() if self.last_activity else None,
        }
