"""Catalog scraper: product listing pages to curated catalog records."""

__version__ = "0.1.0"

from catalog_scraper.scraper import CatalogScraper
from catalog_scraper.batch import BatchOrchestrator
from catalog_scraper.browser_session import BrowserSessionManager, SessionState
from catalog_scraper.robots import RobotsComplianceGate
from catalog_scraper.sanitizer import DataSanitizer
from catalog_scraper.extraction import ExtractionEngine
from catalog_scraper.browser_config import BrowserConfig
from catalog_scraper.config import CategoryTaxonomy, ScraperConfig, settings
from catalog_scraper.models import (
    RawExtraction,
    RawImage,
    RawSpecification,
    PriceBracket,
    RenderedPage,
    BatchResult,
    BatchItem,
    BatchError,
    BatchSummary,
    SessionStatus,
)
from catalog_scraper.schema import (
    SanitizedProductRecord,
    ProductImage,
    Specification,
    GSTInfo,
    SEOFields,
)
from catalog_scraper.exceptions import (
    ScraperError,
    InvalidDomainError,
    RobotsDisallowedError,
    BrowserLaunchError,
    NavigationError,
    NavigationTimeoutError,
    ContentNotReadyError,
    ExtractionError,
    BatchInputError,
    DuplicateProductError,
    classify_error,
)
from catalog_scraper.storage import JsonlProductStore, ProductStore

__all__ = [
    # Pipeline
    "CatalogScraper",
    "BatchOrchestrator",
    "BrowserSessionManager",
    "SessionState",
    "RobotsComplianceGate",
    "DataSanitizer",
    "ExtractionEngine",
    # Config
    "BrowserConfig",
    "CategoryTaxonomy",
    "ScraperConfig",
    "settings",
    # Models
    "RawExtraction",
    "RawImage",
    "RawSpecification",
    "PriceBracket",
    "RenderedPage",
    "BatchResult",
    "BatchItem",
    "BatchError",
    "BatchSummary",
    "SessionStatus",
    "SanitizedProductRecord",
    "ProductImage",
    "Specification",
    "GSTInfo",
    "SEOFields",
    # Errors
    "ScraperError",
    "InvalidDomainError",
    "RobotsDisallowedError",
    "BrowserLaunchError",
    "NavigationError",
    "NavigationTimeoutError",
    "ContentNotReadyError",
    "ExtractionError",
    "BatchInputError",
    "DuplicateProductError",
    "classify_error",
    # Storage
    "JsonlProductStore",
    "ProductStore",
]
