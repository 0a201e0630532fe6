"""
Single-URL scraping pipeline.

CatalogScraper owns the compliance gate and the browser session for one
target site and runs each URL through:

    domain check -> robots check -> render -> extract -> normalize

It is an explicit resource owner; the browser starts lazily on the first
scrape and is torn down by the caller:

    async with CatalogScraper(config) as scraper:
        record = await scraper.scrape_single(url)
        batch = await scraper.scrape_batch(urls)
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional, Sequence
from urllib.parse import urlparse

from catalog_scraper.batch import BatchOrchestrator
from catalog_scraper.browser_session import BrowserSessionManager
from catalog_scraper.config import ScraperConfig, settings
from catalog_scraper.exceptions import (
    InvalidDomainError,
    RobotsDisallowedError,
    ScraperError,
)
from catalog_scraper.extraction import ExtractionEngine
from catalog_scraper.models import BatchResult, SessionStatus
from catalog_scraper.robots import RobotsComplianceGate
from catalog_scraper.sanitizer import DataSanitizer
from catalog_scraper.schema import SanitizedProductRecord

logger = logging.getLogger(__name__)


def _bare_host(host: str) -> str:
    host = (host or "").lower().rstrip(".")
    return host[4:] if host.startswith("www.") else host


class CatalogScraper:
    """Scrapes product pages of the configured target site into catalog records."""

    def __init__(
        self,
        config: Optional[ScraperConfig] = None,
        session: Optional[BrowserSessionManager] = None,
        robots: Optional[RobotsComplianceGate] = None,
        engine: Optional[ExtractionEngine] = None,
        sanitizer: Optional[DataSanitizer] = None,
    ):
        """
        Initialize the scraper. Nothing is fetched or launched yet.

        Args:
            config: Pipeline configuration (defaults to ScraperConfig.from_env())
            session: Browser session (built from config when omitted)
            robots: Compliance gate (built from config when omitted)
            engine: Extraction engine (built from config when omitted)
            sanitizer: Record sanitizer (built from config when omitted)
        """
        self.config = config or ScraperConfig.from_env()
        self.session = session or BrowserSessionManager(self.config.browser_config())
        self.robots = robots or RobotsComplianceGate(
            base_url=self.config.base_url,
            user_agent=self.config.user_agent,
            timeout=self.config.robots_timeout_seconds,
        )
        self.engine = engine or ExtractionEngine.from_config(self.config)
        self.sanitizer = sanitizer or DataSanitizer.from_config(self.config)

        self._initialized = False
        self._init_lock = asyncio.Lock()
        self._last_activity: Optional[datetime] = None

    async def __aenter__(self) -> "CatalogScraper":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    @property
    def initialized(self) -> bool:
        return self._initialized

    def validate_url(self, url: str) -> str:
        """
        Check that a URL belongs to the target domain.

        Raises:
            InvalidDomainError: Malformed URL, non-HTTP scheme, or foreign host
        """
        if not isinstance(url, str) or not url.strip():
            raise InvalidDomainError("Valid URL is required", url=url if isinstance(url, str) else None)

        url = url.strip()
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https") or not parsed.hostname:
            raise InvalidDomainError("Valid URL is required", url=url)

        if _bare_host(parsed.hostname) != _bare_host(self.config.target_domain):
            raise InvalidDomainError(
                f"URL must be from {self.config.target_domain} domain", url=url
            )
        return url

    async def initialize(self) -> None:
        """Load robots.txt and launch the browser. Idempotent."""
        async with self._init_lock:
            if self._initialized:
                return

            logger.info("Initializing catalog scraper...")
            await asyncio.to_thread(self.robots.initialize)
            self._apply_crawl_delay()
            await self.session.initialize()

            self._initialized = True
            logger.info("Catalog scraper initialized successfully")

    def _apply_crawl_delay(self) -> None:
        crawl_delay = self.robots.crawl_delay()
        if crawl_delay is None:
            return
        delay_ms = int(crawl_delay * 1000)
        if delay_ms > self.session.config.request_delay:
            logger.info(f"Honoring robots.txt Crawl-delay of {crawl_delay}s")
            self.session.config.request_delay = min(delay_ms, 60000)

    async def scrape_single(self, url: str) -> SanitizedProductRecord:
        """
        Scrape one product page.

        Args:
            url: Product page URL on the target domain

        Returns:
            SanitizedProductRecord ready for curation

        Raises:
            InvalidDomainError: Before any network activity
            RobotsDisallowedError: Before navigation
            NavigationTimeoutError, NavigationError, ContentNotReadyError,
            ExtractionError, BrowserLaunchError: From the later stages
        """
        url = self.validate_url(url)
        await self.initialize()

        if not self.robots.is_allowed(url, self.config.user_agent):
            raise RobotsDisallowedError("URL is disallowed by robots.txt", url=url)

        logger.info(f"Starting to scrape product: {url}")
        try:
            page = await self.session.fetch_rendered_page(url)
            raw = self.engine.extract(page.html, url)
            record = self.sanitizer.normalize(raw)
        except ScraperError as e:
            e.url = e.url or url
            logger.error(f"Error scraping product {url}: [{e.kind}] {e.message}")
            raise
        except Exception as e:
            logger.error(f"Unexpected error scraping product {url}: {e}")
            raise

        self._last_activity = datetime.now(timezone.utc)
        logger.info(f"Successfully scraped product: {record.name}")
        return record

    async def scrape_batch(self, urls: Sequence[str]) -> BatchResult:
        """
        Scrape up to ``max_batch_size`` URLs sequentially.

        Raises:
            BatchInputError: Empty or oversized input
        """
        orchestrator = BatchOrchestrator(
            self.scrape_single,
            max_batch_size=self.config.max_batch_size,
            delay_ms=self.config.batch_delay_ms,
            include_details=not settings.is_production,
        )
        return await orchestrator.run(urls)

    async def scrape_and_save(self, url: str, store, actor: str) -> dict:
        """
        Scrape a URL and insert the record through a persistence collaborator.

        Args:
            url: Product page URL
            store: Object implementing the ProductStore protocol
            actor: Identity recorded as the record's creator

        Returns:
            The stored document

        Raises:
            DuplicateProductError: The store already holds this product
        """
        record = await self.scrape_single(url)
        saved = store.insert(record, actor)
        logger.info(f"Product saved successfully: {record.name}")
        return saved

    def get_session_status(self) -> SessionStatus:
        """Read-only status for operational tooling."""
        return SessionStatus(
            initialized=self._initialized,
            browser_active=bool(self.session.browser_active),
            last_activity=self._last_activity,
        )

    async def close(self) -> None:
        """Tear down the browser session. Safe to call repeatedly."""
        await self.session.close()
        if self._initialized:
            logger.info("Scraper resources cleaned up")
        self._initialized = False
