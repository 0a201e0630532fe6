"""
Batch orchestration.

Runs the single-URL pipeline over a list of URLs strictly in order, one
at a time. A failure on one URL is recorded in the ledger and the batch
moves on; only malformed input aborts the call.
"""

import asyncio
import logging
import traceback
from typing import Awaitable, Callable, Sequence

from catalog_scraper.constants import MAX_BATCH_SIZE
from catalog_scraper.exceptions import BatchInputError, classify_error
from catalog_scraper.models import BatchError, BatchItem, BatchResult, BatchSummary, utcnow

logger = logging.getLogger(__name__)

ScrapeFn = Callable[[str], Awaitable]


class BatchOrchestrator:
    """Sequential batch runner with per-URL failure isolation."""

    def __init__(
        self,
        scrape: ScrapeFn,
        max_batch_size: int = MAX_BATCH_SIZE,
        delay_ms: int = 2000,
        include_details: bool = False,
    ):
        """
        Initialize the orchestrator.

        Args:
            scrape: Coroutine function running the full pipeline for one URL
            max_batch_size: Largest accepted batch
            delay_ms: Pause between consecutive URLs (none after the last)
            include_details: Attach tracebacks to ledger entries
        """
        self._scrape = scrape
        self.max_batch_size = max_batch_size
        self.delay_ms = delay_ms
        self.include_details = include_details

    def validate(self, urls: Sequence[str]) -> None:
        """
        Reject malformed batch input.

        Raises:
            BatchInputError: Not a list of URLs, empty, or too large
        """
        if isinstance(urls, (str, bytes)) or not isinstance(urls, (list, tuple)):
            raise BatchInputError("URLs must be provided as a list")
        if len(urls) == 0:
            raise BatchInputError("URLs array is required and must not be empty")
        if len(urls) > self.max_batch_size:
            raise BatchInputError(
                f"Maximum {self.max_batch_size} URLs allowed per bulk request"
            )

    async def run(self, urls: Sequence[str]) -> BatchResult:
        """
        Scrape every URL in input order.

        Args:
            urls: 1 to max_batch_size URLs

        Returns:
            BatchResult with results, per-URL errors and a summary

        Raises:
            BatchInputError: For malformed input only
        """
        self.validate(urls)

        total = len(urls)
        result = BatchResult(summary=BatchSummary(total=total))
        logger.info(f"Bulk scraping {total} products")

        for index, url in enumerate(urls):
            logger.info(f"Processing URL {index + 1}/{total}: {url}")
            try:
                record = await self._scrape(url)
                result.results.append(BatchItem(url=url, record=record))
            except Exception as e:
                logger.error(f"Error scraping URL {url}: {e}")
                result.errors.append(
                    BatchError(
                        url=url,
                        kind=classify_error(e),
                        message=str(e),
                        details=traceback.format_exc() if self.include_details else None,
                    )
                )

            if index < total - 1:
                await self._pause()

        result.summary.successful = len(result.results)
        result.summary.failed = len(result.errors)
        result.finished_at = utcnow()
        logger.info(result.message)
        return result

    async def _pause(self) -> None:
        if self.delay_ms > 0:
            await asyncio.sleep(self.delay_ms / 1000)
