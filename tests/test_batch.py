"""Tests for BatchOrchestrator."""

import pytest
from unittest.mock import AsyncMock, patch

from catalog_scraper.batch import BatchOrchestrator
from catalog_scraper.exceptions import BatchInputError, ExtractionError

pytest_plugins = ('pytest_asyncio',)


def make_scrape(fail_on=()):
    async def scrape(url):
        if url in fail_on:
            raise ExtractionError("Extraction failed", url=url)
        if url.endswith("/boom"):
            raise KeyError("unexpected")
        return {"url": url}

    return scrape


class FakeRecord(dict):
    def to_dict(self):
        return dict(self)


class TestValidation:
    """Tests for batch input validation."""

    @pytest.mark.parametrize("urls", [[], (), "https://deodap.in/a", None, {"a": 1}])
    def test_malformed_input_rejected(self, urls):
        """Test non-lists and empty lists are rejected."""
        orchestrator = BatchOrchestrator(make_scrape(), delay_ms=0)

        with pytest.raises(BatchInputError):
            orchestrator.validate(urls)

    @pytest.mark.asyncio
    async def test_oversized_batch_rejected(self):
        """Test more than the maximum aborts before any scrape."""
        scrape = AsyncMock()
        orchestrator = BatchOrchestrator(scrape, delay_ms=0)
        urls = [f"https://deodap.in/products/{i}" for i in range(11)]

        with pytest.raises(BatchInputError, match="Maximum 10"):
            await orchestrator.run(urls)

        scrape.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_maximum_batch_accepted(self):
        """Test exactly the maximum is processed."""
        urls = [f"https://deodap.in/products/{i}" for i in range(10)]
        result = await BatchOrchestrator(make_scrape(), delay_ms=0).run(urls)

        assert result.summary.total == 10
        assert result.summary.successful == 10


class TestRun:
    """Tests for sequential batch runs."""

    @pytest.mark.asyncio
    async def test_order_and_isolation(self):
        """Test results keep input order and failures are recorded."""
        urls = ["https://deodap.in/1", "https://deodap.in/2", "https://deodap.in/3"]
        orchestrator = BatchOrchestrator(make_scrape(fail_on={urls[1]}), delay_ms=0)

        result = await orchestrator.run(urls)

        assert [item.url for item in result.results] == [urls[0], urls[2]]
        assert len(result.errors) == 1
        assert result.errors[0].url == urls[1]
        assert result.errors[0].kind == "extraction_failed"
        assert result.errors[0].details is None
        assert result.summary.total == 3
        assert result.summary.successful == 2
        assert result.summary.failed == 1
        assert result.summary.total == result.summary.successful + result.summary.failed
        assert result.finished_at is not None
        assert result.message == "Bulk scraping completed. 2 successful, 1 failed."

    @pytest.mark.asyncio
    async def test_unexpected_errors_classified(self):
        """Test non-pipeline exceptions get the catch-all kind and details."""
        orchestrator = BatchOrchestrator(make_scrape(), delay_ms=0, include_details=True)

        result = await orchestrator.run(["https://deodap.in/boom"])

        assert result.errors[0].kind == "unexpected_error"
        assert "KeyError" in result.errors[0].details
        assert result.errors[0].to_dict()["success"] is False

    @pytest.mark.asyncio
    async def test_delay_between_urls_only(self):
        """Test the pause runs between URLs and not after the last."""
        orchestrator = BatchOrchestrator(make_scrape(), delay_ms=2000)

        with patch("catalog_scraper.batch.asyncio.sleep", new=AsyncMock()) as sleep:
            await orchestrator.run(["https://deodap.in/1", "https://deodap.in/2", "https://deodap.in/3"])

        assert sleep.await_count == 2
        sleep.assert_awaited_with(2.0)

    @pytest.mark.asyncio
    async def test_single_url_no_delay(self):
        """Test a one-URL batch never sleeps."""
        orchestrator = BatchOrchestrator(make_scrape(), delay_ms=2000)

        with patch("catalog_scraper.batch.asyncio.sleep", new=AsyncMock()) as sleep:
            await orchestrator.run(["https://deodap.in/1"])

        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_to_dict(self):
        """Test the ledger serializes results, errors and summary."""
        async def scrape(url):
            if url.endswith("bad"):
                raise ExtractionError("Extraction failed", url=url)
            return FakeRecord(name="Fan")

        result = await BatchOrchestrator(scrape, delay_ms=0).run(
            ["https://deodap.in/ok", "https://deodap.in/bad"]
        )
        data = result.to_dict()

        assert data["results"] == [
            {"url": "https://deodap.in/ok", "success": True, "data": {"name": "Fan"}}
        ]
        assert data["errors"] == [{
            "url": "https://deodap.in/bad",
            "success": False,
            "error": "Extraction failed",
            "kind": "extraction_failed",
        }]
        assert data["summary"] == {"total": 2, "successful": 1, "failed": 1}
