"""
Browser session management.

Owns a single headless browser process for the lifetime of a scraping
session and hands out one page context at a time:

    async with BrowserSessionManager(config) as session:
        page = await session.fetch_rendered_page("https://deodap.in/products/x")

Every fetch opens a fresh context with a fixed user agent and viewport,
waits for a content-ready marker, and closes the context on every exit
path. A politeness delay follows each successful fetch.
"""

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from catalog_scraper.browser_config import BrowserConfig
from catalog_scraper.exceptions import (
    BrowserLaunchError,
    ContentNotReadyError,
    NavigationError,
    NavigationTimeoutError,
)
from catalog_scraper.models import RenderedPage

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """Lifecycle of the browser session."""
    UNINITIALIZED = "uninitialized"
    LAUNCHING = "launching"
    READY = "ready"
    CLOSED = "closed"


class BrowserSessionManager:
    """
    Single shared browser process with serialized page contexts.

    Features:
    - Idempotent initialize()/close()
    - One page context open at a time (fetches are serialized)
    - Navigation and readiness timeouts mapped to classified errors
    - Fixed politeness delay after each fetch
    """

    def __init__(self, config: Optional[BrowserConfig] = None):
        """
        Initialize the session manager. No browser is launched yet.

        Args:
            config: Browser configuration (defaults to BrowserConfig())
        """
        self.config = config or BrowserConfig()
        self._state = SessionState.UNINITIALIZED
        self._playwright = None
        self._browser = None
        self._init_lock = asyncio.Lock()
        self._page_lock = asyncio.Lock()
        self._pages_fetched = 0
        self._last_activity: Optional[datetime] = None

    async def __aenter__(self) -> "BrowserSessionManager":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state == SessionState.READY

    @property
    def browser_active(self) -> bool:
        """Whether a browser process is currently held."""
        return self._browser is not None

    @property
    def pages_fetched(self) -> int:
        return self._pages_fetched

    @property
    def last_activity(self) -> Optional[datetime]:
        return self._last_activity

    async def initialize(self) -> None:
        """
        Launch the browser process.

        Transitions UNINITIALIZED (or CLOSED) -> LAUNCHING -> READY.
        No-op when already READY.

        Raises:
            BrowserLaunchError: If the browser could not be started
        """
        async with self._init_lock:
            if self._state == SessionState.READY:
                return

            self._state = SessionState.LAUNCHING
            logger.info(
                f"Launching {self.config.browser_type} browser "
                f"(headless={self.config.headless})"
            )

            try:
                self._playwright = await async_playwright().start()
                launcher = getattr(self._playwright, self.config.browser_type)
                self._browser = await launcher.launch(
                    headless=self.config.headless,
                    args=list(self.config.launch_args),
                )
            except Exception as e:
                await self._shutdown()
                self._state = SessionState.UNINITIALIZED
                logger.error(f"Failed to launch browser: {e}")
                raise BrowserLaunchError(f"Failed to launch browser: {e}") from e

            self._state = SessionState.READY
            logger.info("Browser launched successfully")

    async def close(self) -> None:
        """
        Terminate the browser process.

        Transitions to CLOSED. Safe to call repeatedly or before initialize().
        """
        async with self._init_lock:
            if self._state == SessionState.CLOSED:
                return
            if self._state == SessionState.UNINITIALIZED:
                self._state = SessionState.CLOSED
                return

            await self._shutdown()
            self._state = SessionState.CLOSED
            logger.info("Browser closed")

    async def _shutdown(self) -> None:
        if self._browser:
            try:
                await self._browser.close()
            except Exception as e:
                logger.warning(f"Error closing browser: {e}")
            self._browser = None

        if self._playwright:
            try:
                await self._playwright.stop()
            except Exception as e:
                logger.warning(f"Error stopping playwright: {e}")
            self._playwright = None

    @asynccontextmanager
    async def _page_context(self, url: str):
        """
        Open an isolated context and page, closing both on exit.

        Yields:
            Playwright Page
        """
        try:
            context = await self._browser.new_context(
                user_agent=self.config.user_agent,
                viewport=self.config.viewport,
            )
        except PlaywrightError as e:
            raise NavigationError(f"Could not open browser context: {e.message}", url=url) from e

        try:
            try:
                page = await context.new_page()
            except PlaywrightError as e:
                raise NavigationError(f"Could not open page: {e.message}", url=url) from e
            yield page
        finally:
            try:
                await context.close()
            except Exception as e:
                logger.warning(f"Error closing page context: {e}")

    async def fetch_rendered_page(self, url: str) -> RenderedPage:
        """
        Load a URL and return its rendered HTML.

        Args:
            url: Absolute URL to load

        Returns:
            RenderedPage with the rendered DOM

        Raises:
            RuntimeError: If the session is not READY
            NavigationTimeoutError: Navigation exceeded the timeout
            NavigationError: Navigation failed for another reason, or the
                browser could not open or read the page
            ContentNotReadyError: No content-ready selector appeared in time
        """
        if self._state != SessionState.READY:
            raise RuntimeError(
                f"Browser session is {self._state.value}. Call initialize() first."
            )

        async with self._page_lock:
            start_time = time.time()

            async with self._page_context(url) as page:
                response = await self._navigate(page, url)
                await self._wait_until_ready(page, url)

                html = await self._read_content(page, url)
                final_url = page.url
                status_code = response.status if response else 0

            load_time = time.time() - start_time
            self._pages_fetched += 1
            self._last_activity = datetime.now(timezone.utc)
            logger.info(f"Fetched {url} (status={status_code}, time={load_time:.2f}s)")

            await self._politeness_delay()

            return RenderedPage(
                url=url,
                html=html,
                final_url=final_url,
                status_code=status_code,
                load_time=load_time,
            )

    async def _navigate(self, page, url: str):
        try:
            return await page.goto(
                url,
                wait_until=self.config.wait_until,
                timeout=self.config.navigation_timeout,
            )
        except PlaywrightTimeoutError as e:
            raise NavigationTimeoutError(
                f"Navigation timed out after {self.config.navigation_timeout}ms",
                url=url,
            ) from e
        except PlaywrightError as e:
            raise NavigationError(f"Navigation failed: {e.message}", url=url) from e

    async def _wait_until_ready(self, page, url: str) -> None:
        try:
            await page.wait_for_selector(
                self.config.ready_selector,
                timeout=self.config.selector_timeout,
            )
        except PlaywrightTimeoutError as e:
            raise ContentNotReadyError(
                f"No content-ready marker ({self.config.ready_selector}) appeared "
                f"within {self.config.selector_timeout}ms",
                url=url,
            ) from e
        except PlaywrightError as e:
            raise ContentNotReadyError(f"Readiness check failed: {e.message}", url=url) from e

    async def _read_content(self, page, url: str) -> str:
        try:
            return await page.content()
        except PlaywrightError as e:
            raise NavigationError(f"Could not read rendered page: {e.message}", url=url) from e

    async def _politeness_delay(self) -> None:
        if self.config.request_delay > 0:
            await asyncio.sleep(self.config.request_delay / 1000)
