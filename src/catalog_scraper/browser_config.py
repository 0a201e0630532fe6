"""
Browser configuration for the Playwright-backed page session.

This module provides a validated Pydantic configuration model for the
browser session and the launch arguments used to sandbox it.
"""
from typing import Dict, List, Literal

from pydantic import BaseModel, ConfigDict, Field

from catalog_scraper.constants import DEFAULT_USER_AGENT


# Launch flags for a sandboxed headless Chromium in containers
DEFAULT_LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--no-first-run",
    "--no-zygote",
    "--disable-gpu",
]

# Generic heading / product-title candidates that mark a rendered page
DEFAULT_READY_SELECTORS = [
    "h1",
    ".product-title",
    '[data-testid="product-title"]',
]


class BrowserConfig(BaseModel):
    """
    Configuration for BrowserSessionManager.

    All fields are validated by Pydantic to ensure type safety and valid values.
    """

    model_config = ConfigDict(frozen=False, validate_assignment=True)

    headless: bool = Field(
        default=True,
        description="Run browser in headless mode (no visible UI)"
    )

    browser_type: Literal["chromium", "firefox", "webkit"] = Field(
        default="chromium",
        description="Browser engine to launch"
    )

    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        description="Fixed user agent sent with every page request"
    )

    viewport_width: int = Field(default=1920, ge=320, le=7680)
    viewport_height: int = Field(default=1080, ge=240, le=4320)

    navigation_timeout: int = Field(
        default=30000,
        description="Page navigation timeout in milliseconds",
        ge=1000,
        le=300000
    )

    selector_timeout: int = Field(
        default=10000,
        description="Timeout in milliseconds for a content-ready selector to appear",
        ge=100,
        le=120000
    )

    request_delay: int = Field(
        default=2000,
        description="Politeness delay in milliseconds applied after every page fetch",
        ge=0,
        le=60000
    )

    wait_until: Literal["load", "domcontentloaded", "networkidle", "commit"] = Field(
        default="load",
        description="When to consider navigation complete; the ready-selector wait follows"
    )

    ready_selectors: List[str] = Field(
        default_factory=lambda: list(DEFAULT_READY_SELECTORS),
        min_length=1,
        description="Any one of these appearing marks the page as ready"
    )

    launch_args: List[str] = Field(
        default_factory=lambda: list(DEFAULT_LAUNCH_ARGS),
        description="Browser launch arguments"
    )

    @property
    def viewport(self) -> Dict[str, int]:
        return {"width": self.viewport_width, "height": self.viewport_height}

    @property
    def ready_selector(self) -> str:
        """Selector list matching any of the content-ready markers."""
        return ", ".join(self.ready_selectors)
