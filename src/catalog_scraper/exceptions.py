"""Classified errors raised by the scraping pipeline."""

import traceback
from typing import Any, Dict, Optional


class ScraperError(Exception):
    """Base class for pipeline errors.

    ``kind`` is a stable identifier used when errors are reported to
    callers or recorded in a batch ledger.
    """
    kind = "scraper_error"

    def __init__(self, message: str, url: Optional[str] = None):
        self.message = message
        self.url = url
        super().__init__(message)

    def to_dict(self, include_details: bool = False) -> Dict[str, Any]:
        """Serialize for callers.

        Args:
            include_details: Attach the formatted traceback (non-production only)
        """
        data: Dict[str, Any] = {
            "kind": self.kind,
            "message": self.message,
            "url": self.url,
        }
        if include_details:
            data["details"] = "".join(
                traceback.format_exception(type(self), self, self.__traceback__)
            )
        return data


class InvalidDomainError(ScraperError):
    """URL host does not match the configured target domain."""
    kind = "invalid_domain"


class RobotsDisallowedError(ScraperError):
    """URL is disallowed by the site's robots.txt."""
    kind = "robots_disallowed"


class BrowserLaunchError(ScraperError):
    """The headless browser process could not be started."""
    kind = "browser_launch_failed"


class NavigationError(ScraperError):
    """Page failed to load."""
    kind = "navigation_failed"


class NavigationTimeoutError(NavigationError):
    """Page failed to load within the navigation timeout."""
    kind = "navigation_timeout"


class ContentNotReadyError(ScraperError):
    """Page loaded but no content-ready marker appeared in time."""
    kind = "content_not_ready"


class ExtractionError(ScraperError):
    """The extraction stage failed as a whole."""
    kind = "extraction_failed"


class BatchInputError(ScraperError):
    """Malformed batch request."""
    kind = "batch_input_invalid"


class DuplicateProductError(ScraperError):
    """The persistence collaborator already holds this product."""
    kind = "duplicate_product"

    def __init__(self, message: str, url: Optional[str] = None, existing: Optional[dict] = None):
        super().__init__(message, url=url)
        self.existing = existing or {}

    def to_dict(self, include_details: bool = False) -> Dict[str, Any]:
        data = super().to_dict(include_details)
        data["existing"] = self.existing
        return data


UNEXPECTED_ERROR_KIND = "unexpected_error"


def classify_error(exc: BaseException) -> str:
    """Return the error kind for any exception."""
    if isinstance(exc, ScraperError):
        return exc.kind
    return UNEXPECTED_ERROR_KIND
