"""
robots.txt compliance gate.

Fetches the target site's crawling policy once per session and answers
allow/deny lookups against it. If the policy cannot be fetched the gate
allows every URL and logs a warning.
"""

import logging
from typing import Optional
from urllib.robotparser import RobotFileParser

import requests

logger = logging.getLogger(__name__)


class RobotsComplianceGate:
    """Answers whether a URL may be fetched under the site's robots.txt."""

    def __init__(
        self,
        base_url: str,
        user_agent: str,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the gate.

        Args:
            base_url: Site root, e.g. https://deodap.in
            user_agent: User agent used for the fetch and as the default lookup agent
            timeout: robots.txt request timeout in seconds
            session: Optional requests session (injected in tests)
        """
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.timeout = timeout
        self._session = session or requests.Session()
        self._parser: Optional[RobotFileParser] = None
        self._initialized = False

    @property
    def robots_url(self) -> str:
        return f"{self.base_url}/robots.txt"

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def rules_loaded(self) -> bool:
        """Whether a robots.txt was fetched and parsed."""
        return self._parser is not None

    def initialize(self) -> None:
        """Fetch and parse robots.txt. Runs once; later calls are no-ops."""
        if self._initialized:
            return

        try:
            response = self._session.get(
                self.robots_url,
                timeout=self.timeout,
                headers={"User-Agent": self.user_agent},
            )
            response.raise_for_status()
            self.load(response.text)
            logger.info(f"robots.txt loaded and parsed from {self.robots_url}")
        except requests.exceptions.RequestException as e:
            # Fail open: availability over strictness
            self._parser = None
            logger.warning(
                f"Could not load {self.robots_url}, allowing all URLs: {e}"
            )

        self._initialized = True

    def load(self, content: str) -> None:
        """Parse robots.txt content directly."""
        parser = RobotFileParser(self.robots_url)
        parser.parse(content.splitlines())
        self._parser = parser
        self._initialized = True

    def is_allowed(self, url: str, user_agent: Optional[str] = None) -> bool:
        """
        Check a URL against the loaded rules.

        Args:
            url: Absolute URL to check
            user_agent: Agent to match rules for (defaults to the gate's agent)

        Returns:
            True when allowed, or when no rules were loaded
        """
        if self._parser is None:
            return True
        return self._parser.can_fetch(user_agent or self.user_agent, url)

    def crawl_delay(self, user_agent: Optional[str] = None) -> Optional[float]:
        """Crawl-delay directive for the agent, if the site declares one."""
        if self._parser is None:
            return None
        delay = self._parser.crawl_delay(user_agent or self.user_agent)
        return float(delay) if delay is not None else None
