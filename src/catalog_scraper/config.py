from dotenv import load_dotenv
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple
from pathlib import Path
import json
import os

from catalog_scraper.browser_config import BrowserConfig
from catalog_scraper.constants import (
    DEFAULT_BASE_URL,
    DEFAULT_CATEGORY,
    DEFAULT_CATEGORY_KEYWORDS,
    DEFAULT_IMAGE_HOST_HINTS,
    DEFAULT_SITE_NAME,
    DEFAULT_SKU_PREFIX,
    DEFAULT_STORE_NAME,
    DEFAULT_TARGET_DOMAIN,
    DEFAULT_USER_AGENT,
    TAXONOMY_CATEGORIES,
)

load_dotenv()  # Loads variables from .env file


class Settings:
    """
    Process-level settings loaded from environment variables.
    """
    SCRAPER_ENV = os.getenv("SCRAPER_ENV", "development")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_DIR = os.getenv("LOG_DIR", "logs")

    @property
    def is_production(self) -> bool:
        return self.SCRAPER_ENV.lower() == "production"


settings = Settings()


@dataclass(frozen=True)
class CategoryTaxonomy:
    """Closed category taxonomy with an ordered keyword map.

    Keywords are matched as case-insensitive substrings of the scraped
    category text, in order; the first hit wins.
    """
    keywords: Tuple[Tuple[str, str], ...] = DEFAULT_CATEGORY_KEYWORDS
    categories: Tuple[str, ...] = TAXONOMY_CATEGORIES
    default: str = DEFAULT_CATEGORY

    def __post_init__(self):
        if self.default not in self.categories:
            raise ValueError(f"Default category {self.default!r} is not in the taxonomy")
        for keyword, category in self.keywords:
            if category not in self.categories:
                raise ValueError(
                    f"Keyword {keyword!r} maps to unknown category {category!r}"
                )

    def resolve(self, text: Optional[str]) -> str:
        """Map free-text category to a taxonomy value.

        Args:
            text: Raw category text scraped from the page

        Returns:
            A category from the closed taxonomy
        """
        if not text:
            return self.default

        lowered = text.strip().lower()
        for category in self.categories:
            if lowered == category.lower():
                return category

        for keyword, category in self.keywords:
            if keyword in lowered:
                return category

        return self.default

    @classmethod
    def from_dict(cls, data: dict) -> "CategoryTaxonomy":
        """Build a taxonomy from a JSON-style mapping.

        Expected keys: ``keywords`` (object or list of pairs), ``categories``
        and ``default``. Missing keys fall back to the built-in taxonomy.
        """
        keywords = data.get("keywords", DEFAULT_CATEGORY_KEYWORDS)
        if isinstance(keywords, dict):
            keywords = keywords.items()
        return cls(
            keywords=tuple((str(k).lower(), str(v)) for k, v in keywords),
            categories=tuple(data.get("categories", TAXONOMY_CATEGORIES)),
            default=data.get("default", DEFAULT_CATEGORY),
        )


@dataclass
class ScraperConfig:
    """Configuration for the scraping pipeline."""
    target_domain: str = DEFAULT_TARGET_DOMAIN
    base_url: str = DEFAULT_BASE_URL
    site_name: str = DEFAULT_SITE_NAME  # Source site, stripped from page titles
    store_name: str = DEFAULT_STORE_NAME  # Our storefront, used in SEO titles
    user_agent: str = DEFAULT_USER_AGENT

    request_delay_ms: int = 2000
    batch_delay_ms: int = 2000
    navigation_timeout_ms: int = 30000
    selector_timeout_ms: int = 10000
    robots_timeout_seconds: float = 10.0
    headless: bool = True

    max_batch_size: int = 10
    sku_prefix: str = DEFAULT_SKU_PREFIX
    image_host_hints: Tuple[str, ...] = DEFAULT_IMAGE_HOST_HINTS
    taxonomy: CategoryTaxonomy = field(default_factory=CategoryTaxonomy)

    @classmethod
    def from_env(cls) -> "ScraperConfig":
        """Load configuration from environment variables.

        Environment variables are prefixed with SCRAPER_,
        e.g. SCRAPER_TARGET_DOMAIN=deodap.in

        Returns:
            ScraperConfig with values from environment
        """
        config = cls()
        prefix = "SCRAPER_"

        for field_name, field_def in config.__dataclass_fields__.items():
            if field_name == "taxonomy":
                continue
            env_value = os.getenv(f"{prefix}{field_name.upper()}")
            if env_value is None:
                continue
            try:
                setattr(config, field_name, _coerce(field_def.type, env_value))
            except ValueError:
                pass  # Keep default if conversion fails

        return config

    @classmethod
    def from_file(cls, path: str) -> "ScraperConfig":
        """Load configuration from a JSON file.

        Args:
            path: Path to JSON configuration file

        Returns:
            ScraperConfig with values from file (defaults if file is missing)
        """
        config = cls()
        file_path = Path(path)

        if not file_path.exists():
            return config

        with open(file_path, 'r') as f:
            data = json.load(f)

        data = data.get('scraper', data)

        for field_name in config.__dataclass_fields__:
            if field_name not in data:
                continue
            value = data[field_name]
            if field_name == "taxonomy":
                value = CategoryTaxonomy.from_dict(value)
            elif field_name == "image_host_hints":
                value = tuple(value)
            setattr(config, field_name, value)

        return config

    def browser_config(self) -> BrowserConfig:
        """Derive the browser session configuration."""
        return BrowserConfig(
            headless=self.headless,
            user_agent=self.user_agent,
            navigation_timeout=self.navigation_timeout_ms,
            selector_timeout=self.selector_timeout_ms,
            request_delay=self.request_delay_ms,
        )

    def with_overrides(self, **overrides) -> "ScraperConfig":
        return replace(self, **overrides)

    def to_dict(self) -> dict:
        """Convert configuration to a JSON-compatible dictionary."""
        data = {
            field_name: getattr(self, field_name)
            for field_name in self.__dataclass_fields__
        }
        data["image_host_hints"] = list(self.image_host_hints)
        data["taxonomy"] = {
            "keywords": [list(pair) for pair in self.taxonomy.keywords],
            "categories": list(self.taxonomy.categories),
            "default": self.taxonomy.default,
        }
        return data


def _coerce(field_type, value: str):
    if field_type in (int, "int"):
        return int(value)
    if field_type in (float, "float"):
        return float(value)
    if field_type in (bool, "bool"):
        return value.strip().lower() in ("1", "true", "yes", "on")
    if "Tuple" in str(field_type):
        return tuple(part.strip() for part in value.split(",") if part.strip())
    return value
