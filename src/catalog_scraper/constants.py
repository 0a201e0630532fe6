# src/catalog_scraper/constants.py
"""Centralized constants for the catalog scraper.

This module contains the record caps and defaults shared across the
extraction and sanitization stages. For user-configurable values, see
config.py and ScraperConfig.
"""

# =============================================================================
# Source Site Defaults
# =============================================================================

DEFAULT_TARGET_DOMAIN = "deodap.in"
DEFAULT_BASE_URL = "https://deodap.in"
DEFAULT_SITE_NAME = "DeoDap"
DEFAULT_STORE_NAME = "ViralDeals"

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

# Hosts whose images are treated as product images in the fallback scan
DEFAULT_IMAGE_HOST_HINTS = ("cdn.shopify.com",)


# =============================================================================
# Record Field Caps
# =============================================================================

MAX_NAME_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 2000
MAX_SHORT_DESCRIPTION_LENGTH = 200
MAX_BRAND_LENGTH = 50
MAX_SKU_LENGTH = 50
MAX_TEXT_LENGTH = 500  # Image alt, spec names/values, features

MAX_IMAGES = 10
MAX_SPECIFICATIONS = 20
MAX_FEATURES = 15
MAX_TAGS = 10
MAX_SEO_KEYWORDS = 5

MAX_META_TITLE_NAME_LENGTH = 50
MAX_META_DESCRIPTION_LENGTH = 150

# Length of a derived short description when the text has no sentence break
SHORT_DESCRIPTION_FALLBACK_LENGTH = 100


# =============================================================================
# Record Defaults
# =============================================================================

DEFAULT_STOCK = 100
DEFAULT_GST_RATE = 18
DEFAULT_SKU_PREFIX = "VD"
SKU_RANDOM_LENGTH = 5

DEFAULT_PRODUCT_NAME = "Unknown Product"
DEFAULT_IMAGE_ALT = "Product image {index}"
DEFAULT_META_DESCRIPTION = (
    "Discover amazing viral products at unbeatable prices on {store}."
)


# =============================================================================
# Extraction Constants
# =============================================================================

# Plausible price bounds (exclusive)
MIN_PLAUSIBLE_PRICE = 0
MAX_PLAUSIBLE_PRICE = 100000

# Images with a declared width or height below this are treated as icons
MIN_IMAGE_DIMENSION_PX = 100

# Minimum text length for the description paragraph scan
MIN_DESCRIPTION_SCAN_LENGTH = 50

# Text containing any of these is not a description candidate
CURRENCY_MARKERS = ("₹", "Rs.", "Rs ", "INR", "Price")

# Minimum token length for generated tags
MIN_TAG_LENGTH = 3

TAG_STOP_WORDS = frozenset({
    "the", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with",
    "by", "is", "are", "was", "were", "be", "been", "have", "has", "had",
    "do", "does", "did", "will", "would", "could", "should", "this", "that",
    "from", "your", "you", "its", "can", "all", "not",
})


# =============================================================================
# Category Taxonomy
# =============================================================================

TAXONOMY_CATEGORIES = (
    "Tech Accessories",
    "Kitchen Innovations",
    "Smart Home Gadgets",
    "Health & Wellness Devices",
    "Gaming & Entertainment",
    "Novelty & Fun Gadgets",
    "Viral Picks",
)

DEFAULT_CATEGORY = "Viral Picks"

# Ordered: first matching keyword wins
DEFAULT_CATEGORY_KEYWORDS = (
    ("electronics", "Tech Accessories"),
    ("mobile", "Tech Accessories"),
    ("kitchen", "Kitchen Innovations"),
    ("home", "Smart Home Gadgets"),
    ("beauty", "Health & Wellness Devices"),
    ("toys", "Gaming & Entertainment"),
    ("fashion", "Novelty & Fun Gadgets"),
    ("gadgets", "Viral Picks"),
    ("accessories", "Tech Accessories"),
)


# =============================================================================
# Batch Constants
# =============================================================================

MAX_BATCH_SIZE = 10
