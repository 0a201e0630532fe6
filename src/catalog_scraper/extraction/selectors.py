"""Ordered CSS selector chains per product field.

Each chain runs from the most specific pattern to the most generic.
Theme-specific selectors (Shopify ``product-single__*`` / ``product__*``)
come before generic class-substring matches.
"""

NAME_SELECTORS = (
    '[data-testid="product-title"]',
    ".product-single__title",
    ".product__title",
    "h1.product-title",
    ".product-info h1",
    ".product-title",
    ".product-name",
    'h1[class*="title"]',
    "h1",
)

DESCRIPTION_SELECTORS = (
    '[data-testid="product-description"]',
    ".product-single__description",
    ".product__description",
    ".product-info .description",
    ".product-description",
    ".product-form__description",
    ".description",
    ".product-details",
    ".rte",
    '[class*="description"]',
)

# Containers scanned for a long paragraph when no description selector hits
DESCRIPTION_CONTAINERS = (
    ".product-single",
    ".product-form",
    ".product-info",
    ".product-content",
)

SHORT_DESCRIPTION_SELECTORS = (
    '[data-testid="product-short-description"]',
    ".product-short-description",
    ".short-description",
    ".product__excerpt",
    ".product-excerpt",
)

PRICE_SELECTORS = (
    '[data-testid="price"]',
    ".price-item--sale",
    ".sale-price",
    ".current-price",
    ".product-form__price",
    ".product-price",
    ".price-item--regular",
    ".price",
    ".money",
    '[class*="price"]',
)

IMAGE_SELECTORS = (
    '[data-testid="product-image"] img',
    ".product-single__media img",
    ".product__media img",
    ".product-form__media img",
    ".product-gallery img",
    ".product-image img",
    ".product-photos img",
    ".product-slider img",
    ".media img",
)

# Attributes holding the image URL, in preference order (lazy loaders use data-*)
IMAGE_SOURCE_ATTRIBUTES = ("src", "data-src", "data-original")

SPEC_ROW_SELECTORS = (
    ".specifications tr",
    ".specs tr",
    ".product-specs tr",
    "table.product-specifications tr",
)

SPEC_LIST_SELECTORS = (
    ".specifications dl",
    ".specs dl",
    ".product-specs dl",
)

FEATURE_SELECTORS = (
    ".features li",
    ".product-features li",
    ".highlights li",
    ".product-highlights li",
)

BRAND_SELECTORS = (
    '[data-testid="brand"]',
    ".product-brand",
    ".product__vendor",
    ".brand",
    ".manufacturer",
)

SKU_SELECTORS = (
    '[data-testid="sku"]',
    ".product-sku",
    ".product__sku",
    ".sku",
    ".product-code",
)

CATEGORY_SELECTORS = (
    '[data-testid="category"]',
    ".breadcrumb a:last-child",
    ".product-category",
    ".category",
)
