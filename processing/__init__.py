"""Processing package for the hotline.ua catalog scraper."""

from .product_filters import filter_by_price, search_by_title, deduplicate_products
from .stats import price_summary, products_to_dataframe, vendor_counts
from .category_extractor import (
    extract_categories,
    extract_category_urls,
    is_category_url,
    load_categories_file,
)

__all__ = [
    "filter_by_price",
    "search_by_title",
    "deduplicate_products",
    "price_summary",
    "products_to_dataframe",
    "vendor_counts",
    "extract_categories",
    "extract_category_urls",
    "is_category_url",
    "load_categories_file",
]
