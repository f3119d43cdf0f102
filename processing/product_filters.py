"""In-memory queries over an already scraped result set."""

import logging
from typing import Iterable, List, Optional, Set

from models.product import Product


def _reference_price(product: Product) -> Optional[float]:
    if product.min_price is not None:
        return product.min_price
    return product.max_price


def filter_by_price(
    products: Iterable[Product], min_price: float, max_price: float
) -> List[Product]:
    """Keep products whose price lies within ``[min_price, max_price]``.

    The minimum offer price is used, or the maximum one when no minimum was
    reported. Products without any price are dropped.

    Args:
        products: Products to filter
        min_price: Inclusive lower bound
        max_price: Inclusive upper bound

    Returns:
        Matching products in input order
    """
    result = []
    for product in products:
        price = _reference_price(product)
        if price is not None and min_price <= price <= max_price:
            result.append(product)
    return result


def search_by_title(products: Iterable[Product], term: str) -> List[Product]:
    """Case-insensitive substring search over product titles."""
    needle = term.casefold()
    return [product for product in products if needle in product.title.casefold()]


def deduplicate_products(
    products: Iterable[Product], seen: Optional[Set[int]] = None
) -> List[Product]:
    """Drop products whose id was already seen, keeping the first occurrence.

    Args:
        products: Products in result order
        seen: Ids seen in earlier batches; updated in place when given

    Returns:
        Products with unseen ids, in input order
    """
    logger = logging.getLogger(__name__)
    if seen is None:
        seen = set()

    unique = []
    duplicates = 0
    for product in products:
        if product.product_id in seen:
            duplicates += 1
            continue
        seen.add(product.product_id)
        unique.append(product)

    if duplicates:
        logger.info(f"Dropped {duplicates} duplicate products")
    return unique
