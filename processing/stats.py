"""Price statistics over scraped products."""

from typing import Dict, List, Optional

import pandas as pd

from models.product import Product


def products_to_dataframe(products: List[Product]) -> pd.DataFrame:
    """Flatten products into a DataFrame with one row per product.

    Args:
        products: Products to convert

    Returns:
        DataFrame with id, title, vendor, category, price and offer columns
    """
    return pd.DataFrame(
        [
            {
                "product_id": product.product_id,
                "title": product.title,
                "vendor": product.vendor_title,
                "category": product.category_name,
                "min_price": product.min_price,
                "max_price": product.max_price,
                "offer_count": product.offer_count,
            }
            for product in products
        ],
        columns=[
            "product_id",
            "title",
            "vendor",
            "category",
            "min_price",
            "max_price",
            "offer_count",
        ],
    )


def price_summary(products: List[Product]) -> Dict[str, Optional[float]]:
    """Summarize minimum offer prices.

    Args:
        products: Products to summarize

    Returns:
        Dictionary with ``count`` (all products), ``priced`` (products with a
        minimum price) and ``min``/``max``/``mean`` of those prices (None when
        nothing is priced)
    """
    df = products_to_dataframe(products)
    prices = pd.to_numeric(df["min_price"], errors="coerce").dropna()
    prices = prices[prices > 0]

    if prices.empty:
        return {"count": len(df), "priced": 0, "min": None, "max": None, "mean": None}

    return {
        "count": len(df),
        "priced": int(prices.count()),
        "min": float(prices.min()),
        "max": float(prices.max()),
        "mean": round(float(prices.mean()), 2),
    }


def vendor_counts(products: List[Product], top: int = 10) -> Dict[str, int]:
    """Count products per vendor, most frequent first."""
    df = products_to_dataframe(products)
    counts = df["vendor"].fillna("unknown").value_counts().head(top)
    return {str(vendor): int(count) for vendor, count in counts.items()}
