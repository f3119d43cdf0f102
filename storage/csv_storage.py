"""CSV export of scrape results for spreadsheet tools."""

import csv
import logging
import re
from typing import List, Any, Optional

from models.product import Product
from storage.base_storage import BaseStorage

CSV_HEADER = [
    "ID",
    "Title",
    "Vendor",
    "Category",
    "Min Price",
    "Max Price",
    "Offer Count",
    "URL",
    "Images",
    "Specifications",
]

_WHITESPACE_RUN = re.compile(r"[\r\n\t]+")


def clean_text(value: Optional[Any]) -> str:
    """Collapse line breaks and tabs to single spaces and trim.

    Quote doubling is left to the csv writer.

    Args:
        value: Field value, may be None

    Returns:
        Cleaned text ("" for None)
    """
    if value is None:
        return ""
    return _WHITESPACE_RUN.sub(" ", str(value)).strip()


def _number(value: Optional[Any]):
    """Numbers are written bare, missing ones as an empty quoted string."""
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, (int, float)):
        return value
    return clean_text(value)


class CSVStorage(BaseStorage):
    """CSV exporter for the final result set.

    The file is UTF-8 with a byte-order mark so spreadsheet tools detect the
    encoding of Cyrillic titles. Every text field is quoted.

    Args:
        path: Path of the CSV file
    """

    def __init__(self, path) -> None:
        super().__init__(path)
        self.logger = logging.getLogger(__name__)

    @staticmethod
    def product_row(product: Product) -> List[Any]:
        """Render one product as a CSV row."""
        return [
            _number(product.product_id),
            clean_text(product.title),
            clean_text(product.vendor_title),
            clean_text(product.category_name),
            _number(product.min_price),
            _number(product.max_price),
            _number(product.offer_count),
            clean_text(product.url),
            clean_text("; ".join(product.image_links)),
            clean_text("; ".join(product.tech_short_specifications_list)),
        ]

    def save_products(self, products: List[Product]) -> None:
        """Write the CSV file, replacing any previous export.

        Args:
            products: Products to export, in output order

        Raises:
            OSError: If the file cannot be written
        """

        def write(file) -> None:
            writer = csv.writer(
                file, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n"
            )
            writer.writerow(CSV_HEADER)
            for product in products:
                writer.writerow(self.product_row(product))

        self._replace_file(write, encoding="utf-8-sig", newline="")
        self.logger.info(f"Exported {len(products)} products to {self.path}")
