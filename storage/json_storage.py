"""JSON accumulator file that mirrors scrape progress on disk."""

import json
import logging
from typing import List, Dict, Any

from models.product import Product
from storage.base_storage import BaseStorage


class JSONStorage(BaseStorage):
    """Pretty-printed JSON array of products.

    ``flush`` appends a batch to whatever is already in the file so a crash
    only loses pages that were not flushed yet. ``save_products`` replaces
    the file with the canonical full result.

    Args:
        path: Path of the JSON file
    """

    def __init__(self, path) -> None:
        super().__init__(path)
        self.logger = logging.getLogger(__name__)

    def _read_existing(self) -> List[Dict[str, Any]]:
        """Read the current array; anything unreadable counts as empty."""
        try:
            with open(self.path, "r", encoding="utf-8") as file:
                data = json.load(file)
        except FileNotFoundError:
            self.logger.debug(f"No existing file at {self.path}, starting fresh")
            return []
        except (OSError, ValueError) as e:
            self.logger.warning(f"Could not read {self.path} ({e}), starting fresh")
            return []

        if not isinstance(data, list):
            self.logger.warning(f"{self.path} does not hold a JSON array, starting fresh")
            return []
        return data

    def _write(self, items: List[Dict[str, Any]]) -> None:
        self._replace_file(
            lambda file: json.dump(items, file, ensure_ascii=False, indent=2)
        )

    def flush(self, batch: List[Product], reset: bool = False) -> int:
        """Append a batch of products to the file.

        The caller must pass batches that do not overlap with what was
        flushed before.

        Args:
            batch: Newly fetched products
            reset: Ignore the current file content (first flush of a run)

        Returns:
            Number of products in the file after the flush

        Raises:
            OSError: If the file cannot be written
        """
        items = [] if reset else self._read_existing()
        items.extend(product.to_dict() for product in batch)
        self._write(items)
        self.logger.info(
            f"Flushed {len(batch)} products to {self.path} ({len(items)} total)"
        )
        return len(items)

    def save_products(self, products: List[Product]) -> None:
        """Overwrite the file with the complete result set."""
        self._write([product.to_dict() for product in products])
        self.logger.info(f"Saved {len(products)} products to {self.path}")

    def load(self) -> List[Product]:
        """Read the products currently stored in the file.

        Returns:
            Products in file order

        Raises:
            OSError: If the file cannot be read
            ValueError: If the file is not a JSON array of products
        """
        with open(self.path, "r", encoding="utf-8") as file:
            data = json.load(file)
        if not isinstance(data, list):
            raise ValueError(f"{self.path} does not hold a JSON array")
        return [Product.from_graphql(item) for item in data]
