"""Base pipeline interface for scraping and storing category data."""

import logging
import threading
from abc import ABC, abstractmethod
from typing import List, Dict, Any, Iterable, Optional

from models.product import Product
from models.settings import RunSettings
from scraper.base_scraper import BaseScraper
from scraper.errors import ScrapeCancelled


class BasePipeline(ABC):
    """Abstract base class for scrape pipelines.

    A pipeline runs one category at a time. Failures of a single category are
    recorded in the run summary and do not stop the remaining categories;
    a cancellation stops the whole run.

    Args:
        scraper: Scraper instance
        settings: Immutable run settings
    """

    def __init__(self, scraper: BaseScraper, settings: RunSettings):
        self.scraper = scraper
        self.settings = settings
        self.logger = logging.getLogger(__name__)

    @abstractmethod
    def category_name(self, category_url: str) -> str:
        """Name used for a category's output files."""
        pass

    @abstractmethod
    def run_pipeline(
        self, category_url: str, cancel_event: Optional[threading.Event] = None
    ) -> List[Product]:
        """Scrape one category and store the result.

        Args:
            category_url: URL of the category to scrape
            cancel_event: Optional cancellation flag

        Returns:
            The full result set of the category
        """
        pass

    def run_categories(
        self,
        category_urls: Iterable[str],
        cancel_event: Optional[threading.Event] = None,
    ) -> Dict[str, Dict[str, Any]]:
        """Run the pipeline for several categories in sequence.

        Args:
            category_urls: Category URLs to scrape
            cancel_event: Optional cancellation flag

        Returns:
            Mapping of category name to ``{"count": n}`` or ``{"error": msg}``
        """
        category_urls = list(category_urls)
        results: Dict[str, Dict[str, Any]] = {}

        for index, category_url in enumerate(category_urls):
            try:
                name = self.category_name(category_url)
            except ValueError as e:
                self.logger.error(f"Skipping category {category_url}: {e}")
                results[category_url] = {"error": str(e)}
                continue

            self.logger.info(
                f"Scraping category {index + 1}/{len(category_urls)}: {name}"
            )
            try:
                products = self.run_pipeline(category_url, cancel_event=cancel_event)
                results[name] = {"count": len(products)}
            except ScrapeCancelled as e:
                results[name] = {"error": str(e)}
                self.logger.warning("Run cancelled, skipping remaining categories")
                break
            except Exception as e:
                self.logger.error(
                    f"Error processing category {name}: {e}", exc_info=True
                )
                results[name] = {"error": str(e)}

        succeeded = [r for r in results.values() if "error" not in r]
        self.logger.info(
            f"Finished {len(succeeded)}/{len(category_urls)} categories, "
            f"{sum(r['count'] for r in succeeded)} products total"
        )
        return results

    def close(self) -> None:
        """Close pipeline resources."""
        self.logger.info("Closing pipeline resources")
        self.scraper.close()
