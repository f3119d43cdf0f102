"""Hotline.ua pipeline: paginate, flush progressively, write final outputs."""

import logging
import threading
from typing import List, Optional, Set

from models.product import Product
from models.settings import RunSettings
from pipelines.base_pipeline import BasePipeline
from processing.product_filters import deduplicate_products
from scraper.errors import ScrapeCancelled
from scraper.hotline_scraper import HotlineScraper
from storage.csv_storage import CSVStorage
from storage.json_storage import JSONStorage


class HotlinePipeline(BasePipeline):
    """Pipeline for one or more hotline.ua categories.

    For each category the JSON file is flushed after page 1 and then every
    ``save_interval`` pages, so an aborted run leaves the flushed pages on
    disk. When all pages are in, the JSON file is rewritten with the full
    result set and the CSV export is produced.
    """

    def __init__(self, scraper: HotlineScraper, settings: RunSettings):
        super().__init__(scraper, settings)
        self.logger = logging.getLogger(__name__)

    def category_name(self, category_url: str) -> str:
        path, _ = self.scraper.resolve_category(category_url)
        return path

    def run_pipeline(
        self, category_url: str, cancel_event: Optional[threading.Event] = None
    ) -> List[Product]:
        """Scrape every page of a category and persist it.

        Args:
            category_url: URL of the category to scrape
            cancel_event: Optional cancellation flag checked between pages

        Returns:
            The full result set in page order

        Raises:
            ScraperError: If a page cannot be fetched or decoded
            requests.RequestException: On transport failures
            OSError: If an output file cannot be written
        """
        storage_settings = self.settings.storage
        name = self.category_name(category_url)
        json_storage = JSONStorage(storage_settings.json_path(name))
        json_storage.initialize()

        seen: Optional[Set[int]] = set() if storage_settings.deduplicate else None
        result_set: List[Product] = []
        pending: List[Product] = []
        pending_pages = 0
        flushes = 0
        last_page = 0

        self.logger.info(f"Starting pipeline for category: {category_url}")
        try:
            for page_result in self.scraper.iter_pages(
                category_url, cancel_event=cancel_event
            ):
                last_page = page_result.page
                products = list(page_result.products)
                if seen is not None:
                    products = deduplicate_products(products, seen)

                result_set.extend(products)
                pending.extend(products)
                pending_pages += 1

                if storage_settings.save_progressively and (
                    flushes == 0 or pending_pages >= storage_settings.save_interval
                ):
                    json_storage.flush(pending, reset=flushes == 0)
                    flushes += 1
                    pending = []
                    pending_pages = 0
        except ScrapeCancelled:
            if storage_settings.save_progressively and pending:
                json_storage.flush(pending, reset=flushes == 0)
                flushes += 1
            self.logger.warning(
                f"Category '{name}' cancelled after page {last_page} "
                f"({len(result_set)} products kept, {flushes} flushes)"
            )
            raise
        except Exception as e:
            self.logger.error(
                f"Category '{name}' aborted after page {last_page} "
                f"({len(result_set)} products, {flushes} flushes): {e}"
            )
            raise

        json_storage.save_products(result_set)

        if storage_settings.export_csv:
            csv_storage = CSVStorage(storage_settings.csv_path(name))
            csv_storage.save_products(result_set)

        self.logger.info(f"Category '{name}' done: {len(result_set)} products")
        return result_set

    @classmethod
    def create_from_config(cls, config, token_source=None) -> "HotlinePipeline":
        """Create a HotlinePipeline from the loaded configuration.

        Args:
            config: Configuration object
            token_source: Overrides the token source picked from config

        Returns:
            Configured HotlinePipeline instance
        """
        from scraper.factory import create_scraper, create_token_source

        settings = RunSettings.from_config(config)
        if token_source is None:
            token_source = create_token_source(config)
        return cls(create_scraper(settings, token_source), settings)
