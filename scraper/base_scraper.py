"""Base scraper interface for the hotline.ua scraper."""

import logging
from abc import ABC, abstractmethod
from typing import List, Dict, Any, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util import Retry

from models.product import Product


class BaseScraper(ABC):
    """Abstract base class for catalog scrapers.

    This class owns the HTTP session and provides request logging and error
    reporting. Pacing between pages is left to the concrete scraper.

    Args:
        base_url: Base URL of the site
        user_agent: User agent string to use for requests
        request_delay: Delay between page requests in seconds
        max_retries: Maximum number of retries for idempotent requests
        timeout: Timeout for requests in seconds
    """

    def __init__(
        self,
        base_url: str,
        user_agent: str = "Mozilla/5.0",
        request_delay: float = 1.0,
        max_retries: int = 3,
        timeout: int = 30,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.request_delay = request_delay
        self.max_retries = max_retries
        self.timeout = timeout
        self.logger = logging.getLogger(__name__)
        self.session = session or self._create_session()

    def _create_session(self) -> requests.Session:
        """Create a requests session.

        Only GET and HEAD are retried by the adapter; POSTs are sent once.

        Returns:
            Configured requests session
        """
        session = requests.Session()

        retry_strategy = Retry(
            total=self.max_retries,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET", "HEAD"],
            backoff_factor=1,
        )

        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        session.headers.update({"User-Agent": self.user_agent})

        return session

    def _make_request(
        self,
        method: str,
        url: str,
        json: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> requests.Response:
        """Make one HTTP request and raise on a non-2xx status.

        Args:
            method: HTTP method
            url: Absolute or base-relative URL
            json: JSON body to send
            headers: Extra headers for this request

        Returns:
            HTTP response

        Raises:
            requests.RequestException: If the request fails
        """
        full_url = (
            url if url.startswith(("http://", "https://")) else f"{self.base_url}{url}"
        )
        self.logger.debug(f"Making {method} request to {full_url}")

        try:
            response = self.session.request(
                method, full_url, json=json, headers=headers, timeout=self.timeout
            )
            response.raise_for_status()
            return response
        except requests.RequestException as e:
            self.logger.error(f"Request to {full_url} failed: {e}")
            if e.response is not None:
                self.logger.error(f"Response status: {e.response.status_code}")
                self.logger.error(f"Response body: {e.response.text[:2000]}")
            raise

    def close(self) -> None:
        """Close the scraper and release resources."""
        self.session.close()
        self.logger.info("Scraper closed")

    @abstractmethod
    def get_products(self, category_url: str) -> List[Product]:
        """Scrape every product of a category.

        Args:
            category_url: URL of the category to scrape

        Returns:
            List of scraped products
        """
        pass
