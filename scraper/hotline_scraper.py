"""Hotline.ua catalog scraper built on the frontend GraphQL API."""

import logging
import threading
import time
from typing import List, Dict, Any, Optional, Generator, Tuple

import requests
from tqdm import tqdm

from models.product import Product, PageRequest, PageResult
from models.settings import DEFAULT_USER_AGENT
from scraper.base_scraper import BaseScraper
from scraper.errors import (
    ScraperError,
    NoDataError,
    RemoteErrorsError,
    MissingDataError,
    MissingResultError,
    PaginationError,
    ScrapeCancelled,
)
from scraper.tokens import ApiTokens, TokenSource
from scraper.utils import derive_total_pages, extract_path_from_url, generate_request_id

OPERATION_NAME = "getCatalogProducts"
RESULT_KEY = "byPathSectionQueryProducts"

CATALOG_PRODUCTS_QUERY = """
query getCatalogProducts($path: String!, $cityId: Int, $sort: String, $showFirst: String, $phrase: String, $itemsPerPage: Int, $page: Int, $filters: [Int], $excludedFilters: [Int], $priceMin: Int, $priceMax: Int) {
    byPathSectionQueryProducts(path: $path, cityId: $cityId, sort: $sort, showFirst: $showFirst, phrase: $phrase, itemsPerPage: $itemsPerPage, page: $page, filters: $filters, excludedFilters: $excludedFilters, priceMin: $priceMin, priceMax: $priceMax) {
        collection {
            _id
            title
            date
            vendor {
                title
                __typename
            }
            section {
                _id
                productCategoryName
                __typename
            }
            isPromo
            toOfficial
            promoBid
            lineName
            linePathNew
            imagesCount
            videosCount
            techShortSpecifications
            techShortSpecificationsList
            reviewsCount
            questionsCount
            url
            imageLinks
            minPrice
            maxPrice
            salesCount
            isNew
            colorsProduct
            offerCount
            singleOffer {
                _id
                conversionUrl
                firmId
                firmTitle
                price
                firmExtraInfo
                delivery {
                    deliveryMethods
                    hasFreeDelivery
                    isSameCity
                    name
                    __typename
                }
                __typename
            }
            madeInUkraine
            userSubscribed
            __typename
        }
        paginationInfo {
            lastPage
            totalCount
            itemsPerPage
            __typename
        }
        __typename
    }
}
"""


class HotlineScraper(BaseScraper):
    """Scraper for hotline.ua catalog categories.

    Pages are fetched strictly one after another with a fixed pause after
    every page beyond the first. A failed page aborts the whole category.

    Args:
        token_source: Supplies the ``x-token``/``x-request-id`` headers
        base_url: Site URL, used to build referers for bare category paths
        api_url: GraphQL endpoint
        user_agent: User agent string to use for requests
        language: Value of the ``x-language`` header
        city_id: City used for offer pricing
        sort: Sort mode
        items_per_page: Page size
        request_delay: Pause after each page beyond the first, in seconds
        max_retries: Retries for idempotent requests
        timeout: Timeout for requests in seconds
        max_pages: Optional cap on pages per category
        show_progress: Whether to draw a tqdm progress bar
        filters: Filter value ids to apply
        excluded_filters: Filter value ids to exclude
        price_min: Lower price bound
        price_max: Upper price bound
    """

    def __init__(
        self,
        token_source: TokenSource,
        base_url: str = "https://hotline.ua",
        api_url: str = "https://hotline.ua/svc/frontend-api/graphql",
        user_agent: str = DEFAULT_USER_AGENT,
        language: str = "uk",
        city_id: int = 5394,
        sort: str = "popularity",
        items_per_page: int = 48,
        request_delay: float = 1.0,
        max_retries: int = 3,
        timeout: int = 30,
        max_pages: Optional[int] = None,
        show_progress: bool = True,
        filters: Tuple[int, ...] = (),
        excluded_filters: Tuple[int, ...] = (),
        price_min: Optional[int] = None,
        price_max: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        super().__init__(
            base_url=base_url,
            user_agent=user_agent,
            request_delay=request_delay,
            max_retries=max_retries,
            timeout=timeout,
            session=session,
        )
        self.logger = logging.getLogger(__name__)
        self.token_source = token_source
        self.api_url = api_url
        self.language = language
        self.city_id = city_id
        self.sort = sort
        self.items_per_page = items_per_page
        self.max_pages = max_pages
        self.show_progress = show_progress
        self.filters = tuple(filters)
        self.excluded_filters = tuple(excluded_filters)
        self.price_min = price_min
        self.price_max = price_max

    def resolve_category(self, category: str) -> Tuple[str, str]:
        """Return ``(path, referer)`` for a category URL or bare path."""
        if category.startswith(("http://", "https://")):
            return extract_path_from_url(category), category
        path = category.strip("/")
        return path, f"{self.base_url}/{path}/"

    def build_request(self, path: str, page: int = 1) -> PageRequest:
        """Build the request for one page of a category."""
        return PageRequest(
            path=path,
            page=page,
            items_per_page=self.items_per_page,
            city_id=self.city_id,
            sort=self.sort,
            filters=self.filters,
            excluded_filters=self.excluded_filters,
            price_min=self.price_min,
            price_max=self.price_max,
        )

    def _build_headers(self, tokens: ApiTokens, referer: str) -> Dict[str, str]:
        return {
            "accept": "*/*",
            "content-type": "application/json",
            "x-language": self.language,
            "x-referer": referer,
            "x-token": tokens.token,
            "x-request-id": tokens.request_id or generate_request_id(),
            "User-Agent": self.user_agent,
        }

    def fetch_raw(
        self,
        request: PageRequest,
        referer: Optional[str] = None,
        tokens: Optional[ApiTokens] = None,
    ) -> Dict[str, Any]:
        """Send one catalog query and return the validated response body.

        Args:
            request: Page to fetch
            referer: Category page URL sent as ``x-referer``
            tokens: Tokens to use; asked from the token source when omitted

        Returns:
            Decoded response body

        Raises:
            NoDataError: If the body is empty or not JSON
            RemoteErrorsError: If the body carries a GraphQL ``errors`` list
            MissingDataError: If the body has no ``data``
            MissingResultError: If ``data`` has no result object
            requests.RequestException: On transport failures
        """
        referer = referer or f"{self.base_url}/{request.path}/"
        if tokens is None:
            tokens = self.token_source.get_tokens(referer)

        payload = {
            "operationName": OPERATION_NAME,
            "variables": request.to_variables(),
            "query": CATALOG_PRODUCTS_QUERY,
        }

        self.logger.debug(f"Requesting page {request.page} of '{request.path}'")
        response = self._make_request(
            "POST",
            self.api_url,
            json=payload,
            headers=self._build_headers(tokens, referer),
        )

        if not response.content:
            raise NoDataError("empty response from server", page=request.page)
        try:
            body = response.json()
        except ValueError as e:
            raise NoDataError(f"response is not JSON: {e}", page=request.page)

        if not body or not isinstance(body, dict):
            raise NoDataError("empty response from server", page=request.page)

        if body.get("errors") is not None:
            self.logger.error(f"GraphQL errors on page {request.page}: {body['errors']}")
            raise RemoteErrorsError(body["errors"], page=request.page)

        if not body.get("data"):
            self.logger.error(f"Unexpected response structure: {body}")
            raise MissingDataError("response has no data", page=request.page)

        if not body["data"].get(RESULT_KEY):
            self.logger.error(f"Unexpected response structure: {body['data']}")
            raise MissingResultError(
                f"response has no {RESULT_KEY}", page=request.page
            )

        return body

    def fetch_page(
        self,
        request: PageRequest,
        referer: Optional[str] = None,
        tokens: Optional[ApiTokens] = None,
    ) -> PageResult:
        """Fetch and decode one page of products.

        Args:
            request: Page to fetch
            referer: Category page URL sent as ``x-referer``
            tokens: Tokens to use; asked from the token source when omitted

        Returns:
            Decoded page
        """
        try:
            body = self.fetch_raw(request, referer=referer, tokens=tokens)
        except (ScraperError, requests.RequestException) as e:
            self.logger.error(f"Failed to fetch page {request.page} of '{request.path}': {e}")
            raise

        result = PageResult.from_graphql(request.page, body["data"][RESULT_KEY])
        self.logger.debug(
            f"Got {len(result.products)} products on page {request.page} of '{request.path}'"
        )
        return result

    def _pause(self) -> None:
        if self.request_delay > 0:
            time.sleep(self.request_delay)

    def iter_pages(
        self, category: str, cancel_event: Optional[threading.Event] = None
    ) -> Generator[PageResult, None, None]:
        """Fetch every page of a category in order.

        Page 1 decides how many pages there are; when its metadata is
        unusable, page 1 is still yielded before PaginationError is raised.
        The next page is only
        requested after the previous one has completed and the pause has
        elapsed. Errors propagate and end the iteration.

        Args:
            category: Category URL or bare category path
            cancel_event: Checked between pages; when set the run stops with
                ScrapeCancelled

        Yields:
            One PageResult per page, in page order
        """
        path, referer = self.resolve_category(category)
        tokens = self.token_source.get_tokens(referer)

        first = self.fetch_page(self.build_request(path, 1), referer, tokens)
        try:
            total_pages = derive_total_pages(
                first.pagination, self.items_per_page, self.max_pages
            )
        except PaginationError:
            yield first
            raise
        self.logger.info(
            f"Category '{path}': {total_pages} pages, "
            f"{first.pagination.total_count} products reported"
        )

        progress = tqdm(
            desc=f"Pages in {path}",
            unit="page",
            total=total_pages,
            ncols=100,
            colour="green",
            disable=not self.show_progress,
        )

        try:
            progress.update(1)
            yield first

            for page in range(2, total_pages + 1):
                if cancel_event is not None and cancel_event.is_set():
                    raise ScrapeCancelled(
                        f"cancelled before page {page} of {total_pages}", page=page
                    )

                progress.set_description(f"Page {page}/{total_pages} of {path}")
                try:
                    result = self.fetch_page(
                        self.build_request(path, page), referer, tokens
                    )
                finally:
                    self._pause()

                progress.update(1)
                yield result
        finally:
            progress.close()

    def get_products(
        self, category_url: str, cancel_event: Optional[threading.Event] = None
    ) -> List[Product]:
        """Scrape products from all pages of a category.

        Args:
            category_url: URL of the category to scrape
            cancel_event: Optional cancellation flag checked between pages

        Returns:
            Products in page order, server order within each page
        """
        all_products: List[Product] = []
        for result in self.iter_pages(category_url, cancel_event=cancel_event):
            all_products.extend(result.products)

        self.logger.info(
            f"Total products scraped from '{category_url}': {len(all_products)}"
        )
        return all_products
