"""Utility functions for the hotline.ua scraper."""

import logging
import math
import uuid
from typing import Optional
from urllib.parse import urlparse

from models.product import PaginationInfo
from scraper.errors import PaginationError


def is_hotline_host(hostname) -> bool:
    """Check that a host is hotline.ua or one of its subdomains."""
    hostname = (hostname or "").lower()
    return hostname == "hotline.ua" or hostname.endswith(".hotline.ua")


def extract_path_from_url(category_url: str) -> str:
    """Extract the catalog path the API expects from a category URL.

    Args:
        category_url: Category URL
            (e.g., "https://hotline.ua/mobile/mobilnye-telefony-i-smartfony/")

    Returns:
        Last path segment (e.g., "mobilnye-telefony-i-smartfony")

    Raises:
        ValueError: If the URL is not a hotline.ua category URL
    """
    parsed = urlparse(category_url.strip())
    if not is_hotline_host(parsed.hostname):
        raise ValueError(f"Not a hotline.ua URL: {category_url}")

    segments = [part for part in parsed.path.split("/") if part]
    if not segments or segments == ["ua"]:
        raise ValueError(f"No category path in URL: {category_url}")
    return segments[-1]


def generate_request_id() -> str:
    """Generate a fresh 32 character correlation id."""
    return uuid.uuid4().hex


def derive_total_pages(
    pagination: PaginationInfo,
    items_per_page: int,
    max_pages: Optional[int] = None,
) -> int:
    """Work out how many pages a category has from page 1's metadata.

    ``lastPage`` is authoritative; ``totalCount`` divided by the page size
    (rounded up) is used when it is absent.

    Args:
        pagination: Pagination metadata of the first page
        items_per_page: Page size the requests were made with
        max_pages: Optional cap on the number of pages

    Returns:
        Number of pages to fetch, at least 1

    Raises:
        PaginationError: If neither field is usable or the count is below 1
    """
    logger = logging.getLogger(__name__)
    page_size = pagination.items_per_page or items_per_page

    from_count = None
    if pagination.total_count is not None and page_size > 0:
        from_count = math.ceil(pagination.total_count / page_size)

    if pagination.last_page is not None:
        total_pages = pagination.last_page
        if from_count is not None and from_count != total_pages:
            logger.warning(
                f"lastPage={total_pages} disagrees with totalCount="
                f"{pagination.total_count} / itemsPerPage={page_size}, using lastPage"
            )
    elif from_count is not None:
        total_pages = from_count
    else:
        raise PaginationError(
            "response has neither lastPage nor totalCount", page=1
        )

    if total_pages < 1:
        raise PaginationError(f"derived page count {total_pages} is invalid", page=1)

    if max_pages is not None and total_pages > max_pages:
        logger.info(f"Limiting {total_pages} pages to {max_pages}")
        total_pages = max_pages

    return total_pages
