"""Exceptions raised while fetching and paginating catalog pages."""

from typing import Any, Optional


class ScraperError(Exception):
    """Base class for scraper failures.

    Args:
        message: Human readable description
        page: Page number the failure belongs to, if any
    """

    def __init__(self, message: str, page: Optional[int] = None) -> None:
        self.page = page
        if page is not None:
            message = f"page {page}: {message}"
        super().__init__(message)


class ResponseError(ScraperError):
    """The remote answered, but the response is unusable."""


class NoDataError(ResponseError):
    """The response body was empty or not JSON."""


class RemoteErrorsError(ResponseError):
    """The response carried a GraphQL ``errors`` list."""

    def __init__(self, errors: Any, page: Optional[int] = None) -> None:
        self.errors = errors
        super().__init__(f"remote reported errors: {errors!r}", page=page)


class MissingDataError(ResponseError):
    """The response body had no top-level ``data`` key."""


class MissingResultError(ResponseError):
    """The response ``data`` had no ``byPathSectionQueryProducts`` key."""


class PaginationError(ScraperError):
    """The total page count could not be derived from the first page."""


class ScrapeCancelled(ScraperError):
    """The run was cancelled between two page fetches."""
