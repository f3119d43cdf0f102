"""Shared fixtures: canned catalog API responses and a scraper wired to a mock session."""

import json
from unittest.mock import Mock

import pytest
import requests

from scraper.hotline_scraper import HotlineScraper
from scraper.tokens import StaticTokenSource


def _item(product_id, title=None, **extra):
    item = {
        "_id": product_id,
        "title": title if title is not None else f"Phone {product_id}",
        "vendor": {"title": "Acme", "__typename": "Vendor"},
        "section": {
            "_id": 386,
            "productCategoryName": "Смартфони",
            "__typename": "Section",
        },
        "url": f"/mobile-phone-{product_id}/",
        "imageLinks": [f"https://img.hotline.ua/{product_id}.jpg"],
        "techShortSpecificationsList": ["6.1\"", "128 GB"],
        "minPrice": 1000 + product_id,
        "maxPrice": 2000 + product_id,
        "offerCount": 3,
    }
    item.update(extra)
    return item


def _body(items, last_page=1, total_count=None, items_per_page=48):
    return {
        "data": {
            "byPathSectionQueryProducts": {
                "collection": items,
                "paginationInfo": {
                    "lastPage": last_page,
                    "totalCount": (
                        total_count
                        if total_count is not None
                        else last_page * items_per_page
                    ),
                    "itemsPerPage": items_per_page,
                },
            }
        }
    }


def _response(body=None, status=200, content=None):
    response = Mock()
    response.status_code = status
    if content is None:
        content = json.dumps(body).encode("utf-8") if body is not None else b""
    response.content = content
    response.text = content.decode("utf-8", errors="replace")
    if body is None:
        response.json.side_effect = ValueError("Expecting value")
    else:
        response.json.return_value = body
    if status >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(
            f"{status} Server Error", response=response
        )
    return response


@pytest.fixture
def make_item():
    return _item


@pytest.fixture
def make_body():
    return _body


@pytest.fixture
def make_response():
    return _response


@pytest.fixture
def session():
    return Mock()


@pytest.fixture
def scraper(session):
    return HotlineScraper(
        token_source=StaticTokenSource("test-token", "test-request-id"),
        request_delay=0,
        show_progress=False,
        session=session,
    )


@pytest.fixture
def serve_pages(session):
    """Queue one response per page; ``pages`` is a list of item lists."""

    def serve(pages, extra=()):
        last_page = len(pages)
        responses = [
            _response(_body(items, last_page=last_page))
            for items in pages
        ]
        session.request.side_effect = responses + list(extra)
        return responses

    return serve
