"""Derive the list of category URLs to scrape from raw URL dumps."""

import logging
import re
from pathlib import Path
from typing import Iterable, List
from urllib.parse import urlparse

from scraper.utils import is_hotline_host

URL_PATTERN = re.compile(r"https?://[^\s\[\]]+")

CATEGORY_PATTERNS = [
    re.compile(r"^/ua/[a-zA-Z_-]+/?$"),
    re.compile(r"^/[a-zA-Z_-]+/?$"),
    re.compile(r"^/ua/[a-zA-Z_-]+/[a-zA-Z_-]+/?$"),
]

# Static resources, service pages and product pages
EXCLUDE_PATTERNS = [
    re.compile(pattern)
    for pattern in (
        r"/img/",
        r"/frontend/",
        r"/static/",
        r"/public/",
        r"\.(js|css|png|jpg|jpeg|gif|svg|ico|xml|json)$",
        r"/robots\.txt",
        r"/manifest\.json",
        r"/favicon",
        r"/login",
        r"/register",
        r"/help",
        r"/page/",
        r"/reviews/",
        r"/guides",
        r"/form",
        r"/about",
        r"/feedback",
        r"/vendors",
        r"/place-ad",
        r"/[a-zA-Z-]+-\d+",
        r"/\d+",
        r"-\d{6,}",
    )
]


def is_category_url(url: str) -> bool:
    """Check whether a URL points at a hotline.ua catalog category.

    Args:
        url: URL to check

    Returns:
        True for category-shaped paths that are not excluded
    """
    try:
        parsed = urlparse(url)
    except ValueError:
        return False

    if not is_hotline_host(parsed.hostname):
        return False

    path = parsed.path
    if any(pattern.search(path) or pattern.search(url) for pattern in EXCLUDE_PATTERNS):
        return False
    return any(pattern.match(path) for pattern in CATEGORY_PATTERNS)


def extract_category_urls(lines: Iterable[str]) -> List[str]:
    """Find category URLs in free-form text.

    Args:
        lines: Lines of text containing URLs

    Returns:
        Sorted unique category URLs
    """
    categories = set()
    for line in lines:
        for url in URL_PATTERN.findall(line):
            clean_url = re.sub(r"[:\]]+$", "", url)
            if is_category_url(clean_url):
                categories.add(clean_url)
    return sorted(categories)


def extract_categories(input_file: str, output_file: str = "categories.txt") -> List[str]:
    """Extract category URLs from a URL dump and write them one per line.

    Args:
        input_file: Text file with URLs
        output_file: Where to write the category list

    Returns:
        Extracted category URLs

    Raises:
        FileNotFoundError: If the input file does not exist
    """
    logger = logging.getLogger(__name__)

    with open(input_file, "r", encoding="utf-8") as file:
        categories = extract_category_urls(file)

    Path(output_file).parent.mkdir(parents=True, exist_ok=True)
    with open(output_file, "w", encoding="utf-8") as file:
        file.write("\n".join(categories) + "\n")

    logger.info(f"Found {len(categories)} unique categories, saved to {output_file}")
    return categories


def load_categories_file(path: str) -> List[str]:
    """Read category URLs from a file, one per line.

    Blank lines, ``#`` comments and non hotline.ua lines are ignored.

    Args:
        path: Categories file

    Returns:
        Category URLs in file order

    Raises:
        FileNotFoundError: If the file does not exist
    """
    with open(path, "r", encoding="utf-8") as file:
        lines = [line.strip() for line in file]
    return [
        line
        for line in lines
        if line and not line.startswith("#") and "hotline.ua" in line
    ]
