"""Scraper package for the hotline.ua catalog scraper."""

from .base_scraper import BaseScraper
from .hotline_scraper import HotlineScraper
from .factory import create_scraper, create_token_source

__all__ = ["BaseScraper", "HotlineScraper", "create_scraper", "create_token_source"]
