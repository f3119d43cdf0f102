"""Factory function for creating scrapers."""

import logging
from typing import Optional

from models.settings import RunSettings
from scraper.hotline_scraper import HotlineScraper
from scraper.tokens import EnvTokenSource, StaticTokenSource, TokenSource


def create_token_source(config) -> TokenSource:
    """Pick the token source for a configuration.

    Tokens written in ``scraper.hotline.x_token`` win; otherwise they are
    read from the environment (``.env`` included).

    Args:
        config: Configuration object

    Returns:
        Token source instance
    """
    hotline_config = config.get("scraper", {}).get("hotline", {}) or {}
    token = hotline_config.get("x_token")
    if token:
        return StaticTokenSource(token, hotline_config.get("x_request_id"))
    return EnvTokenSource()


def create_scraper(
    settings: RunSettings, token_source: TokenSource, scraper_type: str = "hotline"
) -> HotlineScraper:
    """Create a scraper instance from run settings.

    Args:
        settings: Immutable run settings
        token_source: Source of the API tokens
        scraper_type: Type of scraper to create (only 'hotline')

    Returns:
        Configured scraper instance

    Raises:
        ValueError: If the scraper type is not supported
    """
    logger = logging.getLogger(__name__)
    logger.debug(f"Creating scraper of type: {scraper_type}")

    if scraper_type.lower() != "hotline":
        raise ValueError(f"Unsupported scraper type: {scraper_type}")

    scraper_settings = settings.scraper
    return HotlineScraper(
        token_source=token_source,
        base_url=scraper_settings.base_url,
        api_url=scraper_settings.api_url,
        user_agent=scraper_settings.user_agent,
        language=scraper_settings.language,
        city_id=scraper_settings.city_id,
        sort=scraper_settings.sort,
        items_per_page=scraper_settings.items_per_page,
        request_delay=scraper_settings.request_delay,
        max_retries=scraper_settings.max_retries,
        timeout=scraper_settings.timeout,
        max_pages=scraper_settings.max_pages,
        show_progress=scraper_settings.show_progress,
        filters=settings.filters,
        excluded_filters=settings.excluded_filters,
        price_min=settings.price_min,
        price_max=settings.price_max,
    )
