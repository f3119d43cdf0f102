"""Immutable run settings built once from the loaded configuration."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Tuple

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)


@dataclass(frozen=True)
class ScraperSettings:
    """Settings for talking to the hotline.ua catalog API."""

    base_url: str = "https://hotline.ua"
    api_url: str = "https://hotline.ua/svc/frontend-api/graphql"
    user_agent: str = DEFAULT_USER_AGENT
    language: str = "uk"
    city_id: int = 5394
    sort: str = "popularity"
    items_per_page: int = 48
    request_delay: float = 1.0
    max_retries: int = 3
    timeout: int = 30
    max_pages: Optional[int] = None
    show_progress: bool = True

    def __post_init__(self) -> None:
        if self.items_per_page <= 0:
            raise ValueError("items_per_page must be positive")
        if self.request_delay < 0:
            raise ValueError("request_delay must not be negative")
        if self.max_pages is not None and self.max_pages < 1:
            raise ValueError("max_pages must be at least 1")


@dataclass(frozen=True)
class StorageSettings:
    """Where and how scrape results are written."""

    output_dir: str = "output"
    json_dir: str = "JSON"
    csv_dir: str = "CSV"
    save_progressively: bool = True
    save_interval: int = 5
    deduplicate: bool = False
    export_csv: bool = True

    def __post_init__(self) -> None:
        if self.save_interval < 1:
            raise ValueError("save_interval must be at least 1")

    def json_path(self, name: str) -> Path:
        return Path(self.output_dir) / self.json_dir / f"{name}.json"

    def csv_path(self, name: str) -> Path:
        return Path(self.output_dir) / self.csv_dir / f"{name}.csv"


@dataclass(frozen=True)
class RunSettings:
    """Everything a pipeline run needs, passed in at construction."""

    scraper: ScraperSettings = field(default_factory=ScraperSettings)
    storage: StorageSettings = field(default_factory=StorageSettings)
    filters: Tuple[int, ...] = ()
    excluded_filters: Tuple[int, ...] = ()
    price_min: Optional[int] = None
    price_max: Optional[int] = None

    @classmethod
    def from_config(cls, config: Any) -> "RunSettings":
        """Create settings from the Box-wrapped ``config.yaml`` contents.

        Args:
            config: Configuration object (``Box`` or plain dict)

        Returns:
            RunSettings instance
        """
        scraper_config = config.get("scraper", {}) or {}
        hotline_config = scraper_config.get("hotline", {}) or {}
        storage_config = config.get("storage", {}) or {}

        scraper = ScraperSettings(
            base_url=hotline_config.get("base_url", ScraperSettings.base_url),
            api_url=hotline_config.get("api_url", ScraperSettings.api_url),
            user_agent=scraper_config.get("user_agent") or DEFAULT_USER_AGENT,
            language=hotline_config.get("language", ScraperSettings.language),
            city_id=int(hotline_config.get("city_id", ScraperSettings.city_id)),
            sort=hotline_config.get("sort", ScraperSettings.sort),
            items_per_page=int(
                hotline_config.get("items_per_page", ScraperSettings.items_per_page)
            ),
            request_delay=float(
                scraper_config.get("request_delay", ScraperSettings.request_delay)
            ),
            max_retries=int(
                scraper_config.get("max_retries", ScraperSettings.max_retries)
            ),
            timeout=int(scraper_config.get("timeout", ScraperSettings.timeout)),
            max_pages=hotline_config.get("max_pages"),
            show_progress=bool(scraper_config.get("show_progress", True)),
        )

        storage = StorageSettings(
            output_dir=storage_config.get("output_dir", StorageSettings.output_dir),
            json_dir=storage_config.get("json_dir", StorageSettings.json_dir),
            csv_dir=storage_config.get("csv_dir", StorageSettings.csv_dir),
            save_progressively=bool(storage_config.get("save_progressively", True)),
            save_interval=int(
                storage_config.get("save_interval", StorageSettings.save_interval)
            ),
            deduplicate=bool(storage_config.get("deduplicate", False)),
            export_csv=bool(storage_config.get("export_csv", True)),
        )

        return cls(
            scraper=scraper,
            storage=storage,
            filters=tuple(hotline_config.get("filters") or ()),
            excluded_filters=tuple(hotline_config.get("excluded_filters") or ()),
            price_min=hotline_config.get("price_min"),
            price_max=hotline_config.get("price_max"),
        )
