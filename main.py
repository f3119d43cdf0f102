#!/usr/bin/env python3
"""Main entry point for the hotline.ua catalog scraper."""

import argparse
import logging
import signal
import sys
import threading
from pathlib import Path

import yaml
from box import Box
from dotenv import load_dotenv

from models.settings import RunSettings
from pipelines import HotlinePipeline
from processing import (
    extract_categories,
    filter_by_price,
    load_categories_file,
    price_summary,
    search_by_title,
)
from scraper.logger import setup_logging
from storage import JSONStorage, list_output_files


def load_config(config_path="config.yaml"):
    """Load configuration from YAML file."""
    try:
        with open(config_path, "r", encoding="utf-8") as file:
            config = yaml.safe_load(file) or {}
        return Box(config)
    except (OSError, yaml.YAMLError) as e:
        logging.error(f"Failed to load configuration from {config_path}: {e}")
        sys.exit(1)


def get_categories(config, provided_url=None, categories_file=None):
    """Get list of category URLs to scrape.

    Args:
        config: Configuration object
        provided_url: Optional specific URL provided by command line
        categories_file: Optional file with one category URL per line

    Returns:
        List of category URLs
    """
    if provided_url:
        return [provided_url]

    hotline_config = config.get("scraper", {}).get("hotline", {})
    categories_file = categories_file or hotline_config.get("categories_file")
    if categories_file and Path(categories_file).exists():
        return load_categories_file(categories_file)
    if categories_file and not hotline_config.get("categories"):
        logging.getLogger(__name__).error(
            f"Categories file {categories_file} not found"
        )

    return [
        category["url"] if isinstance(category, dict) else category
        for category in hotline_config.get("categories") or []
    ]


def apply_overrides(config, args):
    """Write command-line overrides into the loaded configuration."""
    storage = config.setdefault("storage", {})
    scraper = config.setdefault("scraper", {})
    hotline = scraper.setdefault("hotline", {})

    if args.flush_interval is not None:
        storage["save_interval"] = args.flush_interval
    if args.no_progressive:
        storage["save_progressively"] = False
    if args.dedupe:
        storage["deduplicate"] = True
    if args.no_csv:
        storage["export_csv"] = False
    if args.output_dir:
        storage["output_dir"] = args.output_dir
    if args.max_pages is not None:
        hotline["max_pages"] = args.max_pages
    if args.delay is not None:
        scraper["request_delay"] = args.delay
    if args.no_progress:
        scraper["show_progress"] = False
    return config


def report_products(json_path, args):
    """Log price statistics and ad-hoc query results for one JSON file."""
    logger = logging.getLogger(__name__)
    products = JSONStorage(json_path).load()
    summary = price_summary(products)
    logger.info(
        f"{Path(json_path).name}: {summary['count']} products, "
        f"min {summary['min']}, max {summary['max']}, avg {summary['mean']}"
    )

    if args.min_price is not None or args.max_price is not None:
        low = args.min_price if args.min_price is not None else 0
        high = args.max_price if args.max_price is not None else float("inf")
        matches = filter_by_price(products, low, high)
        logger.info(f"Products priced {low}-{high}: {len(matches)}")

    if args.search:
        matches = search_by_title(products, args.search)
        logger.info(f'Products with "{args.search}" in the title: {len(matches)}')
        for product in matches[:5]:
            logger.info(f"  {product.title} - {product.min_price}")


def show_report(settings, args):
    """List produced files and summarize every JSON result."""
    logger = logging.getLogger(__name__)
    files = list_output_files(settings.storage)

    logger.info(f"JSON files: {', '.join(files['json']) or 'none'}")
    logger.info(f"CSV files: {', '.join(files['csv']) or 'none'}")

    json_dir = Path(settings.storage.output_dir) / settings.storage.json_dir
    for name in files["json"]:
        try:
            report_products(json_dir / name, args)
        except (OSError, ValueError) as e:
            logger.error(f"Could not read {name}: {e}")


def install_cancel_handler(cancel_event):
    """First Ctrl+C stops after the current page, a second one aborts.

    Returns:
        The SIGINT handler that was installed before
    """
    logger = logging.getLogger(__name__)

    def handle(signum, frame):
        logger.warning("Interrupt received, stopping after the current page")
        cancel_event.set()
        signal.signal(signal.SIGINT, signal.default_int_handler)

    return signal.signal(signal.SIGINT, handle)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Hotline.ua Catalog Scraper")
    parser.add_argument(
        "-c", "--config", default="config.yaml", help="Configuration file path"
    )
    parser.add_argument(
        "-u", "--category", help="Specific category URL to scrape (overrides config)"
    )
    parser.add_argument(
        "-f", "--categories-file", help="File with category URLs, one per line"
    )
    parser.add_argument("-d", "--debug", action="store_true", help="Enable debug mode")
    parser.add_argument(
        "--flush-interval", type=int, help="Pages between progressive JSON saves"
    )
    parser.add_argument(
        "--no-progressive", action="store_true", help="Only write JSON at the end"
    )
    parser.add_argument(
        "--dedupe", action="store_true", help="Drop products whose id was already seen"
    )
    parser.add_argument("--no-csv", action="store_true", help="Skip the CSV export")
    parser.add_argument("-o", "--output-dir", help="Directory for JSON/CSV output")
    parser.add_argument("--max-pages", type=int, help="Maximum pages per category")
    parser.add_argument("--delay", type=float, help="Pause between pages in seconds")
    parser.add_argument(
        "--no-progress", action="store_true", help="Disable the progress bar"
    )
    parser.add_argument(
        "--extract-categories",
        metavar="INPUT",
        help="Extract category URLs from a URL dump and exit",
    )
    parser.add_argument(
        "--categories-output",
        default="categories.txt",
        help="Output file for --extract-categories",
    )
    parser.add_argument(
        "--report", action="store_true", help="Summarize existing output and exit"
    )
    parser.add_argument("--min-price", type=float, help="Report products from price")
    parser.add_argument("--max-price", type=float, help="Report products up to price")
    parser.add_argument("--search", help="Report products whose title contains text")
    args = parser.parse_args()

    load_dotenv()

    config = load_config(args.config)

    log_level = "DEBUG" if args.debug else config.get("logging", {}).get("level", "INFO")
    setup_logging(level=log_level, log_file=config.get("logging", {}).get("file") or None)

    logger = logging.getLogger(__name__)

    if args.extract_categories:
        try:
            extract_categories(args.extract_categories, args.categories_output)
        except OSError as e:
            logger.error(f"Category extraction failed: {e}")
            return 1
        return 0

    config = apply_overrides(config, args)
    try:
        settings = RunSettings.from_config(config)
    except (TypeError, ValueError) as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    if args.report:
        show_report(settings, args)
        return 0

    categories = get_categories(config, args.category, args.categories_file)
    if not categories:
        logger.error("No categories to scrape")
        return 1

    logger.info(f"Will scrape {len(categories)} categories")

    pipeline = HotlinePipeline.create_from_config(config)
    cancel_event = threading.Event()
    previous_handler = install_cancel_handler(cancel_event)
    try:
        results = pipeline.run_categories(categories, cancel_event=cancel_event)
    finally:
        pipeline.close()
        if previous_handler is not None:
            signal.signal(signal.SIGINT, previous_handler)

    for name, result in results.items():
        if "error" in result:
            logger.error(f"{name}: {result['error']}")
            continue
        logger.info(f"{name}: {result['count']} products")
        if args.min_price is not None or args.max_price is not None or args.search:
            report_products(settings.storage.json_path(name), args)

    return 0 if all("error" not in result for result in results.values()) else 1


if __name__ == "__main__":
    sys.exit(main())
