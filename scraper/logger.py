"""Logging configuration for the hotline.ua scraper."""

import logging
import sys
from pathlib import Path
from typing import Optional

# Libraries that are chatty at DEBUG and drown out page progress
NOISY_LOGGERS = ("urllib3", "requests", "charset_normalizer")


class ColoredFormatter(logging.Formatter):
    """Formatter that colors the level, logger name and message."""

    COLORS = {
        "RESET": "\033[0m",
        "DEBUG": "\033[38;5;245m",  # Gray
        "INFO": "\033[38;5;39m",  # Blue
        "WARNING": "\033[38;5;208m",  # Orange
        "ERROR": "\033[38;5;196m",  # Red
        "CRITICAL": "\033[48;5;196m\033[38;5;231m",  # White on Red
        "NAME": "\033[38;5;85m",  # Light green
    }

    def format(self, record):
        """Format the record with colors, leaving the record untouched."""
        color = self.COLORS.get(record.levelname, "")
        reset = self.COLORS["RESET"]

        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = f"{color}{record.levelname:^8}{reset}"
        colored.name = f"{self.COLORS['NAME']}{record.name}{reset}"
        colored.msg = f"{color}{record.getMessage()}{reset}"
        colored.args = None

        return super().format(colored)


def setup_logging(
    level: str = "INFO", log_file: Optional[str] = None, colored: Optional[bool] = None
) -> None:
    """Set up console (and optionally file) logging.

    Args:
        level: Logging level name
        log_file: Path to log file, if specified
        colored: Force colors on or off; by default only when stdout is a tty
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if colored is None:
        colored = sys.stdout.isatty()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    if colored:
        console_handler.setFormatter(
            ColoredFormatter("%(asctime)s │ %(levelname)s │ %(name)s │ %(message)s")
        )
    else:
        console_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        )
    root_logger.addHandler(console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(log_level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        )
        root_logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))
