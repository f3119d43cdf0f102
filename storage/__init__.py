"""Storage package for the hotline.ua catalog scraper."""

from .base_storage import BaseStorage
from .csv_storage import CSVStorage
from .json_storage import JSONStorage
from .reports import list_output_files

__all__ = [
    "BaseStorage",
    "CSVStorage",
    "JSONStorage",
    "list_output_files",
]
