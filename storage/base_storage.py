"""Base storage interface for scrape results."""

import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List

from models.product import Product


class BaseStorage(ABC):
    """Abstract base class for file-backed result storage.

    Args:
        path: File the backend writes to
    """

    def __init__(self, path) -> None:
        self.path = Path(path)

    def initialize(self) -> None:
        """Create the directory the output file lives in."""
        self.path.parent.mkdir(parents=True, exist_ok=True)

    @abstractmethod
    def save_products(self, products: List[Product]) -> None:
        """Write the complete product list, replacing previous content.

        Args:
            products: Products to write

        Raises:
            OSError: If the file cannot be written
        """
        pass

    def _replace_file(self, write, encoding: str = "utf-8", newline=None) -> None:
        """Write through a temporary file that then replaces ``self.path``.

        Args:
            write: Callable receiving the open temporary file
            encoding: Text encoding of the output
            newline: Passed to the temporary file
        """
        self.initialize()
        temp_file = tempfile.NamedTemporaryFile(
            mode="w",
            delete=False,
            dir=self.path.parent,
            prefix=f".{self.path.name}.",
            suffix=".tmp",
            encoding=encoding,
            newline=newline,
        )

        try:
            with temp_file:
                write(temp_file)
            os.replace(temp_file.name, self.path)
        except BaseException:
            if os.path.exists(temp_file.name):
                os.unlink(temp_file.name)
            raise

    def close(self) -> None:
        """Release resources (no-op for file backends)."""
        pass
