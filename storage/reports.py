"""Listing of files produced by previous runs."""

import logging
from pathlib import Path
from typing import Dict, List

from models.settings import StorageSettings


def list_output_files(settings: StorageSettings) -> Dict[str, List[str]]:
    """List JSON and CSV result files in the configured output directories.

    Missing directories are reported as empty.

    Args:
        settings: Storage settings

    Returns:
        Mapping with ``json`` and ``csv`` keys to sorted file names
    """
    logger = logging.getLogger(__name__)
    report = {}
    for kind, directory in (
        ("json", settings.json_dir),
        ("csv", settings.csv_dir),
    ):
        path = Path(settings.output_dir) / directory
        if not path.is_dir():
            logger.debug(f"Output directory {path} does not exist")
            report[kind] = []
            continue
        report[kind] = sorted(
            entry.name
            for entry in path.iterdir()
            if entry.is_file() and entry.suffix in (".json", ".csv")
        )
    return report
