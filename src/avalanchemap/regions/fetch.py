"""Loading of the region summary dataset.

The dataset (``region_summary.json``) is read from a local file or fetched
over HTTP. Both paths return the decoded JSON payload; validation happens in
``RegionSummaryStore.from_records``.

Configuration via environment:
    AVALANCHEMAP_SUMMARY_SOURCE: file path or http(s) URL of the dataset
    AVALANCHEMAP_FETCH_TIMEOUT: HTTP timeout in seconds (default 30)
"""

import json
import logging
import os
import time
from pathlib import Path
from typing import Any, Optional, Union

import requests

from avalanchemap.utils.io import get_project_root

logger = logging.getLogger(__name__)

SUMMARY_FILENAME = "region_summary.json"

DEFAULT_SUMMARY_SOURCE = os.environ.get(
    "AVALANCHEMAP_SUMMARY_SOURCE",
    str(get_project_root() / "data" / "raw" / SUMMARY_FILENAME),
)
REQUEST_TIMEOUT = float(os.environ.get("AVALANCHEMAP_FETCH_TIMEOUT", 30))

# Vector tiles with micro-region polygons, consumed by the tile renderer
EAWS_TILE_URL = "https://static.avalanche.report/eaws_pbf/{z}/{x}/{y}.pbf"

# Errors that mean "no dataset this time" rather than a programming error
LOAD_ERRORS = (requests.RequestException, OSError, ValueError)


def is_url(source: Union[str, Path]) -> bool:
    """Whether a dataset source is an http(s) URL."""
    return isinstance(source, str) and source.startswith(("http://", "https://"))


def read_region_summaries(path: Union[str, Path]) -> Any:
    """Read the dataset from a local JSON file.

    Args:
        path: Path to region_summary.json

    Returns:
        Decoded JSON payload

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not valid JSON
    """
    path = Path(path)
    logger.debug(f"Reading region summaries from {path}")
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def fetch_region_summaries(url: str, timeout: float = REQUEST_TIMEOUT) -> Any:
    """Fetch the dataset over HTTP.

    Args:
        url: Dataset URL
        timeout: Request timeout in seconds

    Returns:
        Decoded JSON payload

    Raises:
        requests.RequestException: On connection errors and HTTP error codes
        ValueError: If the response body is not valid JSON
    """
    start_time = time.time()
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    payload = response.json()
    duration_ms = int((time.time() - start_time) * 1000)
    logger.info(f"Fetched region summaries from {url} ({duration_ms}ms)")
    return payload


def load_region_summaries(source: Optional[Union[str, Path]] = None) -> Any:
    """Load the dataset from a URL or file path.

    Args:
        source: URL or path, defaults to DEFAULT_SUMMARY_SOURCE

    Returns:
        Decoded JSON payload
    """
    source = source if source is not None else DEFAULT_SUMMARY_SOURCE
    if is_url(source):
        return fetch_region_summaries(str(source))
    return read_region_summaries(source)
