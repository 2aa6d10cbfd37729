"""Utility functions for loading spec documents and writing generated files.

This module loads Swagger documents from files and URLs (JSON or YAML)
with proper error handling, and writes generated sources under a target
directory.
"""

import json
from pathlib import Path
from typing import Any, Dict, List
from urllib.parse import urlparse

import requests
import yaml

from .logging_config import get_logger
from .spec import SpecDocument

logger = get_logger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")


class SpecLoaderError(Exception):
    """Custom exception for spec loading errors."""

    pass


def is_url(source: str) -> bool:
    """True when ``source`` looks like an http(s) URL rather than a path."""
    parsed = urlparse(str(source))
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def _parse_text(text: str, yaml_input: bool, origin: str) -> Any:
    try:
        if yaml_input:
            return yaml.safe_load(text)
        return json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        kind = "YAML" if yaml_input else "JSON"
        logger.error(f"Invalid {kind} in {origin}: {e}")
        raise SpecLoaderError(f"Invalid {kind} in {origin}: {e}") from e


def load_spec_from_file(file_path: str | Path) -> tuple[str, Any]:
    """Load a spec document from a local file.

    Args:
        file_path: Path to a ``.json``, ``.yaml`` or ``.yml`` file.

    Returns:
        Tuple of (source description, parsed document).

    Raises:
        FileNotFoundError: If file doesn't exist.
        SpecLoaderError: If file cannot be read or parsed.
    """
    file_path = Path(file_path)
    logger.debug(f"Attempting to load spec from file: {file_path}")

    if not file_path.exists():
        logger.error(f"File not found: {file_path}")
        raise FileNotFoundError(f"File not found: {file_path}")

    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as e:
        logger.error(f"Error reading file {file_path}: {e}", exc_info=True)
        raise SpecLoaderError(f"Error reading file {file_path}: {e}") from e

    data = _parse_text(text, file_path.suffix.lower() in YAML_SUFFIXES, str(file_path))
    logger.info(f"Loaded spec from {file_path}")
    return str(file_path), data


def load_spec_from_url(url: str, timeout: int = 30) -> tuple[str, Any]:
    """Load a spec document from a URL.

    Args:
        url: URL to fetch the document from.
        timeout: Request timeout in seconds.

    Returns:
        Tuple of (source description, parsed document).

    Raises:
        SpecLoaderError: If the URL is invalid, the request fails or the body cannot be parsed.
    """
    logger.debug(f"Attempting to load spec from URL: {url}")

    if not is_url(url):
        logger.error(f"Invalid URL format: {url}")
        raise SpecLoaderError(f"Invalid URL: {url}")

    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.exceptions.Timeout as e:
        logger.error(f"Request timeout for URL: {url}")
        raise SpecLoaderError(f"Request timeout for URL: {url}") from e
    except requests.exceptions.ConnectionError as e:
        logger.error(f"Connection error for URL {url}: {e}")
        raise SpecLoaderError(f"Connection error for URL: {url}") from e
    except requests.exceptions.HTTPError as e:
        logger.error(f"HTTP error {e.response.status_code} for URL: {url}")
        raise SpecLoaderError(f"HTTP error {e.response.status_code} for URL: {url}") from e
    except requests.exceptions.RequestException as e:
        logger.error(f"Request error for URL {url}: {e}", exc_info=True)
        raise SpecLoaderError(f"Request error for URL {url}: {e}") from e

    content_type = response.headers.get("content-type", "").lower()
    yaml_input = "yaml" in content_type or urlparse(url).path.lower().endswith(YAML_SUFFIXES)
    data = _parse_text(response.text, yaml_input, url)
    logger.info(f"Loaded spec from {url}")
    return url, data


def load_spec(source: str | Path, timeout: int = 30) -> tuple[str, SpecDocument]:
    """Load and parse a spec document from a file path or URL.

    Args:
        source: Local path or http(s) URL.
        timeout: Request timeout in seconds (only used for URLs).

    Returns:
        Tuple of (source description, SpecDocument).

    Raises:
        SpecLoaderError: If loading or parsing fails.
        SpecError: If the document is not a usable Swagger 2.0 spec.
        FileNotFoundError: If a local file doesn't exist.
    """
    if not source:
        logger.error("No spec source provided")
        raise SpecLoaderError("A spec file path or URL must be provided")

    if is_url(str(source)):
        description, data = load_spec_from_url(str(source), timeout)
    else:
        description, data = load_spec_from_file(source)

    return description, SpecDocument.from_dict(data)


def write_files(files: Dict[str, str], target: str | Path) -> List[Path]:
    """Write generated files below ``target``, creating package directories.

    Args:
        files: Mapping of relative path to file content.
        target: Output root directory.

    Returns:
        Paths written, in the order given.
    """
    root = Path(target)
    written = []
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        # newline="" keeps "\n" endings on every platform
        with path.open("w", encoding="utf-8", newline="") as f:
            f.write(content)
        logger.debug(f"Wrote {path}")
        written.append(path)
    logger.info(f"Wrote {len(written)} files under {root}")
    return written
