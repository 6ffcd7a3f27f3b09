"""Utility functions for loading generator input documents.

Type metadata and generation settings are plain JSON documents that can
live on disk or behind a URL.
"""

import json
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import requests

from .logging_config import get_logger

logger = get_logger(__name__)


class MetadataLoaderError(Exception):
    """Raised when an input document cannot be loaded."""

    pass


def load_json_from_file(file_path: str | Path) -> tuple[str, Any]:
    """Load a JSON document from a local file.

    Args:
        file_path: Path to the JSON file.

    Returns:
        Tuple of (source description, parsed JSON data).

    Raises:
        FileNotFoundError: If file doesn't exist.
        MetadataLoaderError: If file cannot be read or JSON is invalid.
    """
    file_path = Path(file_path)
    logger.debug("Attempting to load JSON from file: %s", file_path)

    if not file_path.exists():
        logger.error("File not found: %s", file_path)
        raise FileNotFoundError(f"File not found: {file_path}")

    if file_path.suffix.lower() != ".json":
        logger.warning("File does not have .json extension: %s", file_path)

    try:
        with file_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        logger.info("Loaded JSON from %s", file_path)
        return str(file_path), data
    except json.JSONDecodeError as e:
        logger.error("Invalid JSON in file %s: %s", file_path, e)
        raise MetadataLoaderError(f"Invalid JSON in file {file_path}: {e}") from e
    except OSError as e:
        logger.error("Error reading file %s: %s", file_path, e)
        raise MetadataLoaderError(f"Error reading file {file_path}: {e}") from e


def load_json_from_url(url: str, timeout: int = 30) -> tuple[str, Any]:
    """Load a JSON document from a URL.

    Args:
        url: URL to fetch JSON from.
        timeout: Request timeout in seconds.

    Returns:
        Tuple of (source description, parsed JSON data).

    Raises:
        MetadataLoaderError: If URL is invalid, request fails, or response isn't valid JSON.
    """
    logger.debug("Attempting to load JSON from URL: %s", url)

    parsed_url = urlparse(url)
    if not all([parsed_url.scheme, parsed_url.netloc]):
        logger.error("Invalid URL format: %s", url)
        raise MetadataLoaderError(f"Invalid URL: {url}")

    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()

        content_type = response.headers.get("content-type", "").lower()
        if "application/json" not in content_type and not url.endswith(".json"):
            logger.warning("URL %s does not have JSON content type: %s", url, content_type)

        data = response.json()
        logger.info("Loaded JSON from %s", url)
        return url, data

    except requests.exceptions.Timeout as e:
        logger.error("Request timeout for URL: %s", url)
        raise MetadataLoaderError(f"Request timeout for URL: {url}") from e
    except requests.exceptions.ConnectionError as e:
        logger.error("Connection error for URL %s: %s", url, e)
        raise MetadataLoaderError(f"Connection error for URL: {url}") from e
    except requests.exceptions.HTTPError as e:
        logger.error("HTTP error %s for URL: %s", e.response.status_code, url)
        raise MetadataLoaderError(
            f"HTTP error {e.response.status_code} for URL: {url}"
        ) from e
    except requests.exceptions.RequestException as e:
        logger.error("Request error for URL %s: %s", url, e)
        raise MetadataLoaderError(f"Request error for URL {url}: {e}") from e
    except ValueError as e:
        logger.error("Invalid JSON response from URL %s: %s", url, e)
        raise MetadataLoaderError(f"Invalid JSON response from URL {url}: {e}") from e


def load_document(source: str | Path, timeout: int = 30) -> tuple[str, Any]:
    """Load a JSON document from a path or an http(s) URL."""
    text = str(source)
    if urlparse(text).scheme in ("http", "https"):
        return load_json_from_url(text, timeout)
    return load_json_from_file(source)


def load_metadata(source: str | Path, timeout: int = 30) -> dict[str, Any]:
    """Load a type metadata document.

    The document must be a JSON object carrying a ``types`` list.
    """
    origin, data = load_document(source, timeout)
    if not isinstance(data, dict) or not isinstance(data.get("types"), list):
        raise MetadataLoaderError(
            f"Metadata document {origin} must be an object with a 'types' list"
        )
    return data


def load_settings(source: str | Path, timeout: int = 30) -> list[dict[str, Any]]:
    """Load generation setting entries.

    Accepts either a bare list of entries or an object with a ``settings`` list.
    """
    origin, data = load_document(source, timeout)
    entries = data.get("settings") if isinstance(data, dict) else data
    if not isinstance(entries, list):
        raise MetadataLoaderError(
            f"Settings document {origin} must be a list or an object with a 'settings' list"
        )
    return entries
