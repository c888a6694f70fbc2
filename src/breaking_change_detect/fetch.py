"""Loads an OpenAPI document from a URL or a local file."""

import logging
from pathlib import Path

import requests

from breaking_change_detect.errors import FetchError
from breaking_change_detect.parser.base import ApiDocument
from breaking_change_detect.parser.swagger import parse_openapi

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


def is_url(locator: str) -> bool:
    return locator.startswith(("http://", "https://"))


def fetch_document(locator: str, timeout: float = DEFAULT_TIMEOUT) -> ApiDocument:
    """Fetch and parse the document at ``locator``.

    Raises FetchError when the source cannot be read (network failure,
    non-2xx status, missing file) and ParseError when the body is not an
    OpenAPI 3 document.
    """
    text = _fetch_url(locator, timeout) if is_url(locator) else _read_file(locator)
    return parse_openapi(text, source=locator)


def _fetch_url(url: str, timeout: float) -> str:
    logger.debug("Fetching specification from %s", url)
    try:
        resp = requests.get(url, timeout=timeout, headers={"Accept": "application/json, application/yaml"})
    except requests.RequestException as e:
        logger.error("Failed to fetch the specification from %s: %s", url, e)
        raise FetchError(url, str(e)) from e

    if not 200 <= resp.status_code < 300:
        logger.warning("Failed to fetch the specification from %s. Status code: %s", url, resp.status_code)
        raise FetchError(url, f"status code {resp.status_code}", status_code=resp.status_code)
    return resp.text


def _read_file(locator: str) -> str:
    path = Path(locator)
    logger.debug("Reading specification from %s", path)
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise FetchError(locator, str(e)) from e
