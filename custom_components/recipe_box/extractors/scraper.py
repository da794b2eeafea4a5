"""
Web scraper utilities for reading structured recipe data from pages.

This module downloads a recipe page and looks for a Schema.org Recipe
object in its JSON-LD scripts, so well-structured sites can be imported
without asking the AI service.
"""
from __future__ import annotations

import json
import logging
import time
from typing import Any

import cloudscraper
import requests
from bs4 import BeautifulSoup

from ..const import (
    DEFAULT_MAX_REDIRECTS,
    DEFAULT_MAX_RESPONSE_SIZE,
    DEFAULT_MAX_RETRIES,
    DEFAULT_TIMEOUT,
)

_LOGGER = logging.getLogger(__name__)

_HTML_CONTENT_TYPES = ("text/html", "application/xhtml", "application/xml")


def _fetch_with_retry(session: requests.Session, url: str, max_retries: int = DEFAULT_MAX_RETRIES) -> bytes:
    """Fetch URL with exponential backoff retry logic.

    Args:
        session: Requests session to use
        url: URL to fetch
        max_retries: Maximum number of attempts

    Returns:
        Response content as bytes

    Raises:
        requests.exceptions.RequestException: If all retries fail
        ValueError: If response is too large or not HTML
    """
    for attempt in range(max_retries):
        try:
            _LOGGER.debug("Fetching %s (attempt %d/%d)",
                          url, attempt + 1, max_retries)
            response = session.get(
                url,
                timeout=DEFAULT_TIMEOUT,
                allow_redirects=True,
                stream=True
            )
            response.raise_for_status()

            content_type = response.headers.get("content-type", "").lower()
            if not any(allowed in content_type for allowed in _HTML_CONTENT_TYPES):
                _LOGGER.warning(
                    "Invalid content type for %s: %s", url, content_type)
                raise ValueError(
                    f"Invalid content type: {content_type}. Only HTML/XHTML content is allowed.")

            content_length = response.headers.get("content-length")
            if content_length and int(content_length) > DEFAULT_MAX_RESPONSE_SIZE:
                _LOGGER.warning(
                    "Response too large for %s: %s bytes", url, content_length)
                raise ValueError(
                    f"Response size ({content_length} bytes) exceeds maximum allowed size ({DEFAULT_MAX_RESPONSE_SIZE} bytes)")

            content = b""
            for chunk in response.iter_content(chunk_size=8192):
                content += chunk
                if len(content) > DEFAULT_MAX_RESPONSE_SIZE:
                    _LOGGER.warning(
                        "Response exceeded size limit while downloading from %s", url)
                    raise ValueError(
                        f"Response size exceeds maximum allowed size ({DEFAULT_MAX_RESPONSE_SIZE} bytes)")

            return content
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            if status == 403 and attempt < max_retries - 1:
                wait_time = 2 ** attempt
                _LOGGER.warning(
                    "Got 403 for %s, retrying after %ds", url, wait_time)
                time.sleep(wait_time)
                continue
            raise
        except requests.exceptions.RequestException as e:
            if attempt < max_retries - 1:
                wait_time = 2 ** attempt
                _LOGGER.warning(
                    "Error fetching %s: %s, retrying after %ds", url, e, wait_time)
                time.sleep(wait_time)
                continue
            raise

    raise requests.exceptions.RequestException(
        f"Failed to fetch {url} after {max_retries} attempts")


def is_recipe(item: Any) -> bool:
    """Check if a JSON-LD item represents a Recipe."""
    if not isinstance(item, dict):
        return False
    item_type = item.get("@type")
    if isinstance(item_type, str):
        return item_type == "Recipe"
    if isinstance(item_type, list):
        return "Recipe" in item_type
    return False


def find_recipe_jsonld(html: bytes | str) -> dict[str, Any] | None:
    """Return the first Schema.org Recipe object in the page's JSON-LD.

    Recipes are looked up at the top level of each script, inside
    top-level lists and inside @graph containers.

    Args:
        html: Page markup

    Returns:
        The Recipe object, or None when the page has none
    """
    soup = BeautifulSoup(html, features="html.parser")
    json_lds = soup.find_all("script", type="application/ld+json")
    _LOGGER.debug("Found %d JSON-LD scripts", len(json_lds))

    for idx, json_ld in enumerate(json_lds):
        if not json_ld.string:
            continue
        try:
            parsed_data = json.loads(json_ld.string)
        except json.JSONDecodeError as e:
            _LOGGER.debug("Failed to parse JSON-LD script %d: %s", idx, e)
            continue

        candidates = parsed_data if isinstance(parsed_data, list) else [parsed_data]
        for candidate in candidates:
            if is_recipe(candidate):
                _LOGGER.debug("Found recipe data in JSON-LD script %d", idx)
                return candidate
            if isinstance(candidate, dict) and isinstance(candidate.get("@graph"), list):
                data = next(
                    (item for item in candidate["@graph"] if is_recipe(item)), None)
                if data:
                    _LOGGER.debug("Found recipe data in @graph of JSON-LD script %d", idx)
                    return data

    return None


def fetch_structured_recipe(url: str) -> dict[str, Any] | None:
    """Download a page and return its JSON-LD Recipe object.

    Args:
        url: The URL of the recipe page

    Returns:
        The Recipe object, or None when the page carries no structured recipe

    Raises:
        requests.exceptions.RequestException: If fetching fails
        ValueError: If URL is empty or the response is not acceptable HTML
    """
    if not url or not url.strip():
        raise ValueError("URL cannot be empty")

    _LOGGER.info("Fetching structured recipe data from %s", url)

    # cloudscraper gets past the anti-bot pages many recipe sites use
    session = cloudscraper.create_scraper(
        browser={
            "browser": "chrome",
            "platform": "windows",
            "desktop": True
        }
    )
    session.max_redirects = DEFAULT_MAX_REDIRECTS

    html = _fetch_with_retry(session, url)
    _LOGGER.debug("Successfully fetched %d bytes from %s", len(html), url)

    data = find_recipe_jsonld(html)
    if data is None:
        _LOGGER.info("No JSON-LD recipe found at %s", url)
    return data
