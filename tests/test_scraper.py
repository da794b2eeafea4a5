"""Tests for downloading recipe pages with the HTTP session mocked."""
from __future__ import annotations

import json
from unittest.mock import MagicMock, patch

import pytest
import requests

from custom_components.recipe_box.const import DEFAULT_MAX_REDIRECTS, DEFAULT_TIMEOUT
from custom_components.recipe_box.extractors.scraper import (
    _fetch_with_retry,
    fetch_structured_recipe,
)

URL = "https://www.example.com/recipes/tomato-soup"
SCRAPER = "custom_components.recipe_box.extractors.scraper"

PAGE = (
    "<html><head><script type=\"application/ld+json\">"
    + json.dumps({"@type": "Recipe", "name": "Tomato Soup"})
    + "</script></head><body></body></html>"
).encode()


def _response(body: bytes = PAGE, status: int = 200, headers: dict | None = None) -> MagicMock:
    response = MagicMock()
    response.status_code = status
    response.headers = {"content-type": "text/html; charset=utf-8", **(headers or {})}
    response.iter_content.return_value = [body]
    if status >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(
            f"{status} error", response=response)
    return response


@pytest.fixture
def sleep():
    with patch(f"{SCRAPER}.time.sleep") as mock_sleep:
        yield mock_sleep


class TestFetchWithRetry:

    def test_returns_content_with_timeout(self, sleep):
        session = MagicMock()
        session.get.return_value = _response()

        assert _fetch_with_retry(session, URL) == PAGE
        assert session.get.call_args.kwargs["timeout"] == DEFAULT_TIMEOUT
        sleep.assert_not_called()

    def test_rejects_non_html(self, sleep):
        session = MagicMock()
        session.get.return_value = _response(headers={"content-type": "application/pdf"})

        with pytest.raises(ValueError, match="Invalid content type"):
            _fetch_with_retry(session, URL)
        assert session.get.call_count == 1

    def test_rejects_large_content_length(self, sleep):
        session = MagicMock()
        session.get.return_value = _response(headers={"content-length": str(10 * 1024 * 1024)})

        with pytest.raises(ValueError, match="exceeds maximum allowed size"):
            _fetch_with_retry(session, URL)

    def test_rejects_large_streamed_body(self, sleep):
        session = MagicMock()
        response = _response()
        response.iter_content.return_value = [b"x" * 8, b"x" * 8]
        session.get.return_value = response

        with patch(f"{SCRAPER}.DEFAULT_MAX_RESPONSE_SIZE", 10):
            with pytest.raises(ValueError, match="exceeds maximum allowed size"):
                _fetch_with_retry(session, URL)

    def test_retries_forbidden_then_succeeds(self, sleep):
        session = MagicMock()
        session.get.side_effect = [_response(status=403), _response()]

        assert _fetch_with_retry(session, URL) == PAGE
        assert session.get.call_count == 2
        sleep.assert_called_once_with(1)

    def test_backoff_doubles_on_network_errors(self, sleep):
        session = MagicMock()
        session.get.side_effect = [
            requests.exceptions.Timeout("slow"),
            requests.exceptions.ConnectionError("reset"),
            _response(),
        ]

        assert _fetch_with_retry(session, URL) == PAGE
        assert [c.args[0] for c in sleep.call_args_list] == [1, 2]

    def test_exhausted_retries_reraise(self, sleep):
        session = MagicMock()
        session.get.side_effect = requests.exceptions.ConnectionError("offline")

        with pytest.raises(requests.exceptions.ConnectionError):
            _fetch_with_retry(session, URL, max_retries=3)
        assert session.get.call_count == 3
        assert sleep.call_count == 2

    def test_not_found_is_not_retried(self, sleep):
        session = MagicMock()
        session.get.return_value = _response(status=404)

        with pytest.raises(requests.exceptions.HTTPError):
            _fetch_with_retry(session, URL)
        assert session.get.call_count == 1
        sleep.assert_not_called()


class TestFetchStructuredRecipe:

    def test_empty_url(self):
        with pytest.raises(ValueError):
            fetch_structured_recipe("  ")

    def test_returns_recipe_and_limits_redirects(self, sleep):
        with patch(f"{SCRAPER}.cloudscraper.create_scraper") as create_scraper:
            session = create_scraper.return_value
            session.get.return_value = _response()

            data = fetch_structured_recipe(URL)

        assert data == {"@type": "Recipe", "name": "Tomato Soup"}
        assert session.max_redirects == DEFAULT_MAX_REDIRECTS

    def test_page_without_recipe(self, sleep):
        with patch(f"{SCRAPER}.cloudscraper.create_scraper") as create_scraper:
            create_scraper.return_value.get.return_value = _response(body=b"<html></html>")

            assert fetch_structured_recipe(URL) is None
