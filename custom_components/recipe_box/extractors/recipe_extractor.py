"""
Recipe extraction engine.

This module turns a recipe URL or a free-text request into a structured
Recipe. URLs are first checked for embedded JSON-LD recipe data; everything
else is answered by Gemini with Google Search grounding.
"""
from __future__ import annotations

import ipaddress
import logging
from urllib.parse import urlparse

from ..const import DEFAULT_MODEL, MSG_EMPTY_QUERY
from ..models.recipe import Recipe, generate_recipe_id
from ..parsers.jsonld_parser import JSONLDRecipeParser
from ..parsers.response_parser import ResponseRecipeParser, parse_sources
from .gemini_client import GeminiClient
from .prompts import build_query_prompt, build_url_prompt
from .scraper import fetch_structured_recipe

_LOGGER = logging.getLogger(__name__)


def is_url(text: str) -> bool:
    """Return True when *text* is an http(s) address with a host."""
    parsed = urlparse(text.strip())
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def validate_url(url: str) -> None:
    """Validate URL scheme and refuse internal addresses.

    Raises:
        ValueError: If the scheme is not http(s) or the host is a private,
            loopback or link-local IP address
    """
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        raise ValueError("Only HTTP/HTTPS protocols allowed")
    if not parsed.hostname:
        raise ValueError("URL has no host")

    try:
        ip = ipaddress.ip_address(parsed.hostname)
    except ValueError:
        return  # Hostname is not an IP
    if ip.is_private or ip.is_loopback or ip.is_link_local:
        raise ValueError("Cannot access internal IP addresses")


class RecipeExtractor:
    """Extracts structured recipes from URLs or free-text requests."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        prefer_structured_data: bool = True,
    ) -> None:
        """Initialize the recipe extractor.

        Args:
            api_key: Gemini API key
            model: The model to use for extraction
            prefer_structured_data: Read JSON-LD recipe data from URLs before
                asking the AI service
        """
        self.client = GeminiClient(api_key=api_key, model=model)
        self.prefer_structured_data = prefer_structured_data
        self.parser = ResponseRecipeParser()

    def _extract_structured(self, url: str) -> Recipe | None:
        """Try the JSON-LD fast path; None means fall back to AI."""
        try:
            validate_url(url)
            data = fetch_structured_recipe(url)
            if data is None:
                return None
            return JSONLDRecipeParser(source_url=url).parse_recipe(data)
        except Exception as e:
            # Anti-bot challenges from cloudscraper do not derive from requests errors
            _LOGGER.info("Structured data lookup failed for %s: %s",
                         url, str(e), exc_info=True)
            return None

    def _extract_with_ai(self, query: str, url_input: bool) -> Recipe:
        """Ask Gemini for the recipe and validate its answer."""
        prompt = build_url_prompt(query) if url_input else build_query_prompt(query)
        result = self.client.generate(prompt)
        recipe = self.parser.parse_recipe(result.text)
        recipe.sources = parse_sources(result.grounding_chunks)
        return recipe

    def extract(self, query: str) -> Recipe:
        """Extract a recipe for a URL or free-text request.

        Args:
            query: Recipe page URL, or a dish name / ingredient list

        Returns:
            The extracted Recipe with a freshly generated id

        Raises:
            ValueError: If the query is empty
            RecipeBoxError: If the AI service fails or returns no usable recipe
        """
        if not query or not query.strip():
            raise ValueError(MSG_EMPTY_QUERY)

        query = query.strip()
        url_input = is_url(query)
        _LOGGER.info(
            "Extracting recipe for %s %s using model %s",
            "URL" if url_input else "query",
            query,
            self.client.model,
        )

        recipe = None
        if url_input and self.prefer_structured_data:
            recipe = self._extract_structured(query)
            if recipe:
                _LOGGER.info("Using JSON-LD recipe data (skipping AI inference)")

        if recipe is None:
            recipe = self._extract_with_ai(query, url_input)

        recipe.id = generate_recipe_id()
        _LOGGER.info(
            "Successfully extracted recipe '%s' with %d ingredients and %d steps",
            recipe.name,
            len(recipe.ingredients),
            len(recipe.instructions),
        )
        return recipe
