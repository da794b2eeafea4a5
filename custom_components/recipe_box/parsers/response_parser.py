"""
AI Response Parser.

This module turns the free-form text returned by the generative AI service
into a validated Recipe: it strips markdown fences, locates the JSON object
inside the text, decodes it and checks the required fields.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Iterable

from ..exceptions import InvalidResponseError, RecipeNotFoundError
from ..models.recipe import GroundingSource, Recipe
from .base_parser import BaseRecipeParser

_LOGGER = logging.getLogger(__name__)


def strip_code_fence(text: str) -> str:
    """Return *text* trimmed, without a surrounding markdown code fence.

    Handles an opening fence with or without a language hint::

        ```json
        {"name": "Pancakes"}
        ```
    """
    if not text:
        return ""

    text = text.strip()
    if text.startswith("```"):
        first_newline = text.find("\n")
        if first_newline == -1:
            text = text[3:]
            if text.lower().startswith("json"):
                text = text[4:]
        else:
            text = text[first_newline + 1:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


def extract_json_object(text: str) -> str:
    """Return the JSON object contained in *text*.

    The fence-free text is used as is when it already decodes. Otherwise the
    span from the first opening brace to the last closing brace is returned.

    Raises:
        InvalidResponseError: If the text contains no braced span
    """
    cleaned = strip_code_fence(text)
    try:
        json.loads(cleaned)
        return cleaned
    except json.JSONDecodeError:
        pass

    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start == -1 or end <= start:
        _LOGGER.debug("No JSON object boundaries found in response")
        raise InvalidResponseError()
    return cleaned[start:end + 1]


def _clean_entries(value: Any) -> list[str]:
    """Normalize a list field to stripped, non-empty strings."""
    if not isinstance(value, list):
        return []
    entries = []
    for item in value:
        if item is None or isinstance(item, (dict, list)):
            continue
        item = str(item).strip()
        if item:
            entries.append(item)
    return entries


def parse_sources(grounding_chunks: Iterable[Any] | None) -> list[GroundingSource]:
    """Build the source list from search grounding chunks.

    Chunks without a web address are skipped. Sources are unique by uri:
    a repeated uri keeps the position of its first occurrence and takes
    the title of its last one.

    Args:
        grounding_chunks: Chunks from the response grounding metadata, either
            SDK objects or plain dicts

    Returns:
        Deduplicated list of sources
    """
    unique: dict[str, GroundingSource] = {}
    for chunk in grounding_chunks or []:
        web = chunk.get("web") if isinstance(chunk, dict) else getattr(chunk, "web", None)
        if web is None:
            continue
        if isinstance(web, dict):
            uri, title = web.get("uri"), web.get("title")
        else:
            uri, title = getattr(web, "uri", None), getattr(web, "title", None)
        if not isinstance(uri, str) or not uri.strip():
            continue
        source = GroundingSource(uri=uri, title=title if isinstance(title, str) else "")
        unique[source.uri] = source
    return list(unique.values())


class ResponseRecipeParser(BaseRecipeParser):
    """Parses the AI service's text response into a Recipe."""

    def parse_recipe(self, data: str) -> Recipe:
        """Parse and validate a recipe from AI response text.

        Args:
            data: The raw response text

        Returns:
            The validated Recipe, without sources

        Raises:
            InvalidResponseError: If the text holds no decodable JSON object
            RecipeNotFoundError: If name, ingredients or instructions are missing
        """
        payload = extract_json_object(data)
        try:
            recipe_data = json.loads(payload)
        except json.JSONDecodeError as e:
            _LOGGER.error("Failed to parse JSON response from AI: %s", payload)
            raise InvalidResponseError() from e

        if not isinstance(recipe_data, dict):
            _LOGGER.error("AI response is not a JSON object: %s", payload)
            raise InvalidResponseError()

        name = recipe_data.get("name")
        name = name.strip() if isinstance(name, str) else ""
        ingredients = _clean_entries(recipe_data.get("ingredients"))
        instructions = _clean_entries(recipe_data.get("instructions"))

        if not name:
            _LOGGER.warning("AI response contains no recipe name")
            raise RecipeNotFoundError()
        if not ingredients:
            _LOGGER.warning("AI response for '%s' contains no ingredients", name)
            raise RecipeNotFoundError()
        if not instructions:
            _LOGGER.warning("AI response for '%s' contains no instructions", name)
            raise RecipeNotFoundError()

        _LOGGER.debug(
            "Parsed recipe '%s' with %d ingredients and %d steps",
            name,
            len(ingredients),
            len(instructions),
        )
        return Recipe(name=name, ingredients=ingredients, instructions=instructions)
