"""
JSON-LD Recipe Parser.

This module converts Schema.org Recipe objects, as embedded in recipe pages
through JSON-LD, into Recipe models without an AI call.
"""
from __future__ import annotations

import html
import logging
import re
from typing import Any

from ..models.recipe import GroundingSource, Recipe
from .base_parser import BaseRecipeParser

_LOGGER = logging.getLogger(__name__)

_TAG_RE = re.compile(r"<[^>]+>")
_WHITESPACE_RE = re.compile(r"\s+")


class JSONLDRecipeParser(BaseRecipeParser):
    """Parses recipe data from a Schema.org Recipe JSON-LD object.

    Handles the instruction layouts seen in the wild: a single string,
    a list of strings, HowToStep objects and HowToSection objects whose
    steps sit in itemListElement.
    """

    def __init__(self, source_url: str | None = None) -> None:
        """Initialize the JSON-LD recipe parser.

        Args:
            source_url: Page the JSON-LD was read from, recorded as the source
        """
        self.source_url = source_url
        _LOGGER.debug("Initialized JSONLDRecipeParser for %s", source_url)

    @staticmethod
    def _clean_text(value: Any) -> str:
        """Strip HTML tags and entities and collapse whitespace."""
        if value is None:
            return ""
        text = html.unescape(_TAG_RE.sub(" ", str(value)))
        return _WHITESPACE_RE.sub(" ", text).strip()

    def _parse_instructions(self, value: Any) -> list[str]:
        """Flatten recipeInstructions into a list of step strings."""
        if value is None:
            return []

        if isinstance(value, str):
            # Some sites put every step into one string separated by newlines
            lines = value.split("\n") if "\n" in value else [value]
            return [step for step in (self._clean_text(line) for line in lines) if step]

        if isinstance(value, list):
            steps = []
            for item in value:
                steps.extend(self._parse_instructions(item))
            return steps

        if isinstance(value, dict):
            if "itemListElement" in value:
                return self._parse_instructions(value["itemListElement"])
            text = value.get("text") or value.get("name")
            step = self._clean_text(text)
            return [step] if step else []

        return []

    def _parse_ingredients(self, value: Any) -> list[str]:
        """Normalize recipeIngredient into a list of ingredient strings."""
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, list):
            return []
        ingredients = (self._clean_text(item) for item in value)
        return [ingredient for ingredient in ingredients if ingredient]

    def parse_recipe(self, data: dict[str, Any]) -> Recipe | None:
        """Parse a JSON-LD Recipe object directly without AI.

        Args:
            data: The decoded JSON-LD Recipe object

        Returns:
            Recipe object, or None if name, ingredients or instructions are missing
        """
        if not isinstance(data, dict):
            _LOGGER.warning("JSON-LD recipe data is not an object")
            return None

        name = self._clean_text(data.get("name"))
        ingredients = self._parse_ingredients(data.get("recipeIngredient"))
        instructions = self._parse_instructions(data.get("recipeInstructions"))

        if not name:
            _LOGGER.warning("No name found in JSON-LD data")
            return None
        if not ingredients or not instructions:
            _LOGGER.warning(
                "Incomplete JSON-LD recipe '%s': %d ingredients, %d steps",
                name,
                len(ingredients),
                len(instructions),
            )
            return None

        sources = []
        if self.source_url:
            sources.append(GroundingSource(uri=self.source_url, title=name))

        return Recipe(
            name=name,
            ingredients=ingredients,
            instructions=instructions,
            sources=sources,
        )
