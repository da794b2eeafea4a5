"""
Recipe Extraction Service.

This module runs one extraction outside the event loop and returns the
recipe as a plain dictionary for service responses and events.
"""
from __future__ import annotations

import logging
from typing import Any

from ..extractors.recipe_extractor import RecipeExtractor

_LOGGER = logging.getLogger(__name__)


def extract_recipe(
    query: str,
    api_key: str,
    model: str,
    prefer_structured_data: bool = True,
) -> dict[str, Any]:
    """Extract a recipe from a URL or free-text request.

    Blocking: performs network I/O, so callers inside Home Assistant run it
    in the executor.

    Args:
        query: Recipe page URL, or a dish name / ingredient list
        api_key: Gemini API key
        model: Model name to use
        prefer_structured_data: Read JSON-LD recipe data before asking the AI

    Returns:
        Dictionary with the recipe data

    Raises:
        Exception: Re-raises extraction errors for the caller to report
    """
    _LOGGER.debug("Starting recipe extraction for %s using model %s", query, model)

    try:
        extractor = RecipeExtractor(
            api_key=api_key,
            model=model,
            prefer_structured_data=prefer_structured_data,
        )
        recipe = extractor.extract(query)
    except Exception as e:
        _LOGGER.error(
            "Error extracting recipe for %s: %s",
            query,
            str(e),
            exc_info=True
        )
        raise

    return recipe.model_dump()
