"""Extractors package."""
from .gemini_client import GeminiClient
from .recipe_extractor import RecipeExtractor, is_url, validate_url
from .scraper import fetch_structured_recipe

__all__ = [
    "GeminiClient",
    "RecipeExtractor",
    "fetch_structured_recipe",
    "is_url",
    "validate_url",
]
