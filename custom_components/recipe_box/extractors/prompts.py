"""
Prompts for recipe extraction with Gemini and Google Search grounding.
"""
from __future__ import annotations

_RESPONSE_FORMAT = """You MUST format your response as a single, valid JSON object with the following keys:
- "name": The name of the recipe (string).
- "ingredients": An array of strings, where each string is a single ingredient with its quantity.
- "instructions": An array of strings, where each string is a single step in the cooking instructions.

IMPORTANT: Do not add any text, explanations, or markdown formatting (like ```json) around the JSON output. Your entire response must be only the raw JSON object.
"""


def build_url_prompt(url: str) -> str:
    """Prompt asking the model to read the recipe published at *url*."""
    return (
        "You are an expert recipe extractor. Using Google Search to access the "
        f"provided URL, find and extract the recipe details. The URL is: {url}.\n"
        f"{_RESPONSE_FORMAT}"
        "If you cannot find a clear recipe on the page, return a JSON object with "
        'an empty string for "name", and empty arrays for "ingredients" and "instructions".'
    )


def build_query_prompt(query: str) -> str:
    """Prompt asking the model to find a recipe matching a free-text request."""
    return (
        "You are an expert recipe finder. Using Google Search, find one well-reviewed "
        "recipe that best matches the following request, which may name a dish or "
        f"list ingredients the cook has available: {query}\n"
        f"{_RESPONSE_FORMAT}"
        "If no sensible recipe matches the request, return a JSON object with "
        'an empty string for "name", and empty arrays for "ingredients" and "instructions".'
    )
