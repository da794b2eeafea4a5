"""
Gemini client with Google Search grounding.

Thin wrapper around the google-genai SDK: one generate_content call per
extraction, returning the response text together with the web sources
the model consulted.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from google import genai
from google.genai import errors, types

from ..const import DEFAULT_MODEL
from ..exceptions import AIServiceError, InvalidResponseError

_LOGGER = logging.getLogger(__name__)


@dataclass
class GeminiResult:
    """Text and grounding chunks of one Gemini response."""

    text: str
    grounding_chunks: list[Any] = field(default_factory=list)


class GeminiClient:
    """Calls Gemini with the Google Search tool enabled."""

    def __init__(self, api_key: str, model: str = DEFAULT_MODEL) -> None:
        """Initialize the client.

        Args:
            api_key: Gemini API key
            model: The model to use for generation

        Raises:
            ValueError: If API key is empty
        """
        if not api_key or not api_key.strip():
            raise ValueError("API key cannot be empty")

        self.model = model
        self._client = genai.Client(api_key=api_key)
        _LOGGER.debug("Initialized GeminiClient with model %s", model)

    def generate(self, prompt: str) -> GeminiResult:
        """Send *prompt* to the model with search grounding.

        Raises:
            AIServiceError: If the request fails
            InvalidResponseError: If the response carries no text
        """
        _LOGGER.debug("Calling Gemini model %s with search grounding", self.model)
        try:
            response = self._client.models.generate_content(
                model=self.model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    tools=[types.Tool(google_search=types.GoogleSearch())],
                ),
            )
        except errors.APIError as e:
            _LOGGER.error("Gemini request failed with status %s: %s", e.code, e.message)
            raise AIServiceError(f"Gemini request failed: {e.message or e}") from e
        except Exception as e:
            _LOGGER.error("Error communicating with Gemini: %s", e, exc_info=True)
            raise AIServiceError() from e

        text = response.text
        if not text or not text.strip():
            _LOGGER.warning("Gemini returned an empty response")
            raise InvalidResponseError()

        grounding_chunks: list[Any] = []
        candidates = response.candidates or []
        if candidates and candidates[0].grounding_metadata:
            grounding_chunks = candidates[0].grounding_metadata.grounding_chunks or []

        _LOGGER.debug(
            "Gemini returned %d characters with %d grounding chunks",
            len(text),
            len(grounding_chunks),
        )
        return GeminiResult(text=text, grounding_chunks=list(grounding_chunks))

    def list_models(self) -> list[str]:
        """Return the names of models that support content generation."""
        try:
            models = list(self._client.models.list())
        except errors.APIError as e:
            raise AIServiceError(f"Could not list models: {e.message or e}") from e
        return [
            model.name
            for model in models
            if "generateContent" in (model.supported_actions or [])
        ]
