"""Exceptions raised by the Recipe Box extraction pipeline."""
from __future__ import annotations

from .const import MSG_INVALID_FORMAT, MSG_RECIPE_NOT_FOUND, MSG_UNKNOWN_ERROR


class RecipeBoxError(Exception):
    """Base class for recipe extraction errors."""


class InvalidResponseError(RecipeBoxError):
    """The AI response could not be decoded into a JSON object."""

    def __init__(self, message: str = MSG_INVALID_FORMAT) -> None:
        super().__init__(message)


class RecipeNotFoundError(RecipeBoxError):
    """The response decoded fine but did not describe a usable recipe."""

    def __init__(self, message: str = MSG_RECIPE_NOT_FOUND) -> None:
        super().__init__(message)


class AIServiceError(RecipeBoxError):
    """The generative AI service could not be reached or refused the request."""

    def __init__(self, message: str = MSG_UNKNOWN_ERROR) -> None:
        super().__init__(message)
