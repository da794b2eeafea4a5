"""
Base Recipe Parser.

This module defines the interface shared by the parsers that turn
raw extraction output into Recipe objects.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from ..models.recipe import Recipe


class BaseRecipeParser(ABC):
    """Abstract base class for recipe parsers.

    Parsers receive whatever their source produces (AI response text,
    a decoded JSON-LD object) and return a structured Recipe.
    """

    @abstractmethod
    def parse_recipe(self, data: Any) -> Recipe | None:
        """Parse recipe information from source data.

        Args:
            data: The raw data to parse

        Returns:
            A Recipe object with extracted information, or None if the data
            holds no recipe
        """
        pass
