"""
Saved recipe storage.

Recipes are kept as one list, newest first, in Home Assistant's JSON
storage under a single key. Saving is deduplicated by recipe name.
"""
from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from homeassistant.core import HomeAssistant
from homeassistant.helpers.storage import Store

from .const import STORAGE_KEY, STORAGE_VERSION
from .models.recipe import Recipe

_LOGGER = logging.getLogger(__name__)


class RecipeStorage:
    """Persists the user's saved recipes."""

    def __init__(self, hass: HomeAssistant) -> None:
        self._store: Store[dict[str, Any]] = Store(hass, STORAGE_VERSION, STORAGE_KEY)
        self._recipes: list[Recipe] = []

    @property
    def recipes(self) -> list[Recipe]:
        """Saved recipes, newest first."""
        return list(self._recipes)

    async def async_load(self) -> None:
        """Load saved recipes from disk."""
        data = await self._store.async_load()
        recipes = []
        for item in (data or {}).get("recipes", []):
            try:
                recipes.append(Recipe.model_validate(item))
            except ValidationError as e:
                _LOGGER.warning("Skipping unreadable saved recipe: %s", e)
        self._recipes = recipes
        _LOGGER.debug("Loaded %d saved recipes", len(recipes))

    async def _async_write(self, recipes: list[Recipe]) -> None:
        """Persist *recipes*, then make them the in-memory list."""
        await self._store.async_save(
            {"recipes": [recipe.model_dump() for recipe in recipes]}
        )
        self._recipes = recipes

    def get(self, recipe_id: str) -> Recipe | None:
        """Return the saved recipe with *recipe_id*, if any."""
        return next((r for r in self._recipes if r.id == recipe_id), None)

    def contains_name(self, name: str) -> bool:
        """Return True when a recipe with exactly this name is saved."""
        return any(r.name == name for r in self._recipes)

    async def async_save(self, recipe: Recipe) -> bool:
        """Save *recipe* at the top of the list.

        Returns:
            False when a recipe with the same name was already saved
        """
        if self.contains_name(recipe.name):
            _LOGGER.info("Recipe '%s' is already saved", recipe.name)
            return False

        await self._async_write([recipe, *self._recipes])
        _LOGGER.info("Saved recipe '%s' (%s)", recipe.name, recipe.id)
        return True

    async def async_delete(self, recipe_id: str) -> bool:
        """Delete the recipe with *recipe_id*.

        Returns:
            True when a recipe was removed
        """
        remaining = [r for r in self._recipes if r.id != recipe_id]
        if len(remaining) == len(self._recipes):
            _LOGGER.debug("No saved recipe with id %s", recipe_id)
            return False

        await self._async_write(remaining)
        _LOGGER.info("Deleted recipe %s", recipe_id)
        return True
