"""
Service Handlers.

This module contains the Home Assistant service handler functions for
extracting recipes and managing the saved recipe box.
"""
from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from homeassistant.core import HomeAssistant, ServiceCall
from homeassistant.exceptions import ServiceValidationError

from ..const import (
    DOMAIN,
    EVENT_EXTRACTION_STARTED,
    EVENT_RECIPE_EXTRACTED,
    EVENT_EXTRACTION_FAILED,
    EVENT_RECIPE_SAVED,
    EVENT_RECIPE_DELETED,
    DATA_QUERY,
    DATA_MODEL,
    DATA_RECIPE,
    DATA_RECIPE_ID,
    DATA_ERROR,
    MSG_EMPTY_QUERY,
    MSG_EXTRACTION_FAILED,
)
from ..models.recipe import Recipe
from ..storage import RecipeStorage
from .recipe_service import extract_recipe

_LOGGER = logging.getLogger(__name__)


def get_entry_config(hass: HomeAssistant) -> dict[str, Any] | None:
    """Get runtime data of the first available config entry.

    Returns:
        Entry data dict or None if no entries exist
    """
    if not hass.data.get(DOMAIN):
        return None

    # Services are shared across entries; the integration allows one entry
    entry_id = next(iter(hass.data[DOMAIN]))
    return hass.data[DOMAIN][entry_id]


def _require_entry_config(hass: HomeAssistant) -> dict[str, Any]:
    config = get_entry_config(hass)
    if not config:
        _LOGGER.error("No configuration found for Recipe Box")
        raise ServiceValidationError("Recipe Box is not configured")
    return config


async def handle_extract_recipe(hass: HomeAssistant, call: ServiceCall) -> dict[str, Any]:
    """Handle the extract recipe service call.

    Only one extraction runs at a time; the entry's loading flag rejects
    calls made while another is in flight.

    Args:
        hass: Home Assistant instance
        call: Service call with query and optional model

    Returns:
        Dictionary with recipe data, or with the user-facing error message
    """
    query = call.data.get(DATA_QUERY, "").strip()
    if not query:
        raise ServiceValidationError(MSG_EMPTY_QUERY)

    config = _require_entry_config(hass)
    if config["is_loading"]:
        raise ServiceValidationError(
            "A recipe extraction is already in progress, please wait")

    model = call.data.get(DATA_MODEL) or config["default_model"]

    config["is_loading"] = True
    config["current_recipe"] = None
    _LOGGER.info("Extracting recipe for %s using model %s", query, model)
    hass.bus.async_fire(EVENT_EXTRACTION_STARTED, {DATA_QUERY: query})

    try:
        recipe_data = await hass.async_add_executor_job(
            extract_recipe,
            query,
            config["api_key"],
            model,
            config["prefer_structured_data"],
        )
    except Exception as e:
        _LOGGER.error("Recipe extraction failed for %s: %s",
                      query, e, exc_info=True)
        hass.bus.async_fire(
            EVENT_EXTRACTION_FAILED,
            {
                DATA_QUERY: query,
                DATA_ERROR: str(e),
            }
        )
        return {DATA_ERROR: MSG_EXTRACTION_FAILED}
    finally:
        config["is_loading"] = False

    config["current_recipe"] = recipe_data
    hass.bus.async_fire(
        EVENT_RECIPE_EXTRACTED,
        {
            DATA_QUERY: query,
            DATA_RECIPE: recipe_data,
        }
    )
    _LOGGER.info("Recipe extraction successful for %s", query)
    return recipe_data


async def handle_save_recipe(hass: HomeAssistant, call: ServiceCall) -> dict[str, Any]:
    """Handle the save recipe service call.

    Saves the recipe passed in the call, or the most recently extracted one.
    A recipe whose name is already saved is not stored again.

    Returns:
        Dictionary with the saved flag and the recipe
    """
    config = _require_entry_config(hass)
    storage: RecipeStorage = config["storage"]

    recipe_data = call.data.get(DATA_RECIPE) or config["current_recipe"]
    if not recipe_data:
        raise ServiceValidationError("There is no extracted recipe to save")

    try:
        recipe = Recipe.model_validate(recipe_data)
    except ValidationError as e:
        raise ServiceValidationError(f"Invalid recipe data: {e}") from e

    saved = await storage.async_save(recipe)
    config["current_recipe"] = None

    if saved:
        hass.bus.async_fire(EVENT_RECIPE_SAVED, {DATA_RECIPE: recipe.model_dump()})

    return {"saved": saved, DATA_RECIPE: recipe.model_dump()}


async def handle_delete_recipe(hass: HomeAssistant, call: ServiceCall) -> dict[str, Any]:
    """Handle the delete recipe service call."""
    config = _require_entry_config(hass)
    storage: RecipeStorage = config["storage"]
    recipe_id = call.data[DATA_RECIPE_ID]

    deleted = await storage.async_delete(recipe_id)
    if deleted:
        hass.bus.async_fire(EVENT_RECIPE_DELETED, {DATA_RECIPE_ID: recipe_id})

    return {"deleted": deleted}


async def handle_list_recipes(hass: HomeAssistant, call: ServiceCall) -> dict[str, Any]:
    """Handle the list recipes service call: summaries, newest first."""
    config = _require_entry_config(hass)
    storage: RecipeStorage = config["storage"]
    return {"recipes": [recipe.summary for recipe in storage.recipes]}


async def handle_get_recipe(hass: HomeAssistant, call: ServiceCall) -> dict[str, Any]:
    """Handle the get recipe service call: the full saved recipe."""
    config = _require_entry_config(hass)
    storage: RecipeStorage = config["storage"]
    recipe_id = call.data[DATA_RECIPE_ID]

    recipe = storage.get(recipe_id)
    if recipe is None:
        raise ServiceValidationError(f"No saved recipe with id {recipe_id}")
    return recipe.model_dump()
