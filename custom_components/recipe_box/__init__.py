"""
Recipe Box Integration for Home Assistant.

This integration extracts structured recipes from recipe pages or free-text
requests using Gemini with Google Search grounding, and keeps a box of
saved recipes in Home Assistant's local storage.
"""
from __future__ import annotations

import logging
from typing import Any

import voluptuous as vol

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant, ServiceCall, SupportsResponse
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers import config_validation as cv
from homeassistant.helpers.typing import ConfigType

from .const import (
    DOMAIN,
    CONF_API_KEY,
    CONF_MODEL,
    CONF_DEFAULT_MODEL,
    CONF_PREFER_STRUCTURED_DATA,
    DEFAULT_MODEL,
    SERVICE_EXTRACT,
    SERVICE_SAVE,
    SERVICE_DELETE,
    SERVICE_LIST,
    SERVICE_GET,
    DATA_QUERY,
    DATA_MODEL,
    DATA_RECIPE,
    DATA_RECIPE_ID,
)
from .services.service_handlers import (
    handle_extract_recipe,
    handle_save_recipe,
    handle_delete_recipe,
    handle_list_recipes,
    handle_get_recipe,
)
from .storage import RecipeStorage

_LOGGER = logging.getLogger(__name__)

# Config flow only - no YAML support
CONFIG_SCHEMA = cv.empty_config_schema(DOMAIN)

# Service schemas
SERVICE_EXTRACT_SCHEMA = vol.Schema(
    {
        vol.Required(DATA_QUERY): cv.string,
        vol.Optional(DATA_MODEL): cv.string,
    }
)

SERVICE_SAVE_SCHEMA = vol.Schema(
    {
        vol.Optional(DATA_RECIPE): dict,
    }
)

SERVICE_RECIPE_ID_SCHEMA = vol.Schema(
    {
        vol.Required(DATA_RECIPE_ID): cv.string,
    }
)

SERVICE_LIST_SCHEMA = vol.Schema({})

_SERVICES = (
    (SERVICE_EXTRACT, handle_extract_recipe, SERVICE_EXTRACT_SCHEMA),
    (SERVICE_SAVE, handle_save_recipe, SERVICE_SAVE_SCHEMA),
    (SERVICE_DELETE, handle_delete_recipe, SERVICE_RECIPE_ID_SCHEMA),
    (SERVICE_LIST, handle_list_recipes, SERVICE_LIST_SCHEMA),
    (SERVICE_GET, handle_get_recipe, SERVICE_RECIPE_ID_SCHEMA),
)


async def async_setup(hass: HomeAssistant, config: ConfigType) -> bool:
    """Set up the Recipe Box integration."""
    hass.data.setdefault(DOMAIN, {})
    _LOGGER.debug("Recipe Box integration setup complete")
    return True


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up Recipe Box from a config entry."""
    _LOGGER.info("Setting up Recipe Box config entry")

    # Get configuration from options (preferred) or data
    api_key = entry.options.get(
        CONF_API_KEY) or entry.data.get(CONF_API_KEY, "")
    default_model = entry.options.get(
        CONF_DEFAULT_MODEL) or entry.data.get(CONF_MODEL, DEFAULT_MODEL)
    prefer_structured_data = entry.options.get(
        CONF_PREFER_STRUCTURED_DATA, True)

    if not api_key:
        _LOGGER.error("No API key configured for Recipe Box")
        raise HomeAssistantError("Recipe Box requires an API key")

    storage = RecipeStorage(hass)
    await storage.async_load()

    hass.data.setdefault(DOMAIN, {})
    hass.data[DOMAIN][entry.entry_id] = {
        "api_key": api_key,
        "default_model": default_model,
        "prefer_structured_data": prefer_structured_data,
        "storage": storage,
        "current_recipe": None,
        "is_loading": False,
    }

    # Set up services only once (for the first entry)
    if len(hass.data[DOMAIN]) == 1:
        _setup_services(hass)
        _LOGGER.info("Recipe Box services registered")

    # Listen for options updates
    entry.async_on_unload(entry.add_update_listener(async_reload_entry))

    _LOGGER.debug("Recipe Box config entry setup complete")
    return True


async def async_reload_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Reload the config entry when options change."""
    await hass.config_entries.async_reload(entry.entry_id)


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    _LOGGER.info("Unloading Recipe Box config entry")

    hass.data[DOMAIN].pop(entry.entry_id, None)

    # Remove services only if this is the last entry
    if not hass.data[DOMAIN]:
        for service, _handler, _schema in _SERVICES:
            hass.services.async_remove(DOMAIN, service)
        _LOGGER.info("Recipe Box services unregistered")

    return True


def _setup_services(hass: HomeAssistant) -> None:
    """Register the integration services."""

    def _bind(handler):
        async def _handle(call: ServiceCall) -> dict[str, Any]:
            """Wrapper that injects hass into the handler."""
            return await handler(hass, call)
        return _handle

    for service, handler, schema in _SERVICES:
        hass.services.async_register(
            DOMAIN,
            service,
            _bind(handler),
            schema=schema,
            supports_response=SupportsResponse.OPTIONAL,
        )
