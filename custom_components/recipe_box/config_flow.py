"""Config flow for Recipe Box integration."""
from __future__ import annotations

import logging
from typing import Any

import voluptuous as vol

from homeassistant import config_entries
from homeassistant.core import callback
from homeassistant.data_entry_flow import FlowResult
from homeassistant.helpers import selector

from .const import (
    DOMAIN,
    AVAILABLE_MODELS,
    DEFAULT_MODEL,
    CONF_API_KEY,
    CONF_DEFAULT_MODEL,
    CONF_PREFER_STRUCTURED_DATA,
)

_LOGGER = logging.getLogger(__name__)


def _build_schema(
    api_key: str | None = None,
    model: str = DEFAULT_MODEL,
    prefer_structured_data: bool = True,
) -> vol.Schema:
    """Build the form shared by the config and options flows."""
    api_key_marker = (
        vol.Optional(CONF_API_KEY, default=api_key)
        if api_key
        else vol.Required(CONF_API_KEY)
    )
    return vol.Schema(
        {
            api_key_marker: selector.TextSelector(
                selector.TextSelectorConfig(
                    type=selector.TextSelectorType.PASSWORD,
                ),
            ),
            vol.Optional(
                CONF_DEFAULT_MODEL,
                default=model,
            ): selector.SelectSelector(
                selector.SelectSelectorConfig(
                    options=AVAILABLE_MODELS,
                    mode=selector.SelectSelectorMode.DROPDOWN,
                ),
            ),
            vol.Optional(
                CONF_PREFER_STRUCTURED_DATA,
                default=prefer_structured_data,
            ): selector.BooleanSelector(),
        }
    )


def _validate_api_key(user_input: dict[str, Any], errors: dict[str, str]) -> None:
    """Strip the API key in place and flag it when blank."""
    api_key = (user_input.get(CONF_API_KEY) or "").strip()
    if not api_key:
        errors[CONF_API_KEY] = "api_key_required"
    else:
        user_input[CONF_API_KEY] = api_key


class RecipeBoxConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    """Handle a config flow for Recipe Box."""

    VERSION = 1

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> FlowResult:
        """Handle the initial step."""
        errors: dict[str, str] = {}

        # Single instance: the recipe box storage is shared
        await self.async_set_unique_id(DOMAIN)
        self._abort_if_unique_id_configured()

        if user_input is not None:
            _validate_api_key(user_input, errors)

            if not errors:
                _LOGGER.info("Creating Recipe Box config entry")
                return self.async_create_entry(
                    title="Recipe Box",
                    data={},
                    options=user_input,
                )

        return self.async_show_form(
            step_id="user",
            data_schema=_build_schema(),
            errors=errors,
        )

    @staticmethod
    @callback
    def async_get_options_flow(
        config_entry: config_entries.ConfigEntry,
    ) -> RecipeBoxOptionsFlow:
        """Get the options flow for this handler."""
        return RecipeBoxOptionsFlow()


class RecipeBoxOptionsFlow(config_entries.OptionsFlow):
    """Handle options flow for Recipe Box."""

    async def async_step_init(
        self, user_input: dict[str, Any] | None = None
    ) -> FlowResult:
        """Manage the options."""
        errors: dict[str, str] = {}

        if user_input is not None:
            _validate_api_key(user_input, errors)

            if not errors:
                _LOGGER.info("Updating Recipe Box options")
                return self.async_create_entry(title="", data=user_input)

        options = self.config_entry.options
        return self.async_show_form(
            step_id="init",
            data_schema=_build_schema(
                api_key=options.get(CONF_API_KEY, ""),
                model=options.get(CONF_DEFAULT_MODEL, DEFAULT_MODEL),
                prefer_structured_data=options.get(
                    CONF_PREFER_STRUCTURED_DATA, True),
            ),
            errors=errors,
        )
