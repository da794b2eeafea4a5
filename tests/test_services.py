"""Tests for the Recipe Box services."""
from __future__ import annotations

from typing import Any
from unittest.mock import patch

import pytest

from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ServiceValidationError
from pytest_homeassistant_custom_component.common import MockConfigEntry, async_capture_events

from custom_components.recipe_box.const import (
    DOMAIN,
    EVENT_EXTRACTION_FAILED,
    EVENT_EXTRACTION_STARTED,
    EVENT_RECIPE_DELETED,
    EVENT_RECIPE_EXTRACTED,
    EVENT_RECIPE_SAVED,
    MSG_EXTRACTION_FAILED,
    SERVICE_DELETE,
    SERVICE_EXTRACT,
    SERVICE_GET,
    SERVICE_LIST,
    SERVICE_SAVE,
)
from custom_components.recipe_box.exceptions import AIServiceError

URL = "https://example.com/banana-bread"
EXTRACT = "custom_components.recipe_box.services.service_handlers.extract_recipe"

pytestmark = pytest.mark.usefixtures("enable_custom_integrations")


@pytest.fixture
async def setup_integration(hass: HomeAssistant, config_entry: MockConfigEntry) -> MockConfigEntry:
    config_entry.add_to_hass(hass)
    assert await hass.config_entries.async_setup(config_entry.entry_id)
    await hass.async_block_till_done()
    return config_entry


async def _call(hass: HomeAssistant, service: str, data: dict[str, Any] | None = None) -> dict[str, Any]:
    return await hass.services.async_call(
        DOMAIN, service, data or {}, blocking=True, return_response=True)


def _entry_data(hass: HomeAssistant, entry: MockConfigEntry) -> dict[str, Any]:
    return hass.data[DOMAIN][entry.entry_id]


async def test_services_registered(hass: HomeAssistant, setup_integration) -> None:
    for service in (SERVICE_EXTRACT, SERVICE_SAVE, SERVICE_DELETE, SERVICE_LIST, SERVICE_GET):
        assert hass.services.has_service(DOMAIN, service)


async def test_extract_success(hass: HomeAssistant, setup_integration, recipe_data) -> None:
    started = async_capture_events(hass, EVENT_EXTRACTION_STARTED)
    extracted = async_capture_events(hass, EVENT_RECIPE_EXTRACTED)

    with patch(EXTRACT, return_value=recipe_data) as mock_extract:
        response = await _call(hass, SERVICE_EXTRACT, {"query": f"  {URL} "})

    assert response == recipe_data
    mock_extract.assert_called_once_with(URL, "test-key", "gemini-2.5-flash", True)
    await hass.async_block_till_done()
    assert started[0].data == {"query": URL}
    assert extracted[0].data["recipe"] == recipe_data

    data = _entry_data(hass, setup_integration)
    assert data["current_recipe"] == recipe_data
    assert data["is_loading"] is False


async def test_extract_model_override(hass: HomeAssistant, setup_integration, recipe_data) -> None:
    with patch(EXTRACT, return_value=recipe_data) as mock_extract:
        await _call(hass, SERVICE_EXTRACT, {"query": URL, "model": "gemini-2.5-pro"})

    assert mock_extract.call_args.args[2] == "gemini-2.5-pro"


async def test_extract_failure_returns_single_message(hass: HomeAssistant, setup_integration) -> None:
    failed = async_capture_events(hass, EVENT_EXTRACTION_FAILED)

    with patch(EXTRACT, side_effect=AIServiceError("quota exceeded")):
        response = await _call(hass, SERVICE_EXTRACT, {"query": URL})

    assert response == {"error": MSG_EXTRACTION_FAILED}
    await hass.async_block_till_done()
    assert failed[0].data == {"query": URL, "error": "quota exceeded"}

    data = _entry_data(hass, setup_integration)
    assert data["is_loading"] is False
    assert data["current_recipe"] is None


async def test_extract_blank_query(hass: HomeAssistant, setup_integration) -> None:
    with patch(EXTRACT) as mock_extract, pytest.raises(ServiceValidationError):
        await _call(hass, SERVICE_EXTRACT, {"query": "   "})
    mock_extract.assert_not_called()


async def test_extract_rejected_while_loading(hass: HomeAssistant, setup_integration) -> None:
    _entry_data(hass, setup_integration)["is_loading"] = True

    with patch(EXTRACT) as mock_extract, pytest.raises(ServiceValidationError):
        await _call(hass, SERVICE_EXTRACT, {"query": URL})
    mock_extract.assert_not_called()


async def test_extract_clears_previous_recipe(hass: HomeAssistant, setup_integration, recipe_data) -> None:
    data = _entry_data(hass, setup_integration)
    data["current_recipe"] = recipe_data

    with patch(EXTRACT, side_effect=ValueError("bad")):
        await _call(hass, SERVICE_EXTRACT, {"query": "pasta"})

    assert data["current_recipe"] is None


async def test_save_current_recipe(hass: HomeAssistant, setup_integration, recipe_data) -> None:
    saved_events = async_capture_events(hass, EVENT_RECIPE_SAVED)
    with patch(EXTRACT, return_value=recipe_data):
        await _call(hass, SERVICE_EXTRACT, {"query": URL})

    response = await _call(hass, SERVICE_SAVE)

    assert response["saved"] is True
    assert response["recipe"]["name"] == "Banana Bread"
    assert _entry_data(hass, setup_integration)["current_recipe"] is None
    await hass.async_block_till_done()
    assert len(saved_events) == 1

    listing = await _call(hass, SERVICE_LIST)
    assert listing == {
        "recipes": [
            {"id": "1718000000000", "name": "Banana Bread", "ingredient_count": 3, "step_count": 3}
        ]
    }


async def test_save_duplicate_name(hass: HomeAssistant, setup_integration, recipe_data) -> None:
    await _call(hass, SERVICE_SAVE, {"recipe": recipe_data})
    response = await _call(hass, SERVICE_SAVE, {"recipe": {**recipe_data, "id": "99"}})

    assert response["saved"] is False
    listing = await _call(hass, SERVICE_LIST)
    assert [r["id"] for r in listing["recipes"]] == ["1718000000000"]


async def test_save_without_recipe(hass: HomeAssistant, setup_integration) -> None:
    with pytest.raises(ServiceValidationError):
        await _call(hass, SERVICE_SAVE)


async def test_save_invalid_recipe(hass: HomeAssistant, setup_integration) -> None:
    with pytest.raises(ServiceValidationError):
        await _call(hass, SERVICE_SAVE, {"recipe": {"name": "No lists"}})


async def test_get_and_delete(hass: HomeAssistant, setup_integration, recipe_data) -> None:
    deleted_events = async_capture_events(hass, EVENT_RECIPE_DELETED)
    await _call(hass, SERVICE_SAVE, {"recipe": recipe_data})

    recipe = await _call(hass, SERVICE_GET, {"recipe_id": "1718000000000"})
    assert recipe["instructions"] == recipe_data["instructions"]
    assert recipe["sources"] == recipe_data["sources"]

    assert await _call(hass, SERVICE_DELETE, {"recipe_id": "1718000000000"}) == {"deleted": True}
    assert await _call(hass, SERVICE_DELETE, {"recipe_id": "1718000000000"}) == {"deleted": False}
    await hass.async_block_till_done()
    assert len(deleted_events) == 1

    with pytest.raises(ServiceValidationError):
        await _call(hass, SERVICE_GET, {"recipe_id": "1718000000000"})
    assert await _call(hass, SERVICE_LIST) == {"recipes": []}


async def test_saved_recipes_survive_reload(hass: HomeAssistant, setup_integration, recipe_data) -> None:
    await _call(hass, SERVICE_SAVE, {"recipe": recipe_data})

    assert await hass.config_entries.async_reload(setup_integration.entry_id)
    await hass.async_block_till_done()

    listing = await _call(hass, SERVICE_LIST)
    assert [r["name"] for r in listing["recipes"]] == ["Banana Bread"]


async def test_unload_removes_services(hass: HomeAssistant, setup_integration) -> None:
    assert await hass.config_entries.async_unload(setup_integration.entry_id)
    await hass.async_block_till_done()

    assert not hass.services.has_service(DOMAIN, SERVICE_EXTRACT)
    assert DOMAIN in hass.data
    assert hass.data[DOMAIN] == {}


async def test_setup_without_api_key(hass: HomeAssistant) -> None:
    entry = MockConfigEntry(domain=DOMAIN, data={}, options={}, unique_id=DOMAIN)
    entry.add_to_hass(hass)

    assert not await hass.config_entries.async_setup(entry.entry_id)
    assert not hass.services.has_service(DOMAIN, SERVICE_EXTRACT)
