"""Shared fixtures for the Recipe Box tests."""
from __future__ import annotations

from typing import Any

import pytest

from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.recipe_box.const import (
    CONF_API_KEY,
    CONF_DEFAULT_MODEL,
    CONF_PREFER_STRUCTURED_DATA,
    DOMAIN,
)


@pytest.fixture
def recipe_data() -> dict[str, Any]:
    return {
        "id": "1718000000000",
        "name": "Banana Bread",
        "ingredients": ["3 ripe bananas", "250 g flour", "1 tsp baking soda"],
        "instructions": ["Mash the bananas.", "Mix in the flour and soda.", "Bake for 60 minutes."],
        "sources": [{"uri": "https://example.com/banana-bread", "title": "Banana Bread"}],
    }


@pytest.fixture
def config_entry() -> MockConfigEntry:
    return MockConfigEntry(
        domain=DOMAIN,
        title="Recipe Box",
        data={},
        options={
            CONF_API_KEY: "test-key",
            CONF_DEFAULT_MODEL: "gemini-2.5-flash",
            CONF_PREFER_STRUCTURED_DATA: True,
        },
        unique_id=DOMAIN,
    )
