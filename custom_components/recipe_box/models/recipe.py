"""
Recipe data models for the Recipe Box integration.

This module defines the Pydantic models used to structure recipe data
returned by the AI service or read from a page's structured data, and
persisted in the recipe box.
"""
from __future__ import annotations

import time

from pydantic import BaseModel, Field, field_validator, model_validator


def generate_recipe_id() -> str:
    """Return a new recipe id: the current time in milliseconds."""
    return str(time.time_ns() // 1_000_000)


class GroundingSource(BaseModel):
    """A web page the AI service consulted while answering.

    Attributes:
        uri: Address of the page
        title: Page title, or the address when no title was reported
    """

    uri: str = Field(description="Address of the source page")
    title: str = Field(default="", description="Title of the source page")

    @field_validator("uri")
    @classmethod
    def _uri_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Source uri cannot be empty")
        return value

    @model_validator(mode="after")
    def _default_title(self) -> GroundingSource:
        if not self.title or not self.title.strip():
            self.title = self.uri
        return self


class Recipe(BaseModel):
    """The top-level schema for a recipe.

    Attributes:
        id: Identifier generated when the recipe was extracted
        name: The recipe name
        ingredients: Ingredient lines with quantities, in recipe order
        instructions: Cooking steps, in recipe order
        sources: Web pages the recipe was taken from
    """

    id: str = Field(
        default_factory=generate_recipe_id,
        description="Identifier generated when the recipe was extracted"
    )
    name: str = Field(
        description="The name of the recipe"
    )
    ingredients: list[str] = Field(
        description="Each entry is a single ingredient with its quantity"
    )
    instructions: list[str] = Field(
        description="Each entry is a single step of the cooking instructions"
    )
    sources: list[GroundingSource] = Field(
        default_factory=list,
        description="Web pages the recipe was extracted from"
    )

    @property
    def summary(self) -> dict[str, object]:
        """Short description used when listing saved recipes."""
        return {
            "id": self.id,
            "name": self.name,
            "ingredient_count": len(self.ingredients),
            "step_count": len(self.instructions),
        }
