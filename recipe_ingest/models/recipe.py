"""
Recipe data models for the recipe ingestion pipeline.

This module defines the Pydantic models used to carry recipe data from
the individual extraction tiers to the final, normalized record.
"""
from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class NormalizedIngredient(BaseModel):
    """A single ingredient line split into its components.

    Attributes:
        name: The ingredient itself (e.g., 'green beans')
        amount: Optional leading quantity and unit (e.g., '300g/10oz')
        preparation: Optional preparation clause (e.g., 'trimmed')
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(
        description="The name of the ingredient, e.g., 'green beans'"
    )
    amount: str | None = Field(
        default=None,
        description="The quantity with its unit as written, e.g., '2 cups'"
    )
    preparation: str | None = Field(
        default=None,
        description="How the ingredient is prepared, e.g., 'finely chopped'"
    )


class PreparationSplit(BaseModel):
    """Result of pulling the preparation clause out of a raw line."""

    model_config = ConfigDict(frozen=True)

    main_text: str
    preparation: str | None = None


class ImageCandidate(BaseModel):
    """An <img> element considered for the hero image of a page.

    Attributes:
        url: The image source as written in the markup
        width: Declared width in pixels, if any
        height: Declared height in pixels, if any
        alt_text: The alt attribute
        css_classes: Class names on the element
        element_id: The id attribute
        ancestor_tags: Tag names of all enclosing elements, nearest first
        itemprop: The microdata itemprop attribute
        lazy: Whether the image is deferred-loaded
        position: Index of the image in document order
    """

    model_config = ConfigDict(frozen=True)

    url: str = ""
    width: int | None = None
    height: int | None = None
    alt_text: str = ""
    css_classes: tuple[str, ...] = ()
    element_id: str = ""
    ancestor_tags: tuple[str, ...] = ()
    itemprop: str = ""
    lazy: bool = False
    position: int = 0


class PartialRecipe(BaseModel):
    """Recipe fields as gathered by one extraction tier.

    Every field is optional; later tiers only fill what earlier tiers
    left empty.
    """

    title: str | None = None
    ingredients: list[str] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)
    time: int | None = None
    servings: int | None = None
    difficulty: str | None = None
    description: str | None = None
    image: str | None = None
    tags: list[str] = Field(default_factory=list)

    def missing_fields(self) -> list[str]:
        """Names of the fields that are still empty."""
        return [
            name for name, value in self
            if value is None or value == "" or value == []
        ]

    def fill_from(self, other: PartialRecipe) -> list[str]:
        """Copy values from another partial into fields that are empty here.

        Returns:
            The names of the fields that were filled
        """
        filled = []
        for name in self.missing_fields():
            value = getattr(other, name)
            if value is None or value == "" or value == []:
                continue
            setattr(self, name, value)
            filled.append(name)
        return filled


class ExtractedRecipe(BaseModel):
    """The canonical, normalized recipe record.

    Attributes:
        title: The recipe title (empty string when none was found)
        ingredients: Cleaned ingredient lines in source order
        instructions: Instruction steps in source order
        time: Total time in minutes, or None when not stated
        servings: Number of servings, or None when not stated
        difficulty: One of Easy, Medium, Hard, or None
        description: Short description, or None
        image: Absolute URL of the dish photo, or None
        tags: De-duplicated category and keyword tags
    """

    model_config = ConfigDict(frozen=True)

    title: str = Field(default="", description="The title of the recipe")
    ingredients: list[str] = Field(
        default_factory=list,
        description="Ingredient lines, cleaned, in source order"
    )
    instructions: list[str] = Field(
        default_factory=list,
        description="Instruction steps in source order"
    )
    time: int | None = Field(default=None, ge=0)
    servings: int | None = Field(default=None, ge=0)
    difficulty: Literal["Easy", "Medium", "Hard"] | None = None
    description: str | None = None
    image: str | None = None
    tags: list[str] = Field(default_factory=list)


class ExtractionTier(str, Enum):
    """Which strategy produced an extraction outcome."""

    STRUCTURED = "structured"
    HEURISTIC = "heuristic"
    AI_ASSISTED = "ai_assisted"


class ExtractionOutcome(BaseModel):
    """Tagged result of one pass through the extraction tiers."""

    tier: ExtractionTier
    recipe: PartialRecipe

    @property
    def is_weak(self) -> bool:
        """True when the result is too thin to return without escalation."""
        return (
            not (self.recipe.title or "").strip()
            and not self.recipe.ingredients
            and not self.recipe.instructions
        )
