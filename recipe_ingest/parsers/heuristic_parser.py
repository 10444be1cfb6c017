"""
Heuristic DOM Recipe Parser.

Finds recipe fields from page structure and content patterns when the page
carries no usable structured metadata.
"""
from __future__ import annotations

import logging
import re
from typing import Callable, Iterable

from ..const import (
    BOILERPLATE_TAGS,
    FOOD_TERMS,
    INGREDIENT_CONTAINER_SELECTORS,
    INGREDIENT_ITEM_SELECTOR,
)
from ..extractors.hero_image import find_hero_image
from ..markup import Document, Element
from ..models.recipe import PartialRecipe
from .base_parser import BaseRecipeParser
from .duration import parse_duration
from .ingredient_parser import ingredient_line_from_markup, normalize_ingredients

_LOGGER = logging.getLogger(__name__)

_QUANTITY_START = re.compile(r"^\s*(?:[\d½⅓⅔¼¾⅛⅜⅝⅞]|an?\s+(?:pinch|handful|dash)\b)", re.IGNORECASE)
_FOOD_TERM = re.compile(
    r"\b(?:" + "|".join(re.escape(term) for term in FOOD_TERMS) + r")(?:e?s)?\b",
    re.IGNORECASE)
_INSTRUCTION_HEADING = re.compile(r"instruction|direction|method|preparation", re.IGNORECASE)
# Label, then a "1 hour 30 mins" / "2 hrs" / "45 minutes" phrase
_TIME = re.compile(
    r"\b(total|cook(?:ing)?|prep(?:aration)?|time)[\s:]*(?:time[\s:]*)?"
    r"(\d+(?:[.,]\d+)?\s*(?:hours?|hrs?|h)(?![a-z])"
    r"(?:\s*(?:and\s*)?\d+\s*(?:minutes?|mins?|m)(?![a-z]))?"
    r"|\d+\s*(?:minutes?|mins?|m)(?![a-z]))",
    re.IGNORECASE)
_SERVINGS = re.compile(r"\b(?:serves|servings|yields?|makes)\s*:?\s*(\d+)", re.IGNORECASE)

MIN_CONTAINER_ITEMS = 4
MIN_INSTRUCTION_STEPS = 2


def _list_items(element: Element) -> list[Element]:
    return element.select(":scope > li")


def _is_boilerplate(element: Element) -> bool:
    return element.name in BOILERPLATE_TAGS or element.has_ancestor(BOILERPLATE_TAGS)


def looks_like_ingredient(text: str) -> bool:
    """Whether a list item reads like an ingredient line."""
    return bool(_QUANTITY_START.match(text) or _FOOD_TERM.search(text))


class HeuristicRecipeParser(BaseRecipeParser):
    """Parses recipe fields from page structure.

    Each field has its own finder; finders that fail are logged and treated
    as "not found".
    """

    def __init__(self, preparation_words: Iterable[str] | None = None) -> None:
        """Initialize the heuristic parser.

        Args:
            preparation_words: Preparation vocabulary used when cleaning ingredients
        """
        self.preparation_words = tuple(preparation_words) if preparation_words else None
        self._finders: dict[str, Callable[[Document, str], object]] = {
            "title": lambda document, url: self.find_title(document),
            "ingredients": lambda document, url: self.find_ingredients(document),
            "instructions": lambda document, url: self.find_instructions(document),
            "time": lambda document, url: self.find_time(document),
            "servings": lambda document, url: self.find_servings(document),
            "description": lambda document, url: self.find_description(document),
            "image": find_hero_image,
        }

    def _lines(self, items: list[Element]) -> list[str]:
        return normalize_ingredients(
            [ingredient_line_from_markup(item.inner_html) for item in items],
            self.preparation_words,
        )

    def find_title(self, document: Document) -> str | None:
        heading = document.select_one("h1")
        return heading.text or None if heading else None

    def find_ingredients(self, document: Document) -> list[str]:
        """Find the ingredient list.

        Tries microdata items, then lists inside ingredient-area containers
        with more than three items, then any list where at least half of the
        items look like ingredients.
        """
        items = document.select(INGREDIENT_ITEM_SELECTOR)
        if items:
            _LOGGER.debug("Using %d microdata ingredient items", len(items))
            return self._lines(items)

        for selector in INGREDIENT_CONTAINER_SELECTORS:
            for container in document.select(selector):
                lists = [container] if container.name in ("ul", "ol") else container.select("ul, ol")
                for candidate in lists:
                    items = _list_items(candidate)
                    if len(items) >= MIN_CONTAINER_ITEMS:
                        _LOGGER.debug("Using ingredient container list (%s)", selector)
                        return self._lines(items)

        for candidate in document.select("ul") + document.select("ol"):
            if _is_boilerplate(candidate):
                continue
            items = _list_items(candidate)
            if len(items) < 2:
                continue
            matches = sum(1 for item in items if looks_like_ingredient(item.text))
            if matches * 2 >= len(items):
                _LOGGER.debug("Using list with %d/%d ingredient-like items", matches, len(items))
                return self._lines(items)
        return []

    def find_instructions(self, document: Document) -> list[str]:
        """Find instruction steps from an ordered list or an instructions section."""
        for candidate in document.select("ol"):
            if _is_boilerplate(candidate):
                continue
            items = _list_items(candidate)
            if len(items) >= MIN_INSTRUCTION_STEPS:
                return [text for text in (item.text for item in items) if text]

        for section in document.select("div, section"):
            heading = section.select_one("h2, h3, h4")
            if heading and _INSTRUCTION_HEADING.search(heading.text):
                steps = [text for text in (p.text for p in section.select("p")) if text]
                if steps:
                    return steps
        return []

    def find_time(self, document: Document) -> int | None:
        """Find the cooking time, preferring a "total" figure over prep or cook."""
        matches = list(_TIME.finditer(document.body.text))
        if not matches:
            return None
        match = next((m for m in matches if m.group(1).lower() == "total"), matches[0])
        return parse_duration(match.group(2))

    def find_servings(self, document: Document) -> int | None:
        match = _SERVINGS.search(document.body.text)
        return int(match.group(1)) if match else None

    def find_description(self, document: Document) -> str | None:
        return document.meta_content("description", "og:description")

    def fill(self, document: Document, url: str, recipe: PartialRecipe) -> list[str]:
        """Fill the empty fields of a partial recipe in place.

        Returns:
            The names of the fields that were filled
        """
        filled = []
        for field in recipe.missing_fields():
            finder = self._finders.get(field)
            if finder is None:
                continue
            try:
                value = finder(document, url)
            except Exception as e:  # a broken heuristic only means "not found"
                _LOGGER.debug("Heuristic for %s failed: %s", field, e, exc_info=True)
                continue
            if value is None or value == "" or value == []:
                continue
            setattr(recipe, field, value)
            filled.append(field)

        if filled:
            _LOGGER.info("Heuristics filled %s for %s", ", ".join(filled), url)
        return filled

    def parse_recipe(self, document: Document, url: str) -> PartialRecipe:
        """Parse every field heuristically.

        Args:
            document: The parsed page
            url: The URL the page was fetched from

        Returns:
            PartialRecipe with the fields the heuristics found
        """
        recipe = PartialRecipe()
        self.fill(document, url, recipe)
        return recipe
