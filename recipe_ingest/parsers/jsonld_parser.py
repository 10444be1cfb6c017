"""
JSON-LD Recipe Parser.

This module reads Schema.org Recipe metadata embedded in a page as
``application/ld+json`` blocks, requiring no AI inference.
"""
from __future__ import annotations

import json
import logging
import math
import re
from typing import Any, Iterable, Iterator

from ..markup import Document, fragment_text
from ..models.recipe import PartialRecipe
from .base_parser import BaseRecipeParser
from .duration import parse_duration
from .ingredient_parser import ingredient_line_from_markup, normalize_ingredients

_LOGGER = logging.getLogger(__name__)

_STEP_NUMBER = re.compile(r"^\s*(?:step\s*)?\d+\s*[.):]\s*", re.IGNORECASE)
_SERVINGS = re.compile(r"\d+")


def is_recipe(item: Any) -> bool:
    """Check if a JSON-LD item represents a Recipe."""
    if not isinstance(item, dict):
        return False
    item_type = item.get("@type")
    types = item_type if isinstance(item_type, list) else [item_type]
    return any(
        isinstance(value, str) and re.split(r"[/:#]", value)[-1] == "Recipe"
        for value in types
    )


def _walk_nodes(value: Any) -> Iterator[dict]:
    """Yield every JSON-LD object in document order, descending into graphs."""
    if isinstance(value, list):
        for item in value:
            yield from _walk_nodes(item)
    elif isinstance(value, dict):
        yield value
        graph = value.get("@graph")
        if graph is not None:
            yield from _walk_nodes(graph)
        main_entity = value.get("mainEntity")
        if isinstance(main_entity, (dict, list)):
            yield from _walk_nodes(main_entity)


def find_recipe_node(payload: Any) -> dict | None:
    """Return the first Recipe object in a parsed JSON-LD payload."""
    return next((node for node in _walk_nodes(payload) if is_recipe(node)), None)


def parse_servings(value: Any) -> int | None:
    """Extract a serving count from a recipeYield-like value.

    Examples:
        "4" -> 4, "Serves 8" -> 8, ["6", "6 servings"] -> 6, 4 -> 4
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, (int, float)):
        return int(value) if value >= 0 else None
    if isinstance(value, list):
        for item in value:
            servings = parse_servings(item)
            if servings is not None:
                return servings
        return None
    if not isinstance(value, str):
        return None
    match = _SERVINGS.search(value)
    return int(match.group()) if match else None


def dedupe_tags(tags: Iterable[Any]) -> list[str]:
    """Trim tags and drop empty and case-insensitive duplicates, keeping order."""
    seen = set()
    unique = []
    for tag in tags:
        if not isinstance(tag, str):
            continue
        tag = fragment_text(tag)
        key = tag.lower()
        if tag and key not in seen:
            seen.add(key)
            unique.append(tag)
    return unique


def extract_instructions(value: Any) -> list[str]:
    """Flatten recipeInstructions into a list of step texts.

    Handles plain strings, lists of strings, HowToStep objects with a text
    or description, and HowToSection objects grouping further steps.
    """
    if not value:
        return []
    if isinstance(value, str):
        lines = [fragment_text(line) for line in re.split(r"\n+|<br\s*/?>", value)]
        lines = [line for line in lines if line]
        if len(lines) > 1:
            lines = [_STEP_NUMBER.sub("", line) for line in lines]
        return [line for line in lines if line]
    if isinstance(value, list):
        steps = []
        for item in value:
            steps.extend(extract_instructions(item))
        return steps
    if isinstance(value, dict):
        if value.get("itemListElement"):
            return extract_instructions(value["itemListElement"])
        text = value.get("text") or value.get("description") or ""
        if isinstance(text, str):
            text = fragment_text(text)
            return [text] if text else []
    return []


def extract_image(value: Any) -> str | None:
    """Pick an image URL from a string, list, or ImageObject value."""
    if not value:
        return None
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, list):
        return extract_image(value[0])
    if isinstance(value, dict):
        return extract_image(value.get("url") or value.get("contentUrl"))
    return None


def _as_list(value: Any) -> list:
    if value is None:
        return []
    return value if isinstance(value, list) else [value]


def extract_tags(node: dict) -> list[str]:
    """Merge recipeCategory, recipeCuisine and keywords into unique tags."""
    tags: list[Any] = []
    tags.extend(_as_list(node.get("recipeCategory")))
    tags.extend(_as_list(node.get("recipeCuisine")))
    for keywords in _as_list(node.get("keywords")):
        if isinstance(keywords, str):
            tags.extend(keyword.strip() for keyword in keywords.split(","))
        else:
            tags.append(keywords)
    return dedupe_tags(tags)


def extract_time(node: dict) -> int | None:
    """Total time, or cook time plus prep time, in minutes."""
    total = parse_duration(node.get("totalTime"))
    cook = parse_duration(node.get("cookTime"))
    prep = parse_duration(node.get("prepTime"))
    parts = [part for part in (cook, prep) if part is not None]
    combined = sum(parts) if parts else None

    # Some sites publish PT0M as total alongside real cook and prep times
    if total is None or (total == 0 and combined):
        return combined
    return total


class JSONLDRecipeParser(BaseRecipeParser):
    """Parses recipe data from structured JSON-LD blocks.

    This parser handles pre-structured recipe data that follows the
    Schema.org Recipe format. Blocks that fail to parse are skipped.
    """

    def __init__(self, preparation_words: Iterable[str] | None = None) -> None:
        """Initialize the JSON-LD recipe parser.

        Args:
            preparation_words: Preparation vocabulary used when cleaning ingredients
        """
        self.preparation_words = tuple(preparation_words) if preparation_words else None
        _LOGGER.debug("Initialized JSONLDRecipeParser")

    def find_recipe(self, document: Document) -> dict | None:
        """Return the first Recipe object embedded in the page."""
        scripts = document.select('script[type="application/ld+json"]')
        _LOGGER.debug("Found %d JSON-LD scripts", len(scripts))

        for idx, script in enumerate(scripts):
            raw = script.raw_text.strip()
            if not raw:
                continue
            try:
                payload = json.loads(raw, strict=False)
                node = find_recipe_node(payload)
            except (json.JSONDecodeError, TypeError, ValueError, RecursionError) as e:
                _LOGGER.debug("Failed to parse JSON-LD script %d: %s", idx, e)
                continue

            if node is not None:
                _LOGGER.debug("Found recipe data in JSON-LD script %d", idx)
                return node
        return None

    def parse_recipe(self, document: Document, url: str) -> PartialRecipe:
        """Map the first JSON-LD Recipe on the page onto recipe fields.

        Args:
            document: The parsed page
            url: The URL the page was fetched from

        Returns:
            PartialRecipe, empty when the page carries no Recipe metadata
        """
        node = self.find_recipe(document)
        if node is None:
            return PartialRecipe()

        recipe = PartialRecipe()
        mappers = {
            "title": lambda: fragment_text(node.get("name")) or None,
            "ingredients": lambda: normalize_ingredients(
                [ingredient_line_from_markup(line)
                 for line in _as_list(node.get("recipeIngredient") or node.get("ingredients"))
                 if isinstance(line, str)],
                self.preparation_words,
            ),
            "instructions": lambda: extract_instructions(node.get("recipeInstructions")),
            "time": lambda: extract_time(node),
            "servings": lambda: parse_servings(node.get("recipeYield")),
            "description": lambda: fragment_text(node.get("description")) or None,
            "image": lambda: extract_image(node.get("image")),
            "tags": lambda: extract_tags(node),
        }
        for field, mapper in mappers.items():
            try:
                setattr(recipe, field, mapper())
            except (AttributeError, TypeError, ValueError, OverflowError, RecursionError) as e:
                _LOGGER.debug("Skipping malformed JSON-LD field %s: %s", field, e)

        _LOGGER.info(
            "JSON-LD recipe '%s' with %d ingredients and %d steps from %s",
            recipe.title, len(recipe.ingredients), len(recipe.instructions), url)
        return recipe
