"""
AI-based Recipe Parser.

This module handles AI-powered extraction of recipe data from the text of a
page, asking a generative model for the recipe fields as JSON and coercing
its answer into a PartialRecipe.
"""
from __future__ import annotations

import json
import logging
import math
import re
from typing import Any

from ..const import CONTENT_SELECTORS, DEFAULT_DIFFICULTY, DEFAULT_MAX_TEXT_LENGTH, DIFFICULTIES
from ..exceptions import AIParseError
from ..llm import CompletionClient, ModelSettings
from ..markup import Document
from ..models.recipe import PartialRecipe
from .ai_prompts import EXTRACTION_PROMPT, build_user_content
from .base_parser import BaseRecipeParser
from .duration import parse_duration
from .jsonld_parser import dedupe_tags

_LOGGER = logging.getLogger(__name__)

_FENCED_BLOCK = re.compile(r"```(?:json)?\s*\n?(.*?)\n?\s*```", re.DOTALL | re.IGNORECASE)
_LEADING_NUMBER = re.compile(r"^\s*(\d+(?:\.\d+)?)")

MIN_CONTENT_LENGTH = 200


def parse_answer(text: str) -> dict:
    """Parse the JSON object out of a model answer.

    A fenced code block is tried first, then the whole answer.

    Raises:
        AIParseError: If no JSON object can be parsed
    """
    if not text or not text.strip():
        raise AIParseError("Model returned an empty answer")

    match = _FENCED_BLOCK.search(text)
    raw = match.group(1) if match else text
    try:
        data = json.loads(raw.strip())
    except (json.JSONDecodeError, ValueError, RecursionError) as err:
        raise AIParseError(f"Model answer is not valid JSON: {err}") from err

    if not isinstance(data, dict):
        raise AIParseError(f"Model answer is a {type(data).__name__}, expected an object")
    return data


def _as_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        match = _LEADING_NUMBER.match(value)
        value = float(match.group(1)) if match else None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, (int, float)):
        return int(round(value)) if value >= 0 else None
    return None


def _as_time(value: Any) -> int | None:
    minutes = parse_duration(value)
    return minutes if minutes is not None else _as_int(value)


def _as_text(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    return value.strip() or None


def _as_strings(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


def coerce_difficulty(value: Any) -> str:
    """Map a difficulty answer onto Easy, Medium or Hard, defaulting to Medium."""
    if isinstance(value, str):
        for difficulty in DIFFICULTIES:
            if value.strip().lower() == difficulty.lower():
                return difficulty
    return DEFAULT_DIFFICULTY


def recipe_from_answer(data: dict) -> PartialRecipe:
    """Coerce a parsed model answer into recipe fields.

    Raises:
        AIParseError: If the answer contains no recipe content
    """
    recipe = PartialRecipe(
        title=_as_text(data.get("title")),
        ingredients=_as_strings(data.get("ingredients")),
        instructions=_as_strings(data.get("instructions")),
        time=_as_time(data.get("time")),
        servings=_as_int(data.get("servings")),
        difficulty=coerce_difficulty(data.get("difficulty")),
        description=_as_text(data.get("description")),
        tags=dedupe_tags(_as_strings(data.get("tags"))),
    )
    if not recipe.title and not recipe.ingredients and not recipe.instructions:
        raise AIParseError("Model answer contains no recipe content")
    return recipe


class AIRecipeParser(BaseRecipeParser):
    """Parses recipe data from page text using a generative model."""

    def __init__(
        self,
        client: CompletionClient,
        settings: ModelSettings | None = None,
        max_text_length: int = DEFAULT_MAX_TEXT_LENGTH,
    ) -> None:
        """Initialize the AI recipe parser.

        Args:
            client: Completion client used to query the model
            settings: Model, temperature, token and timeout settings
            max_text_length: Character budget for the page excerpt
        """
        self.client = client
        self.settings = settings or ModelSettings()
        self.max_text_length = max_text_length
        _LOGGER.debug("Initialized AIRecipeParser with model %s", self.settings.model)

    def build_excerpt(self, document: Document) -> str:
        """Build the bounded page excerpt sent to the model.

        Uses the first main-content container with enough text, falling back
        to the whole body, truncated to the character budget.
        """
        content = ""
        for selector in CONTENT_SELECTORS:
            element = document.select_one(selector)
            if element is not None:
                text = element.text
                if len(text) > MIN_CONTENT_LENGTH:
                    content = text
                    break
        if not content:
            content = document.body.text

        if len(content) > self.max_text_length:
            _LOGGER.debug("Truncating text from %d to %d characters",
                          len(content), self.max_text_length)
            content = content[:self.max_text_length]
        return build_user_content(document.title, content)

    def parse_recipe(self, document: Document, url: str) -> PartialRecipe:
        """Ask the model for the recipe on a page.

        Args:
            document: The parsed page
            url: The URL the page was fetched from

        Returns:
            PartialRecipe with the fields the model reported

        Raises:
            AIParseError: If the model fails or its answer is unusable
        """
        excerpt = self.build_excerpt(document)
        _LOGGER.info("Parsing recipe from %d characters of text using AI (%s)",
                     len(excerpt), url)

        try:
            answer = self.client.complete(EXTRACTION_PROMPT, excerpt, self.settings)
        except AIParseError:
            raise
        except Exception as err:
            raise AIParseError(f"Model call failed: {err}") from err

        try:
            recipe = recipe_from_answer(parse_answer(answer))
        except AIParseError:
            _LOGGER.debug("Unusable model answer: %.500s", answer)
            raise
        except (OverflowError, ValueError) as err:
            _LOGGER.debug("Unusable model answer: %.500s", answer)
            raise AIParseError(f"Model answer has unusable values: {err}") from err

        _LOGGER.info("AI parsed recipe '%s' with %d ingredients and %d steps",
                     recipe.title, len(recipe.ingredients), len(recipe.instructions))
        return recipe
