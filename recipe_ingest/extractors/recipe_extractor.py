"""
Recipe extraction engine.

Sequences the extraction tiers for one page: structured metadata first,
heuristics for whatever is still missing, and a generative model when the
deterministic result is too weak or the caller asks for it.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping
from urllib.parse import urljoin

import voluptuous as vol

from ..config import EXTRACT_OPTIONS_SCHEMA, ExtractorConfig, load_config
from ..const import DEFAULT_HEADERS, DIFFICULTIES, OPT_FORCE_AI
from ..exceptions import AIParseError, FetchError
from ..llm import CompletionClient, GeminiCompletionClient
from ..markup import Document
from ..models.recipe import (
    ExtractedRecipe,
    ExtractionOutcome,
    ExtractionTier,
    PartialRecipe,
)
from ..parsers.ai_parser import AIRecipeParser
from ..parsers.heuristic_parser import HeuristicRecipeParser
from ..parsers.ingredient_parser import clean_ingredient
from ..parsers.jsonld_parser import JSONLDRecipeParser, dedupe_tags
from .scraper import CloudscraperFetcher, Fetcher, validate_url

_LOGGER = logging.getLogger(__name__)


class RecipeExtractor:
    """Extracts normalized recipes from recipe web pages.

    An extractor holds no per-request state and can serve parallel calls.
    """

    def __init__(
        self,
        config: ExtractorConfig | None = None,
        fetcher: Fetcher | None = None,
        completion_client: CompletionClient | None = None,
    ) -> None:
        """Initialize the recipe extractor.

        Args:
            config: Pipeline settings; read from the environment if omitted
            fetcher: Page fetcher; a cloudscraper fetcher if omitted
            completion_client: Model backend; a Gemini client if omitted and
                an API key is configured
        """
        self.config = config or load_config()
        self.fetcher = fetcher or CloudscraperFetcher()
        if completion_client is None and self.config.api_key:
            completion_client = GeminiCompletionClient(self.config.api_key)

        words = self.config.preparation_words
        self.jsonld_parser = JSONLDRecipeParser(words)
        self.heuristic_parser = HeuristicRecipeParser(words)
        self.ai_parser = None
        if completion_client is not None:
            self.ai_parser = AIRecipeParser(
                completion_client,
                self.config.model_settings(),
                self.config.max_text_length,
            )
        _LOGGER.debug("Initialized RecipeExtractor (AI %s)",
                      "available" if self.ai_parser else "unavailable")

    def fetch(self, url: str) -> tuple[str, str]:
        """Fetch a page.

        Returns:
            The page body and the final URL after redirects

        Raises:
            FetchError: On an invalid URL, transport failure or non-success status
        """
        validate_url(url)
        _LOGGER.info("Fetching recipe from %s", url)
        response = self.fetcher(url, DEFAULT_HEADERS, self.config.fetch_timeout)
        if not 200 <= response.status < 300:
            _LOGGER.error("Failed to fetch %s: HTTP %d", url, response.status)
            raise FetchError(f"HTTP {response.status} fetching {url}", url=url, status=response.status)
        return response.body, response.url or url

    def _parse_ai(self, document: Document, url: str) -> PartialRecipe:
        if self.ai_parser is None:
            raise AIParseError("AI-assisted extraction is not configured")
        return self.ai_parser.parse_recipe(document, url)

    def extract_from_document(self, document: Document, url: str,
                              force_ai: bool = False) -> ExtractionOutcome:
        """Run the extraction tiers over an already parsed page.

        Args:
            document: The parsed page
            url: URL of the page, used to resolve relative links
            force_ai: Skip the deterministic tiers and ask the model directly

        Returns:
            The tagged outcome, before normalization

        Raises:
            AIParseError: If AI extraction is needed and fails
        """
        if force_ai:
            _LOGGER.info("AI extraction requested for %s", url)
            return ExtractionOutcome(tier=ExtractionTier.AI_ASSISTED,
                                     recipe=self._parse_ai(document, url))

        try:
            recipe = self.jsonld_parser.parse_recipe(document, url)
        except Exception as e:  # unusable metadata only means "no structured data"
            _LOGGER.warning("Ignoring structured data on %s: %s", url, e)
            recipe = PartialRecipe()
        tier = ExtractionTier.STRUCTURED
        if recipe.title is None and not recipe.ingredients and not recipe.instructions:
            tier = ExtractionTier.HEURISTIC

        filled = self.heuristic_parser.fill(document, url, recipe)
        if filled and tier is ExtractionTier.STRUCTURED:
            _LOGGER.debug("Structured data for %s completed heuristically: %s", url, filled)
        outcome = ExtractionOutcome(tier=tier, recipe=recipe)

        if not outcome.is_weak:
            return outcome

        if not self.config.ai_fallback:
            _LOGGER.warning("Weak extraction for %s and AI fallback is disabled", url)
            return outcome

        _LOGGER.warning("Deterministic extraction found no recipe on %s, falling back to AI", url)
        ai_recipe = self._parse_ai(document, url)
        ai_recipe.fill_from(recipe)
        return ExtractionOutcome(tier=ExtractionTier.AI_ASSISTED, recipe=ai_recipe)

    def normalize(self, recipe: PartialRecipe, url: str) -> ExtractedRecipe:
        """Build the final immutable record from a partial recipe."""
        words = self.config.preparation_words
        ingredients = [clean_ingredient(line, words) for line in recipe.ingredients]
        instructions = [step.strip() for step in recipe.instructions]

        difficulty = recipe.difficulty if recipe.difficulty in DIFFICULTIES else None
        image = urljoin(url, recipe.image) if recipe.image else None

        return ExtractedRecipe(
            title=(recipe.title or "").strip(),
            ingredients=[line for line in ingredients if line],
            instructions=[step for step in instructions if step],
            time=recipe.time if recipe.time is None or recipe.time >= 0 else None,
            servings=recipe.servings if recipe.servings is None or recipe.servings >= 0 else None,
            difficulty=difficulty,
            description=(recipe.description or "").strip() or None,
            image=image,
            tags=dedupe_tags(recipe.tags),
        )

    def extract_with_outcome(self, url: str, force_ai: bool = False) -> tuple[ExtractedRecipe, ExtractionTier]:
        """Extract a recipe and report which tier produced it.

        Raises:
            FetchError: If the page cannot be retrieved
            ParseError: If the page is not markup at all
            AIParseError: If AI extraction is needed and fails
        """
        body, final_url = self.fetch(url)
        document = Document.parse(body)
        outcome = self.extract_from_document(document, final_url, force_ai=force_ai)
        recipe = self.normalize(outcome.recipe, final_url)
        _LOGGER.info("Extracted recipe '%s' from %s via %s tier (%d ingredients, %d steps)",
                     recipe.title, url, outcome.tier.value,
                     len(recipe.ingredients), len(recipe.instructions))
        return recipe, outcome.tier

    def extract(self, url: str, force_ai: bool = False) -> ExtractedRecipe:
        """Extract a normalized recipe from a URL.

        Args:
            url: The recipe page URL
            force_ai: Ask the model directly instead of the deterministic tiers

        Returns:
            The normalized recipe

        Raises:
            FetchError: If the page cannot be retrieved
            ParseError: If the page is not markup at all
            AIParseError: If AI extraction is needed and fails
        """
        recipe, _tier = self.extract_with_outcome(url, force_ai=force_ai)
        return recipe


def extract_recipe(url: str, options: Mapping[str, Any] | None = None,
                   extractor: RecipeExtractor | None = None) -> ExtractedRecipe:
    """Extract a recipe from a URL in one call.

    Args:
        url: The recipe page URL
        options: Call options, currently only {"force_ai": bool}
        extractor: Extractor to use; one configured from the environment if omitted

    Raises:
        ValueError: If the options are invalid
        FetchError, ParseError, AIParseError: If extraction fails
    """
    try:
        options = EXTRACT_OPTIONS_SCHEMA(dict(options or {}))
    except vol.Invalid as err:
        raise ValueError(f"Invalid extraction options: {err}") from err

    extractor = extractor or RecipeExtractor()
    return extractor.extract(url, force_ai=options[OPT_FORCE_AI])
