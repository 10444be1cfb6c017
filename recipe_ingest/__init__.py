"""
Recipe ingestion pipeline.

Turns a recipe web page into a normalized recipe record using embedded
structured data, page heuristics and, when needed, a generative model.
"""
from __future__ import annotations

from .config import ExtractorConfig, load_config
from .exceptions import AIParseError, FetchError, ParseError, RecipeIngestError
from .extractors.recipe_extractor import RecipeExtractor, extract_recipe
from .models.recipe import ExtractedRecipe, ExtractionTier, NormalizedIngredient

__version__ = "0.1.0"

__all__ = [
    "AIParseError",
    "ExtractedRecipe",
    "ExtractionTier",
    "ExtractorConfig",
    "FetchError",
    "NormalizedIngredient",
    "ParseError",
    "RecipeExtractor",
    "RecipeIngestError",
    "extract_recipe",
    "load_config",
]
