"""Extractors package."""
from .recipe_extractor import RecipeExtractor, extract_recipe
from .scraper import CloudscraperFetcher, FetchResponse, with_retry

__all__ = ["RecipeExtractor", "extract_recipe", "CloudscraperFetcher", "FetchResponse", "with_retry"]
