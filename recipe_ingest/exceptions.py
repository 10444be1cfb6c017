"""Errors raised by the recipe ingestion pipeline."""
from __future__ import annotations

from .const import USER_FACING_ERROR


class RecipeIngestError(Exception):
    """Base class for terminal extraction errors."""

    user_message = USER_FACING_ERROR


class FetchError(RecipeIngestError):
    """The page could not be retrieved (network, timeout or non-success status)."""

    def __init__(self, message: str, url: str | None = None, status: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status = status


class ParseError(RecipeIngestError):
    """The page body is not parseable as markup at all."""


class AIParseError(RecipeIngestError):
    """The AI-assisted fallback produced nothing usable."""
