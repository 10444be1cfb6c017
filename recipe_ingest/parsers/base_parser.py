"""
Base Recipe Parser.

This module defines the interface shared by the deterministic parsers.
"""
from __future__ import annotations

from abc import ABC, abstractmethod

from ..markup import Document
from ..models.recipe import PartialRecipe


class BaseRecipeParser(ABC):
    """Abstract base class for deterministic recipe parsers.

    Parsers read a parsed page and return whatever recipe fields they can
    find. They never raise for missing or malformed content; a field they
    cannot find is simply left empty.
    """

    @abstractmethod
    def parse_recipe(self, document: Document, url: str) -> PartialRecipe:
        """Parse recipe fields from a page.

        Args:
            document: The parsed page
            url: The URL the page was fetched from

        Returns:
            A PartialRecipe with the fields this parser found
        """
        pass
