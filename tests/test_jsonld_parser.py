"""Tests for JSON-LD recipe parsing."""

import pytest
from conftest import PAGE_URL, jsonld_page

from recipe_ingest.markup import Document
from recipe_ingest.parsers.jsonld_parser import (
    JSONLDRecipeParser,
    dedupe_tags,
    extract_image,
    extract_instructions,
    extract_time,
    find_recipe_node,
    is_recipe,
    parse_servings,
)


class TestFindRecipe:
    """Tests for locating the Recipe object."""

    def test_is_recipe(self):
        assert is_recipe({"@type": "Recipe"})
        assert is_recipe({"@type": ["Recipe", "NewsArticle"]})
        assert is_recipe({"@type": "http://schema.org/Recipe"})
        assert not is_recipe({"@type": "WebPage"})
        assert not is_recipe(["Recipe"])

    def test_top_level_list(self):
        node = find_recipe_node([{"@type": "WebPage"}, {"@type": "Recipe", "name": "Soup"}])
        assert node["name"] == "Soup"

    def test_graph(self, jsonld_recipe):
        assert find_recipe_node(jsonld_recipe)["name"] == "Grandma's Tomato Soup"

    def test_no_recipe(self):
        assert find_recipe_node({"@type": "WebPage"}) is None

    def test_skips_broken_blocks(self):
        page = (
            '<html><head><script type="application/ld+json">{ not json</script>'
            '<script type="application/ld+json">{"@type": "Recipe", "name": "Bread"}</script>'
            "</head><body></body></html>"
        )
        node = JSONLDRecipeParser().find_recipe(Document.parse(page))
        assert node["name"] == "Bread"

    def test_skips_deeply_nested_blocks(self):
        nested = "[" * 100000 + "]" * 100000
        page = (
            f'<html><head><script type="application/ld+json">{nested}</script>'
            '<script type="application/ld+json">{"@type": "Recipe", "name": "Bread"}</script>'
            "</head><body></body></html>"
        )
        node = JSONLDRecipeParser().find_recipe(Document.parse(page))
        assert node["name"] == "Bread"


class TestFieldMappers:
    """Tests for individual field conversions."""

    def test_servings(self):
        assert parse_servings("4") == 4
        assert parse_servings("Serves 8") == 8
        assert parse_servings(["6", "6 servings"]) == 6
        assert parse_servings(4) == 4
        assert parse_servings(None) is None
        assert parse_servings("a few") is None

    def test_servings_non_finite_numbers(self):
        assert parse_servings(float("inf")) is None
        assert parse_servings(float("nan")) is None
        assert parse_servings([float("inf"), "4"]) == 4

    def test_instructions_from_strings(self):
        assert extract_instructions("1. Mix.\n2. Bake.") == ["Mix.", "Bake."]
        assert extract_instructions("Mix and bake.") == ["Mix and bake."]

    def test_instructions_from_steps_and_sections(self, jsonld_recipe):
        node = find_recipe_node(jsonld_recipe)
        assert extract_instructions(node["recipeInstructions"]) == [
            "Soften the onion.",
            "Add tomatoes and stock.",
            "Simmer and blend.",
        ]

    def test_instructions_description_fallback(self):
        assert extract_instructions([{"@type": "HowToStep", "description": "Stir."}]) == ["Stir."]

    def test_image_variants(self):
        assert extract_image("https://example.com/a.jpg") == "https://example.com/a.jpg"
        assert extract_image(["https://example.com/a.jpg", "https://example.com/b.jpg"]) == "https://example.com/a.jpg"
        assert extract_image({"@type": "ImageObject", "url": "https://example.com/c.jpg"}) == "https://example.com/c.jpg"
        assert extract_image(None) is None

    def test_time_prefers_total(self):
        assert extract_time({"totalTime": "PT45M", "cookTime": "PT30M", "prepTime": "PT10M"}) == 45

    def test_time_falls_back_to_cook_and_prep(self):
        assert extract_time({"cookTime": "PT30M", "prepTime": "PT10M"}) == 40
        assert extract_time({"totalTime": "PT0M", "cookTime": "PT30M"}) == 30
        assert extract_time({}) is None

    def test_dedupe_tags(self):
        assert dedupe_tags(["Soup", " soup ", "Italian", "", None]) == ["Soup", "Italian"]


class TestJSONLDRecipeParser:
    """Tests for the full parser."""

    def test_parse_recipe(self, jsonld_recipe):
        recipe = JSONLDRecipeParser().parse_recipe(Document.parse(jsonld_page(jsonld_recipe)), PAGE_URL)
        assert recipe.title == "Grandma's Tomato Soup"
        assert recipe.ingredients == [
            "1kg tomatoes, roughly chopped",
            "1 onion, diced",
            "500ml vegetable stock",
            "Salt, to taste",
        ]
        assert len(recipe.instructions) == 3
        assert recipe.time == 40
        assert recipe.servings == 4
        assert recipe.description == "A simple, warming soup."
        assert recipe.image == "https://cdn.example.com/soup-large.jpg"
        assert recipe.tags == ["Soup", "Italian", "tomato"]

    def test_page_without_metadata(self):
        recipe = JSONLDRecipeParser().parse_recipe(Document.parse("<p>Hello</p>"), PAGE_URL)
        assert recipe.missing_fields() == [
            "title", "ingredients", "instructions", "time", "servings",
            "difficulty", "description", "image", "tags",
        ]

    def test_malformed_fields_are_skipped(self):
        payload = {"@type": "Recipe", "name": "Toast", "recipeIngredient": "1 slice bread",
                   "recipeYield": {"value": 2}, "recipeInstructions": 42}
        recipe = JSONLDRecipeParser().parse_recipe(Document.parse(jsonld_page(payload)), PAGE_URL)
        assert recipe.title == "Toast"
        assert recipe.ingredients == ["1 slice bread"]
        assert recipe.instructions == []
        assert recipe.servings is None

    @pytest.mark.parametrize("raw", [
        '{"@type": "Recipe", "name": "Soup", "totalTime": 1e999, "recipeYield": 1e999}',
        '{"@type": "Recipe", "name": "Soup", "totalTime": Infinity, "recipeYield": -Infinity}',
        '{"@type": "Recipe", "name": "Soup", "totalTime": NaN, "recipeYield": NaN}',
    ])
    def test_non_finite_numbers_are_skipped(self, raw):
        page = f'<html><head><script type="application/ld+json">{raw}</script></head><body></body></html>'
        recipe = JSONLDRecipeParser().parse_recipe(Document.parse(page), PAGE_URL)
        assert recipe.title == "Soup"
        assert recipe.time is None
        assert recipe.servings is None
