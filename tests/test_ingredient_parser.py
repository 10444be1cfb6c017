"""Tests for ingredient line normalization."""

import pytest

from recipe_ingest.parsers.ingredient_parser import (
    clean_ingredient,
    extract_marked_preparation,
    ingredient_line_from_markup,
    normalize_ingredient,
    normalize_ingredients,
    parse_preparation,
    split_amount,
)


class TestNormalizeIngredient:
    """Tests for the full name/amount/preparation split."""

    def test_dual_units_with_nested_preparation(self):
        result = normalize_ingredient("300g / 10oz green beans ((trimmed))")
        assert result.name == "green beans"
        assert result.amount == "300g/10oz"
        assert result.preparation == "trimmed"

    def test_italic_preparation(self):
        result = normalize_ingredient("1 onion, <em>diced</em>")
        assert result.preparation == "diced"
        assert "diced" not in result.name
        assert result.amount == "1"
        assert result.name == "onion"

    def test_italic_span_preparation(self):
        result = normalize_ingredient('2 carrots <span style="font-style: italic">diced</span>')
        assert result.preparation == "diced"
        assert result.name == "carrots"

    def test_no_amount(self):
        result = normalize_ingredient("Salt (to taste)")
        assert result.name == "Salt"
        assert result.amount is None
        assert result.preparation == "to taste"

    def test_unit_amount(self):
        result = normalize_ingredient("2 cups flour")
        assert result.amount == "2 cups"
        assert result.name == "flour"
        assert result.preparation is None

    def test_name_never_empty_for_non_blank_input(self):
        assert normalize_ingredient("(finely chopped)").name == "finely chopped"
        assert normalize_ingredient("(optional)").name

    def test_blank_input(self):
        assert normalize_ingredient("").name == ""


class TestParsePreparation:
    """Tests for preparation clause extraction."""

    def test_parenthetical_preparation(self):
        result = parse_preparation("1 onion (finely chopped)")
        assert result.preparation == "finely chopped"
        assert "chopped" not in result.main_text

    def test_note_is_discarded_not_kept(self):
        result = parse_preparation("2 eggs (see note, beaten)")
        assert result.preparation is None
        assert "note" not in result.main_text

    def test_quantity_is_discarded_not_kept(self):
        result = parse_preparation("1 bunch parsley (about 30g, chopped)")
        assert result.preparation is None
        assert "30g" not in result.main_text

    def test_abbreviations_are_not_units(self):
        result = parse_preparation("2 potatoes (peeled, e.g. russet)")
        assert "peeled" in result.preparation
        assert "peeled" not in result.main_text

    def test_other_parentheticals_stay_in_main_text(self):
        result = parse_preparation("1 tin tomatoes (400g)")
        assert result.preparation is None
        assert "(400g)" in result.main_text

    def test_marked_and_parenthetical_are_joined(self):
        result = parse_preparation("1 <i>peeled</i> potato (cubed)")
        assert result.preparation == "peeled, cubed"

    def test_custom_vocabulary(self):
        result = parse_preparation("1 lemon (spiralized)", vocabulary=["spiralized"])
        assert result.preparation == "spiralized"
        assert parse_preparation("1 lemon (spiralized)").preparation is None


class TestExtractMarkedPreparation:
    """Tests for italic-marked clauses."""

    def test_em(self):
        text, preparation = extract_marked_preparation("1 onion <em>diced</em>")
        assert preparation == "diced"
        assert "diced" not in text
        assert "<" not in text

    def test_other_tags_are_stripped(self):
        text, preparation = extract_marked_preparation('<a href="/beans">green beans</a>')
        assert preparation is None
        assert text.strip() == "green beans"

    def test_plain_text(self):
        assert extract_marked_preparation("2 eggs") == ("2 eggs", None)


class TestCleanIngredient:
    """Tests for the cleaning step alone."""

    def test_green_beans(self):
        assert clean_ingredient("300g / 10oz green beans ((trimmed))") == "300g/10oz green beans, trimmed"

    def test_duplicate_commas_and_whitespace(self):
        assert clean_ingredient("2  eggs,, ,  beaten,") == "2 eggs, beaten"

    def test_strips_notes(self):
        assert clean_ingredient("1 tin tomatoes (400g) (see note 2)") == "1 tin tomatoes"

    def test_trailing_unmatched_bracket(self):
        assert clean_ingredient("1 cup rice)") == "1 cup rice"

    def test_empty(self):
        assert clean_ingredient("") == ""

    @pytest.mark.parametrize("line", [
        "300g / 10oz green beans ((trimmed))",
        "1 onion, <em>diced</em>",
        "Salt (to taste) (see note)",
        "2  eggs,, ,  beaten,",
        "((a) b (c (d)))",
        "1 cup rice)",
        ",, (finely chopped) ,",
        "500 g / 1 lb / 2 cups stuff",
        "a < b > c",
        "&amp; (diced) <i>sliced</i>",
        "1kg/2lb beef (cubed",
        ")( chopped",
    ])
    def test_idempotent(self, line):
        once = clean_ingredient(line)
        assert clean_ingredient(once) == once


class TestSplitAmount:
    """Tests for quantity/name separation."""

    def test_units(self):
        assert split_amount("2 cups flour") == ("2 cups", "flour")
        assert split_amount("500g chicken breast") == ("500g", "chicken breast")

    def test_dual_units(self):
        assert split_amount("300g/10oz green beans") == ("300g/10oz", "green beans")

    def test_bare_number(self):
        assert split_amount("2 eggs") == ("2", "eggs")

    def test_reverse(self):
        assert split_amount("chicken breast 500g") == ("500g", "chicken breast")

    def test_no_amount(self):
        assert split_amount("salt") == (None, "salt")


class TestMarkupLines:
    """Tests for building lines from element markup."""

    def test_italic_clause_becomes_trailing_clause(self):
        assert ingredient_line_from_markup("1 onion <em>finely diced</em>") == "1 onion, finely diced"

    def test_entities_are_decoded(self):
        assert ingredient_line_from_markup("salt &amp; pepper") == "salt & pepper"

    def test_normalize_ingredients_drops_empty_and_non_strings(self):
        assert normalize_ingredients(["2 eggs", "", "()", None, 3]) == ["2 eggs"]
