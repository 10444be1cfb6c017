"""
Ingredient line normalization.

Cleans raw ingredient lines as they appear in recipe markup: decorative
parenthetical notes, italic preparation clauses, duplicated punctuation and
dual unit notation ("300g / 10oz"). Also splits a cleaned line into amount,
name and preparation.
"""
from __future__ import annotations

import logging
import re
from typing import Iterable

from ..const import DUAL_UNITS, NOTE_WORDS, PREPARATION_WORDS, UNIT_WORDS
from ..markup import fragment_text, strip_tags
from ..models.recipe import NormalizedIngredient, PreparationSplit

_LOGGER = logging.getLogger(__name__)

_ITALIC_ELEMENT = re.compile(
    r"<(em|i)\b[^<>]*>(.*?)</\1\s*>", re.IGNORECASE | re.DOTALL)
_ITALIC_SPAN = re.compile(
    r"<span\b[^<>]*style\s*=\s*[\"'][^\"']*font-style\s*:\s*italic[^\"']*[\"'][^<>]*>(.*?)</span\s*>",
    re.IGNORECASE | re.DOTALL,
)
_INNERMOST_GROUP = re.compile(r"\(([^()]*)\)")
_PLACEHOLDER = re.compile(r"\x00(\d+)\x00")
_COMMA_RUN = re.compile(r"\s*,(?:\s*,)*")
_LEADING_JUNK = re.compile(r"^[\s,]+")
_TRAILING_JUNK = re.compile(r"[\s,)]+$")
_WHITESPACE = re.compile(r"\s+")

_DUAL_UNIT = "|".join(DUAL_UNITS)
_DUAL_QUANTITY = rf"\d+(?:[.,]\d+)?\s*(?:{_DUAL_UNIT})"
_DUAL_SLASH = re.compile(
    rf"({_DUAL_QUANTITY})\s*/\s*(?={_DUAL_QUANTITY}(?![a-z]))", re.IGNORECASE)

_UNITS = "|".join(UNIT_WORDS)
_NUMBER = r"[\d½⅓⅔¼¾⅛⅜⅝⅞][\d½⅓⅔¼¾⅛⅜⅝⅞/.,\-\s]*"
_AMOUNT_PATTERNS = (
    # "300g/10oz green beans"
    re.compile(
        rf"^({_NUMBER}\s*(?:{_DUAL_UNIT})/{_NUMBER}\s*(?:{_DUAL_UNIT}))\s+(.+)$",
        re.IGNORECASE),
    # "2 cups flour", "500g chicken breast"
    re.compile(rf"^({_NUMBER}\s*(?:{_UNITS})\.?)\s+(.+)$", re.IGNORECASE),
)
# "chicken breast 500g"
_REVERSE_AMOUNT = re.compile(
    rf"^(.+?)\s+({_NUMBER}\s*(?:{_DUAL_UNIT}))$", re.IGNORECASE)
# "2 eggs"
_BARE_AMOUNT = re.compile(rf"^({_NUMBER})\s+(.+)$")


def _collapse(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def _strip_clause(text: str) -> str:
    """Trim whitespace and stray commas around a preparation clause."""
    return _collapse(text).strip(" ,;")


def _join_preparation(*parts: str | None) -> str | None:
    clauses = [part for part in parts if part]
    return ", ".join(clauses) if clauses else None


def _vocabulary_pattern(words: Iterable[str]) -> re.Pattern[str]:
    alternatives = sorted({word.strip().lower() for word in words if word.strip()},
                          key=len, reverse=True)
    return re.compile(
        r"\b(?:" + "|".join(re.escape(word) for word in alternatives) + r")\b",
        re.IGNORECASE)


_DEFAULT_PREPARATION = _vocabulary_pattern(PREPARATION_WORDS)
# Single-letter units ("g", "l") only count after a number ("e.g." is not grams)
_QUANTITY_WORDS = re.compile(
    r"\b(?:" + "|".join(re.escape(word) for word in (*NOTE_WORDS, *UNIT_WORDS) if len(word) > 1) + r")\b"
    r"|\d+\s*(?:" + _DUAL_UNIT + r")\b",
    re.IGNORECASE,
)


def extract_marked_preparation(text: str) -> tuple[str, str | None]:
    """Pull italic-marked preparation clauses out of a line.

    Italic clauses are ``<em>``/``<i>`` elements or spans with an inline
    ``font-style: italic`` declaration. Remaining tags and stray angle
    brackets are removed. Entities are left as they are, so the result can
    be fed back in without change.

    Args:
        text: A raw ingredient line that may contain inline markup

    Returns:
        Tuple of (text without markup, preparation text or None)
    """
    if not text:
        return "", None

    clauses: list[str] = []

    def take(match: re.Match[str]) -> str:
        clause = _strip_clause(strip_tags(match.group(match.lastindex)))
        if clause:
            clauses.append(clause)
        return " "

    remaining = text
    if "<" in remaining:
        previous = None
        while previous != remaining:
            previous = remaining
            remaining = _ITALIC_ELEMENT.sub(take, remaining)
            remaining = _ITALIC_SPAN.sub(take, remaining)
        remaining = strip_tags(remaining)

    remaining = remaining.replace("<", " ").replace(">", " ")
    clauses = [clause.replace("<", "").replace(">", "") for clause in clauses]
    return remaining, _join_preparation(*clauses)


def parse_preparation(
    text: str,
    vocabulary: Iterable[str] | None = None,
) -> PreparationSplit:
    """Separate the preparation clause from the rest of an ingredient line.

    Covers italic-marked clauses and parenthetical clauses built from the
    preparation vocabulary. Parentheticals mentioning notes or quantities
    are discarded. No punctuation cleanup is done on the main text.

    Args:
        text: A raw ingredient line
        vocabulary: Preparation words to accept; defaults to PREPARATION_WORDS

    Returns:
        PreparationSplit with the remaining text and the preparation, if any
    """
    pattern = _vocabulary_pattern(vocabulary) if vocabulary else _DEFAULT_PREPARATION
    main_text, marked = extract_marked_preparation((text or "").replace("\x00", ""))

    accepted: list[str] = []
    # Groups that are neither kept nor dropped are parked behind placeholders
    # so their enclosing groups can still be examined.
    parked: list[str] = []

    def restore(content: str) -> str:
        return _PLACEHOLDER.sub(lambda m: parked[int(m.group(1))], content)

    def examine(match: re.Match[str]) -> str:
        content = match.group(1)
        plain = restore(content)
        if pattern.search(plain):
            # Only the group's own words decide; nested groups are judged separately
            if _QUANTITY_WORDS.search(_PLACEHOLDER.sub(" ", content)):
                _LOGGER.debug("Discarding parenthetical note: %r", plain)
                return " "
            clause = _strip_clause(plain)
            if clause:
                accepted.append(clause)
            return " "
        parked.append(f"({plain})")
        return f"\x00{len(parked) - 1}\x00"

    previous = None
    while previous != main_text:
        previous = main_text
        main_text = _INNERMOST_GROUP.sub(examine, main_text)

    main_text = restore(main_text)

    return PreparationSplit(
        main_text=main_text,
        preparation=_join_preparation(marked, *accepted),
    )


def _tidy(text: str) -> str:
    """Strip parentheticals, collapse punctuation and normalize dual units."""
    previous = None
    while previous != text:
        previous = text
        text = _INNERMOST_GROUP.sub(" ", text)

    text = _COMMA_RUN.sub(",", text)
    text = _LEADING_JUNK.sub("", text)
    text = _collapse(text)
    text = _DUAL_SLASH.sub(r"\1/", text)
    return _TRAILING_JUNK.sub("", text)


def clean_ingredient(text: str, vocabulary: Iterable[str] | None = None) -> str:
    """Clean an ingredient line into a tidy label.

    Example: "300g / 10oz green beans ((trimmed))" -> "300g/10oz green beans, trimmed"

    Cleaning is idempotent: cleaning an already cleaned line returns it
    unchanged.

    Args:
        text: Raw ingredient line
        vocabulary: Preparation words to accept; defaults to PREPARATION_WORDS

    Returns:
        The cleaned line (empty string for empty input)
    """
    if not text:
        return ""
    split = parse_preparation(text, vocabulary)
    main_text = _tidy(split.main_text)
    preparation = _tidy(split.preparation) if split.preparation else None
    return _tidy(", ".join(part for part in (main_text, preparation) if part))


def split_amount(text: str) -> tuple[str | None, str]:
    """Split a leading quantity/unit token from the ingredient name.

    Examples:
        "2 cups flour" -> ("2 cups", "flour")
        "300g/10oz green beans" -> ("300g/10oz", "green beans")
        "salt" -> (None, "salt")

    Returns:
        Tuple of (amount or None, name)
    """
    text = _collapse(text)
    for pattern in _AMOUNT_PATTERNS:
        match = pattern.match(text)
        if match:
            return match.group(1).strip(), match.group(2).strip()

    match = _REVERSE_AMOUNT.match(text)
    if match:
        return match.group(2).strip(), match.group(1).strip()

    match = _BARE_AMOUNT.match(text)
    if match:
        return match.group(1).strip(), match.group(2).strip()

    return None, text


def normalize_ingredient(
    text: str,
    vocabulary: Iterable[str] | None = None,
) -> NormalizedIngredient:
    """Turn one raw ingredient line into name, amount and preparation.

    Args:
        text: Raw ingredient line, possibly containing inline markup
        vocabulary: Preparation words to accept; defaults to PREPARATION_WORDS

    Returns:
        NormalizedIngredient; its name is non-empty whenever the input is not blank
    """
    split = parse_preparation(text or "", vocabulary)
    main_text = _tidy(split.main_text)
    preparation = _tidy(split.preparation) if split.preparation else None

    amount, name = split_amount(main_text) if main_text else (None, "")
    if not name:
        if preparation:
            name, preparation = preparation, None
        else:
            name = fragment_text(text) or (text or "").strip()
            amount = None

    return NormalizedIngredient(
        name=name,
        amount=amount or None,
        preparation=preparation or None,
    )


def ingredient_line_from_markup(fragment: str) -> str:
    """Render the inner markup of an ingredient element as a raw line.

    Italic preparation clauses are kept as a trailing comma clause so they
    survive entity decoding; everything else becomes plain text.
    """
    main_text, marked = extract_marked_preparation(fragment)
    line = fragment_text(main_text)
    if marked:
        line = f"{line}, {fragment_text(marked)}" if line else fragment_text(marked)
    return line


def normalize_ingredients(
    lines: Iterable[str] | None,
    vocabulary: Iterable[str] | None = None,
) -> list[str]:
    """Clean a list of ingredient lines, dropping those that end up empty."""
    if not lines:
        return []
    cleaned = []
    for line in lines:
        if not isinstance(line, str):
            continue
        value = clean_ingredient(line, vocabulary)
        if value:
            cleaned.append(value)
    return cleaned
