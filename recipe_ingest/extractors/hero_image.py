"""
Hero image selection.

Scores every image on a page for how likely it is to show the finished
dish and picks the best one. Scoring is a pure function of the candidate so
it can be tested without a page or network access.
"""
from __future__ import annotations

import logging
import re
from typing import Iterable, Sequence
from urllib.parse import urljoin

from ..const import (
    ARTICLE_TAGS,
    HEADER_TAGS,
    IMAGE_DISQUALIFY_WORDS,
    IMAGE_HERO_WORDS,
    IMAGE_MIN_URL_LENGTH,
    IMAGE_SUBJECT_WORDS,
)
from ..markup import Document, Element
from ..models.recipe import ImageCandidate

_LOGGER = logging.getLogger(__name__)

DISQUALIFIED = -1

_DIMENSION = re.compile(r"^\s*(\d+)")
_LAZY_SOURCE_ATTRIBUTES = ("data-src", "data-lazy-src", "data-original", "data-srcset", "data-lazy-srcset")


def _mentions(text: str, words: Iterable[str]) -> bool:
    text = text.lower()
    return any(word in text for word in words)


def is_disqualified(url: str | None) -> bool:
    """Whether an image URL can never be the hero image."""
    if not url or len(url) < IMAGE_MIN_URL_LENGTH:
        return True
    return url.lower().startswith("data:") or _mentions(url, IMAGE_DISQUALIFY_WORDS)


def score_image(candidate: ImageCandidate) -> int:
    """Score an image candidate; higher is more likely the dish photo.

    Returns:
        The additive score, or -1 when the candidate is disqualified
    """
    if is_disqualified(candidate.url):
        return DISQUALIFIED

    score = 0
    size = max(candidate.width or 0, candidate.height or 0)
    if size > 400:
        score += 20
    elif size > 200:
        score += 10

    if any(tag in ARTICLE_TAGS for tag in candidate.ancestor_tags):
        score += 15
    if any(tag in HEADER_TAGS for tag in candidate.ancestor_tags):
        score += 10

    if _mentions(candidate.alt_text, IMAGE_SUBJECT_WORDS):
        score += 25

    markers = " ".join((*candidate.css_classes, candidate.element_id))
    if _mentions(markers, IMAGE_HERO_WORDS):
        score += 25

    if _mentions(candidate.url, IMAGE_HERO_WORDS):
        score += 15
    if _mentions(candidate.url, IMAGE_SUBJECT_WORDS):
        score += 15

    if candidate.itemprop.lower() == "image":
        score += 30

    return score


def rank_images(candidates: Sequence[ImageCandidate]) -> list[tuple[int, ImageCandidate]]:
    """Score candidates and sort best first, keeping document order on ties."""
    scored = [(score_image(candidate), candidate) for candidate in candidates]
    return sorted(scored, key=lambda item: (-item[0], item[1].position))


def select_hero_image(
    candidates: Sequence[ImageCandidate],
    page_url: str,
    metadata_image: str | None = None,
) -> str | None:
    """Choose the image most likely to depict the dish.

    Args:
        candidates: Every image candidate on the page
        page_url: URL of the page, used to resolve relative URLs
        metadata_image: Image named by page metadata (og:image, itemprop)

    Returns:
        Absolute URL of the chosen image, or None
    """
    ranked = rank_images(candidates)
    if ranked and ranked[0][0] > 0:
        score, best = ranked[0]
        _LOGGER.debug("Selected hero image %s with score %d", best.url, score)
        return urljoin(page_url, best.url)

    if metadata_image:
        _LOGGER.debug("No image scored positively, using metadata image")
        return urljoin(page_url, metadata_image)

    for candidate in candidates:
        if candidate.lazy and candidate.url and not is_disqualified(candidate.url):
            _LOGGER.debug("Falling back to deferred-loading image %s", candidate.url)
            return urljoin(page_url, candidate.url)

    return None


def _dimension(value: str | None) -> int | None:
    if not value:
        return None
    match = _DIMENSION.match(value)
    return int(match.group(1)) if match else None


def _image_source(element: Element) -> tuple[str, bool]:
    """Return the best source URL of an <img> and whether it is deferred-loading."""
    lazy_source = None
    for attribute in _LAZY_SOURCE_ATTRIBUTES:
        value = (element.attr(attribute) or "").strip()
        if value:
            lazy_source = value.split()[0] if "srcset" in attribute else value
            break

    lazy = lazy_source is not None or (element.attr("loading") or "").lower() == "lazy"
    src = (element.attr("src") or "").strip()
    # Lazy loaders put a placeholder in src and the real image in a data attribute
    if lazy_source and (not src or src.lower().startswith("data:")):
        return lazy_source, lazy
    return src or lazy_source or "", lazy


def collect_image_candidates(document: Document) -> list[ImageCandidate]:
    """Build image candidates for every <img> in document order."""
    candidates = []
    for position, element in enumerate(document.find_all("img")):
        url, lazy = _image_source(element)
        candidates.append(ImageCandidate(
            url=url,
            width=_dimension(element.attr("width")),
            height=_dimension(element.attr("height")),
            alt_text=element.attr("alt") or "",
            css_classes=element.classes,
            element_id=element.element_id,
            ancestor_tags=tuple(ancestor.name for ancestor in element.ancestors()),
            itemprop=element.attr("itemprop") or "",
            lazy=lazy,
            position=position,
        ))
    return candidates


def metadata_image(document: Document) -> str | None:
    """Image named by page-level metadata, if any."""
    image = document.meta_content("og:image", "og:image:url", "twitter:image", "image")
    if image:
        return image
    link = document.select_one('link[itemprop="image"]')
    if link is not None:
        return (link.attr("href") or "").strip() or None
    return None


def find_hero_image(document: Document, page_url: str) -> str | None:
    """Run the hero image scorer over a whole page."""
    candidates = collect_image_candidates(document)
    _LOGGER.debug("Scoring %d image candidates", len(candidates))
    return select_hero_image(candidates, page_url, metadata_image(document))
