"""
Markup model.

Wraps the HTML parser behind a small interface so the extraction code only
deals with element lookup, attribute access, collapsed text and raw inner
markup.
"""
from __future__ import annotations

import logging
import re
from typing import Iterator

from bs4 import BeautifulSoup, Tag
from bs4.builder import ParserRejectedMarkup

from .exceptions import ParseError

_LOGGER = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


def collapse_whitespace(text: str | None) -> str:
    """Collapse whitespace runs into single spaces and trim the ends."""
    if not text:
        return ""
    return _WHITESPACE.sub(" ", text).strip()


class Element:
    """A single element of a parsed document."""

    __slots__ = ("_tag",)

    def __init__(self, tag: Tag) -> None:
        self._tag = tag

    def __repr__(self) -> str:
        return f"<Element {self.name}>"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Element) and other._tag is self._tag

    def __hash__(self) -> int:
        return id(self._tag)

    @property
    def name(self) -> str:
        return self._tag.name or ""

    @property
    def text(self) -> str:
        """Text content with whitespace collapsed."""
        return collapse_whitespace(self._tag.get_text(separator=" "))

    @property
    def raw_text(self) -> str:
        """Text content exactly as written, e.g. the body of a <script>."""
        string = self._tag.string
        return str(string) if string is not None else self._tag.get_text()

    @property
    def inner_html(self) -> str:
        """Raw markup of the element's children."""
        return self._tag.decode_contents()

    @property
    def classes(self) -> tuple[str, ...]:
        value = self._tag.get("class") or ()
        if isinstance(value, str):
            value = value.split()
        return tuple(value)

    @property
    def element_id(self) -> str:
        return self.attr("id") or ""

    def attr(self, name: str) -> str | None:
        """Return an attribute value, or None when absent."""
        value = self._tag.get(name)
        if value is None:
            return None
        if isinstance(value, list):
            return " ".join(value)
        return str(value)

    def has_attr(self, name: str) -> bool:
        return self._tag.has_attr(name)

    def select(self, selector: str) -> list[Element]:
        return [Element(tag) for tag in self._tag.select(selector)]

    def select_one(self, selector: str) -> Element | None:
        tag = self._tag.select_one(selector)
        return Element(tag) if tag is not None else None

    def find_all(self, name: str | list[str] | None = None, **attrs) -> list[Element]:
        return [Element(tag) for tag in self._tag.find_all(name, attrs=attrs)]

    def ancestors(self) -> Iterator[Element]:
        """Enclosing elements, nearest first, excluding the document root."""
        for parent in self._tag.parents:
            if isinstance(parent, BeautifulSoup) or parent.name is None:
                break
            yield Element(parent)

    def has_ancestor(self, names: tuple[str, ...]) -> bool:
        return any(ancestor.name in names for ancestor in self.ancestors())


class Document(Element):
    """A parsed HTML page."""

    __slots__ = ()

    @classmethod
    def parse(cls, markup: str | bytes) -> Document:
        """Parse raw HTML into a document.

        Args:
            markup: The page body as text or bytes

        Returns:
            The parsed document

        Raises:
            ParseError: If the input is not parseable as markup at all
        """
        if isinstance(markup, bytes):
            try:
                markup = markup.decode("utf-8")
            except UnicodeDecodeError:
                markup = markup.decode("latin-1")
        if not isinstance(markup, str):
            raise ParseError(f"Cannot parse {type(markup).__name__} as markup")

        try:
            soup = BeautifulSoup(markup, features="html.parser")
        except (ParserRejectedMarkup, AssertionError) as err:
            raise ParseError(f"Markup rejected by parser: {err}") from err

        if soup.find(True) is None:
            raise ParseError("Input contains no markup elements")

        _LOGGER.debug("Parsed document with %d characters", len(markup))
        return cls(soup)

    @property
    def title(self) -> str:
        """Text of the <title> element."""
        element = self.select_one("title")
        return element.text if element else ""

    @property
    def body(self) -> Element:
        """The <body> element, or the whole document when there is none."""
        return self.select_one("body") or self

    def meta_content(self, *keys: str) -> str | None:
        """Return the first non-empty content of a <meta> tag matching a name or property."""
        for key in keys:
            for attribute in ("property", "name", "itemprop"):
                element = self.select_one(f'meta[{attribute}="{key}"]')
                if element is not None:
                    content = (element.attr("content") or "").strip()
                    if content:
                        return content
        return None


_TAG = re.compile(r"</?[a-zA-Z][^<>]*>")


def strip_tags(fragment: str) -> str:
    """Remove markup tags from a text fragment without decoding entities."""
    previous = None
    while previous != fragment:
        previous = fragment
        fragment = _TAG.sub(" ", fragment)
    return fragment


def fragment_text(fragment: str | None) -> str:
    """Plain text of an HTML fragment, entities decoded, whitespace collapsed."""
    if not fragment:
        return ""
    if "<" not in fragment and "&" not in fragment:
        return collapse_whitespace(fragment)
    soup = BeautifulSoup(fragment, features="html.parser")
    return collapse_whitespace(soup.get_text(separator=" "))
