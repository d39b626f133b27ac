# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""DOM access layer: lxml tree + CSS-selector lookups.

Pure adapter, no business logic. Every lookup is total: unknown selectors,
missing elements and absent attributes come back as ``None`` / empty lists.
CSS selectors are translated to XPath once with cssselect and cached.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Iterator

import lxml.html
from cssselect import HTMLTranslator, SelectorError
from lxml import etree

from contentmap.errors import DocumentParseError
from contentmap.sanitizer import collapse_whitespace

logger = logging.getLogger(__name__)

_TRANSLATOR = HTMLTranslator()

_EMPTY_DOCUMENT = b"<html><head></head><body></body></html>"

_JSONLD_TYPE = "application/ld+json"


@functools.lru_cache(maxsize=512)
def _compile(css: str) -> etree.XPath | None:
    """Translate a CSS selector to a compiled XPath. ``None`` if it doesn't compile."""
    try:
        return etree.XPath(_TRANSLATOR.css_to_xpath(css))
    except (SelectorError, etree.XPathSyntaxError) as e:
        logger.warning("Unsupported selector %r: %s", css, e)
        return None


def is_element(node: object) -> bool:
    """True for real elements (not comments, processing instructions or entities)."""
    return isinstance(node, lxml.html.HtmlElement) and isinstance(node.tag, str)


def tag_name(el: lxml.html.HtmlElement) -> str:
    return el.tag.lower() if isinstance(el.tag, str) else ""


def element_text(el: lxml.html.HtmlElement | None) -> str:
    """Whitespace-normalized text content of an element."""
    if el is None:
        return ""
    try:
        return collapse_whitespace(el.text_content())
    except ValueError:
        return ""


def element_attr(el: lxml.html.HtmlElement | None, name: str) -> str | None:
    """Stripped attribute value, ``None`` when absent or blank."""
    if el is None:
        return None
    value = el.get(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


class Document:
    """A parsed HTML document with CSS-selector lookups."""

    __slots__ = ("_root",)

    def __init__(self, root: lxml.html.HtmlElement) -> None:
        self._root = root

    # --- construction ---

    @classmethod
    def parse(cls, html: str | None, *, strict: bool = False) -> Document:
        """Parse HTML leniently.

        Empty or unparsable input yields an empty document unless ``strict``
        is set, in which case :class:`DocumentParseError` is raised.
        """
        if not html or not html.strip():
            if strict:
                raise DocumentParseError("Empty HTML input")
            return cls.empty()

        # lxml rejects NUL bytes; they never carry content
        data = html.replace("\x00", "").encode("utf-8", errors="replace")
        try:
            parser = lxml.html.HTMLParser(recover=True, encoding="utf-8")
            root = lxml.html.document_fromstring(data, parser=parser)
        except (etree.ParserError, etree.XMLSyntaxError, ValueError) as e:
            if strict:
                raise DocumentParseError(f"lxml parsing failed: {e}") from e
            logger.warning("HTML parsing failed, using empty document: %s", e)
            return cls.empty()
        return cls(root)

    @classmethod
    def empty(cls) -> Document:
        return cls(lxml.html.document_fromstring(_EMPTY_DOCUMENT))

    # --- structure ---

    @property
    def root(self) -> lxml.html.HtmlElement:
        return self._root

    @property
    def body(self) -> lxml.html.HtmlElement:
        body = self._root.find("body")
        return body if body is not None else self._root

    @property
    def is_empty(self) -> bool:
        return not element_text(self.body) and not self.count("img, video, table")

    def iter_elements(self, scope: lxml.html.HtmlElement | None = None) -> Iterator[lxml.html.HtmlElement]:
        """All descendant elements of ``scope`` (default: root) in document order."""
        base = self._root if scope is None else scope
        for el in base.iterdescendants():
            if is_element(el):
                yield el

    # --- lookups ---

    def select(self, css: str, scope: lxml.html.HtmlElement | None = None) -> list[lxml.html.HtmlElement]:
        """All elements matching ``css`` under ``scope`` (exclusive), in document order."""
        xpath = _compile(css)
        if xpath is None:
            return []
        base = self._root if scope is None else scope
        try:
            found = xpath(base)
        except etree.XPathEvalError as e:
            logger.warning("Selector %r failed to evaluate: %s", css, e)
            return []
        return [el for el in found if is_element(el) and el is not scope]

    def select_one(self, css: str, scope: lxml.html.HtmlElement | None = None) -> lxml.html.HtmlElement | None:
        found = self.select(css, scope)
        return found[0] if found else None

    def count(self, css: str) -> int:
        return len(self.select(css))

    def attr(self, css: str, name: str) -> str | None:
        """Attribute of the first matching element, ``None`` if absent or blank."""
        return element_attr(self.select_one(css), name)

    def first_attr(self, css: str, name: str) -> str | None:
        """First non-blank attribute value among all matching elements."""
        for el in self.select(css):
            value = element_attr(el, name)
            if value:
                return value
        return None

    def text(self, css: str) -> str:
        """Concatenated text of every matching element."""
        return collapse_whitespace(" ".join(element_text(el) for el in self.select(css)))

    def first_text(self, css: str) -> str:
        """Text of the first matching element with non-empty text."""
        for el in self.select(css):
            text = element_text(el)
            if text:
                return text
        return ""

    def meta_content(self, *, name: str | None = None, prop: str | None = None) -> str | None:
        """``content`` of ``<meta name=...>`` or ``<meta property=...>``."""
        if prop is not None:
            return self.attr(f'meta[property="{prop}"]', "content")
        if name is not None:
            return self.attr(f'meta[name="{name}"]', "content")
        return None

    def meta_contents(self, *, prop: str) -> list[str]:
        """All non-blank ``content`` values of repeated ``<meta property=...>``."""
        values = []
        for el in self.select(f'meta[property="{prop}"]'):
            value = el.get("content")
            if value and value.strip():
                values.append(value)
        return values

    @property
    def html_lang(self) -> str | None:
        return element_attr(self._root, "lang")

    def jsonld_sources(self) -> list[str]:
        """Raw text of every ``<script type="application/ld+json">`` block."""
        sources = []
        for el in self.select("script[type]"):
            if (el.get("type") or "").strip().lower() != _JSONLD_TYPE:
                continue
            text = (el.text or "").strip()
            if text:
                sources.append(text)
        return sources

    # --- mutation ---

    def remove(self, css: str) -> int:
        """Detach every element matching ``css`` (with its subtree). Returns count removed."""
        removed = 0
        for el in self.select(css):
            # Skip descendants of an element removed earlier in this loop
            if el is self._root or not self.contains(el):
                continue
            remove_element(el)
            removed += 1
        return removed

    def contains(self, el: lxml.html.HtmlElement) -> bool:
        """True while ``el`` is still attached under the document root."""
        for ancestor in el.iterancestors():
            if ancestor is self._root:
                return True
        return False


def remove_element(el: lxml.html.HtmlElement) -> None:
    """Detach an element and its subtree, keeping its tail text in place."""
    parent = el.getparent()
    if parent is None:
        return
    tail = el.tail
    if tail:
        prev = el.getprevious()
        if prev is not None:
            prev.tail = (prev.tail or "") + tail
        else:
            parent.text = (parent.text or "") + tail
    parent.remove(el)
