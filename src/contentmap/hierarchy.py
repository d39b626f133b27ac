# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Content hierarchy builder.

Finds the primary content region, then walks its descendants once in
document order and emits one typed node per qualifying element.

Wrapper/child pairs that would double-count the same text are collapsed by a
fingerprint of tag + leading text: the first element with a given
fingerprint wins.
"""

from __future__ import annotations

import logging

import lxml.html

from contentmap.config import DEFAULT_CONFIG, ExtractionConfig
from contentmap.dom import Document, element_attr, tag_name
from contentmap.model import ContentNode, Heading, Image, ListBlock, Paragraph, Quote, Table
from contentmap.sanitizer import clean_node_text

logger = logging.getLogger(__name__)

_HEADING_TAGS = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})
_LIST_TAGS = frozenset({"ul", "ol"})

_FINGERPRINT_TEXT_LEN = 50


def _text(el: lxml.html.HtmlElement) -> str:
    try:
        return clean_node_text(el.text_content())
    except ValueError:
        return ""


def fingerprint(tag: str, text: str) -> str:
    return f"{tag}-{text[:_FINGERPRINT_TEXT_LEN]}"


def find_content_region(doc: Document, config: ExtractionConfig = DEFAULT_CONFIG) -> lxml.html.HtmlElement:
    """First element matched by the content-region selectors, else ``<body>``."""
    for sel in config.heuristics.content_region_selectors:
        region = doc.select_one(sel)
        if region is not None:
            logger.debug("Content region: %s", sel)
            return region
    return doc.body


class HierarchyBuilder:
    """Walks one content region and collects nodes."""

    def __init__(self, config: ExtractionConfig = DEFAULT_CONFIG) -> None:
        self._config = config
        self._seen: set[str] = set()
        self._lists: list[lxml.html.HtmlElement] = []
        self._nodes: list[ContentNode] = []

    def build(self, doc: Document) -> tuple[ContentNode, ...]:
        self._seen, self._lists, self._nodes = set(), [], []
        region = find_content_region(doc, self._config)
        for el in doc.iter_elements(region):
            self._visit(el, tag_name(el))
        logger.debug("Hierarchy: %d node(s)", len(self._nodes))
        return tuple(self._nodes)

    def _emit(self, node: ContentNode, key: str) -> None:
        self._seen.add(key)
        self._nodes.append(node)

    def _visit(self, el: lxml.html.HtmlElement, tag: str) -> None:
        if tag in _HEADING_TAGS:
            text = _text(el)
            key = fingerprint(tag, text)
            if text and key not in self._seen:
                self._emit(Heading(level=int(tag[1]), text=text), key)

        elif tag == "p":
            text = _text(el)
            key = fingerprint(tag, text)
            if len(text) > self._config.min_paragraph_length and key not in self._seen:
                self._emit(Paragraph(text=text), key)

        elif tag in _LIST_TAGS:
            if any(a in self._lists for a in el.iterancestors()):
                return
            key = fingerprint(tag, _text(el))
            if key in self._seen:
                return
            items = tuple(t for t in (_text(li) for li in el.iterdescendants("li")) if t)
            if items:
                self._lists.append(el)
                self._emit(ListBlock(item_texts=items, ordered=tag == "ol"), key)

        elif tag == "blockquote":
            text = _text(el)
            key = fingerprint(tag, text)
            if text and key not in self._seen:
                self._emit(Quote(text=text), key)

        elif tag == "img":
            src = element_attr(el, "src")
            # images carry no text; the source URL stands in for it
            key = fingerprint(tag, src or "")
            if src and key not in self._seen:
                self._emit(Image(url=src, alt=clean_node_text(el.get("alt")) or None), key)

        elif tag == "table":
            rows = list(el.iterdescendants("tr"))
            if not rows:
                return
            key = fingerprint(tag, _text(el))
            if key in self._seen:
                return
            col_count = sum(1 for c in rows[0].iterdescendants("td", "th"))
            self._emit(Table(row_count=len(rows), col_count=col_count), key)


def build_hierarchy(doc: Document, config: ExtractionConfig = DEFAULT_CONFIG) -> tuple[ContentNode, ...]:
    """Ordered content nodes of the document's primary content region."""
    return HierarchyBuilder(config).build(doc)
