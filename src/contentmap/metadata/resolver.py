# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Metadata resolution (pass 1).

Each chained field is an ordered tuple of ``(source, candidate)`` pairs;
``first_resolved`` evaluates them lazily and stops at the first non-empty
value. Later candidates are never consulted once one is accepted.

At DEBUG level the source that satisfied each field is logged. Tracing has
no effect on the returned record.

Fields are built independently: a source or sub-record that raises is
logged and leaves only its own field empty.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from contentmap.classifier import analyze_content
from contentmap.config import DEFAULT_CONFIG, ExtractionConfig, Heuristics
from contentmap.dom import Document, element_attr, element_text
from contentmap.metadata import (
    AlternateLanguage,
    AuthorInfo,
    Breadcrumb,
    BusinessInfo,
    ContentAnalysis,
    EnhancedMetadata,
    ImageSet,
    OpenGraph,
    TechnicalMetadata,
    TwitterCard,
    jsonld,
)
from contentmap.metadata.authors import author_name_chain, resolve_author
from contentmap.metadata.dates import modified_date_chain, publish_date_chain
from contentmap.metadata.media import extract_images, extract_videos
from contentmap.metadata.tags import extract_keywords, extract_tags
from contentmap.sanitizer import sanitize_text

logger = logging.getLogger(__name__)

T = TypeVar("T")

Candidate = tuple[str, Callable[[], str | None]]

_SECTION_MIN_LEN = 4
_SECTION_MAX_LEN = 99


def first_resolved(chain: Iterable[Candidate], *, field: str = "", trace: list | None = None) -> str | None:
    """Value of the first candidate that yields a non-empty string.

    ``trace``, when given, receives ``(field, source)`` for the winning
    candidate (``source`` is ``None`` when nothing resolved). A candidate that
    raises is logged and skipped; the chain moves on to the next source.
    """
    for source, candidate in chain:
        try:
            value = candidate()
        except Exception:
            logger.warning("Source %s failed for field=%s, trying next", source, field, exc_info=True)
            continue
        if value:
            logger.debug("resolved field=%s source=%s", field, source)
            if trace is not None:
                trace.append((field, source))
            return value
    logger.debug("unresolved field=%s", field)
    if trace is not None:
        trace.append((field, None))
    return None


def _isolated(field: str, fn: Callable[[], T], fallback: Callable[[], T]) -> T:
    """Build one field; a failure empties that field only."""
    try:
        return fn()
    except Exception:
        logger.warning("Field %s failed, using empty value", field, exc_info=True)
        return fallback()


def _text(value: str | None, max_len: int = 256) -> str | None:
    return sanitize_text(value, max_len=max_len) or None


def _twitter(doc: Document, key: str) -> str | None:
    # Twitter Card tags are specified with name=, but property= is common in the wild
    return doc.meta_content(name=f"twitter:{key}") or doc.meta_content(prop=f"twitter:{key}")


def is_section_title(text: str) -> bool:
    return _SECTION_MIN_LEN <= len(text) <= _SECTION_MAX_LEN


class MetadataResolver:
    """Builds ``EnhancedMetadata`` from a parsed document and its source URL."""

    def __init__(self, config: ExtractionConfig = DEFAULT_CONFIG) -> None:
        self._config = config

    @property
    def heuristics(self) -> Heuristics:
        return self._config.heuristics

    def resolve(self, doc: Document, source_url: str, *, trace: list | None = None) -> EnhancedMetadata:
        cap = self._config.list_cap
        h = self.heuristics
        blocks = _isolated("existingStructuredData", lambda: jsonld.parse_blocks(doc.jsonld_sources()), list)

        open_graph = _isolated("openGraph", lambda: self.open_graph(doc), OpenGraph)
        twitter_card = _isolated("twitterCard", lambda: self.twitter_card(doc), TwitterCard)

        title = first_resolved(
            (
                ("title-tag", lambda: _text(doc.first_text("title"), 300)),
                ("og:title", lambda: open_graph.title),
                ("twitter:title", lambda: twitter_card.title),
            ),
            field="title",
            trace=trace,
        )
        description = first_resolved(
            (
                ("meta:description", lambda: _text(doc.meta_content(name="description"), 500)),
                ("og:description", lambda: open_graph.description),
                ("twitter:description", lambda: twitter_card.description),
            ),
            field="description",
            trace=trace,
        )
        canonical_url = first_resolved(
            (
                ("link:canonical", lambda: doc.first_attr('link[rel="canonical"]', "href")),
                ("source-url", lambda: source_url),
            ),
            field="canonicalUrl",
            trace=trace,
        )
        language = first_resolved(
            (
                ("html:lang", lambda: _text(doc.html_lang, 35)),
                ("og:locale", lambda: open_graph.locale),
            ),
            field="language",
            trace=trace,
        )

        author = None
        author_name = first_resolved(author_name_chain(doc, blocks, h), field="author", trace=trace)
        if author_name:
            author = _isolated(
                "author",
                lambda: resolve_author(doc, blocks, h, author_name, cap=cap),
                lambda: AuthorInfo(name=author_name),
            )

        publish_date = first_resolved(publish_date_chain(doc, blocks, h), field="publishDate", trace=trace)
        modified_date = first_resolved(modified_date_chain(doc, blocks), field="modifiedDate", trace=trace)

        article_sections = _isolated("articleSections", lambda: self.article_sections(doc), list)
        article_section = first_resolved(
            (
                ("meta:article:section", lambda: _text(doc.meta_content(prop="article:section"))),
                ("itemprop:articleSection", lambda: _text(doc.text('[itemprop="articleSection"]'))),
                ("first-h2", lambda: article_sections[0] if article_sections else None),
            ),
            field="articleSection",
            trace=trace,
        )

        return EnhancedMetadata(
            title=title or "",
            description=description or "",
            canonical_url=canonical_url or "",
            language=language or "en",
            open_graph=open_graph,
            twitter_card=twitter_card,
            author=author,
            publish_date=publish_date,
            modified_date=modified_date,
            article_section=article_section,
            article_sections=article_sections,
            tags=_isolated("tags", lambda: extract_tags(doc, h, cap), list),
            keywords=_isolated("keywords", lambda: extract_keywords(doc, cap), list),
            images=_isolated("images", lambda: extract_images(doc, cap), ImageSet),
            videos=_isolated("videos", lambda: extract_videos(doc, blocks, h, cap), list),
            existing_structured_data=blocks,
            business=_isolated("business", lambda: self.business(doc, blocks, trace=trace), lambda: None),
            content_analysis=_isolated(
                "contentAnalysis", lambda: analyze_content(doc, source_url, self._config), ContentAnalysis
            ),
            technical=_isolated("technical", lambda: self.technical(doc, blocks), TechnicalMetadata),
        )

    # --- sub-records ---

    def open_graph(self, doc: Document) -> OpenGraph:
        def og(key: str, max_len: int = 256) -> str | None:
            return _text(doc.meta_content(prop=f"og:{key}"), max_len)

        return OpenGraph(
            title=og("title", 300),
            description=og("description", 500),
            image=doc.meta_content(prop="og:image"),
            image_alt=og("image:alt"),
            type=og("type", 64),
            site_name=og("site_name"),
            url=doc.meta_content(prop="og:url"),
            locale=og("locale", 35),
        )

    def twitter_card(self, doc: Document) -> TwitterCard:
        return TwitterCard(
            card=_text(_twitter(doc, "card"), 64),
            title=_text(_twitter(doc, "title"), 300),
            description=_text(_twitter(doc, "description"), 500),
            image=_twitter(doc, "image"),
            image_alt=_text(_twitter(doc, "image:alt")),
            site=_text(_twitter(doc, "site"), 64),
            creator=_text(_twitter(doc, "creator"), 64),
        )

    def article_sections(self, doc: Document) -> list[str]:
        """Titles of the first selector that matches any H2; 4-99 chars each."""
        for sel in self.heuristics.section_heading_selectors:
            headings = doc.select(sel)
            if not headings:
                continue
            titles = [_text(element_text(h), 200) or "" for h in headings]
            sections = [t for t in titles if is_section_title(t)]
            logger.debug("Found %d H2 heading(s) using selector %r", len(headings), sel)
            return sections
        return []

    def business(self, doc: Document, blocks: list[Any], *, trace: list | None = None) -> BusinessInfo | None:
        name = first_resolved(
            (
                ("og:site_name", lambda: _text(doc.meta_content(prop="og:site_name"))),
                ("meta:application-name", lambda: _text(doc.meta_content(name="application-name"))),
                ("jsonld:publisher", lambda: jsonld.publisher_name(blocks)),
            ),
            field="business",
            trace=trace,
        )
        if not name:
            return None
        h = self.heuristics
        logo_chain: list[Candidate] = [(f"css:{sel}", lambda sel=sel: doc.attr(sel, "href")) for sel in h.logo_selectors]
        logo_chain += [
            ("css:logo-img", lambda: doc.attr(h.logo_image_selector, "src")),
            ("jsonld:publisher.logo", lambda: jsonld.publisher_logo(blocks)),
            ("og:image", lambda: doc.meta_content(prop="og:image")),
        ]
        return BusinessInfo(
            name=name,
            logo=first_resolved(logo_chain, field="business.logo", trace=trace),
            website=doc.meta_content(prop="og:url"),
        )

    def technical(self, doc: Document, blocks: list[Any]) -> TechnicalMetadata:
        alternates = []
        for link in doc.select('link[rel="alternate"][hreflang]'):
            lang, url = element_attr(link, "hreflang"), element_attr(link, "href")
            if lang and url:
                alternates.append(AlternateLanguage(lang=lang, url=url))

        breadcrumbs = []
        for link in doc.select(self.heuristics.breadcrumb_link_selector):
            name = _text(element_text(link), 200)
            if name:
                breadcrumbs.append(Breadcrumb(name=name, url=element_attr(link, "href")))
        if not breadcrumbs:
            breadcrumbs = jsonld.breadcrumb_list(blocks)

        return TechnicalMetadata(
            robots_directive=_text(doc.meta_content(name="robots"), 200),
            viewport=_text(doc.meta_content(name="viewport"), 200),
            alternate_languages=alternates,
            breadcrumbs=breadcrumbs,
        )


def resolve_metadata(
    doc: Document,
    source_url: str,
    config: ExtractionConfig = DEFAULT_CONFIG,
    *,
    trace: list | None = None,
) -> EnhancedMetadata:
    """Convenience wrapper around :class:`MetadataResolver`."""
    return MetadataResolver(config).resolve(doc, source_url, trace=trace)
