# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Coarse content-type label and content signal flags.

URL rules first (first match wins), then homepage detection, else article.
Signals are plain selector counts on the document as fetched, before any
element removal.
"""

from __future__ import annotations

import logging
import math
from urllib.parse import urlsplit

from contentmap.config import DEFAULT_CONFIG, ExtractionConfig, Heuristics
from contentmap.dom import Document, element_text
from contentmap.metadata import ContentAnalysis, ContentType

logger = logging.getLogger(__name__)

_FAQ_MIN_COUNT = 3


def classify_url(url: str, heuristics: Heuristics) -> ContentType:
    """Page type from URL path patterns, in fixed priority order."""
    for type_name, patterns in heuristics.url_type_rules:
        if any(p in url for p in patterns):
            return ContentType(type_name)
    if _is_homepage(url):
        return ContentType.HOMEPAGE
    return ContentType.ARTICLE


def _is_homepage(url: str) -> bool:
    if url.endswith("/"):
        return True
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    return bool(parts.netloc) and not parts.path and not parts.query and not parts.fragment


def count_words(text: str) -> int:
    return len(text.split())


def reading_time(word_count: int, words_per_minute: int = 200) -> int:
    """Minutes at ``words_per_minute``, rounded up; zero words → 0."""
    if word_count <= 0:
        return 0
    return math.ceil(word_count / words_per_minute)


def main_text(doc: Document, heuristics: Heuristics) -> str:
    """Text of the outermost main/article/content regions, else the body."""
    regions = doc.select(heuristics.word_count_selector)
    outermost = [el for el in regions if not any(a in regions for a in el.iterancestors())]
    text = " ".join(element_text(el) for el in outermost).strip()
    return text or element_text(doc.body)


def analyze_content(doc: Document, url: str, config: ExtractionConfig = DEFAULT_CONFIG) -> ContentAnalysis:
    h = config.heuristics
    word_count = count_words(main_text(doc, h))
    analysis = ContentAnalysis(
        type=classify_url(url, h),
        word_count=word_count,
        reading_time=reading_time(word_count, config.words_per_minute),
        has_video_content=doc.count(h.video_signal_selector) > 0,
        has_faq_content=doc.count(h.faq_signal_selector) >= _FAQ_MIN_COUNT,
        has_product_content=doc.count(h.product_signal_selector) > 0,
        has_contact_info=doc.count(h.contact_signal_selector) > 0,
    )
    logger.debug("Classified %s as %s (%d words)", url, analysis.type, word_count)
    return analysis
