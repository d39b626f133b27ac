# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for content-type classification and content signals."""

from __future__ import annotations

import pytest

from contentmap.classifier import analyze_content, classify_url, count_words, main_text, reading_time
from contentmap.config import DEFAULT_HEURISTICS, ExtractionConfig
from contentmap.dom import Document
from contentmap.metadata import ContentType
from tests._html_helpers import doc, words


class TestClassifyUrl:
    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("https://ex.com/product/widget", ContentType.PRODUCT),
            ("https://ex.com/shop/widget", ContentType.PRODUCT),
            ("https://ex.com/blog/post/x", ContentType.BLOG),
            ("https://ex.com/post/x", ContentType.BLOG),
            ("https://ex.com/news/today", ContentType.NEWS),
            ("https://ex.com/about-us", ContentType.ABOUT),
            ("https://ex.com/contact", ContentType.CONTACT),
            ("https://ex.com", ContentType.HOMEPAGE),
            ("https://ex.com/", ContentType.HOMEPAGE),
            ("https://ex.com/docs/", ContentType.HOMEPAGE),
            ("https://ex.com/guide", ContentType.ARTICLE),
            ("https://ex.com?ref=x", ContentType.ARTICLE),
            ("", ContentType.ARTICLE),
        ],
    )
    def test_rules(self, url, expected):
        assert classify_url(url, DEFAULT_HEURISTICS) is expected

    def test_product_rule_beats_blog_rule(self):
        assert classify_url("https://ex.com/blog/product/x", DEFAULT_HEURISTICS) is ContentType.PRODUCT


class TestReadingTime:
    @pytest.mark.parametrize(("wc", "minutes"), [(0, 0), (1, 1), (200, 1), (201, 2), (400, 2), (401, 3)])
    def test_rounds_up(self, wc, minutes):
        assert reading_time(wc) == minutes

    def test_custom_speed(self):
        assert reading_time(400, words_per_minute=100) == 4

    def test_count_words(self):
        assert count_words("  one two\nthree ") == 3
        assert count_words("") == 0


class TestMainText:
    def test_outermost_regions_only(self):
        d = doc('<main>alpha <article>beta</article></main><div class="content">gamma</div><p>outside</p>')
        assert main_text(d, DEFAULT_HEURISTICS) == "alpha beta gamma"

    def test_body_fallback(self):
        assert main_text(doc("<div>just body</div>"), DEFAULT_HEURISTICS) == "just body"

    def test_empty_document(self):
        assert main_text(Document.empty(), DEFAULT_HEURISTICS) == ""


class TestAnalyzeContent:
    def test_word_count_and_reading_time(self):
        d = doc(f"<main><p>{words(400)}</p></main>")
        analysis = analyze_content(d, "https://ex.com/blog/x")
        assert analysis.type is ContentType.BLOG
        assert analysis.word_count == 400
        assert analysis.reading_time == 2

    def test_empty_document(self):
        analysis = analyze_content(Document.empty(), "https://ex.com/guide")
        assert analysis.word_count == 0
        assert analysis.reading_time == 0

    def test_signals(self):
        body = (
            '<iframe src="https://www.youtube.com/embed/a"></iframe>'
            '<div class="faq-item">Q1</div><div class="faq-item">Q2</div><div class="faq-item">Q3</div>'
            '<span class="price">$10</span>'
            '<a href="mailto:hi@ex.com">Mail</a>'
        )
        analysis = analyze_content(doc(body), "https://ex.com/guide")
        assert analysis.has_video_content
        assert analysis.has_faq_content
        assert analysis.has_product_content
        assert analysis.has_contact_info

    def test_faq_needs_three_matches(self):
        body = '<div class="faq-item">Q1</div><div class="question">Q2</div>'
        assert not analyze_content(doc(body), "https://ex.com/guide").has_faq_content

    def test_no_signals(self):
        analysis = analyze_content(doc("<p>Plain text.</p>"), "https://ex.com/guide")
        assert not analysis.has_video_content
        assert not analysis.has_faq_content
        assert not analysis.has_product_content
        assert not analysis.has_contact_info

    def test_words_per_minute_config(self):
        d = doc(f"<main><p>{words(400)}</p></main>")
        assert analyze_content(d, "https://ex.com/x", ExtractionConfig(words_per_minute=100)).reading_time == 4
