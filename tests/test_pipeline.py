# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""End-to-end pipeline tests: phase order, degradation, and result properties."""

from __future__ import annotations

import logging
import re

import pytest
import structlog

import contentmap.pipeline as pipeline_mod
from contentmap import ContentPipeline, ExtractionConfig, process_html
from contentmap.advisor import SuggestionCode
from contentmap.metadata.resolver import MetadataResolver
from contentmap.model import Heading, Quote
from contentmap.pipeline_timer import PHASES
from contentmap.serializer import render_clean_text, to_json
from tests._html_helpers import meta, page, words

SHORT_MSG = "Content is quite short"
HEADINGS_MSG = "Consider adding H2 or H3 headings"


class TestArticle:
    def test_result_shape(self, article_html, article_url):
        content = process_html(article_html, article_url)
        assert len(content.hierarchy) == 9
        assert content.clean_text == render_clean_text(content.hierarchy)
        assert content.original_length == len(article_html)
        assert content.processed_length == len(content.clean_text)
        assert content.clean_text.startswith("# How to Brew Coffee\n\n## Choosing Beans\n\nP: Fresh beans")
        assert "LIST: UL with 2 items\n  - Arabica\n  - Robusta" in content.clean_text
        assert content.clean_text.endswith("TABLE: Table with 2 rows and 2 columns")

    def test_metadata(self, article_html, article_url):
        m = process_html(article_html, article_url).metadata
        assert m.title == "How to Brew Coffee | Bean Blog"
        assert m.author.name == "Jane Doe"
        assert m.publish_date == "2024-03-05T08:00:00Z"
        assert m.modified_date == "2024-03-05T08:00:00Z"
        assert m.business.name == "Bean Blog"
        assert m.article_sections == ["Choosing Beans", "Grinding"]

    def test_noise_never_reaches_hierarchy(self, article_html, article_url):
        text = process_html(article_html, article_url).clean_text
        assert "Home" not in text
        assert "Copyright" not in text
        assert "analytics" not in text

    def test_suggestions(self, article_html, article_url):
        content, suggestions = ContentPipeline().process_with_advice(article_html, article_url)
        assert [s.code for s in suggestions] == [SuggestionCode.SHORT_CONTENT]
        assert content.quality_suggestions == tuple(s.message for s in suggestions)

    def test_to_dict(self, article_html, article_url):
        data = process_html(article_html, article_url).to_dict()
        assert data["metadata"]["canonicalUrl"] == "https://beanblog.com/blog/brew"
        assert data["metadata"]["contentAnalysis"]["type"] == "blog"
        assert data["tokenEstimate"] == -(-data["processedLength"] // 4)


class TestProperties:
    def test_determinism(self, article_html, article_url):
        first = to_json(process_html(article_html, article_url, max_length=150))
        second = to_json(ContentPipeline().process(article_html, article_url, 150))
        assert first == second

    @pytest.mark.parametrize("max_length", [1, 20, 50, 100, 200, 400])
    def test_truncation_bound(self, article_html, article_url, max_length):
        content = process_html(article_html, article_url, max_length=max_length)
        assert content.processed_length <= max_length
        assert content.clean_text == render_clean_text(content.hierarchy)

    def test_fitting_content_unchanged(self, article_html, article_url):
        full = process_html(article_html, article_url)
        again = process_html(article_html, article_url, max_length=len(full.clean_text))
        assert again.clean_text == full.clean_text
        assert again.hierarchy == full.hierarchy

    def test_heading_preservation(self, article_html, article_url):
        full = process_html(article_html, article_url)
        headings = [n for n in full.hierarchy if isinstance(n, Heading)]
        content = process_html(article_html, article_url, max_length=100)
        assert [n for n in content.hierarchy if isinstance(n, Heading)] == headings
        assert Quote(text="Coffee is a language in itself.") in content.hierarchy

    def test_title_precedence(self):
        html = page(head="<title>Tag Title</title>" + meta("OG Title", prop="og:title"))
        assert process_html(html, "https://ex.com/a").metadata.title == "Tag Title"

    def test_tag_normalization(self):
        html = page(
            "<main><p>Some article body text goes here.</p></main>",
            head=meta("SEO", prop="article:tag") + meta("marketing seo INBOUND", prop="article:tag"),
        )
        assert process_html(html, "https://ex.com/a").metadata.tags == ["SEO", "marketing", "INBOUND"]

    def test_monotonic_publish_date(self):
        html = page(
            "<main><p>Published on March 5, 2024 in London.</p></main>",
            head=meta("2020-01-01", prop="article:published_time"),
        )
        assert process_html(html, "https://ex.com/a").metadata.publish_date == "2020-01-01"

    def test_publish_date_inferred_from_body(self):
        html = page("<main><p>Published on March 5, 2024 in London.</p></main>")
        assert process_html(html, "https://ex.com/a").metadata.publish_date == "2024-03-05"

    def test_reading_time_400_words(self):
        content = process_html(page(f"<main><p>{words(400)}</p></main>"), "https://ex.com/blog/x")
        analysis = content.to_dict()["metadata"]["contentAnalysis"]
        assert analysis["wordCount"] == 400
        assert analysis["readingTime"] == 2

    def test_section_fallback_to_h3(self):
        html = page(
            "<main><h1>Guide</h1><h3>Step One</h3><p>Do the first thing carefully.</p>"
            "<h3>Step Two</h3><h3>Step Three</h3></main>"
        )
        m = process_html(html, "https://ex.com/guide").metadata
        assert m.article_sections == ["Step One", "Step Two", "Step Three"]
        assert m.article_section == "Step One"

    def test_short_content_and_headings_suggestions(self):
        content = process_html(page("<main><p>Just a short paragraph of text here.</p></main>"), "https://ex.com/a")
        assert any(s.startswith(HEADINGS_MSG) for s in content.quality_suggestions)
        assert any(s.startswith(SHORT_MSG) for s in content.quality_suggestions)


class TestDegenerateInput:
    @pytest.mark.parametrize("html", [None, "", "   ", "<<<>>>", "\x00\x01\x02", "<html>", "plain text only"])
    def test_never_raises(self, html):
        content = process_html(html, "https://ex.com/a", max_length=100)
        assert content.processed_length <= 100

    def test_empty_input_result(self):
        content, suggestions = ContentPipeline().process_with_advice("", "https://ex.com/a")
        assert content.hierarchy == ()
        assert content.clean_text == ""
        assert content.original_length == 0
        assert content.metadata.title == ""
        assert content.metadata.canonical_url == "https://ex.com/a"
        assert [s.code for s in suggestions] == [
            SuggestionCode.MISSING_HEADINGS,
            SuggestionCode.MISSING_AUTHOR,
            SuggestionCode.MISSING_PUBLISH_DATE,
        ]

    def test_config_max_length_is_default_budget(self, article_html, article_url):
        content = ContentPipeline(ExtractionConfig(max_length=50)).process(article_html, article_url)
        assert content.processed_length <= 50


class TestDegradation:
    def test_build_failure_yields_empty_hierarchy(self, article_html, article_url, monkeypatch, caplog):
        def boom(*args, **kwargs):
            raise RuntimeError("walk failed")

        monkeypatch.setattr(pipeline_mod, "build_hierarchy", boom)
        with caplog.at_level(logging.WARNING, logger="contentmap.pipeline"):
            content = process_html(article_html, article_url)
        assert content.hierarchy == ()
        assert content.clean_text == ""
        assert content.metadata.title == "How to Brew Coffee | Bean Blog"
        assert "Phase build failed" in caplog.text
        assert "Degraded pipeline" in caplog.text

    def test_resolve_failure_yields_default_metadata(self, article_html, article_url, monkeypatch):
        def boom(self, *args, **kwargs):
            raise RuntimeError("resolver failed")

        monkeypatch.setattr(MetadataResolver, "resolve", boom)
        content = process_html(article_html, article_url)
        assert content.metadata.title == ""
        assert len(content.hierarchy) == 9

    def test_infer_failure_keeps_resolved_metadata(self, article_html, article_url, monkeypatch):
        def boom(*args, **kwargs):
            raise RuntimeError("inference failed")

        monkeypatch.setattr(pipeline_mod, "infer_metadata", boom)
        m = process_html(article_html, article_url).metadata
        assert m.author.name == "Jane Doe"
        assert m.modified_date is None

    def test_classify_failure_yields_no_suggestions(self, article_html, article_url, monkeypatch):
        def boom(*args, **kwargs):
            raise RuntimeError("advice failed")

        monkeypatch.setattr(pipeline_mod, "advise", boom)
        assert process_html(article_html, article_url).quality_suggestions == ()


class TestLogging:
    def test_source_url_bound_during_processing(self, article_html, article_url, monkeypatch):
        seen = {}
        real_build = pipeline_mod.build_hierarchy

        def spy(doc, config):
            seen.update(structlog.contextvars.get_contextvars())
            return real_build(doc, config)

        monkeypatch.setattr(pipeline_mod, "build_hierarchy", spy)
        process_html(article_html, article_url)
        assert seen.get("source_url") == article_url
        assert "source_url" not in structlog.contextvars.get_contextvars()

    def test_debug_summary(self, article_html, article_url, caplog):
        with caplog.at_level(logging.DEBUG, logger="contentmap.pipeline"):
            process_html(article_html, article_url, max_length=100)
        assert "Processed in" in caplog.text
        assert "dropped" in caplog.text
        slowest = re.search(r"slowest=(\w+)", caplog.text)
        assert slowest is not None
        assert slowest.group(1) in PHASES
