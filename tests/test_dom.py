# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for the DOM access layer (lxml + cssselect)."""

from __future__ import annotations

import pytest

from contentmap.dom import Document, element_attr, element_text, is_element, tag_name
from contentmap.errors import DocumentParseError
from tests._html_helpers import doc, page


class TestParse:
    def test_empty_string_yields_empty_document(self):
        d = Document.parse("")
        assert d.is_empty
        assert d.select("p") == []

    def test_none_yields_empty_document(self):
        assert Document.parse(None).is_empty

    def test_whitespace_only_yields_empty_document(self):
        assert Document.parse("   \n\t ").is_empty

    def test_strict_empty_raises(self):
        with pytest.raises(DocumentParseError):
            Document.parse("", strict=True)

    def test_fragment_gets_body(self):
        d = Document.parse("<p>Hello there</p>")
        assert tag_name(d.body) == "body"
        assert d.first_text("p") == "Hello there"

    def test_nul_bytes_are_dropped(self):
        d = Document.parse("<p>a\x00b</p>")
        assert d.first_text("p") == "ab"

    def test_malformed_markup_recovers(self):
        d = Document.parse("<div><p>Unclosed paragraph<div>next")
        assert "Unclosed paragraph" in d.text("p")

    def test_image_only_document_is_not_empty(self):
        assert not Document.parse(page('<img src="a.png">')).is_empty


class TestLookups:
    def test_invalid_selector_returns_empty(self):
        d = doc("<p>text</p>")
        assert d.select("p[") == []
        assert d.select_one("p[") is None
        assert d.count("p[") == 0

    def test_select_in_document_order(self):
        d = doc("<h2>a</h2><p>b</p><h2>c</h2>")
        assert [element_text(el) for el in d.select("h2, p")] == ["a", "b", "c"]

    def test_select_scope_excludes_scope_itself(self):
        d = doc('<div id="outer"><div id="inner">x</div></div>')
        outer = d.select_one("#outer")
        found = d.select("div", outer)
        assert [el.get("id") for el in found] == ["inner"]

    def test_attr_blank_is_none(self):
        d = doc('<a href="  ">x</a>')
        assert d.attr("a", "href") is None

    def test_attr_is_stripped(self):
        d = doc('<a href=" /about ">x</a>')
        assert d.attr("a", "href") == "/about"

    def test_attr_missing_element(self):
        assert doc("<p>x</p>").attr("a", "href") is None

    def test_first_attr_skips_blank(self):
        d = doc('<a href="">x</a><a href="/second">y</a>')
        assert d.first_attr("a", "href") == "/second"

    def test_text_concatenates_matches(self):
        d = doc('<span class="t">one</span><span class="t">two</span>')
        assert d.text(".t") == "one two"

    def test_text_collapses_whitespace(self):
        d = doc("<p>  lots \n\n of space  </p>")
        assert d.text("p") == "lots of space"

    def test_first_text_skips_empty(self):
        d = doc('<span class="a"></span><span class="a">hi</span>')
        assert d.first_text(".a") == "hi"

    def test_meta_content_by_name_and_property(self):
        d = doc(head='<meta name="description" content="Desc"><meta property="og:title" content="OG">')
        assert d.meta_content(name="description") == "Desc"
        assert d.meta_content(prop="og:title") == "OG"
        assert d.meta_content(name="og:title") is None
        assert d.meta_content() is None

    def test_meta_contents_skips_blank(self):
        head = (
            '<meta property="article:tag" content="one">'
            '<meta property="article:tag" content=" ">'
            '<meta property="article:tag" content="two">'
        )
        assert doc(head=head).meta_contents(prop="article:tag") == ["one", "two"]

    def test_html_lang(self):
        assert doc(lang="de-DE").html_lang == "de-DE"
        assert doc().html_lang is None

    def test_jsonld_sources(self):
        head = (
            '<script type="application/ld+json">{"@type": "Article"}</script>'
            '<script type=" Application/LD+JSON ">{"@type": "Person"}</script>'
            '<script type="text/javascript">var x = 1;</script>'
            '<script type="application/ld+json">   </script>'
        )
        assert doc(head=head).jsonld_sources() == ['{"@type": "Article"}', '{"@type": "Person"}']

    def test_iter_elements_skips_comments(self):
        d = doc('<div id="s"><!-- note --><p>a</p><span>b</span></div>')
        scope = d.select_one("#s")
        assert [tag_name(el) for el in d.iter_elements(scope)] == ["p", "span"]


class TestMutation:
    def test_remove_counts_outermost_only(self):
        d = doc('<div id="a"><div id="b">x</div></div><p>keep</p>')
        assert d.remove("div") == 1
        assert d.select("div") == []
        assert d.text("p") == "keep"

    def test_remove_keeps_tail_text(self):
        d = doc("<p>before<span>x</span> after</p>")
        d.remove("span")
        assert d.first_text("p") == "before after"

    def test_remove_first_child_keeps_tail_in_parent(self):
        d = doc("<p><b>bold</b>tail text</p>")
        d.remove("b")
        assert d.first_text("p") == "tail text"

    def test_contains_after_removal(self):
        d = doc("<div><p>x</p></div>")
        p = d.select_one("p")
        assert d.contains(p)
        d.remove("div")
        assert not d.contains(p)


class TestHelpers:
    def test_element_text_none(self):
        assert element_text(None) == ""

    def test_element_attr_none(self):
        assert element_attr(None, "href") is None

    def test_is_element(self):
        d = doc("<p>x</p>")
        assert is_element(d.select_one("p"))
        assert not is_element("p")
