# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Publish/modified date sources and visible-text date literals."""

from __future__ import annotations

import re
from collections.abc import Callable
from datetime import date, datetime
from typing import Any

from contentmap.config import Heuristics
from contentmap.dom import Document, element_text
from contentmap.metadata import jsonld
from contentmap.sanitizer import sanitize_text

Candidate = tuple[str, Callable[[], str | None]]

_MONTHS = {
    m: i
    for i, m in enumerate(
        (
            "january",
            "february",
            "march",
            "april",
            "may",
            "june",
            "july",
            "august",
            "september",
            "october",
            "november",
            "december",
        ),
        start=1,
    )
}

_MONTH_ALT = (
    "January|February|March|April|May|June|July|August|September|October|November|December"
    "|Jan|Feb|Mar|Apr|Jun|Jul|Aug|Sept|Sep|Oct|Nov|Dec"
)

_DATE_LITERAL_RE = re.compile(
    rf"\b(?P<month>{_MONTH_ALT})\.?\s+(?P<day>\d{{1,2}})(?:st|nd|rd|th)?,?\s+(?P<year>\d{{4}})\b"
    r"|\b(?P<iso>\d{4}-\d{2}-\d{2})\b"
)

_HAS_DIGIT_RE = re.compile(r"\d")


def _month_number(name: str) -> int:
    key = name.lower()
    if key in _MONTHS:
        return _MONTHS[key]
    for full, number in _MONTHS.items():
        if full.startswith(key[:3]):
            return number
    raise ValueError(f"unknown month {name!r}")


def _parse_match(match: re.Match[str]) -> str | None:
    try:
        if match.group("iso"):
            parsed = datetime.strptime(match.group("iso"), "%Y-%m-%d").date()
        else:
            parsed = date(int(match.group("year")), _month_number(match.group("month")), int(match.group("day")))
    except ValueError:
        return None
    return parsed.isoformat()


def find_date_literal(text: str | None) -> str | None:
    """First parsable date literal in ``text`` as ``YYYY-MM-DD``.

    Recognizes ``Month D, YYYY`` (full or abbreviated month) and ISO
    ``YYYY-MM-DD``. Impossible dates such as ``February 30, 2024`` are skipped.
    """
    if not text:
        return None
    for match in _DATE_LITERAL_RE.finditer(text):
        parsed = _parse_match(match)
        if parsed:
            return parsed
    return None


def accept_date_value(raw: str | None) -> str | None:
    """A tag-sourced date value is kept verbatim when it looks like a date at all."""
    value = sanitize_text(raw, max_len=64)
    return value if value and _HAS_DIGIT_RE.search(value) else None


def _itemprop_date(doc: Document, prop: str) -> str | None:
    sel = f'[itemprop="{prop}"]'
    return doc.attr(sel, "content") or doc.attr(sel, "datetime")


def _visible_text_date(doc: Document, heuristics: Heuristics) -> str | None:
    # only the first element of each selector is looked at
    for sel in heuristics.date_text_selectors:
        found = find_date_literal(element_text(doc.select_one(sel)))
        if found:
            return found
    return None


def publish_date_chain(doc: Document, blocks: list[Any], heuristics: Heuristics) -> tuple[Candidate, ...]:
    tag_sources: list[Candidate] = [
        ("meta:article:published_time", lambda: doc.meta_content(prop="article:published_time")),
        ("meta:date", lambda: doc.meta_content(name="date")),
        ("meta:publish_date", lambda: doc.meta_content(name="publish_date")),
        ("meta:publishdate", lambda: doc.meta_content(name="publishdate")),
        ("time[itemprop=datePublished]", lambda: doc.attr('time[itemprop="datePublished"]', "datetime")),
        ("time[datetime]", lambda: doc.attr("time[datetime]", "datetime")),
        ("itemprop:datePublished", lambda: _itemprop_date(doc, "datePublished")),
        ("hubspot:published-date", lambda: doc.attr(".blog-post__published-date time", "datetime")),
        ("css:publish-date", lambda: doc.attr('[class*="publish-date"] time', "datetime")),
        ("jsonld:datePublished", lambda: jsonld.find_string(blocks, "datePublished", max_len=64)),
    ]
    chain = [(source, _accepted(fn)) for source, fn in tag_sources]
    chain.append(("visible-text", lambda: _visible_text_date(doc, heuristics)))
    return tuple(chain)


def modified_date_chain(doc: Document, blocks: list[Any]) -> tuple[Candidate, ...]:
    tag_sources: list[Candidate] = [
        ("meta:article:modified_time", lambda: doc.meta_content(prop="article:modified_time")),
        ("meta:last-modified", lambda: doc.meta_content(name="last-modified")),
        ("time[itemprop=dateModified]", lambda: doc.attr('time[itemprop="dateModified"]', "datetime")),
        ("itemprop:dateModified", lambda: _itemprop_date(doc, "dateModified")),
        ("hubspot:updated-date", lambda: doc.attr(".blog-post__updated-date time", "datetime")),
        ("jsonld:dateModified", lambda: jsonld.find_string(blocks, "dateModified", max_len=64)),
    ]
    return tuple((source, _accepted(fn)) for source, fn in tag_sources)


def _accepted(fn: Callable[[], str | None]) -> Callable[[], str | None]:
    return lambda: accept_date_value(fn())
