# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tag and keyword normalization."""

from __future__ import annotations

from collections.abc import Iterable

from contentmap.config import Heuristics
from contentmap.dom import Document, element_text
from contentmap.sanitizer import clean_node_text


def _dedupe(values: Iterable[str], cap: int) -> list[str]:
    """Case-insensitive dedupe keeping the first-seen casing."""
    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        key = value.lower()
        if key in seen:
            continue
        seen.add(key)
        result.append(value)
        if len(result) >= cap:
            break
    return result


def split_tag(raw: str) -> list[str]:
    """One raw tag → zero or more normalized tags.

    Compounds of three or more words are split into their words (3-49 chars
    each); one- and two-word tags are kept whole when 3-99 chars long.
    """
    tag = clean_node_text(raw)
    if not tag:
        return []
    words = tag.split(" ")
    if len(words) >= 3:
        return [w for w in words if 2 < len(w) < 50]
    return [tag] if 2 < len(tag) < 100 else []


def normalize_tags(raw_tags: Iterable[str], cap: int = 10) -> list[str]:
    return _dedupe((t for raw in raw_tags for t in split_tag(raw)), cap)


def normalize_keywords(content: str | None, cap: int = 10) -> list[str]:
    """Comma-separated ``keywords`` meta → trimmed, deduplicated list."""
    if not content:
        return []
    return _dedupe((k for k in (clean_node_text(part) for part in content.split(",")) if k), cap)


def extract_tags(doc: Document, heuristics: Heuristics, cap: int = 10) -> list[str]:
    raw = list(doc.meta_contents(prop="article:tag"))
    for sel in heuristics.tag_element_selectors:
        raw.extend(element_text(el) for el in doc.select(sel))
    return normalize_tags(raw, cap)


def extract_keywords(doc: Document, cap: int = 10) -> list[str]:
    return normalize_keywords(doc.meta_content(name="keywords"), cap)
