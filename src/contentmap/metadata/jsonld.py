# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""JSON-LD helpers.

Blocks are parsed once per document and then treated as opaque data: every
lookup checks the shape it needs and returns ``None`` on anything else.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from contentmap.metadata import Breadcrumb
from contentmap.sanitizer import sanitize_text

logger = logging.getLogger(__name__)

_ORG_TYPES = ("Organization", "Corporation", "NewsMediaOrganization", "LocalBusiness", "OnlineBusiness")
_VIDEO_TYPES = ("VideoObject",)


# Parsed blocks are passed through to JSON output; deeper nesting is dropped
_MAX_BLOCK_DEPTH = 64


def _nesting_depth(data: Any) -> int:
    """Deepest list/dict nesting of a parsed block, measured without recursion."""
    deepest = 0
    stack = [(data, 1)]
    while stack:
        node, depth = stack.pop()
        if isinstance(node, dict):
            children = node.values()
        elif isinstance(node, list):
            children = node
        else:
            continue
        deepest = max(deepest, depth)
        if deepest > _MAX_BLOCK_DEPTH:
            break
        stack.extend((child, depth + 1) for child in children)
    return deepest


def parse_blocks(sources: list[str]) -> list[Any]:
    """Parse raw ``ld+json`` script texts. Unparsable or overly nested blocks are skipped."""
    parsed = []
    for text in sources:
        try:
            data = json.loads(text)
        except (ValueError, TypeError, RecursionError) as e:
            logger.debug("Skipping malformed JSON-LD block: %s", e)
            continue
        if _nesting_depth(data) > _MAX_BLOCK_DEPTH:
            logger.debug("Skipping JSON-LD block nested deeper than %d levels", _MAX_BLOCK_DEPTH)
            continue
        parsed.append(data)
    return parsed


def is_valid_url(url: Any) -> str | None:
    """Validate URL: must be string, <=2048 chars, http(s) or protocol-relative."""
    if not isinstance(url, str) or len(url) > 2048:
        return None
    url = url.strip()
    return url if url.startswith(("http://", "https://", "//")) else None


def image_url(value: Any) -> str | None:
    """URL out of an ``image``/``logo`` value: string, ImageObject or list of either."""
    if isinstance(value, list):
        return image_url(value[0]) if value else None
    if isinstance(value, dict):
        u = value.get("url")
        return is_valid_url(u if u is not None else value.get("contentUrl"))
    return is_valid_url(value)


def person_or_org_name(val: Any, max_len: int = 200) -> str | None:
    """Extract name from a Person/Organization object or plain string; lists use the first entry."""
    if isinstance(val, list):
        return person_or_org_name(val[0], max_len) if val else None
    if isinstance(val, dict):
        name = val.get("name")
        if isinstance(name, str) and name.strip():
            return sanitize_text(name.strip(), max_len=max_len) or None
    elif isinstance(val, str) and val.strip():
        return sanitize_text(val.strip(), max_len=max_len) or None
    return None


def _iter_objects(data: Any, max_depth: int = 5):
    """Yield top-level objects, descending through arrays and ``@graph``."""
    if max_depth <= 0:
        return
    if isinstance(data, list):
        for item in data:
            yield from _iter_objects(item, max_depth - 1)
    elif isinstance(data, dict):
        yield data
        if "@graph" in data:
            yield from _iter_objects(data["@graph"], max_depth - 1)


def _has_type(obj: dict, type_names: tuple[str, ...]) -> bool:
    schema_type = obj.get("@type", "")
    if isinstance(schema_type, list):
        return any(t in type_names for t in schema_type)
    return schema_type in type_names


def find_type(blocks: list[Any], type_names: tuple[str, ...]) -> dict | None:
    """First object with a matching ``@type`` (handles @graph, arrays, list types)."""
    for data in blocks:
        for obj in _iter_objects(data):
            if _has_type(obj, type_names):
                return obj
    return None


def find_value(blocks: list[Any], key: str) -> Any:
    """First non-empty value of ``key`` on any object, in block order."""
    for data in blocks:
        for obj in _iter_objects(data):
            value = obj.get(key)
            if value:
                return value
    return None


def find_string(blocks: list[Any], key: str, max_len: int = 200) -> str | None:
    value = find_value(blocks, key)
    if isinstance(value, (str, int, float)) and not isinstance(value, bool):
        return sanitize_text(str(value).strip(), max_len=max_len) or None
    return None


# --- author ---


def author_object(blocks: list[Any]) -> Any:
    """Raw ``author`` value (string, Person dict or list). ``None`` when absent."""
    return find_value(blocks, "author")


def _first_author_dict(author: Any) -> dict | None:
    if isinstance(author, list):
        author = author[0] if author else None
    return author if isinstance(author, dict) else None


def author_url(blocks: list[Any]) -> str | None:
    author = _first_author_dict(author_object(blocks))
    return is_valid_url(author.get("url")) if author else None


def author_image(blocks: list[Any]) -> str | None:
    author = _first_author_dict(author_object(blocks))
    return image_url(author.get("image")) if author else None


def author_same_as(blocks: list[Any]) -> list[str]:
    author = _first_author_dict(author_object(blocks))
    if not author:
        return []
    same_as = author.get("sameAs")
    if isinstance(same_as, str):
        same_as = [same_as]
    if not isinstance(same_as, list):
        return []
    return [u for u in (is_valid_url(s) for s in same_as) if u]


# --- publisher ---


def publisher(blocks: list[Any]) -> dict | None:
    """The page's ``publisher`` object, else the first Organization-like object."""
    for data in blocks:
        for obj in _iter_objects(data):
            pub = obj.get("publisher")
            if isinstance(pub, list):
                pub = pub[0] if pub else None
            if isinstance(pub, dict):
                return pub
    return find_type(blocks, _ORG_TYPES)


def publisher_name(blocks: list[Any]) -> str | None:
    pub = publisher(blocks)
    return person_or_org_name(pub) if pub else None


def publisher_logo(blocks: list[Any]) -> str | None:
    pub = publisher(blocks)
    return image_url(pub.get("logo")) if pub else None


# --- video ---


def video_objects(blocks: list[Any]) -> list[tuple[str, str | None]]:
    """``(url, name)`` for every VideoObject with a ``contentUrl`` or ``embedUrl``."""
    found = []
    for data in blocks:
        for obj in _iter_objects(data):
            if not _has_type(obj, _VIDEO_TYPES):
                continue
            url = is_valid_url(obj.get("contentUrl")) or is_valid_url(obj.get("embedUrl"))
            if not url:
                continue
            name = obj.get("name")
            title = sanitize_text(name.strip(), max_len=256) if isinstance(name, str) and name.strip() else None
            found.append((url, title))
    return found


# --- breadcrumbs ---


def breadcrumb_list(blocks: list[Any]) -> list[Breadcrumb]:
    """BreadcrumbList items ordered by ``position``. Empty list if none found."""
    bc = find_type(blocks, ("BreadcrumbList",))
    if not bc:
        return []
    elements = bc.get("itemListElement", [])
    if not isinstance(elements, list):
        return []

    crumbs: list[tuple[int, Breadcrumb]] = []
    for el in elements:
        if not isinstance(el, dict):
            continue
        name: str | None = None
        url: str | None = None

        item = el.get("item")
        if isinstance(item, dict):
            if isinstance(item.get("name"), str):
                name = sanitize_text(item["name"].strip(), max_len=200) or None
            url = is_valid_url(item.get("@id") or item.get("url"))
        elif isinstance(item, str):
            url = is_valid_url(item)

        # name can also be at element level
        if not name and isinstance(el.get("name"), str):
            name = sanitize_text(el["name"].strip(), max_len=200) or None

        if name:
            crumbs.append((_position(el.get("position")), Breadcrumb(name=name, url=url)))

    crumbs.sort(key=lambda c: c[0])
    return [c for _, c in crumbs]


def _position(v: Any) -> int:
    try:
        return int(float(str(v).strip()))
    except (ValueError, TypeError, OverflowError):
        return 0
