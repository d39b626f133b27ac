# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Author name validation and the author precedence chain.

Every candidate, whatever its source, goes through ``clean_author_name`` and
``is_valid_author_name``; a rejected candidate lets the chain continue.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from typing import Any
from urllib.parse import urlsplit

from contentmap.config import Heuristics
from contentmap.dom import Document, element_attr, element_text
from contentmap.metadata import AuthorInfo, jsonld
from contentmap.sanitizer import collapse_whitespace, sanitize_text

Candidate = tuple[str, Callable[[], str | None]]

_PREFIX_RE = re.compile(r"^(?:(?:posted|written)\s+by\b:?|author:|by\b:?|from\b)\s*", re.IGNORECASE)
_PIPE_RE = re.compile(r"\s*\|")
_DASH_SEP_RE = re.compile(r"\s+[-–—]\s+")

# "By Jane Doe" at the start of a byline, or anywhere after a "by"
_BYLINE_RE = re.compile(r"(?:^|\bby\s+)([A-Z][\w'’]+(?:-[A-Z][\w'’]+)*(?:\s+[A-Z][\w'.’]*(?:-[A-Z][\w'’]+)*){1,3})")

_MAX_NAME_LEN = 100


def clean_author_name(raw: str | None) -> str:
    """Strip by-line prefixes and trailing ``| ...`` / `` - ...`` parts."""
    if not raw:
        return ""
    name = collapse_whitespace(raw)
    name = _PREFIX_RE.sub("", name).strip()
    name = _PIPE_RE.split(name, maxsplit=1)[0].strip()
    name = _DASH_SEP_RE.split(name, maxsplit=1)[0].strip()
    return sanitize_text(name, max_len=_MAX_NAME_LEN)


def _is_name_part(part: str) -> bool:
    # "O'Brien", "McDonald", "José"
    letters = part.replace("'", "").replace("’", "")
    return len(part) >= 2 and part[0].isupper() and letters.isalpha()


def _is_initial(token: str) -> bool:
    return len(token) == 2 and token[0].isupper() and token[1] == "."


def is_valid_author_name(name: str, deny_words: Iterable[str]) -> bool:
    """2-4 capitalized word tokens, hyphenated parts allowed, no deny-listed words.

    Middle tokens may be initials ("Jane Q. Public"); the first and last token
    must be full name parts.
    """
    if not name or len(name) > _MAX_NAME_LEN:
        return False
    tokens = name.split()
    if not 2 <= len(tokens) <= 4:
        return False
    deny = frozenset(deny_words)
    for i, token in enumerate(tokens):
        parts = token.split("-")
        if any(p.lower().strip(".") in deny for p in parts):
            return False
        if 0 < i < len(tokens) - 1 and _is_initial(token):
            continue
        if not all(_is_name_part(p) for p in parts):
            return False
    return True


def accept_author_name(raw: str | None, heuristics: Heuristics) -> str | None:
    name = clean_author_name(raw)
    return name if is_valid_author_name(name, heuristics.author_deny_words) else None


# --- candidates ---


def _byline_scan(doc: Document, heuristics: Heuristics) -> str | None:
    texts = [doc.first_text(sel) for sel in heuristics.byline_selectors]
    texts += [t for t in (element_text(el) for el in doc.select("p, span")) if t[:3].lower() == "by " and len(t) < 120]
    for text in texts:
        if not text:
            continue
        match = _BYLINE_RE.search(text)
        if match:
            return match.group(1)
    return None


def _jsonld_author_name(blocks: list[Any]) -> str | None:
    return jsonld.person_or_org_name(jsonld.author_object(blocks))


def author_name_chain(doc: Document, blocks: list[Any], heuristics: Heuristics) -> tuple[Candidate, ...]:
    """Ordered ``(source, candidate)`` pairs for the author name."""
    chain: list[Candidate] = [
        ("meta:author", lambda: doc.meta_content(name="author")),
        ("meta:article:author", lambda: doc.meta_content(prop="article:author")),
    ]
    for sel in heuristics.author_text_selectors:
        chain.append((f"css:{sel}", lambda sel=sel: doc.first_text(sel)))
    chain += [
        ("itemprop:author@content", lambda: doc.attr('[itemprop="author"]', "content")),
        ("itemprop:author", lambda: doc.first_text('[itemprop="author"]')),
        ("byline", lambda: _byline_scan(doc, heuristics)),
        ("jsonld:author", lambda: _jsonld_author_name(blocks)),
    ]
    return tuple((source, _validated(fn, heuristics)) for source, fn in chain)


def _validated(fn: Callable[[], str | None], heuristics: Heuristics) -> Callable[[], str | None]:
    return lambda: accept_author_name(fn(), heuristics)


# --- extras ---


def _host(url: str) -> str:
    try:
        host = urlsplit(url if "//" in url else f"//{url}").hostname or ""
    except ValueError:
        return ""
    return host.removeprefix("www.")


def social_profiles(doc: Document, blocks: list[Any], heuristics: Heuristics, cap: int) -> list[str]:
    """Links to known social hosts inside author/byline containers plus JSON-LD ``sameAs``."""
    found: list[str] = []
    seen: set[str] = set()

    def add(url: str | None) -> None:
        if not url or url in seen:
            return
        host = _host(url)
        if any(host == s or host.endswith("." + s) for s in heuristics.social_hosts):
            seen.add(url)
            found.append(url)

    for sel in heuristics.author_container_selectors:
        for container in doc.select(sel):
            for link in doc.select("a[href]", container):
                add(element_attr(link, "href"))
    for url in jsonld.author_same_as(blocks):
        add(url)
    return found[:cap]


def resolve_author(
    doc: Document,
    blocks: list[Any],
    heuristics: Heuristics,
    name: str,
    *,
    cap: int = 10,
) -> AuthorInfo:
    """Fill url/jobTitle/image/socialProfiles around an accepted name."""
    url = doc.attr('a[rel="author"]', "href") or doc.attr('[itemprop="author"] [itemprop="url"]', "href")
    url = url or jsonld.author_url(blocks)
    job_title = sanitize_text(doc.text('[itemprop="jobTitle"]'), max_len=200) or None
    image = (
        doc.meta_content(prop="article:author:image")
        or doc.attr('[itemprop="author"] img', "src")
        or jsonld.author_image(blocks)
    )
    return AuthorInfo(
        name=name,
        url=url,
        job_title=job_title,
        image=image,
        social_profiles=social_profiles(doc, blocks, heuristics, cap),
    )
