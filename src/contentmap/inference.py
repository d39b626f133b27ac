# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Inference pass (pass 2): backfill metadata from the extracted body.

Runs on the truncated clean text and hierarchy. Every step only fills a
field that is still empty; the two exceptions are named explicitly:

- a single-word author name is treated as incomplete and may be replaced by
  a validated full name (url/image/jobTitle are kept);
- a business name that is a raw domain (contains a dot) may be replaced by
  the brand derived from the host name.

Every candidate is validated before acceptance. When validation fails the
field stays empty.
"""

from __future__ import annotations

import ipaddress
import logging
import re
from dataclasses import replace
from urllib.parse import urlsplit

from contentmap.config import DEFAULT_CONFIG, ExtractionConfig, Heuristics
from contentmap.metadata import AuthorInfo, BusinessInfo, EnhancedMetadata
from contentmap.metadata.authors import is_valid_author_name
from contentmap.metadata.dates import find_date_literal
from contentmap.metadata.resolver import is_section_title
from contentmap.model import ContentNode, Heading, Image

logger = logging.getLogger(__name__)

_NAME = r"[A-Z][\w'’]+(?:-[A-Z][\w'’]+)*(?: +(?:[A-Z]\.|[A-Z][\w'’]+(?:-[A-Z][\w'’]+)*)){1,3}"

# A paragraph that is nothing but a byline: "P: Jane Doe", "P: By Jane Doe | May 2, 2024"
_BYLINE_PARAGRAPH_RE = re.compile(rf"^P: (?:[Bb]y +)?(?P<name>{_NAME}) *(?:$|[|,·•–—-])", re.MULTILINE)
# A paragraph opening with "By Jane Doe", "Written by Jane Doe" or "Author: Jane Doe";
# mid-sentence credits ("Photo by Getty Images") are not bylines
_BY_PHRASE_RE = re.compile(rf"^P: (?:[Ww]ritten [Bb]y|[Bb]y|[Aa]uthor:) +(?P<name>{_NAME})", re.MULTILINE)

_SECTION_LEVELS = (2, 3, 4)


def _valid_prefix(candidate: str, heuristics: Heuristics) -> str | None:
    """Longest valid leading run of tokens (at least two)."""
    tokens = candidate.split()
    for n in range(min(len(tokens), 4), 1, -1):
        name = " ".join(tokens[:n])
        if is_valid_author_name(name, heuristics.author_deny_words):
            return name
    return None


def infer_author_name(clean_text: str, heuristics: Heuristics) -> str | None:
    """First validated author name in byline paragraphs, then in by-phrases."""
    for pattern in (_BYLINE_PARAGRAPH_RE, _BY_PHRASE_RE):
        for match in pattern.finditer(clean_text):
            name = _valid_prefix(match.group("name"), heuristics)
            if name:
                return name
    return None


def find_author_image(nodes: tuple[ContentNode, ...], author_name: str) -> str | None:
    """URL of the first image whose alt text or URL mentions "author" or the author's name."""
    needles = ["author"]
    if author_name:
        needles.append(author_name.lower())
    for node in nodes:
        if not isinstance(node, Image):
            continue
        haystack = f"{node.alt or ''} {node.url}".lower()
        if any(n in haystack for n in needles):
            return node.url
    return None


def infer_sections(nodes: tuple[ContentNode, ...], cap: int = 6) -> list[str]:
    """Section titles from H2 headings, falling back to H3, then H4."""
    for level in _SECTION_LEVELS:
        titles = [n.text for n in nodes if isinstance(n, Heading) and n.level == level and is_section_title(n.text)]
        if titles:
            return titles[:cap]
    return []


def _is_address_like(host: str) -> bool:
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return "." not in host
    return True


def brand_from_url(url: str, heuristics: Heuristics) -> str | None:
    """Best-effort brand name from a host name.

    ``blog.helpfulhero.com`` → ``Helpful Hero``; ``www.acme-corp.com`` →
    ``Acme Corp``. IP addresses and single-label hosts yield ``None``.
    """
    try:
        host = (urlsplit(url).hostname or "").lower()
    except ValueError:
        return None
    if not host or _is_address_like(host):
        return None

    stripped = True
    while stripped:
        stripped = False
        for prefix in heuristics.stripped_subdomains:
            if host.startswith(prefix) and "." in host[len(prefix) :]:
                host = host[len(prefix) :]
                stripped = True

    label = host.split(".")[0]
    if "-" in label or "_" in label:
        words = [w for w in re.split(r"[-_]", label) if w]
    else:
        words = [label]
        for suffix in heuristics.brand_suffixes:
            if len(suffix) >= 3 and label.endswith(suffix) and len(label) > len(suffix):
                words = [label[: -len(suffix)], suffix]
                break

    brand = " ".join(w[:1].upper() + w[1:] for w in words)
    if not 2 < len(brand) < 50 or not any(c.isalpha() for c in brand):
        return None
    return brand


def infer_metadata(
    metadata: EnhancedMetadata,
    clean_text: str,
    nodes: tuple[ContentNode, ...],
    *,
    source_url: str = "",
    config: ExtractionConfig = DEFAULT_CONFIG,
) -> EnhancedMetadata:
    """Return a copy of ``metadata`` with empty fields backfilled from the body."""
    h = config.heuristics
    enhanced = replace(metadata)

    # 1. author name
    author = enhanced.author
    if author is None or len(author.name.split()) < 2:
        name = infer_author_name(clean_text, h)
        if name:
            author = replace(author, name=name) if author else AuthorInfo(name=name)
            logger.debug("Inferred author from content: %s", name)

    # 1b. author image
    if author is not None and not author.image:
        image = find_author_image(nodes, author.name)
        if image:
            author = replace(author, image=image)
    enhanced.author = author

    # 2. publish date
    if not enhanced.publish_date:
        enhanced.publish_date = find_date_literal(clean_text)

    # 3. modified date
    if not enhanced.modified_date and enhanced.publish_date:
        enhanced.modified_date = enhanced.publish_date

    # 4. sections
    if not enhanced.article_sections:
        enhanced.article_sections = infer_sections(nodes, config.max_sections)
    if not enhanced.article_section and enhanced.article_sections:
        enhanced.article_section = enhanced.article_sections[0]

    # 5. publisher
    business = enhanced.business
    if business is None or "." in business.name:
        brand = brand_from_url(enhanced.canonical_url or source_url, h)
        if brand is None and source_url and source_url != enhanced.canonical_url:
            brand = brand_from_url(source_url, h)
        if brand:
            enhanced.business = replace(business, name=brand) if business else BusinessInfo(name=brand)
            logger.debug("Inferred publisher from host: %s", brand)

    return enhanced
