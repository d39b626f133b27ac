# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Images and videos referenced by the page."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlsplit

from contentmap.config import Heuristics
from contentmap.dom import Document, element_attr
from contentmap.metadata import ImageRef, ImageSet, VideoRef, jsonld
from contentmap.sanitizer import sanitize_text

logger = logging.getLogger(__name__)


def _dimension(value: str | None) -> int | None:
    if not value:
        return None
    value = value.strip().removesuffix("px")
    if not value.isdigit():
        return None
    # isdigit() also accepts superscripts and other digits int() rejects
    try:
        return int(value)
    except ValueError:
        return None


def featured_image(doc: Document) -> ImageRef | None:
    url = doc.meta_content(prop="og:image") or doc.meta_content(name="twitter:image")
    if not url:
        return None
    alt = doc.meta_content(prop="og:image:alt") or doc.meta_content(name="twitter:image:alt")
    return ImageRef(url=url, alt=sanitize_text(alt) or None)


def page_images(doc: Document, cap: int = 10) -> list[ImageRef]:
    """Every ``<img src>`` except inline ``data:`` URIs, in document order."""
    images: list[ImageRef] = []
    for img in doc.select("img[src]"):
        src = element_attr(img, "src")
        if not src or src.lower().startswith("data:"):
            continue
        caption = element_attr(img, "title") or element_attr(img, "data-caption")
        images.append(
            ImageRef(
                url=src,
                alt=sanitize_text(element_attr(img, "alt")) or None,
                caption=sanitize_text(caption, max_len=500) or None,
                width=_dimension(img.get("width")),
                height=_dimension(img.get("height")),
            )
        )
        if len(images) >= cap:
            break
    return images


def extract_images(doc: Document, cap: int = 10) -> ImageSet:
    return ImageSet(featured=featured_image(doc), all=page_images(doc, cap))


def video_provider(url: str, heuristics: Heuristics) -> str | None:
    """Provider name for an embed URL on a known video host, else ``None``."""
    try:
        host = (urlsplit(url if "//" in url else f"//{url}").hostname or "").lower()
    except ValueError:
        return None
    for domain, provider in heuristics.video_providers:
        if host == domain or host.endswith("." + domain):
            return provider
    return None


def extract_videos(doc: Document, blocks: list[Any], heuristics: Heuristics, cap: int = 10) -> list[VideoRef]:
    """Native ``<video>``, provider embeds and JSON-LD VideoObjects, deduplicated by URL."""
    videos: list[VideoRef] = []
    seen: set[str] = set()

    def add(url: str | None, provider: str, title: str | None = None) -> None:
        if not url or url in seen or len(videos) >= cap:
            return
        seen.add(url)
        videos.append(VideoRef(url=url, provider=provider, title=title))

    for video in doc.select("video"):
        add(element_attr(video, "src"), "html5", sanitize_text(element_attr(video, "title")) or None)
        for source in doc.select("source[src]", video):
            add(element_attr(source, "src"), "html5")

    for embed in doc.select("iframe[src], embed[src]"):
        src = element_attr(embed, "src")
        provider = video_provider(src, heuristics) if src else None
        if provider:
            add(src, provider, sanitize_text(element_attr(embed, "title")) or None)

    for url, title in jsonld.video_objects(blocks):
        add(url, "jsonld", title)

    logger.debug("Found %d video(s)", len(videos))
    return videos
