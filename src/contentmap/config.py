# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Extraction configuration and the fixed heuristic tables.

Two layers:
  - ``Heuristics``: frozen, versioned lookup tables (selector priority lists,
    deny-lists, brand-suffix dictionary). Shared read-only across documents.
  - ``ExtractionConfig``: frozen pydantic model with numeric knobs and the
    heuristics bundle. Injected at pipeline construction.

Environment variables are only read by ``ExtractionConfig.from_env()``; the
core pipeline never touches the environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from contentmap.errors import ConfigError

DEFAULT_MAX_LENGTH = 6000
DEFAULT_PREVIEW_MAX_LENGTH = 2000


@dataclass(frozen=True)
class Heuristics:
    """Immutable heuristic tables. Bump ``version`` whenever a table changes."""

    version: str = "2025.10"

    # Primary content region, first match wins; body is the implicit fallback.
    content_region_selectors: tuple[str, ...] = (
        "main",
        "article",
        '[role="main"]',
        ".post-body",
        ".blog-post",
        ".content",
        ".main-content",
        ".post-content",
        ".entry-content",
        ".article-content",
        ".article-body",
        "#content",
        "#main",
        ".hsg-content-id-main-column",  # HubSpot blog
    )

    # Section headings (pass 1), first selector with any match wins.
    section_heading_selectors: tuple[str, ...] = (
        "main h2",
        "article h2",
        ".content h2",
        ".post-content h2",
        ".entry-content h2",
        ".article-content h2",
        ".post-body h2",
        ".blog-post h2",
        "body h2",
    )

    # --- element removal ---
    script_tags: tuple[str, ...] = ("script", "style", "noscript", "iframe", "embed", "object", "template")
    layout_tags: tuple[str, ...] = ("nav", "footer", "aside")
    noise_selectors: tuple[str, ...] = (
        ".sidebar",
        ".menu",
        ".navigation",
        ".nav",
        ".ads",
        ".advertisement",
        ".ad-banner",
        ".social-share",
        ".share-buttons",
        ".comments",
        ".comment-section",
        ".popup",
        ".modal",
        ".overlay",
        ".cookie-banner",
        ".consent-banner",
        ".newsletter-signup",
        ".subscription",
        ".related-posts",
        ".recommended",
        ".tags-section",
        "#sidebar",
        "#menu",
        "#navigation",
        "#ads",
        "#comments",
        "#popup",
    )
    noise_attribute_selectors: tuple[str, ...] = (
        '[class*="ad-"]:not([class*="author"]):not([class*="date"])',
        '[class*="advertisement"]',
        '[id*="ad-"]:not([id*="author"])',
        '[class*="sidebar"]:not([class*="author"])',
        '[class*="popup"]',
        '[class*="modal"]',
        '[class*="overlay"]',
    )
    head_only_tags: tuple[str, ...] = ("link", "meta")
    # class substrings that protect an empty element from removal
    protected_class_markers: tuple[str, ...] = ("author", "byline", "date")
    # void / structural tags that are legitimately empty
    keep_empty_tags: frozenset[str] = frozenset(
        {"img", "br", "hr", "time", "td", "th", "tr", "source", "video", "audio", "picture", "input"}
    )

    # --- author ---
    author_text_selectors: tuple[str, ...] = (
        '[rel="author"]',
        ".author-name, .author .name, .byline .name",
        ".blog-author__name, .hs-author-name",  # HubSpot
        '[class*="author-name"]',
        ".author, .by-author, .byline",
        '[itemprop="author"] [itemprop="name"]',
    )
    byline_selectors: tuple[str, ...] = (
        ".byline",
        ".author-byline",
        '[class*="byline"]',
        ".blog-post__author",
        ".post-author",
    )
    author_container_selectors: tuple[str, ...] = (
        '[itemprop="author"]',
        ".author",
        ".byline",
        ".post-author",
        ".blog-post__author",
        '[class*="author-bio"]',
    )
    author_deny_words: frozenset[str] = frozenset(
        {
            "team",
            "staff",
            "department",
            "company",
            "editor",
            "editors",
            "editorial",
            "admin",
            "administrator",
            "contributor",
            "contributors",
            "guest",
            "newsroom",
            "desk",
            "office",
            "press",
            "support",
            "marketing",
            "sales",
            "group",
            "inc",
            "llc",
            "ltd",
            "corp",
            "corporation",
            "media",
            "news",
            "blog",
            "posted",
            "updated",
            "published",
            "read",
            "more",
            "share",
            "minutes",
            "min",
            "comments",
            "home",
            "about",
            "contact",
            "privacy",
            "policy",
            "terms",
            "subscribe",
            "unknown",
            "anonymous",
        }
    )
    social_hosts: tuple[str, ...] = (
        "twitter.com",
        "x.com",
        "linkedin.com",
        "facebook.com",
        "instagram.com",
        "github.com",
        "youtube.com",
        "mastodon.social",
        "threads.net",
    )

    # --- dates ---
    date_text_selectors: tuple[str, ...] = (
        ".blog-post__date",
        ".post-date",
        '[class*="publish"]',
        '[class*="date"]',
        "time",
        "article p",
        "main p",
        ".post-content p",
        ".entry-content p",
    )

    # --- tags ---
    tag_element_selectors: tuple[str, ...] = (".tag, .tags a, .post-tags a, [class*=\"tag\"]",)

    # --- media ---
    video_providers: tuple[tuple[str, str], ...] = (
        ("youtube.com", "youtube"),
        ("youtube-nocookie.com", "youtube"),
        ("youtu.be", "youtube"),
        ("vimeo.com", "vimeo"),
        ("wistia.com", "wistia"),
        ("wistia.net", "wistia"),
        ("loom.com", "loom"),
        ("dailymotion.com", "dailymotion"),
    )
    logo_selectors: tuple[str, ...] = (
        'link[rel="icon"][type="image/png"]',
        'link[rel="icon"][type="image/x-icon"]',
        'link[rel="apple-touch-icon"]',
    )
    logo_image_selector: str = '.logo img, .site-logo img, [class*="logo"] img'
    breadcrumb_link_selector: str = '.breadcrumb a, .breadcrumbs a, [class*="breadcrumb"] a'

    # --- publisher inference ---
    stripped_subdomains: tuple[str, ...] = ("www.", "blog.")
    brand_suffixes: tuple[str, ...] = (
        "hero",
        "corp",
        "tech",
        "digital",
        "media",
        "studio",
        "labs",
        "solutions",
        "services",
        "group",
        "company",
        "inc",
        "llc",
        "blog",
        "site",
        "web",
        "net",
        "hub",
        "central",
        "online",
        "world",
        "zone",
        "spot",
    )

    # --- classification (first match wins; homepage handled separately) ---
    url_type_rules: tuple[tuple[str, tuple[str, ...]], ...] = (
        ("product", ("/product/", "/shop/")),
        ("blog", ("/blog/", "/post/")),
        ("news", ("/news/",)),
        ("about", ("/about",)),
        ("contact", ("/contact",)),
    )
    video_signal_selector: str = 'video, iframe[src*="youtube"], iframe[src*="vimeo"]'
    faq_signal_selector: str = '[class*="faq"], [class*="question"]'
    product_signal_selector: str = '[class*="product"], [class*="price"], [class*="buy"]'
    contact_signal_selector: str = '[href^="tel:"], [href^="mailto:"]'
    word_count_selector: str = "main, article, .content"


DEFAULT_HEURISTICS = Heuristics()


class ExtractionConfig(BaseModel):
    """Numeric knobs for one pipeline instance. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    max_length: int = Field(DEFAULT_MAX_LENGTH, gt=0, description="Truncation budget (chars) for AI generation calls")
    preview_max_length: int = Field(
        DEFAULT_PREVIEW_MAX_LENGTH, gt=0, description="Truncation budget (chars) for lightweight preview calls"
    )
    min_paragraph_length: int = Field(20, ge=0, description="Paragraphs must be longer than this to become nodes")
    heading_budget_ratio: float = Field(0.8, gt=0.0, le=1.0, description="Share of budget reserved for headings")
    max_sections: int = Field(6, gt=0, description="Cap for inferred articleSections")
    list_cap: int = Field(10, gt=0, description="Cap for tags, keywords, images, videos")
    words_per_minute: int = Field(200, gt=0, description="Reading speed for readingTime")
    short_content_words: int = Field(300, ge=0, description="Word count below which content is flagged short")
    heuristics: Heuristics = Field(default=DEFAULT_HEURISTICS, description="Selector and deny-list tables")

    @field_validator("heuristics")
    @classmethod
    def _heuristics_versioned(cls, v: Heuristics) -> Heuristics:
        if not v.version:
            raise ValueError("heuristics.version must be non-empty")
        return v

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None, **overrides) -> ExtractionConfig:
        """Build a config from ``CONTENTMAP_*`` environment variables.

        Raises:
            ConfigError: a variable is set but not a positive integer.
        """
        env = os.environ if environ is None else environ
        values: dict = {}
        for var, key in (
            ("CONTENTMAP_MAX_LENGTH", "max_length"),
            ("CONTENTMAP_PREVIEW_MAX_LENGTH", "preview_max_length"),
        ):
            raw = env.get(var, "").strip()
            if not raw:
                continue
            try:
                values[key] = int(raw)
            except ValueError:
                raise ConfigError(f"{var} must be an integer, got {raw!r}", setting=var) from None
        values.update(overrides)
        try:
            return cls(**values)
        except ValidationError as e:
            first = e.errors()[0]
            setting = str(first["loc"][0]) if first["loc"] else ""
            raise ConfigError(f"Invalid extraction config: {setting}: {first['msg']}", setting=setting) from e


DEFAULT_CONFIG = ExtractionConfig()
