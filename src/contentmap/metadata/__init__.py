# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""EnhancedMetadata record and its sub-records.

Built once per document by the resolver (pass 1); the inference pass is the
only later writer and only fills fields that are still empty.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


def _compact(data: dict[str, Any]) -> dict[str, Any]:
    """Drop keys whose value is None (optional fields absent on the page)."""
    return {k: v for k, v in data.items() if v is not None}


class ContentType(StrEnum):
    """Coarse page type derived from the URL path."""

    ARTICLE = "article"
    PRODUCT = "product"
    BLOG = "blog"
    NEWS = "news"
    ABOUT = "about"
    CONTACT = "contact"
    HOMEPAGE = "homepage"


@dataclass
class OpenGraph:
    title: str | None = None
    description: str | None = None
    image: str | None = None
    image_alt: str | None = None
    type: str | None = None
    site_name: str | None = None
    url: str | None = None
    locale: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "title": self.title,
                "description": self.description,
                "image": self.image,
                "imageAlt": self.image_alt,
                "type": self.type,
                "siteName": self.site_name,
                "url": self.url,
                "locale": self.locale,
            }
        )


@dataclass
class TwitterCard:
    card: str | None = None
    title: str | None = None
    description: str | None = None
    image: str | None = None
    image_alt: str | None = None
    site: str | None = None
    creator: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "card": self.card,
                "title": self.title,
                "description": self.description,
                "image": self.image,
                "imageAlt": self.image_alt,
                "site": self.site,
                "creator": self.creator,
            }
        )


@dataclass
class AuthorInfo:
    name: str
    url: str | None = None
    job_title: str | None = None
    image: str | None = None
    social_profiles: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            **_compact({"name": self.name, "url": self.url, "jobTitle": self.job_title, "image": self.image}),
            "socialProfiles": list(self.social_profiles),
        }


@dataclass
class ImageRef:
    url: str
    alt: str | None = None
    caption: str | None = None
    width: int | None = None
    height: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {"url": self.url, "alt": self.alt, "caption": self.caption, "width": self.width, "height": self.height}
        )


@dataclass
class ImageSet:
    featured: ImageRef | None = None
    all: list[ImageRef] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            **({"featured": self.featured.to_dict()} if self.featured else {}),
            "all": [img.to_dict() for img in self.all],
        }


@dataclass
class VideoRef:
    url: str
    provider: str  # youtube, vimeo, wistia, loom, dailymotion, html5, jsonld
    title: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact({"url": self.url, "provider": self.provider, "title": self.title})


@dataclass
class BusinessInfo:
    name: str
    logo: str | None = None
    website: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact({"name": self.name, "logo": self.logo, "website": self.website})


@dataclass
class ContentAnalysis:
    type: ContentType = ContentType.ARTICLE
    word_count: int = 0
    reading_time: int = 0
    has_video_content: bool = False
    has_faq_content: bool = False
    has_product_content: bool = False
    has_contact_info: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "wordCount": self.word_count,
            "readingTime": self.reading_time,
            "hasVideoContent": self.has_video_content,
            "hasFaqContent": self.has_faq_content,
            "hasProductContent": self.has_product_content,
            "hasContactInfo": self.has_contact_info,
        }


@dataclass(frozen=True, slots=True)
class AlternateLanguage:
    lang: str
    url: str


@dataclass(frozen=True, slots=True)
class Breadcrumb:
    name: str
    url: str | None = None


@dataclass
class TechnicalMetadata:
    robots_directive: str | None = None
    viewport: str | None = None
    alternate_languages: list[AlternateLanguage] = field(default_factory=list)
    breadcrumbs: list[Breadcrumb] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            **_compact({"robotsDirective": self.robots_directive, "viewport": self.viewport}),
            "alternateLanguages": [{"lang": a.lang, "url": a.url} for a in self.alternate_languages],
            "breadcrumbs": [_compact({"name": b.name, "url": b.url}) for b in self.breadcrumbs],
        }


@dataclass
class EnhancedMetadata:
    """Everything known about a page besides its body content."""

    title: str = ""
    description: str = ""
    canonical_url: str = ""
    language: str = "en"
    open_graph: OpenGraph = field(default_factory=OpenGraph)
    twitter_card: TwitterCard = field(default_factory=TwitterCard)
    author: AuthorInfo | None = None
    publish_date: str | None = None
    modified_date: str | None = None
    article_section: str | None = None
    article_sections: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)
    images: ImageSet = field(default_factory=ImageSet)
    videos: list[VideoRef] = field(default_factory=list)
    existing_structured_data: list[Any] = field(default_factory=list)
    business: BusinessInfo | None = None
    content_analysis: ContentAnalysis = field(default_factory=ContentAnalysis)
    technical: TechnicalMetadata = field(default_factory=TechnicalMetadata)

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "canonicalUrl": self.canonical_url,
            "language": self.language,
            "openGraph": self.open_graph.to_dict(),
            "twitterCard": self.twitter_card.to_dict(),
            "author": self.author.to_dict() if self.author else None,
            **_compact(
                {
                    "publishDate": self.publish_date,
                    "modifiedDate": self.modified_date,
                    "articleSection": self.article_section,
                }
            ),
            "articleSections": list(self.article_sections),
            "tags": list(self.tags),
            "keywords": list(self.keywords),
            "images": self.images.to_dict(),
            "videos": [v.to_dict() for v in self.videos],
            "existingStructuredData": list(self.existing_structured_data),
            "business": self.business.to_dict() if self.business else None,
            "contentAnalysis": self.content_analysis.to_dict(),
            "technical": self.technical.to_dict(),
        }
