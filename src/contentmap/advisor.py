# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Quality suggestions: informational advisories, never fatal."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from contentmap.config import DEFAULT_CONFIG, ExtractionConfig
from contentmap.metadata import EnhancedMetadata
from contentmap.model import ContentNode, Heading


class SuggestionCode(StrEnum):
    MISSING_HEADINGS = "missing_headings"
    SHORT_CONTENT = "short_content"
    MISSING_AUTHOR = "missing_author"
    MISSING_PUBLISH_DATE = "missing_publish_date"


@dataclass(frozen=True, slots=True)
class Suggestion:
    code: SuggestionCode
    message: str


def advise(
    nodes: tuple[ContentNode, ...],
    metadata: EnhancedMetadata,
    config: ExtractionConfig = DEFAULT_CONFIG,
) -> list[Suggestion]:
    """Suggestions in fixed order: headings, length, author, publish date."""
    suggestions: list[Suggestion] = []

    if not any(isinstance(n, Heading) and n.level in (2, 3) for n in nodes):
        suggestions.append(
            Suggestion(
                SuggestionCode.MISSING_HEADINGS,
                "Consider adding H2 or H3 headings to improve content structure and SEO. "
                "Well-structured headings help search engines understand your content better.",
            )
        )

    words = metadata.content_analysis.word_count
    if 0 < words < config.short_content_words:
        suggestions.append(
            Suggestion(
                SuggestionCode.SHORT_CONTENT,
                f"Content is quite short ({words} words). Consider expanding to at least "
                f"{config.short_content_words} words for better SEO performance.",
            )
        )

    if metadata.author is None or not metadata.author.name:
        suggestions.append(
            Suggestion(
                SuggestionCode.MISSING_AUTHOR,
                "Add author information to your article for better entity recognition and trust signals.",
            )
        )

    if not metadata.publish_date:
        suggestions.append(
            Suggestion(
                SuggestionCode.MISSING_PUBLISH_DATE,
                "Add a publication date to improve temporal relevance signals.",
            )
        )

    return suggestions
