# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""ContentMap: turn raw web-page HTML into bounded, structured content.

Usage:
    from contentmap import process_html

    content = process_html(html, "https://example.com/blog/post", max_length=6000)
    content.clean_text        # prefixed clean text, <= max_length chars
    content.metadata.author   # AuthorInfo or None
    content.to_dict()         # camelCase, JSON-ready
"""

from __future__ import annotations

from contentmap.config import DEFAULT_CONFIG, DEFAULT_HEURISTICS, ExtractionConfig, Heuristics
from contentmap.errors import ConfigError, ContentMapError, DocumentParseError
from contentmap.metadata import ContentType, EnhancedMetadata
from contentmap.model import (
    ContentNode,
    Heading,
    Image,
    ListBlock,
    NodeType,
    Paragraph,
    Quote,
    StructuredContent,
    Table,
)
from contentmap.pipeline import ContentPipeline, process_html

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "ContentMapError",
    "ContentNode",
    "ContentPipeline",
    "ContentType",
    "DEFAULT_CONFIG",
    "DEFAULT_HEURISTICS",
    "DocumentParseError",
    "EnhancedMetadata",
    "ExtractionConfig",
    "Heading",
    "Heuristics",
    "Image",
    "ListBlock",
    "NodeType",
    "Paragraph",
    "Quote",
    "StructuredContent",
    "Table",
    "process_html",
]
