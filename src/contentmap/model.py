# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Content nodes and the StructuredContent result.

A content node is one typed unit of extracted body content. Nodes are frozen;
the node sequence of a document is a tuple in document order (or budget
admission order after truncation).
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, ClassVar

from contentmap.metadata import EnhancedMetadata


class NodeType(StrEnum):
    """Content node kinds, also the truncation priority vocabulary."""

    HEADING = "heading"
    PARAGRAPH = "paragraph"
    LIST = "list"
    QUOTE = "quote"
    IMAGE = "image"
    TABLE = "table"


@dataclass(frozen=True, slots=True)
class Heading:
    type: ClassVar[NodeType] = NodeType.HEADING

    level: int  # 1-6
    text: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, "level": self.level, "text": self.text}


@dataclass(frozen=True, slots=True)
class Paragraph:
    type: ClassVar[NodeType] = NodeType.PARAGRAPH

    text: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, "text": self.text}


@dataclass(frozen=True, slots=True)
class ListBlock:
    """A whole ``ul``/``ol``, flattened into its item texts."""

    type: ClassVar[NodeType] = NodeType.LIST

    item_texts: tuple[str, ...]
    ordered: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, "itemTexts": list(self.item_texts), "ordered": self.ordered}


@dataclass(frozen=True, slots=True)
class Quote:
    type: ClassVar[NodeType] = NodeType.QUOTE

    text: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, "text": self.text}


@dataclass(frozen=True, slots=True)
class Image:
    type: ClassVar[NodeType] = NodeType.IMAGE

    url: str
    alt: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.type.value, "url": self.url}
        if self.alt:
            data["alt"] = self.alt
        return data


@dataclass(frozen=True, slots=True)
class Table:
    type: ClassVar[NodeType] = NodeType.TABLE

    row_count: int
    col_count: int

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, "rowCount": self.row_count, "colCount": self.col_count}


ContentNode = Heading | Paragraph | ListBlock | Quote | Image | Table


def estimate_tokens(length: int) -> int:
    """Rough token estimate: 4 characters per token, rounded up."""
    return math.ceil(length / 4) if length > 0 else 0


@dataclass(frozen=True)
class StructuredContent:
    """Final pipeline output for one document."""

    hierarchy: tuple[ContentNode, ...]
    clean_text: str
    metadata: EnhancedMetadata
    original_length: int
    processed_length: int
    quality_suggestions: tuple[str, ...] = field(default_factory=tuple)

    @property
    def token_estimate(self) -> int:
        return estimate_tokens(self.processed_length)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready dict with camelCase keys for the downstream consumer."""
        return {
            "hierarchy": [node.to_dict() for node in self.hierarchy],
            "cleanText": self.clean_text,
            "metadata": self.metadata.to_dict(),
            "originalLength": self.original_length,
            "processedLength": self.processed_length,
            "tokenEstimate": self.token_estimate,
            "qualitySuggestions": list(self.quality_suggestions),
        }
