# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Clean-text rendering of content nodes, and JSON output.

Clean-text format, one block per node, blocks separated by a blank line:

    ## Heading text
    P: paragraph text
    LIST: UL with 2 items
      - first
      - second
    QUOTE: quoted text
    IMAGE: Image: alt text
    TABLE: Table with 3 rows and 2 columns

The prefixes are stable: the inference pass pattern-matches them.
"""

from __future__ import annotations

import json
from collections.abc import Iterable

from contentmap.model import ContentNode, Heading, Image, ListBlock, Paragraph, Quote, StructuredContent, Table

BLOCK_SEPARATOR = "\n\n"


def render_node(node: ContentNode) -> str:
    """Render a single node as its clean-text block."""
    if isinstance(node, Heading):
        return f"{'#' * node.level} {node.text}"
    if isinstance(node, Paragraph):
        return f"P: {node.text}"
    if isinstance(node, ListBlock):
        kind = "OL" if node.ordered else "UL"
        lines = [f"LIST: {kind} with {len(node.item_texts)} items"]
        lines.extend(f"  - {item}" for item in node.item_texts)
        return "\n".join(lines)
    if isinstance(node, Quote):
        return f"QUOTE: {node.text}"
    if isinstance(node, Image):
        return f"IMAGE: Image: {node.alt or 'No alt text'}"
    if isinstance(node, Table):
        return f"TABLE: Table with {node.row_count} rows and {node.col_count} columns"
    raise TypeError(f"not a content node: {type(node).__name__}")


def node_cost(node: ContentNode) -> int:
    """Length the node adds to a rendering, separator included."""
    return len(render_node(node)) + len(BLOCK_SEPARATOR)


def render_clean_text(nodes: Iterable[ContentNode]) -> str:
    return BLOCK_SEPARATOR.join(render_node(node) for node in nodes)


def to_json(content: StructuredContent, indent: int | None = 2) -> str:
    """Serialize StructuredContent to a JSON string (camelCase keys)."""
    return json.dumps(content.to_dict(), ensure_ascii=False, indent=indent)
