# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Priority-aware truncation of a node sequence to a character budget.

Pass 1 admits headings (document order) while the running cost is under
``heading_budget_ratio`` of the budget. Pass 2 admits the remaining types in
priority order, each in document order. A node is admitted only if the
running cost plus its own cost stays strictly below the budget, so the
rendered result never exceeds ``max_length``. Nodes are never split.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from contentmap.model import ContentNode, NodeType
from contentmap.serializer import node_cost, render_clean_text

logger = logging.getLogger(__name__)

CONTENT_PRIORITY: tuple[NodeType, ...] = (
    NodeType.PARAGRAPH,
    NodeType.LIST,
    NodeType.QUOTE,
    NodeType.IMAGE,
    NodeType.TABLE,
)


@dataclass(frozen=True, slots=True)
class TruncationResult:
    nodes: tuple[ContentNode, ...]
    text: str
    truncated: bool
    dropped: int = 0


def truncate(
    nodes: tuple[ContentNode, ...] | list[ContentNode],
    clean_text: str,
    max_length: int,
    *,
    heading_budget_ratio: float = 0.8,
) -> TruncationResult:
    """Select the nodes that fit in ``max_length`` characters of clean text.

    Input that already fits is returned unchanged.
    """
    nodes = tuple(nodes)
    if len(clean_text) <= max_length:
        return TruncationResult(nodes=nodes, text=clean_text, truncated=False)
    if max_length <= 0:
        return TruncationResult(nodes=(), text="", truncated=True, dropped=len(nodes))

    admitted: list[ContentNode] = []
    running = 0
    heading_budget = max_length * heading_budget_ratio

    for node in nodes:
        if node.type is not NodeType.HEADING or running >= heading_budget:
            continue
        cost = node_cost(node)
        if running + cost < max_length:
            admitted.append(node)
            running += cost

    for node_type in CONTENT_PRIORITY:
        for node in nodes:
            if node.type is not node_type or running >= max_length:
                continue
            cost = node_cost(node)
            if running + cost < max_length:
                admitted.append(node)
                running += cost

    text = render_clean_text(admitted)
    dropped = len(nodes) - len(admitted)
    logger.debug("Truncated %d -> %d chars, dropped %d node(s)", len(clean_text), len(text), dropped)
    return TruncationResult(nodes=tuple(admitted), text=text, truncated=True, dropped=dropped)
