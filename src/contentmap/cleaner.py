# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Element removal between metadata resolution and hierarchy building.

Operates in place on the parsed tree. Removal order matters: script-like
and layout tags first, then class/id noise, then head-only tags, and empty
leaves last. The empty-leaf step is a single pass: a wrapper whose only
children are empty leaves survives it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from contentmap.config import DEFAULT_HEURISTICS, Heuristics
from contentmap.dom import Document, remove_element, tag_name

logger = logging.getLogger(__name__)

_NEVER_REMOVE = frozenset({"html", "head", "body"})


@dataclass
class CleanStats:
    """Statistics from element removal."""

    removed_nodes: int = 0
    removal_reasons: dict[str, int] = field(default_factory=dict)

    def record(self, reason: str, count: int = 1) -> None:
        if count <= 0:
            return
        self.removed_nodes += count
        self.removal_reasons[reason] = self.removal_reasons.get(reason, 0) + count


def _is_protected(el, heuristics: Heuristics) -> bool:
    cls = (el.get("class") or "").lower()
    return any(marker in cls for marker in heuristics.protected_class_markers)


def _remove_empty_leaves(doc: Document, heuristics: Heuristics) -> int:
    # Collect first; the tree can't be modified during iteration
    to_remove = []
    for el in doc.iter_elements():
        tag = tag_name(el)
        if tag in _NEVER_REMOVE or tag in heuristics.keep_empty_tags:
            continue
        if len(el) or (el.text_content() or "").strip():
            continue
        if _is_protected(el, heuristics):
            continue
        to_remove.append(el)
    for el in to_remove:
        remove_element(el)
    return len(to_remove)


def remove_non_content(doc: Document, heuristics: Heuristics = DEFAULT_HEURISTICS) -> CleanStats:
    """Strip scripts, layout chrome, ads, popups and empty leaves (in-place)."""
    stats = CleanStats()
    stats.record("script", doc.remove(", ".join(heuristics.script_tags)))
    stats.record("layout", doc.remove(", ".join(heuristics.layout_tags)))
    stats.record("noise_class", doc.remove(", ".join(heuristics.noise_selectors)))
    for sel in heuristics.noise_attribute_selectors:
        stats.record("noise_attribute", doc.remove(sel))
    stats.record("head_only", doc.remove(", ".join(heuristics.head_only_tags)))
    stats.record("empty", _remove_empty_leaves(doc, heuristics))

    logger.debug("Element removal: removed=%d reasons=%s", stats.removed_nodes, stats.removal_reasons)
    return stats
