# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Text hygiene for values that end up in an LLM prompt.

ContentMap output is fed straight into a schema-generation prompt. Page
content can hide instructions from a human reader through invisible Unicode
or ANSI escape sequences, so both are removed. Visible wording is never
rewritten: titles like "AI: The Future of Work" are legitimate. Two layers:

1. sanitize_text() — short metadata fields (titles, names, descriptions)
2. clean_node_text() — body text of content nodes
"""

from __future__ import annotations

import re

# Zero-width chars, bidi overrides, interlinear annotations, C0/C1 controls
_CONTROL_CHAR_RE = re.compile(
    r"[\u200B-\u200F\u202A-\u202E\u2060-\u2069\uFEFF\uFFF9-\uFFFB"
    r"\u0000-\u0008\u000B\u000C\u000E-\u001F\u007F-\u009F]"
)

_ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;]*[a-zA-Z]")

# str patterns treat NBSP and the other Unicode spaces as \s
_WHITESPACE_RE = re.compile(r"\s+")


def collapse_whitespace(text: str) -> str:
    """Collapse every whitespace run (including NBSP) into one space and strip."""
    if not text:
        return ""
    return _WHITESPACE_RE.sub(" ", text).strip()


def _strip_invisible(text: str) -> str:
    text = _ANSI_ESCAPE_RE.sub("", text)
    return _CONTROL_CHAR_RE.sub("", text)


def sanitize_text(text: str | None, max_len: int = 256) -> str:
    """Sanitize a short metadata field.

    - Strips Unicode control characters (zero-width, bidi overrides)
    - Removes ANSI escape sequences
    - Collapses whitespace (newlines included)
    - Truncates to max_len
    """
    if not text:
        return ""

    text = collapse_whitespace(_strip_invisible(text))

    if len(text) > max_len:
        text = text[:max_len].rstrip()

    return text


def clean_node_text(text: str | None) -> str:
    """Normalize body text of a content node: sanitize_text without the length cap."""
    if not text:
        return ""
    return collapse_whitespace(_strip_invisible(text))
