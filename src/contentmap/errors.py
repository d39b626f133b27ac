# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""ContentMap exception hierarchy.

The extraction pipeline itself never raises for document content: missing
markup degrades to empty fields. These errors cover the edges around it
(configuration and strict parsing requested by callers such as the CLI).
"""

from __future__ import annotations


class ContentMapError(Exception):
    """Base exception for all ContentMap errors."""


class ConfigError(ContentMapError):
    """Invalid configuration value (constructor argument or environment variable)."""

    def __init__(self, message: str, *, setting: str = "") -> None:
        super().__init__(message)
        self.setting = setting


class DocumentParseError(ContentMapError):
    """Input could not be parsed as HTML (raised only in strict mode)."""
