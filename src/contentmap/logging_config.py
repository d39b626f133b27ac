# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""structlog + stdlib bridge. Humans: ConsoleRenderer, machines: JSONRenderer.

Leaf module — no contentmap imports. Library code only calls
``logging.getLogger(__name__)``; applications (the CLI, a crawl worker)
call :func:`configure` once at startup.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager

import structlog


def configure(*, json_output: bool = False, level: str = "INFO") -> None:
    """Route contentmap's stdlib log records to stderr through structlog.

    The pipeline, resolver and inference modules only log through
    ``logging.getLogger``: per-source resolution at DEBUG, skipped sources and
    degraded phases at WARNING. This installs the single root handler that
    renders those records, merging the ``source_url`` bound by
    :func:`bound_document` into each one. stdout stays free for extraction
    output. The CLI calls this with ``--log-level`` (WARNING unless given)
    and ``--log-json``.

    Args:
        json_output: True for one JSON object per record, for batch runs over
            many pages where logs are collected by machine. False for the
            console renderer.
        level: Root logger level name; unknown names fall back to INFO.
    """
    shared_processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
        foreign_pre_chain=shared_processors,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))


@contextmanager
def bound_document(source_url: str) -> Iterator[None]:
    """Bind ``source_url`` to every log record emitted while one document is processed.

    Uses structlog contextvars so stdlib records routed through the bridge
    carry the URL too. Previous bindings for the key are restored on exit.
    """
    tokens = structlog.contextvars.bind_contextvars(source_url=source_url)
    try:
        yield
    finally:
        structlog.contextvars.reset_contextvars(**tokens)
