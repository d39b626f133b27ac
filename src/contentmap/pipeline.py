# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""HTML → StructuredContent pipeline.

Phases, in fixed order, each run exactly once:

    resolve → clean → build → serialize → truncate → infer → classify

Every phase is total. An unexpected exception inside a phase is logged
with its traceback and the phase falls back to its empty result, so
``process`` always returns a StructuredContent.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeVar

from contentmap.advisor import Suggestion, advise
from contentmap.cleaner import remove_non_content
from contentmap.config import DEFAULT_CONFIG, ExtractionConfig
from contentmap.dom import Document
from contentmap.hierarchy import build_hierarchy
from contentmap.inference import infer_metadata
from contentmap.logging_config import bound_document
from contentmap.metadata import EnhancedMetadata
from contentmap.metadata.resolver import MetadataResolver
from contentmap.model import ContentNode, StructuredContent
from contentmap.pipeline_timer import PipelineTimer
from contentmap.serializer import render_clean_text
from contentmap.truncation import TruncationResult, truncate

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ContentPipeline:
    """Reusable pipeline bound to one immutable config.

    Holds no per-document state, so one instance may serve concurrent
    callers.
    """

    def __init__(self, config: ExtractionConfig = DEFAULT_CONFIG) -> None:
        self.config = config
        self._resolver = MetadataResolver(config)

    def process(self, html: str | None, url: str, max_length: int | None = None) -> StructuredContent:
        """Extract, bound and enrich one document."""
        content, _ = self.process_with_advice(html, url, max_length)
        return content

    def process_with_advice(
        self, html: str | None, url: str, max_length: int | None = None
    ) -> tuple[StructuredContent, list[Suggestion]]:
        """Like :meth:`process`, also returning suggestions with their machine codes."""
        html = html or ""
        budget = self.config.max_length if max_length is None else max_length
        timer = PipelineTimer()

        with bound_document(url):
            timer.stage("resolve")
            doc = self._run(timer, "resolve", lambda: Document.parse(html), Document.empty)
            metadata = self._run(timer, "resolve", lambda: self._resolver.resolve(doc, url), EnhancedMetadata)

            timer.stage("clean")
            self._run(timer, "clean", lambda: remove_non_content(doc, self.config.heuristics), lambda: None)

            timer.stage("build")
            nodes: tuple[ContentNode, ...] = self._run(
                timer, "build", lambda: build_hierarchy(doc, self.config), tuple
            )

            timer.stage("serialize")
            clean_text = self._run(timer, "serialize", lambda: render_clean_text(nodes), str)
            if nodes and not clean_text:
                nodes = ()

            timer.stage("truncate")
            result = self._run(
                timer,
                "truncate",
                lambda: truncate(
                    nodes, clean_text, budget, heading_budget_ratio=self.config.heading_budget_ratio
                ),
                lambda: TruncationResult(nodes=(), text="", truncated=True),
            )

            timer.stage("infer")
            base = metadata
            metadata = self._run(
                timer,
                "infer",
                lambda: infer_metadata(base, result.text, result.nodes, source_url=url, config=self.config),
                lambda: base,
            )

            timer.stage("classify")
            suggestions = self._run(
                timer, "classify", lambda: advise(result.nodes, metadata, self.config), list
            )
            timer.finalize()

            content = StructuredContent(
                hierarchy=result.nodes,
                clean_text=result.text,
                metadata=metadata,
                original_length=len(html),
                processed_length=len(result.text),
                quality_suggestions=tuple(s.message for s in suggestions),
            )
            self._log_summary(timer, content, result)
        return content, suggestions

    @staticmethod
    def _run(timer: PipelineTimer, stage: str, fn: Callable[[], T], fallback: Callable[[], T]) -> T:
        try:
            return fn()
        except Exception:
            logger.exception("Phase %s failed, using empty result", stage)
            logger.warning("Degraded pipeline: %s", timer.degraded_report(stage))
            return fallback()

    @staticmethod
    def _log_summary(timer: PipelineTimer, content: StructuredContent, result: TruncationResult) -> None:
        if not logger.isEnabledFor(logging.DEBUG):
            return
        reduction = 0
        if content.original_length:
            reduction = round((1 - content.processed_length / content.original_length) * 100)
        logger.debug(
            "Processed in %.1fms: %d -> %d chars (%d%% reduction), ~%d tokens, %d node(s)%s, slowest=%s, stages=%s",
            timer.total_ms,
            content.original_length,
            content.processed_length,
            reduction,
            content.token_estimate,
            len(content.hierarchy),
            f", {result.dropped} dropped" if result.truncated else "",
            timer.slowest_stage(),
            timer.elapsed_per_stage(),
        )


def process_html(
    html: str | None,
    url: str,
    *,
    max_length: int | None = None,
    config: ExtractionConfig | None = None,
) -> StructuredContent:
    """Run the full pipeline on one document with a fresh or given config."""
    return ContentPipeline(config or DEFAULT_CONFIG).process(html, url, max_length)
