# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Phase timer for extraction latency tracking.

Pure diagnostics: timings go to the log, never into StructuredContent,
so identical input still yields identical output.
"""

from __future__ import annotations

import time
from dataclasses import dataclass

PHASES: tuple[str, ...] = ("resolve", "clean", "build", "serialize", "truncate", "infer", "classify")


@dataclass(slots=True)
class StageRecord:
    name: str
    start_ns: int
    end_ns: int = 0

    @property
    def elapsed_ms(self) -> float:
        return round((self.end_ns - self.start_ns) / 1e6, 1)


class PipelineTimer:
    """Track phase transitions of one pipeline invocation."""

    __slots__ = ("_stages", "_current", "_start_ns")

    def __init__(self) -> None:
        self._stages: list[StageRecord] = []
        self._current: StageRecord | None = None
        self._start_ns: int = time.monotonic_ns()

    def stage(self, name: str) -> None:
        """End previous stage + start new stage."""
        now = time.monotonic_ns()
        if self._current is not None:
            self._current.end_ns = now
            self._stages.append(self._current)
        self._current = StageRecord(name=name, start_ns=now)

    def finalize(self) -> None:
        """End current stage."""
        if self._current is not None:
            self._current.end_ns = time.monotonic_ns()
            self._stages.append(self._current)
            self._current = None

    @property
    def current_stage(self) -> str | None:
        return self._current.name if self._current else None

    @property
    def total_ms(self) -> float:
        return round((time.monotonic_ns() - self._start_ns) / 1e6, 1)

    def elapsed_per_stage(self) -> dict[str, float]:
        """Return {stage_name: elapsed_ms} for all stages (including current)."""
        now = time.monotonic_ns()
        result: dict[str, float] = {s.name: s.elapsed_ms for s in self._stages}
        if self._current is not None:
            result[self._current.name] = round((now - self._current.start_ns) / 1e6, 1)
        return result

    def slowest_stage(self) -> str | None:
        stages = self.elapsed_per_stage()
        if not stages:
            return None
        return max(stages, key=lambda name: stages[name])

    def degraded_report(self, stage: str) -> dict:
        """Structured diagnostic for a phase that fell back to its empty result."""
        return {
            "degraded_stage": stage,
            "completed_stages": [{"stage": s.name, "ms": s.elapsed_ms} for s in self._stages if s.name != stage],
            "total_ms": self.total_ms,
            "hint": self.hint_for_stage(stage),
        }

    @staticmethod
    def hint_for_stage(stage: str) -> str:
        hints = {
            "resolve": "Parsing or metadata resolution failed; fields fall back to defaults.",
            "clean": "Noise removal failed; hierarchy is built from the uncleaned tree.",
            "build": "Content region could not be walked; hierarchy is empty.",
            "truncate": "Budget selection failed; hierarchy is empty.",
            "serialize": "Clean-text rendering failed; hierarchy is empty.",
            "infer": "Body-text inference failed; metadata keeps its tag-resolved values.",
            "classify": "Quality advice failed; no suggestions are emitted.",
        }
        return hints.get(stage, f"Degraded during '{stage}' stage.")
