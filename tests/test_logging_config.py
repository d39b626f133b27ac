# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for contentmap.logging_config — structlog + stdlib bridge."""

from __future__ import annotations

import json
import logging
import sys

import pytest
import structlog

from contentmap.logging_config import bound_document, configure


@pytest.fixture(autouse=True)
def _reset_logging():
    """Ensure clean logging state before/after each test."""
    root = logging.getLogger()
    old_handlers = root.handlers[:]
    old_level = root.level
    yield
    root.handlers = old_handlers
    root.setLevel(old_level)
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


class TestConsoleRenderer:
    """Human mode: ConsoleRenderer."""

    def test_configure_console_mode(self):
        configure(json_output=False)
        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert root.handlers[0].stream is sys.stderr

    def test_console_output_is_human_readable(self, capsys):
        configure(json_output=False)
        logging.getLogger("test.console").info("hello world")
        captured = capsys.readouterr()
        assert "hello world" in captured.err
        assert not captured.err.strip().startswith("{")


class TestJSONRenderer:
    """Batch mode: JSONRenderer (machine-parseable)."""

    def test_json_output_is_valid_json(self, capsys):
        configure(json_output=True)
        logging.getLogger("test.json").info("json test")
        parsed = json.loads(capsys.readouterr().err.strip())
        assert parsed["event"] == "json test"
        assert parsed["level"] == "info"
        assert "timestamp" in parsed

    def test_json_includes_logger_name(self, capsys):
        configure(json_output=True)
        logging.getLogger("contentmap.pipeline").info("name test")
        parsed = json.loads(capsys.readouterr().err.strip())
        assert parsed["logger"] == "contentmap.pipeline"

    def test_percent_args_are_formatted(self, capsys):
        configure(json_output=True)
        logging.getLogger("test.args").warning("Phase %s failed", "build")
        parsed = json.loads(capsys.readouterr().err.strip())
        assert parsed["event"] == "Phase build failed"


class TestBoundDocument:
    """source_url travels with every record emitted for one document."""

    def test_source_url_in_json_output(self, capsys):
        configure(json_output=True)
        with bound_document("https://beanblog.com/blog/brew"):
            logging.getLogger("contentmap.test").info("inside")
        parsed = json.loads(capsys.readouterr().err.strip())
        assert parsed["source_url"] == "https://beanblog.com/blog/brew"

    def test_cleared_after_exit(self, capsys):
        configure(json_output=True)
        with bound_document("https://ex.com/a"):
            pass
        logging.getLogger("contentmap.test").info("outside")
        parsed = json.loads(capsys.readouterr().err.strip())
        assert "source_url" not in parsed

    def test_nested_restores_outer(self):
        with bound_document("https://ex.com/outer"):
            with bound_document("https://ex.com/inner"):
                assert structlog.contextvars.get_contextvars()["source_url"] == "https://ex.com/inner"
            assert structlog.contextvars.get_contextvars()["source_url"] == "https://ex.com/outer"

    def test_cleared_on_exception(self):
        with pytest.raises(RuntimeError):
            with bound_document("https://ex.com/a"):
                raise RuntimeError("boom")
        assert "source_url" not in structlog.contextvars.get_contextvars()


class TestLogLevel:
    def test_default_level_is_info(self):
        configure()
        assert logging.getLogger().level == logging.INFO

    def test_custom_level(self):
        configure(level="debug")
        assert logging.getLogger().level == logging.DEBUG

    def test_invalid_level_falls_back_to_info(self):
        configure(level="NONEXISTENT")
        assert logging.getLogger().level == logging.INFO

    def test_no_handler_stacking(self):
        configure(json_output=False)
        configure(json_output=True)
        configure(json_output=False)
        assert len(logging.getLogger().handlers) == 1
