# Copyright (c) 2026 Vision Contributors. All Rights Reserved.
"""Unit tests for structured logging."""

import json
import logging
import sys

import pytest

from vision.core.logging import StructuredFormatter, setup_logging


def _record(msg="hello", exc_info=None, **extra):
    record = logging.LogRecord("vision.test", logging.WARNING, __file__, 1, msg, (), exc_info)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatter:
    def test_basic_fields(self):
        entry = json.loads(StructuredFormatter().format(_record()))
        assert entry["level"] == "WARNING"
        assert entry["module"] == "vision.test"
        assert entry["message"] == "hello"
        assert "timestamp" in entry

    def test_context_fields(self):
        entry = json.loads(StructuredFormatter().format(_record(method="GET", path="/x", metric="cpu")))
        assert entry["method"] == "GET"
        assert entry["path"] == "/x"
        assert entry["metric"] == "cpu"

    def test_exception_included(self):
        try:
            raise RuntimeError("kaboom")
        except RuntimeError:
            record = _record(exc_info=sys.exc_info())
        entry = json.loads(StructuredFormatter().format(record))
        assert "kaboom" in entry["exception"]


def test_setup_logging_installs_single_handler():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging("debug")
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, StructuredFormatter)
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


class TestSetupLogging:
    @pytest.fixture(autouse=True)
    def restore_root(self):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        yield root
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)

    def test_keeps_host_handlers(self, restore_root):
        host_handler = logging.NullHandler()
        restore_root.handlers[:] = [host_handler]
        setup_logging("info", replace_handlers=False)
        assert restore_root.handlers[0] is host_handler
        assert len(restore_root.handlers) == 2
        assert isinstance(restore_root.handlers[1].formatter, StructuredFormatter)

    def test_repeated_setup_adds_one_handler(self, restore_root):
        restore_root.handlers[:] = []
        setup_logging("info", replace_handlers=False)
        setup_logging("info", replace_handlers=False)
        assert len(restore_root.handlers) == 1


class TestCustomContextKeys:
    def test_only_configured_keys_are_copied(self):
        formatter = StructuredFormatter(context_keys=("tenant",))
        entry = json.loads(formatter.format(_record(tenant="acme", method="GET")))
        assert entry["tenant"] == "acme"
        assert "method" not in entry
