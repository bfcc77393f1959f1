"""Tests for fingerprinter.logging_config."""

from __future__ import annotations

import json
import logging
import sys

import pytest
from fingerprinter.config import Settings
from fingerprinter.logging_config import JSONFormatter, configure_logging


def _record(msg: str = "hello %s", args: tuple = ("world",), **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="fingerprinter.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=args,
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    def test_basic_fields(self):
        payload = json.loads(JSONFormatter().format(_record()))
        assert payload["level"] == "INFO"
        assert payload["logger"] == "fingerprinter.test"
        assert payload["message"] == "hello world"
        assert payload["timestamp"].endswith("+00:00")
        assert "version" not in payload
        assert "exc_info" not in payload

    def test_extra_context(self):
        payload = json.loads(JSONFormatter().format(_record(version="2.4.10", url="http://h/a.js")))
        assert payload["version"] == "2.4.10"
        assert payload["url"] == "http://h/a.js"

    def test_exception_traceback(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = _record()
            record.exc_info = sys.exc_info()
        payload = json.loads(JSONFormatter().format(record))
        assert "RuntimeError: boom" in payload["exc_info"]

    def test_single_line(self):
        assert "\n" not in JSONFormatter().format(_record(msg="a\nb", args=()))


class TestConfigureLogging:
    @pytest.fixture(autouse=True)
    def _restore_root(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_structured_installs_json_handler(self):
        configure_logging(Settings(structured_logging=True, debug=True))
        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JSONFormatter)
        assert root.level == logging.DEBUG
