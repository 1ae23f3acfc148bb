"""
Tests for structured tool-call logging.
"""

import json
import logging
import sys

from mercosur_trade.logging_utils import (
    JSONFormatter,
    configure_logging,
    log_tool_call,
    log_tool_error,
)


class TestJSONFormatter:

    def _record(self, msg):
        return logging.LogRecord("tool_calls", logging.INFO, __file__, 1, msg, None, None)

    def test_dict_message(self):
        line = JSONFormatter().format(self._record({"event_type": "tool_call", "tool": "about"}))
        assert json.loads(line) == {"event_type": "tool_call", "tool": "about"}

    def test_plain_message(self):
        data = json.loads(JSONFormatter().format(self._record("hello")))

        assert data["message"] == "hello"
        assert data["level"] == "INFO"
        assert data["logger"] == "tool_calls"


class TestConfigureLogging:

    def _configure(self, level, fmt):
        """Run configure_logging and return the resulting root handlers/level, then restore."""
        root = logging.getLogger()
        handlers, root_level = list(root.handlers), root.level
        try:
            configure_logging(level, fmt)
            return list(root.handlers), root.level
        finally:
            for handler in list(root.handlers):
                root.removeHandler(handler)
            for handler in handlers:
                root.addHandler(handler)
            root.setLevel(root_level)

    def test_single_stderr_handler(self):
        handlers, level = self._configure("debug", "json")

        assert len(handlers) == 1
        assert handlers[0].stream is sys.stderr
        assert isinstance(handlers[0].formatter, JSONFormatter)
        assert level == logging.DEBUG

    def test_text_format(self):
        handlers, _ = self._configure("INFO", "text")
        assert not isinstance(handlers[0].formatter, JSONFormatter)


class TestToolEvents:

    def test_tool_call_summary(self, caplog):
        result = {"found": True, "count": 3, "agreements": [1, 2, 3]}
        with caplog.at_level(logging.INFO, logger="tool_calls"):
            log_tool_call("get_mutual_recognition", {"country_a": "BR"}, result, 1.234)

        event = caplog.records[-1].msg
        assert event["event_type"] == "tool_call"
        assert event["found"] is True
        assert event["count"] == 3
        assert event["duration_ms"] == 1.23
        assert event["result_bytes"] > 0
        assert "agreements" not in event

    def test_tool_error(self, caplog):
        with caplog.at_level(logging.INFO, logger="tool_calls"):
            log_tool_error("about", {}, ValueError("boom"))

        event = caplog.records[-1].msg
        assert event["error_type"] == "ValueError"
        assert event["error"] == "boom"
        assert event["duration_ms"] is None
