"""Unit tests for structured logging."""

from __future__ import annotations

import io
import json
import logging

from ai_pair.logging import JsonFormatter, configure_logging


def test_json_formatter_includes_extra_fields() -> None:
    record = logging.LogRecord(
        name="ai_pair.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Conversation saved",
        args=None,
        exc_info=None,
    )
    record.path = "/tmp/out.md"

    payload = json.loads(JsonFormatter().format(record))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "ai_pair.test"
    assert payload["message"] == "Conversation saved"
    assert payload["extra"] == {"path": "/tmp/out.md"}


def test_configure_logging_replaces_handlers() -> None:
    stream = io.StringIO()
    root = logging.getLogger()
    previous_handlers = list(root.handlers)
    previous_level = root.level

    try:
        configure_logging("info", stream=stream)
        configure_logging("info", stream=stream)
        logging.getLogger("ai_pair.test").info("hello", extra={"provider": "Test AI"})

        lines = stream.getvalue().splitlines()
        assert len(lines) == 1
        assert json.loads(lines[0])["extra"] == {"provider": "Test AI"}
        assert logging.getLogger("httpx").level == logging.WARNING
    finally:
        for handler in list(root.handlers):
            root.removeHandler(handler)
        for handler in previous_handlers:
            root.addHandler(handler)
        root.setLevel(previous_level)
