"""Unit tests for the JSON log formatter."""

from __future__ import annotations

import json
import logging

from nexus_poc.logging import JsonFormatter, configure_logging


def _record(msg: str, **extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="nexus_poc.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_emits_json_with_extra() -> None:
    line = JsonFormatter().format(_record("Registered namespace", namespace="ns-a"))

    payload = json.loads(line)
    assert payload["level"] == "INFO"
    assert payload["logger"] == "nexus_poc.test"
    assert payload["message"] == "Registered namespace"
    assert payload["extra"] == {"namespace": "ns-a"}


def test_formatter_stringifies_unserializable_extra() -> None:
    line = JsonFormatter().format(_record("msg", info=object()))

    assert json.loads(line)["extra"]["info"].startswith("<object object")


def test_configure_logging_replaces_handlers_and_quiets_sdk() -> None:
    root = logging.getLogger()
    saved = (list(root.handlers), root.level)
    try:
        configure_logging("debug")
        configure_logging("debug")

        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)
        assert root.level == logging.DEBUG
        assert logging.getLogger("temporalio").level == logging.INFO
    finally:
        for handler in list(root.handlers):
            root.removeHandler(handler)
        for handler in saved[0]:
            root.addHandler(handler)
        root.setLevel(saved[1])
