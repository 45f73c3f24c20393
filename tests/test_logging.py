import json
import logging

from ticket_printer.core.logging import JsonFormatter, RequestIdFilter, configure_logging


def test_request_id_filter_outside_request():
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "hello", None, None)
    assert RequestIdFilter().filter(record)
    assert record.request_id == "-"
    assert record.path == "-"


def test_json_formatter_fields():
    record = logging.LogRecord("ticket_printer.printing", logging.WARNING, __file__, 1, "id=%s", ("42",), None)
    record.request_id = "abc"
    out = json.loads(JsonFormatter().format(record))
    assert out["level"] == "WARNING"
    assert out["logger"] == "ticket_printer.printing"
    assert out["msg"] == "id=42"
    assert out["request_id"] == "abc"


def test_configure_logging_json(monkeypatch):
    monkeypatch.setenv("TICKETPRINTER_JSON_LOGS", "true")
    root = configure_logging()
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, JsonFormatter)
    assert root.level == logging.INFO


def test_configure_logging_level_from_env(monkeypatch):
    monkeypatch.setenv("TICKETPRINTER_LOG_LEVEL", "debug")
    assert configure_logging().level == logging.DEBUG


def test_json_formatter_includes_traceback():
    try:
        raise ValueError("bad frame")
    except ValueError:
        import sys

        record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", None, sys.exc_info())
    out = json.loads(JsonFormatter().format(record))
    assert "ValueError: bad frame" in out["exc"]
