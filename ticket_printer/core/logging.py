"""Logging setup shared by the web app and the print path."""

from __future__ import annotations

import logging
import os


class RequestIdFilter(logging.Filter):
    """Tag records with the Flask request id and path ("-" outside a request)."""

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        from flask import g, has_request_context, request  # lazy import

        if has_request_context():
            record.request_id = getattr(g, "request_id", "-")
            record.path = request.path
        else:
            record.request_id = "-"
            record.path = "-"
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per record, including the traceback when present."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        from json import dumps

        base = {
            "ts": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "request_id": getattr(record, "request_id", "-"),
        }
        path = getattr(record, "path", None)
        if path is not None:
            base["path"] = path
        if record.exc_info:
            base["exc"] = self.formatException(record.exc_info)
        return dumps(base, ensure_ascii=False)


def configure_logging() -> logging.Logger:
    """
    Install a single root handler (journald when available, else stderr).

    TICKETPRINTER_LOG_LEVEL sets the level, TICKETPRINTER_JSON_LOGS switches
    to one JSON object per line. Flask's app logger is routed through root.
    """
    root = logging.getLogger()
    root.setLevel(os.environ.get("TICKETPRINTER_LOG_LEVEL", "INFO").upper())

    # create_app() may run more than once per process
    root.handlers = []

    json_logs = os.environ.get("TICKETPRINTER_JSON_LOGS", "false").lower() in ("1", "true", "yes")
    formatter: logging.Formatter
    if json_logs:
        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter("[%(asctime)s] %(levelname)s %(request_id)s %(name)s: %(message)s")

    # Prefer systemd journal when available
    try:
        from systemd.journal import JournalHandler  # type: ignore

        handler: logging.Handler = JournalHandler()
    except ImportError:
        handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    handler.addFilter(RequestIdFilter())
    root.addHandler(handler)

    flask_logger = logging.getLogger("flask.app")
    flask_logger.handlers = []
    flask_logger.propagate = True

    return root


__all__ = ["JsonFormatter", "RequestIdFilter", "configure_logging"]
