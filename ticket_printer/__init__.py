"""
Ticket Printer package

This module provides an application factory with minimal wiring:
- Configures logging via ticket_printer.core.logging
- Resolves printer settings and builds the configured printer variant
- Creates a Flask app exposing the health endpoint and the print API
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Mapping, Optional

from flask import Flask, g

from ticket_printer.core.config import load_settings
from ticket_printer.core.logging import configure_logging
from ticket_printer.printing.printer import Printer, create_printer

logger = logging.getLogger(__name__)


def _set_request_id() -> None:
    """
    Assign a request ID for logging if not set by a filter elsewhere.
    """
    g.request_id = getattr(g, "request_id", uuid.uuid4().hex)


def create_app(
    printer: Optional[Printer] = None,
    settings: Optional[Mapping[str, Any]] = None,
    config_overrides: Optional[dict] = None,
) -> Flask:
    """
    Application factory.

    Parameters:
    - printer: printer to use; if None one is built from settings
    - settings: printer settings; if None they are loaded from config + env
    - config_overrides: values to inject into app.config after defaults

    Returns:
    - Flask app instance
    """
    configure_logging()

    resolved = dict(settings) if settings is not None else load_settings()
    if printer is None:
        printer = create_printer(resolved)

    app = Flask("ticket_printer")
    app.config["TICKETPRINTER_SETTINGS"] = resolved
    app.extensions["ticket_printer"] = printer
    app.url_map.strict_slashes = False

    @app.before_request
    def _before_request():
        _set_request_id()

    from ticket_printer.web import api_bp, health_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(api_bp)

    if config_overrides:
        app.config.update(config_overrides)

    app.logger.info(f"Ticket Printer app created (printer={printer.kind})")
    return app


__all__ = ["create_app"]
