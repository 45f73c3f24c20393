"""
Health endpoint for Ticket Printer.

This blueprint exposes `/healthz`, reporting:
- Overall status ("ok" or "degraded")
- Printer variant and its current state
- The configured registration base URL
"""

from __future__ import annotations

from typing import Any, Dict

from flask import Blueprint, current_app

health_bp = Blueprint("health", __name__)


@health_bp.get("/healthz")
def healthz():
    printer = current_app.extensions["ticket_printer"]
    settings = current_app.config["TICKETPRINTER_SETTINGS"]

    status: Dict[str, Any] = {
        "status": "ok",
        "printer_type": printer.kind,
        "printer_state": printer.state.value,
        "web_base": settings.get("web_base"),
    }
    if not settings.get("web_base"):
        status["status"] = "degraded"
        status["reason"] = "no_web_base"
    return status, 200
