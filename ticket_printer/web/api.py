"""
JSON API (v1) for Ticket Printer.

Endpoints:
- POST /api/v1/tickets/print : Print a freshly created ticket (synchronous)

Payload shape:
{"id": str, "pin": str}

The call blocks until the ticket has been written to the printer. A failed
print is reported with 502 and "print_failed": true so the registration
front-end can tell the user and offer a manual retry; nothing is retried here.
"""

from __future__ import annotations

import logging

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from ticket_printer.printing.errors import PrinterError
from ticket_printer.printing.formatter import registration_url
from . import schemas

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__, url_prefix="/api/v1")


def _json_error(msg: str, code: int = 400, **extra):
    body = {"error": msg}
    body.update(extra)
    return jsonify(body), code


@api_bp.post("/tickets/print")
def print_ticket():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return _json_error("Expected a JSON object")

    try:
        req = schemas.PrintRequest.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        loc = ".".join(str(p) for p in first.get("loc", ()))
        return _json_error(f"{loc}: {first.get('msg', 'invalid')}")

    web_base = current_app.config["TICKETPRINTER_SETTINGS"].get("web_base")
    if not web_base:
        return _json_error("web_base is not configured", 503)

    url = registration_url(web_base, req.ticket_id, req.pin)
    printer = current_app.extensions["ticket_printer"]
    try:
        printer.print_ticket(req.ticket_id, req.pin, web_base, url)
    except PrinterError as e:
        logger.exception(f"Failed to print ticket {req.ticket_id}: {e}")
        return _json_error(str(e), 502, print_failed=True)

    return jsonify({"status": "printed", "id": req.ticket_id, "registration_url": url}), 200
