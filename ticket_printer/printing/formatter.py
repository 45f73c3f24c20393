"""
Ticket layout rendering.

The layout is a Jinja2 template whose macro variables expand to escape
sequences from the macro table. The QR code for the registration deep link
is inlined as banded bitmap data. Text is sent as Latin-1, so bitmap bytes
travel through the template as their Latin-1 code points and come out
unchanged on encoding.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterator, Optional, Tuple
from urllib.parse import quote

from jinja2 import Environment, StrictUndefined, TemplateError
from qrcode.exceptions import DataOverflowError

from ticket_printer.printing.bitmap import encode_image
from ticket_printer.printing.errors import FormatError, WidthExceeded
from ticket_printer.printing.macros import MACROS
from ticket_printer.printing.qr import generate_qr

logger = logging.getLogger(__name__)

WIRE_ENCODING = "latin-1"
DATETIME_FORMAT = "%d.%m.%Y %H:%M"

# Sub-delimiters allowed unescaped inside a path segment
_PATH_SAFE = "$&+,:;=@"

TICKET_TEMPLATE = (
    "{{ reset }}{{ datetime }}\n"
    "{{ big }}{{ center }}+++ ULTRASTAR +++{{ reset }}\n"
    "Deine Ticketnummer und PIN:\n"
    "{{ big }}#{{ id }}{{ aligncolumn }}{{ pin }}{{ reset }}\n"
    "Jetzt Namen eintragen und Song raussuchen:\n"
    "{{ center }}{{ qr(registration.url) }}{{ bold }}{{ center }}{{ registration.base }}{{ reset }}\n"
    "{{ center }}+++ Reminder +++\n"
    "Die Nummern werden angezeigt.\n"
    "{{ cut }}"
)


@dataclass(frozen=True)
class TicketJob:
    ticket_id: str
    pin: str
    registration_base: str
    registration_url: str


@dataclass(frozen=True)
class FormattedStream:
    """Ordered byte chunks of one rendered ticket."""

    chunks: Tuple[bytes, ...]

    def __iter__(self) -> Iterator[bytes]:
        return iter(self.chunks)

    def __bytes__(self) -> bytes:
        return b"".join(self.chunks)

    def __len__(self) -> int:
        return sum(len(c) for c in self.chunks)


def path_escape(segment: str) -> str:
    """Escape a string for use as a single URL path segment."""
    return quote(segment, safe=_PATH_SAFE)


def registration_url(base: str, ticket_id: str, pin: str) -> str:
    """Deep link into the registration page for a ticket."""
    return f"{base}/index#edit/{path_escape(str(ticket_id))}/{path_escape(str(pin))}"


def _qr_bitmap(data: str) -> str:
    return encode_image(generate_qr(data)).decode(WIRE_ENCODING)


def _build_environment() -> Environment:
    env = Environment(undefined=StrictUndefined, autoescape=False, keep_trailing_newline=True)
    env.globals.update({name: code.decode(WIRE_ENCODING) for name, code in MACROS.items()})
    env.globals["qr"] = _qr_bitmap
    return env


_ENV = _build_environment()
_TEMPLATE = _ENV.from_string(TICKET_TEMPLATE)


def format_ticket(job: TicketJob, now: Optional[datetime] = None) -> FormattedStream:
    """
    Render a ticket into the byte stream sent to the printer.

    The whole stream is produced before returning; any failure raises
    FormatError and nothing is returned.
    """
    when = now or datetime.now()
    context = {
        "datetime": when.strftime(DATETIME_FORMAT),
        "id": str(job.ticket_id),
        "pin": str(job.pin),
        "registration": {"base": job.registration_base, "url": job.registration_url},
    }
    try:
        chunks = tuple(part.encode(WIRE_ENCODING) for part in _TEMPLATE.generate(**context) if part)
    except WidthExceeded as e:
        raise FormatError(f"QR code does not fit on the ticket: {e}") from e
    except DataOverflowError as e:
        raise FormatError(f"registration URL too long for a QR code: {e}") from e
    except UnicodeEncodeError as e:
        raise FormatError(f"ticket text not encodable as {WIRE_ENCODING}: {e}") from e
    except TemplateError as e:
        raise FormatError(f"ticket template failed: {e}") from e
    return FormattedStream(chunks)


__all__ = ["FormattedStream", "TicketJob", "format_ticket", "path_escape", "registration_url"]
