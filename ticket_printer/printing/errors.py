"""
Error kinds raised by the printing subsystem.

All of them derive from PrinterError so callers can surface a single
"print failed" message while still logging the specific cause.
"""

from __future__ import annotations


class PrinterError(RuntimeError):
    """Base class for every failure of a print job."""


class WidthExceeded(PrinterError, ValueError):
    """Raster is wider than the printer line buffer accepts."""


class FormatError(PrinterError):
    """Rendering the ticket layout failed; no stream was produced."""


class TransportError(PrinterError):
    """The serial device could not be opened or used."""


class WriteError(TransportError):
    """Writing the formatted stream to the device failed."""


class ShortRead(TransportError):
    """The connection ended before a complete acknowledgement frame arrived."""


__all__ = ["FormatError", "PrinterError", "ShortRead", "TransportError", "WidthExceeded", "WriteError"]
