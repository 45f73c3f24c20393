"""
Printing subsystem for Ticket Printer.

This package groups the pieces that turn a ticket into printer bytes:

- bitmap: raster images to the printer's banded bitmap format
- qr: QR code rasterization
- macros: escape-code macro table
- formatter: ticket layout rendering
- transport: serial link, completion marker and acknowledgement frames
- printer: serialized print facade (serial and null variants)

For convenience, common names are re-exported for easy import.
"""

from .errors import *
from .bitmap import *
from .qr import *
from .macros import *
from .formatter import *
from .transport import *
from .printer import *
