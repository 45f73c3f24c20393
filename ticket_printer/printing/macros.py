"""
Control-code macros understood by the printer firmware.

Names map to literal escape sequences that the ticket layout substitutes at
render time. The table is read-only.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

ESC = b"\x1b"

ALTFONT = ESC + b"\x21\x10"
BOLD = ESC + b"\x47\x01"
DOUBLE = ESC + b"\x57\x01" + ESC + b"\x68\x01"
BIG = BOLD + DOUBLE
RESET = ESC + b"\x21\x10" + ESC + b"\x61\x00"
CENTER = ESC + b"\x61\x01"
ALIGN_COLUMN = ESC + b"\x61\x04"
CUT = b"\x0c"

# Trailer signalling end-of-job to the device
COMPLETION_MARKER = b"\x1b\x00\x80\x00"

# XON inserted by the device into its replies
FLOW_CONTROL_BYTE = 0x11

MACROS: Mapping[str, bytes] = MappingProxyType(
    {
        "altfont": ALTFONT,
        "big": BIG,
        "double": DOUBLE,
        "bold": BOLD,
        "reset": RESET,
        "center": CENTER,
        "aligncolumn": ALIGN_COLUMN,
        "cut": CUT,
    }
)

__all__ = [
    "ALIGN_COLUMN",
    "ALTFONT",
    "BIG",
    "BOLD",
    "CENTER",
    "COMPLETION_MARKER",
    "CUT",
    "DOUBLE",
    "ESC",
    "FLOW_CONTROL_BYTE",
    "MACROS",
    "RESET",
]
