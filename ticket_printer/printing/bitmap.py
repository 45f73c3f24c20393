"""
Raster to printer bitmap conversion.

The printer accepts images as a series of bands. Each band starts with a
5-byte header (ESC * mode width-bytes height-bytes) followed by the packed
rows of the band. A band carries at most 40 pixel rows because of the
printer's line buffer, so taller images are sent as consecutive bands.
"""

from __future__ import annotations

import logging

from PIL import Image

from ticket_printer.printing.errors import WidthExceeded

logger = logging.getLogger(__name__)

BAND_OPCODE = 0x1B
BAND_SUBOPCODE = 0x2A
BAND_MODE = 0x02

MAX_WIDTH_BYTES = 59
MAX_WIDTH = MAX_WIDTH_BYTES * 8
BAND_HEIGHT_BYTES = 5
BAND_ROWS = BAND_HEIGHT_BYTES * 8


def _ceil_div(a: int, b: int) -> int:
    return -(-a // b)


def band_count(height: int) -> int:
    """Number of bands needed for an image of the given pixel height."""
    return _ceil_div(height, BAND_ROWS)


def encode_image(image: Image.Image) -> bytes:
    """
    Encode a monochrome raster into the printer's banded bitmap format.

    A pixel counts as black only when its RGB value is exactly (0, 0, 0).

    Raises:
        WidthExceeded: if the image is wider than MAX_WIDTH pixels.
    """
    width, height = image.size
    if width > MAX_WIDTH:
        raise WidthExceeded(f"image too wide: {width}px > {MAX_WIDTH}px")

    pixels = image.convert("RGB").load()
    buf = bytearray()
    for top in range(0, height, BAND_ROWS):
        rows = min(BAND_ROWS, height - top)
        _encode_band(pixels, width, height, top, rows, buf)

    logger.debug("Encoded %dx%d image into %d band(s), %d bytes", width, height, band_count(height), len(buf))
    return bytes(buf)


def _encode_band(pixels, width: int, height: int, top: int, rows: int, buf: bytearray) -> None:
    width_bytes = _ceil_div(width, 8)
    height_bytes = _ceil_div(rows, 8)
    buf += bytes((BAND_OPCODE, BAND_SUBOPCODE, BAND_MODE, width_bytes, height_bytes))

    for y in range(top, top + height_bytes * 8):
        for x in range(0, width, 8):
            d = 0
            for i in range(8):
                # Bit 0 is the rightmost pixel of the group
                px, py = x + (7 - i), y
                if px < width and py < height and pixels[px, py] == (0, 0, 0):
                    d |= 1 << i
            buf.append(d)


__all__ = ["BAND_ROWS", "MAX_WIDTH", "band_count", "encode_image"]
