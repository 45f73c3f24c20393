"""QR code rasterization for ticket deep links."""

from __future__ import annotations

import qrcode
from qrcode.constants import ERROR_CORRECT_L
from PIL import Image

# Pixels per QR module
QR_SCALE = 4
QR_BORDER = 4


def generate_qr(text: str) -> Image.Image:
    """Render text as a low error-correction QR code, 4 px per module."""
    code = qrcode.QRCode(error_correction=ERROR_CORRECT_L, box_size=QR_SCALE, border=QR_BORDER)
    code.add_data(text)
    code.make(fit=True)
    img = code.make_image(fill_color="black", back_color="white")
    return img.get_image()


__all__ = ["QR_SCALE", "generate_qr"]
