"""
Serial transport for the ticket printer.

Owns the physical link: writes formatted streams followed by the completion
marker and, optionally, reads length-framed acknowledgement frames back from
the device. Replies may be sprinkled with XON flow-control bytes, which are
dropped before a frame is interpreted.

The device is opened through python-escpos' Serial printer, which wraps a
pyserial port. Raw bytes are written as-is; none of escpos' own command
helpers are used since the ticket stream is already complete.
"""

from __future__ import annotations

import logging
import struct
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Optional, Protocol

import serial
from escpos.exceptions import DeviceNotFoundError

from ticket_printer.printing.errors import ShortRead, TransportError, WriteError
from ticket_printer.printing.macros import COMPLETION_MARKER, FLOW_CONTROL_BYTE

logger = logging.getLogger(__name__)

SERIAL_BAUDRATE = 19200
SERIAL_BYTESIZE = serial.EIGHTBITS
SERIAL_PARITY = serial.PARITY_NONE
SERIAL_STOPBITS = serial.STOPBITS_ONE
# No deadline for the first byte of a read; only gaps between bytes are limited
SERIAL_TIMEOUT = None
SERIAL_INTER_BYTE_TIMEOUT = 1.0

_LENGTH = struct.Struct(">H")


class Reader(Protocol):
    def read(self, size: int = ...) -> bytes: ...


@dataclass(frozen=True)
class AckFrame:
    length: int
    payload: bytes


class FilteringReader:
    """Reader that drops every occurrence of one byte value."""

    def __init__(self, source: Reader, drop: int = FLOW_CONTROL_BYTE) -> None:
        self._source = source
        self._drop = bytes((drop,))

    def read(self, size: int = 1) -> bytes:
        # Keep reading while everything received was filtered out
        while True:
            data = self._source.read(size)
            if not data:
                return b""
            kept = data.replace(self._drop, b"")
            if kept:
                return kept


def _read_exact(reader: Reader, size: int, what: str) -> bytes:
    buf = bytearray()
    while len(buf) < size:
        chunk = reader.read(size - len(buf))
        if not chunk:
            raise ShortRead(f"connection ended while reading {what}: got {len(buf)} of {size} bytes")
        buf += chunk
    return bytes(buf)


def read_frame(source: Reader) -> AckFrame:
    """
    Read one acknowledgement frame: a big-endian u16 length that counts
    itself, followed by length - 2 payload bytes.
    """
    reader = FilteringReader(source)
    (length,) = _LENGTH.unpack(_read_exact(reader, _LENGTH.size, "frame length"))
    if length < _LENGTH.size:
        raise ShortRead(f"invalid frame length {length}")
    payload = _read_exact(reader, length - _LENGTH.size, "frame payload")
    return AckFrame(length=length, payload=payload)


class SerialTransport:
    """
    Byte-level access to the printer.

    `device` is an escpos printer (its `_raw` sends bytes); `reader` is the
    object acknowledgement frames are read from and defaults to the
    device's underlying serial port.
    """

    def __init__(self, device: Any, reader: Optional[Reader] = None) -> None:
        self._device = device
        self._reader = reader

    def write(self, stream: Iterable[bytes]) -> None:
        """Write every chunk of the stream, then the completion marker."""
        written = 0
        try:
            for chunk in stream:
                self._device._raw(chunk)
                written += len(chunk)
            self._device._raw(COMPLETION_MARKER)
        except (serial.SerialException, OSError) as e:
            raise WriteError(f"writing to printer failed after {written} bytes: {e}") from e
        logger.debug("Wrote %d bytes plus completion marker", written)

    def read_ack(self) -> AckFrame:
        reader = self._reader if self._reader is not None else self._device.device
        frame = read_frame(reader)
        logger.debug("Received ack frame: length=%d payload=%s", frame.length, frame.payload.hex())
        return frame

    def close(self) -> None:
        try:
            self._device.close()
        except (serial.SerialException, OSError) as e:
            logger.warning(f"Closing printer port failed: {e}")


def open_serial_transport(settings: Mapping[str, Any]) -> SerialTransport:
    """Open the configured serial port (19200 8N1, 1 s inter-byte timeout)."""
    from escpos.printer import Serial

    port = str(settings.get("serial_port", ""))
    baud = int(str(settings.get("serial_baudrate", SERIAL_BAUDRATE)))
    profile = settings.get("printer_profile") or None

    logger.info("Opening printer on %s at %d baud", port, baud)
    kwargs: dict[str, Any] = {
        "devfile": port,
        "baudrate": baud,
        "bytesize": SERIAL_BYTESIZE,
        "parity": SERIAL_PARITY,
        "stopbits": SERIAL_STOPBITS,
        "timeout": SERIAL_TIMEOUT,
        "dsrdtr": False,
    }
    if profile:
        kwargs["profile"] = profile
    try:
        device = Serial(**kwargs)
        device.open()
        device.device.inter_byte_timeout = SERIAL_INTER_BYTE_TIMEOUT
    except (DeviceNotFoundError, serial.SerialException, OSError) as e:
        raise TransportError(f"could not open printer on {port}: {e}") from e
    logger.info("Printer connection established")
    return SerialTransport(device)


__all__ = ["AckFrame", "FilteringReader", "SerialTransport", "open_serial_transport", "read_frame"]
