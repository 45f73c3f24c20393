import io
import os
import sys
import threading

import pytest
import serial
from escpos.printer import Dummy

import escpos.printer
from ticket_printer.printing.errors import ShortRead, TransportError, WriteError
from ticket_printer.printing.formatter import FormattedStream
from ticket_printer.printing.macros import COMPLETION_MARKER
from ticket_printer.printing.transport import AckFrame, FilteringReader, SerialTransport, open_serial_transport


class _ChunkSource:
    """Reader returning pre-set chunks, then EOF."""

    def __init__(self, chunks):
        self.chunks = list(chunks)

    def read(self, size=1):
        if not self.chunks:
            return b""
        chunk = self.chunks.pop(0)
        return chunk[:size]


class _BrokenDevice:
    def __init__(self, fail_after: int):
        self.calls = 0
        self.fail_after = fail_after

    def _raw(self, data):
        self.calls += 1
        if self.calls > self.fail_after:
            raise serial.SerialException("device disconnected")

    def close(self):
        raise OSError("already gone")


def test_write_appends_completion_marker():
    device = Dummy()
    SerialTransport(device).write(FormattedStream((b"abc", b"\x1ba\x01", b"\x0c")))
    assert device.output == b"abc\x1ba\x01\x0c" + COMPLETION_MARKER


def test_write_failure_raises_write_error():
    device = _BrokenDevice(fail_after=1)
    with pytest.raises(WriteError) as ei:
        SerialTransport(device).write(FormattedStream((b"abc", b"def")))
    assert isinstance(ei.value.__cause__, serial.SerialException)
    assert "3 bytes" in str(ei.value)


def test_close_errors_are_logged_not_raised():
    SerialTransport(_BrokenDevice(fail_after=0)).close()


def test_read_ack_strips_flow_control_bytes():
    reader = io.BytesIO(bytes([0x11, 0x00, 0x11, 0x04, 0x11, 0xAB, 0xCD]))
    frame = SerialTransport(Dummy(), reader=reader).read_ack()
    assert frame == AckFrame(length=4, payload=b"\xab\xcd")


def test_read_ack_empty_payload():
    frame = SerialTransport(Dummy(), reader=io.BytesIO(b"\x00\x02")).read_ack()
    assert frame == AckFrame(length=2, payload=b"")


def test_read_ack_reads_consecutive_frames():
    transport = SerialTransport(Dummy(), reader=io.BytesIO(b"\x00\x03\x01\x11\x00\x04\x02\x03"))
    assert transport.read_ack().payload == b"\x01"
    assert transport.read_ack().payload == b"\x02\x03"


@pytest.mark.parametrize(
    "raw",
    [
        b"",
        b"\x11\x11",
        b"\x00",
        b"\x00\x06\x01\x02",
    ],
)
def test_read_ack_short_read(raw):
    with pytest.raises(ShortRead):
        SerialTransport(Dummy(), reader=io.BytesIO(raw)).read_ack()


def test_read_ack_rejects_length_below_header():
    with pytest.raises(ShortRead):
        SerialTransport(Dummy(), reader=io.BytesIO(b"\x00\x01\xff")).read_ack()


def test_filtering_reader_skips_chunks_of_only_flow_control():
    reader = FilteringReader(_ChunkSource([b"\x11\x11", b"\x11a\x11b", b"c"]))
    assert reader.read(4) == b"ab"
    assert reader.read(4) == b"c"
    assert reader.read(4) == b""


class _FakePort:
    inter_byte_timeout = None


class _FakeSerialPrinter:
    instances = []
    fail = False

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.device = _FakePort()
        _FakeSerialPrinter.instances.append(self)

    def open(self):
        if _FakeSerialPrinter.fail:
            raise serial.SerialException("could not open port /dev/ttyNOPE")


def test_open_serial_transport_configures_port(monkeypatch):
    _FakeSerialPrinter.instances = []
    _FakeSerialPrinter.fail = False
    monkeypatch.setattr(escpos.printer, "Serial", _FakeSerialPrinter)

    transport = open_serial_transport({"serial_port": "/dev/ttyUSB3", "serial_baudrate": 19200})

    assert isinstance(transport, SerialTransport)
    (fake,) = _FakeSerialPrinter.instances
    assert fake.kwargs["devfile"] == "/dev/ttyUSB3"
    assert fake.kwargs["baudrate"] == 19200
    assert fake.kwargs["bytesize"] == serial.EIGHTBITS
    assert fake.kwargs["parity"] == serial.PARITY_NONE
    assert fake.kwargs["stopbits"] == serial.STOPBITS_ONE
    assert fake.kwargs["timeout"] is None
    assert "profile" not in fake.kwargs
    assert fake.device.inter_byte_timeout == 1.0


def test_open_serial_transport_failure(monkeypatch):
    _FakeSerialPrinter.fail = True
    monkeypatch.setattr(escpos.printer, "Serial", _FakeSerialPrinter)
    try:
        with pytest.raises(TransportError):
            open_serial_transport({"serial_port": "/dev/ttyNOPE"})
    finally:
        _FakeSerialPrinter.fail = False


@pytest.mark.skipif(sys.platform == "win32", reason="needs a POSIX pseudo-terminal")
def test_read_ack_waits_for_a_slow_printer():
    import pty

    controller, port_fd = pty.openpty()
    transport = open_serial_transport({"serial_port": os.ttyname(port_fd)})

    # The printer replies only after it has printed the whole ticket
    reply = threading.Timer(1.5, os.write, args=(controller, b"\x11\x00\x04\xab\xcd"))
    reply.start()
    try:
        assert transport.read_ack() == AckFrame(length=4, payload=b"\xab\xcd")
    finally:
        reply.cancel()
        transport.close()
        os.close(port_fd)
        os.close(controller)
