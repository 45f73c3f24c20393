"""
Printer facade.

Exposes a single blocking `print_ticket` operation. Two variants exist and
are chosen by configuration:

- SerialPrinter formats the ticket and writes it to the serial transport.
  A lock serializes jobs so only one ticket is on the wire at a time
  (Idle -> Printing -> Idle). Waiting callers are not served in FIFO order.
- NullPrinter only logs the job, for sites without printer hardware.
"""

from __future__ import annotations

import enum
import logging
import threading
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any, Optional, Protocol

from ticket_printer.printing.formatter import FormattedStream, TicketJob, format_ticket
from ticket_printer.printing.transport import AckFrame, open_serial_transport

logger = logging.getLogger(__name__)

# Seconds close() waits for a running job
CLOSE_TIMEOUT = 5.0


class PrinterState(str, enum.Enum):
    IDLE = "idle"
    PRINTING = "printing"


class Transport(Protocol):
    def write(self, stream: FormattedStream) -> None: ...

    def read_ack(self) -> AckFrame: ...

    def close(self) -> None: ...


class Printer(Protocol):
    kind: str

    @property
    def state(self) -> PrinterState: ...

    def print_ticket(self, ticket_id: str, pin: str, registration_base: str, registration_url: str) -> None: ...

    def close(self) -> None: ...


def _log_job(ticket_id: str, pin: str, registration_base: str, registration_url: str) -> None:
    logger.info(
        "Printing ticket id=%s pin=%s regBase=%s regURL=%s",
        ticket_id,
        pin,
        registration_base,
        registration_url,
    )


class SerialPrinter:
    kind = "serial"

    def __init__(
        self,
        transport: Transport,
        *,
        wait_for_ack: bool = False,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._transport = transport
        self._wait_for_ack = wait_for_ack
        self._clock = clock or datetime.now
        self._lock = threading.Lock()
        self._state = PrinterState.IDLE

    @property
    def state(self) -> PrinterState:
        return self._state

    def print_ticket(self, ticket_id: str, pin: str, registration_base: str, registration_url: str) -> None:
        """
        Format and send one ticket. Blocks while another ticket is printing.

        Raises:
            FormatError: the ticket could not be rendered; nothing was sent.
            WriteError: the device rejected the write.
            ShortRead: waiting for the acknowledgement failed (only with wait_for_ack).
        """
        with self._lock:
            self._state = PrinterState.PRINTING
            try:
                _log_job(ticket_id, pin, registration_base, registration_url)
                job = TicketJob(str(ticket_id), str(pin), registration_base, registration_url)
                stream = format_ticket(job, now=self._clock())
                self._transport.write(stream)
                if self._wait_for_ack:
                    frame = self._transport.read_ack()
                    logger.info("Printer acknowledged ticket %s (%d byte frame)", ticket_id, frame.length)
                logger.info("Printed ticket %s", ticket_id)
            finally:
                self._state = PrinterState.IDLE

    def close(self, timeout: float = CLOSE_TIMEOUT) -> None:
        """
        Close the transport, waiting at most `timeout` seconds for a running
        job. A job stuck in a write does not block shutdown; closing the port
        makes that write fail.
        """
        acquired = self._lock.acquire(timeout=timeout)
        if not acquired:
            logger.warning("Printer still busy after %.1fs; closing the connection anyway", timeout)
        try:
            self._transport.close()
        finally:
            if acquired:
                self._lock.release()
        logger.info("Printer connection closed")


class NullPrinter:
    kind = "null"

    @property
    def state(self) -> PrinterState:
        return PrinterState.IDLE

    def print_ticket(self, ticket_id: str, pin: str, registration_base: str, registration_url: str) -> None:
        _log_job(ticket_id, pin, registration_base, registration_url)

    def close(self) -> None:
        pass


def _is_null(settings: Mapping[str, Any]) -> bool:
    ptype = str(settings.get("printer_type", "serial")).lower()
    return ptype == "null" or str(settings.get("serial_port", "")) == "."


def create_printer(settings: Mapping[str, Any]) -> Printer:
    """
    Build the printer variant selected by settings.

    printer_type "null" (or serial_port ".") gives a NullPrinter; "serial"
    opens the port and gives a SerialPrinter.
    """
    if _is_null(settings):
        logger.info("Using null printer; tickets are logged only")
        return NullPrinter()

    ptype = str(settings.get("printer_type", "serial")).lower()
    if ptype != "serial":
        raise RuntimeError(f"Unsupported printer type: {ptype}")

    transport = open_serial_transport(settings)
    return SerialPrinter(transport, wait_for_ack=bool(settings.get("wait_for_ack", False)))


__all__ = ["NullPrinter", "Printer", "PrinterState", "SerialPrinter", "create_printer"]
