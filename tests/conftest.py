# Make `ticket_printer` importable from a plain checkout, and keep the
# environment from leaking host printer settings into tests.

import sys
from pathlib import Path

import pytest

_REPO_ROOT = str(Path(__file__).resolve().parent.parent)
if _REPO_ROOT not in sys.path:
    sys.path.insert(0, _REPO_ROOT)


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch, tmp_path):
    for name in (
        "TICKETPRINTER_PRINTER_TYPE",
        "TICKETPRINTER_SERIAL_PORT",
        "TICKETPRINTER_SERIAL_BAUDRATE",
        "TICKETPRINTER_WAIT_FOR_ACK",
        "TICKETPRINTER_WEB_BASE",
        "TICKETPRINTER_JSON_LOGS",
        "TICKETPRINTER_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("TICKETPRINTER_CONFIG_PATH", str(tmp_path / "config.json"))
