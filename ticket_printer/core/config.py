"""
Config utilities for Ticket Printer.

Responsibilities:
- Resolve the config path with environment and XDG support
- Load the JSON config and merge it with defaults and env overrides
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Optional

DEFAULT_SETTINGS: dict[str, Any] = {
    "printer_type": "serial",
    "serial_port": "/dev/ttyUSB0",
    "serial_baudrate": 19200,
    "printer_profile": None,
    "wait_for_ack": False,
    "web_base": None,
}

# Environment variable -> settings key
ENV_OVERRIDES: dict[str, str] = {
    "TICKETPRINTER_PRINTER_TYPE": "printer_type",
    "TICKETPRINTER_SERIAL_PORT": "serial_port",
    "TICKETPRINTER_SERIAL_BAUDRATE": "serial_baudrate",
    "TICKETPRINTER_WAIT_FOR_ACK": "wait_for_ack",
    "TICKETPRINTER_WEB_BASE": "web_base",
}


def default_config_path() -> str:
    """
    Resolve the default config path using:
    1) $XDG_CONFIG_HOME/ticketprinter/config.json
    2) ~/.config/ticketprinter/config.json
    """
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return str(Path(xdg) / "ticketprinter" / "config.json")
    return str(Path.home() / ".config" / "ticketprinter" / "config.json")


def get_config_path() -> str:
    """
    Return the config path honoring TICKETPRINTER_CONFIG_PATH override.
    """
    return os.environ.get("TICKETPRINTER_CONFIG_PATH", default_config_path())


def load_config(path: Optional[str] = None) -> Optional[dict[str, Any]]:
    """
    Load the JSON config if it exists; return None if missing.

    Raises:
        json.JSONDecodeError if the file exists but contains invalid JSON.
        OSError for I/O errors other than missing file.
    """
    cfg_path = Path(path or get_config_path())
    if not cfg_path.exists():
        return None
    with cfg_path.open("r", encoding="utf-8") as f:
        return json.load(f)


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_settings(path: Optional[str] = None) -> dict[str, Any]:
    """
    Effective printer settings: defaults, then the config file, then env.
    """
    settings = dict(DEFAULT_SETTINGS)
    cfg = load_config(path)
    if cfg:
        settings.update(cfg)

    for env_name, key in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value is None:
            continue
        if key == "wait_for_ack":
            settings[key] = _env_bool(value)
        elif key == "serial_baudrate":
            settings[key] = int(value)
        else:
            settings[key] = value

    if settings.get("web_base"):
        settings["web_base"] = str(settings["web_base"]).rstrip("/")
    return settings


__all__ = [
    "DEFAULT_SETTINGS",
    "ENV_OVERRIDES",
    "default_config_path",
    "get_config_path",
    "load_config",
    "load_settings",
]
