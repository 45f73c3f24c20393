"""
Core utilities for Ticket Printer.

This package groups non-printing helpers used across the app:
- config: config path resolution, JSON loading, effective settings
- logging: Request ID aware logging filters/formatters and root logger config

Exports are explicit to keep static analyzers (e.g., Pyright) happy.
"""

from .config import (
    DEFAULT_SETTINGS,
    ENV_OVERRIDES,
    default_config_path,
    get_config_path,
    load_config,
    load_settings,
)
from .logging import (
    JsonFormatter,
    RequestIdFilter,
    configure_logging,
)

__all__ = [
    # config
    "DEFAULT_SETTINGS",
    "ENV_OVERRIDES",
    "default_config_path",
    "get_config_path",
    "load_config",
    "load_settings",
    # logging
    "configure_logging",
    "RequestIdFilter",
    "JsonFormatter",
]
