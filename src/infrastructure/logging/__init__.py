"""Logging setup and wire diagnostics."""

from .logger import get_logger, setup_logging
from .wire import SignatureWire, WireLogger

__all__: list[str] = ["SignatureWire", "WireLogger", "get_logger", "setup_logging"]
