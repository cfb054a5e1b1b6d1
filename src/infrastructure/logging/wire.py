"""Diagnostic sinks for raw bytes exchanged with providers.

Wire output exists to debug authentication problems: it shows exactly which
headers and bytes went out and came back. Nothing reads it back, and a broken
sink must never affect how a command settles.
"""

from collections.abc import Iterable, Iterator
from typing import Optional, Union

from domain.base.ports.logging_port import LoggingPort, NullLogger
from infrastructure.logging.logger import get_logger

OUTBOUND = ">>"
INBOUND = "<<"

_fallback_logger = get_logger("wire")


class WireLogger:
    """Append-only sink writing each wire line at debug level.

    Defaults to a no-op ``NullLogger``; pass a ``LoggingAdapter`` to enable.
    """

    def __init__(self, logger: Optional[LoggingPort] = None, enabled: bool = True) -> None:
        self._logger = logger or NullLogger()
        self._enabled = enabled
        self._failed = False

    @property
    def enabled(self) -> bool:
        return self._enabled and not self._failed and not isinstance(self._logger, NullLogger)

    def output(self, data: Union[bytes, str]) -> None:
        """Record outbound data."""
        self._write(OUTBOUND, data)

    def input(self, data: Union[bytes, str]) -> None:
        """Record inbound data."""
        self._write(INBOUND, data)

    def tap(self, chunks: Iterable[bytes], direction: str = INBOUND) -> Iterator[bytes]:
        """Yield ``chunks`` unchanged, recording each one on the way through."""
        for chunk in chunks:
            self._write(direction, chunk)
            yield chunk

    def headers(self, direction: str, first_line: str, headers: Iterable[tuple[str, str]]) -> None:
        """Record a request or status line followed by its headers."""
        if not self.enabled:
            return
        lines = [first_line] + [f"{name}: {value}" for name, value in headers]
        self._write(direction, "\n".join(lines))

    def _write(self, direction: str, data: Union[bytes, str]) -> None:
        if not self.enabled or not data:
            return
        try:
            text = data.decode("utf-8", errors="replace") if isinstance(data, bytes) else data
            for line in text.splitlines():
                self._logger.debug("%s %s", direction, line)
        except Exception as e:
            if not self._failed:
                self._failed = True
                _fallback_logger.warning("Wire logging disabled after failure: %s", e)


class SignatureWire(WireLogger):
    """Wire for the strings signers compute signatures over."""

    def string_to_sign(self, value: str) -> None:
        self.output(value)
