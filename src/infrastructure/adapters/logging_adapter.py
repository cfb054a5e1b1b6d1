"""Logging adapter implementing LoggingPort on the stdlib logger."""

import logging
from typing import Any, Optional

from domain.base.ports.logging_port import LoggingPort
from infrastructure.logging.logger import get_logger


class LoggingAdapter(LoggingPort):
    """LoggingPort backed by a ``cloudwire.*`` stdlib logger.

    ``context`` is merged into the ``extra`` of every record, so a bound
    adapter (see ``bind``) tags all its lines with e.g. a command id.
    """

    def __init__(
        self,
        name: str = "runtime",
        logger: Optional[logging.Logger] = None,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        self._logger = logger or get_logger(name)
        self._context: dict[str, Any] = dict(context or {})

    @property
    def name(self) -> str:
        return self._logger.name

    def bind(self, **context: Any) -> "LoggingAdapter":
        """Return an adapter on the same logger with extra bound context."""
        merged = {**self._context, **context}
        return LoggingAdapter(logger=self._logger, context=merged)

    def _prepare_kwargs(self, kwargs: dict[str, Any]) -> dict[str, Any]:
        kwargs.setdefault("stacklevel", 2)
        if self._context:
            kwargs["extra"] = {**self._context, **(kwargs.get("extra") or {})}
        return kwargs

    def debug(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._logger.debug(message, *args, **self._prepare_kwargs(kwargs))

    def info(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._logger.info(message, *args, **self._prepare_kwargs(kwargs))

    def warning(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._logger.warning(message, *args, **self._prepare_kwargs(kwargs))

    def error(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._logger.error(message, *args, **self._prepare_kwargs(kwargs))

    def critical(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._logger.critical(message, *args, **self._prepare_kwargs(kwargs))

    def exception(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._logger.exception(message, *args, **self._prepare_kwargs(kwargs))
