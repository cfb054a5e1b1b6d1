"""Structured logging setup built on structlog.

Runtime components log through the standard library (``LoggingAdapter``);
``setup_logging`` renders those records, and anything logged through
``structlog.get_logger``, with one shared processor chain.
"""

import logging
import os
import sys
from typing import Optional

import structlog

from config.platform_dirs import get_logs_location
from config.settings import settings

ROOT_LOGGER_NAME = "cloudwire"

_HANDLER_MARK = "_cloudwire_handler"


def get_logger(name: str) -> logging.Logger:
    """Return a stdlib logger under the ``cloudwire`` hierarchy."""
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def setup_logging(
    log_level: Optional[str] = None,
    log_destination: Optional[str] = None,
    log_dir: Optional[str] = None,
    log_filename: Optional[str] = None,
    json_output: Optional[bool] = None,
) -> structlog.stdlib.BoundLogger:
    """
    Set up structured logging for the runtime.

    :param log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    :param log_destination: Where to send logs ("file", "stdout" or "both").
    :param log_dir: Directory of the log file.
    :param log_filename: Name of the log file.
    :param json_output: Render JSON lines instead of console key/value output.
    :return: Configured structlog logger for the runtime.
    """
    log_level = log_level or settings.get("LOG_LEVEL", "INFO")
    log_destination = log_destination or settings.get("LOG_DESTINATION", "stdout")
    log_dir = log_dir or settings.get("LOG_DIR") or str(get_logs_location())
    log_filename = log_filename or settings.get("LOG_FILENAME", "cloudwire.log")
    if json_output is None:
        json_output = bool(settings.get("LOG_JSON", False))

    shared_processors = [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    if json_output:
        render_chain = [
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        render_chain = [
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.dev.ConsoleRenderer(colors=False),
        ]

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=render_chain,
        foreign_pre_chain=[*shared_processors, structlog.stdlib.ExtraAdder()],
    )

    handlers: list[logging.Handler] = []
    if log_destination in ("file", "both"):
        os.makedirs(log_dir, exist_ok=True)
        handlers.append(logging.FileHandler(os.path.join(log_dir, log_filename)))
    if log_destination in ("stdout", "both"):
        handlers.append(logging.StreamHandler(sys.stdout))

    root = logging.getLogger(ROOT_LOGGER_NAME)
    for existing in list(root.handlers):
        if getattr(existing, _HANDLER_MARK, False):
            root.removeHandler(existing)
            existing.close()
    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_MARK, True)
        root.addHandler(handler)
    root.setLevel(getattr(logging, str(log_level).upper(), logging.INFO))
    root.propagate = False

    return structlog.get_logger(ROOT_LOGGER_NAME)
