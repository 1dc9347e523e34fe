"""
Logging utilities for forgekit.

This module centralizes logger configuration, formatting, and retrieval
for the forgekit package. It is safe for library use (loggers fall back
to a ``NullHandler``) and for CLI use (optional colorized output).

Structured fields, such as the comment id and recheck counter in spam
lifecycle logs, are passed through ``extra=extra_context(...)`` and
rendered after the message as ``key=value`` pairs.
"""

from __future__ import annotations

import os
import sys
import logging
import threading
from typing import IO, Any, Dict, Mapping, Optional

from forgekit.constants import (
    LOG_DATE_FORMAT,
    LOG_DEFAULT_FORMAT,
    LOG_VERBOSE_FORMAT,
)

ROOT_LOGGER_NAME = "forgekit"

#: Attribute name under which structured fields travel on a LogRecord.
CONTEXT_ATTRIBUTE = "forgekit_context"

_lock = threading.Lock()


def extra_context(**fields: Any) -> Dict[str, Mapping[str, Any]]:
    """Build an ``extra=`` mapping carrying structured log fields.

    Fields whose value is ``None`` are dropped.

    Example:
        >>> logger.info(
        ...     "Skipping spam recheck",
        ...     extra=extra_context(comment_id=7, recheck_count=3),
        ... )
    """
    return {
        CONTEXT_ATTRIBUTE: {k: v for k, v in fields.items() if v is not None}
    }


class ColoredFormatter(logging.Formatter):
    """Logging formatter with optional ANSI colors and structured fields."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(
        self,
        fmt: str,
        *,
        datefmt: Optional[str] = None,
        use_color: bool = True,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        levelname = record.levelname
        if self.use_color and self._should_use_color():
            color = self.COLORS.get(record.levelname)
            if color:
                record.levelname = f"{color}{record.levelname}{self.RESET}"
        try:
            message = super().format(record)
        finally:
            record.levelname = levelname

        context = getattr(record, CONTEXT_ATTRIBUTE, None)
        if context:
            pairs = " ".join(f"{key}={value}" for key, value in context.items())
            message = f"{message} [{pairs}]"
        return message

    @staticmethod
    def _should_use_color() -> bool:
        """Determine whether ANSI colors should be emitted."""
        if os.environ.get("NO_COLOR"):
            return False
        if os.environ.get("CI"):
            return False
        try:
            return sys.stderr.isatty()
        except (AttributeError, OSError):
            return False


def setup_logging(
    *,
    level: int = logging.INFO,
    verbose: bool = False,
    stream: Optional[IO[str]] = None,
) -> None:
    """Configure logging for forgekit.

    This function is safe to call multiple times; configuration is
    protected by a process-wide lock and replaces earlier handlers.

    Args:
        level: Logging level (e.g., ``logging.INFO``, ``logging.DEBUG``).
        verbose: Enable verbose formatting with timestamps and logger names.
        stream: Output stream; defaults to ``sys.stderr``.
    """
    with _lock:
        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        root_logger.handlers.clear()
        root_logger.setLevel(level)

        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setLevel(level)

        fmt = LOG_VERBOSE_FORMAT if verbose else LOG_DEFAULT_FORMAT
        formatter = ColoredFormatter(
            fmt,
            datefmt=LOG_DATE_FORMAT,
            use_color=not os.environ.get("NO_COLOR"),
        )
        handler.setFormatter(formatter)

        root_logger.addHandler(handler)
        root_logger.propagate = False


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger within the forgekit namespace.

    Args:
        name: Logger name, either short (``"resolver"``) or fully
            qualified (``"forgekit.core.resolver"``).

    Returns:
        A logger instance under the ``forgekit`` hierarchy.
    """
    if not name or name == ROOT_LOGGER_NAME:
        logger = logging.getLogger(ROOT_LOGGER_NAME)
    elif name.startswith(f"{ROOT_LOGGER_NAME}."):
        logger = logging.getLogger(name)
    else:
        logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")

    # Library-safe when the application never configured logging
    if not logger.handlers and (not logger.parent or not logger.parent.handlers):
        logger.addHandler(logging.NullHandler())

    return logger
