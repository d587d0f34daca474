# topmark:header:start
#
#   project      : Faultline
#   file         : logger.py
#   file_relpath : src/faultline/logger.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Leveled diagnostic logger.

The logger is a pure pass-through gate: a message is forwarded to the registered
[`LoggingHost`][faultline.logger.LoggingHost] when one is present and the current
threshold is ``<=`` the message's [`LogLevel`][faultline.core.levels.LogLevel].
There is no buffering and no formatting. A missing host turns every call into a
no-op (never an error).

Hosts that want Python logging can use
[`StdlibLoggingHost`][faultline.logger.StdlibLoggingHost], which forwards into the
Faultline logger hierarchy (and therefore through the chalk formatter when
[`setup_logging`][faultline.config.logging.setup_logging] is active).
"""

from __future__ import annotations

import logging
from typing import Protocol

from faultline.config.logging import TRACE_LEVEL, FaultlineLogger, get_logger
from faultline.core.levels import LogLevel

_PY_LEVELS: dict[LogLevel, int] = {
    LogLevel.ERROR: logging.ERROR,
    LogLevel.WARNING: logging.WARNING,
    LogLevel.INFO: logging.INFO,
    LogLevel.VERBOSE: TRACE_LEVEL,
}


class LoggingHost(Protocol):
    """Sink receiving severity-tagged diagnostic messages."""

    def log(self, level: LogLevel, message: str) -> None:
        """Receive a message that passed the logger's threshold.

        Args:
            level (LogLevel): Severity of the message.
            message (str): The message text.
        """
        ...


class StdlibLoggingHost:
    """`LoggingHost` that forwards diagnostics into Python `logging`.

    Args:
        logger_name (str): Name of the target logger.
    """

    def __init__(self, logger_name: str = "faultline.host") -> None:
        self.logger: FaultlineLogger = get_logger(logger_name)

    def log(self, level: LogLevel, message: str) -> None:
        """Forward ``message`` at the Python level matching ``level``.

        `LogLevel.OFF` has no Python counterpart and is dropped.
        """
        py_level: int | None = _PY_LEVELS.get(level)
        if py_level is not None:
            self.logger.log(py_level, "%s", message)


class DiagnosticLogger:
    """Threshold-gated router from severities to an optional host.

    Attributes:
        level (LogLevel): Current threshold; messages with ``level >= threshold`` pass.
        host (LoggingHost | None): Registered sink, or ``None``.
    """

    def __init__(self, level: LogLevel = LogLevel.WARNING, host: LoggingHost | None = None) -> None:
        self.level: LogLevel = level
        self.host: LoggingHost | None = host

    def should_log(self, level: LogLevel) -> bool:
        """Return True if a message of ``level`` passes the current threshold."""
        return self.level <= level

    def log(self, level: LogLevel, message: str) -> None:
        """Forward ``(level, message)`` to the host if one is set and the gate is open."""
        if self.host is not None and self.should_log(level):
            self.host.log(level, message)

    def error(self, message: str) -> None:
        """Log at `LogLevel.ERROR`."""
        self.log(LogLevel.ERROR, message)

    def warn(self, message: str) -> None:
        """Log at `LogLevel.WARNING`."""
        self.log(LogLevel.WARNING, message)

    def info(self, message: str) -> None:
        """Log at `LogLevel.INFO`."""
        self.log(LogLevel.INFO, message)

    def trace(self, message: str) -> None:
        """Log at `LogLevel.VERBOSE`."""
        self.log(LogLevel.VERBOSE, message)
