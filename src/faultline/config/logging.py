# topmark:header:start
#
#   project      : Faultline
#   file         : logging.py
#   file_relpath : src/faultline/config/logging.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Internal Faultline logging with a TRACE level.

This module configures Faultline's *own* Python logging (as opposed to the leveled
diagnostic logger in [`faultline.logger`][faultline.logger], which routes messages to
a host-supplied sink). It adds a custom TRACE level below DEBUG, a logger class with a
``trace()`` method, and a chalk-colored formatter.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TYPE_CHECKING, Final, cast

from yachalk import chalk

from faultline.constants import ENV_PY_LOG_LEVEL

if TYPE_CHECKING:
    from collections.abc import Mapping

TRACE_LEVEL: Final[int] = logging.DEBUG - 5


class FaultlineLogger(logging.Logger):
    """Logger class for Faultline with support for a TRACE log level below DEBUG."""

    def trace(
        self,
        msg: object,
        *args: object,
        extra: Mapping[str, object] | None = None,
    ) -> None:
        """Log 'msg % args' with severity 'TRACE'.

        Args:
            msg (object): The message to be logged.
            *args (object): Variable length argument list for the message.
            extra (Mapping[str, object] | None): Optional dictionary of extra information to pass
                to the logger.
        """
        if self.isEnabledFor(TRACE_LEVEL):
            self._log(
                TRACE_LEVEL,
                msg=msg,
                args=args,
                extra=extra,
                stacklevel=2,
            )


if not hasattr(logging, "TRACE"):
    logging.addLevelName(TRACE_LEVEL, "TRACE")
    logging.TRACE = TRACE_LEVEL  # type: ignore

logging.setLoggerClass(FaultlineLogger)


LOG_FORMAT = "[%(levelname)s] %(message)s"
DEBUG_LOG_FORMAT = "[%(levelname)s] [%(filename)s:%(lineno)d] [%(funcName)s] %(message)s"

ROOT_LOGGER_NAME: Final[str] = "faultline"

# Set on handlers installed by `setup_logging` so reconfiguring replaces only those.
_HANDLER_MARKER: Final[str] = "_faultline_handler"


class ChalkFormatter(logging.Formatter):
    """Formatter that outputs log records with chalk-colored formatting based on severity level."""

    def format(self, record: logging.LogRecord) -> str:
        """Format the specified record with colors based on log level.

        Args:
            record (logging.LogRecord): The LogRecord to be formatted.

        Returns:
            str: The colorized formatted log message as a string.
        """
        level = record.levelno
        message = super().format(record)

        if level >= logging.CRITICAL:
            return chalk.red_bright(message)
        if level >= logging.ERROR:
            return chalk.red(message)
        if level >= logging.WARNING:
            return chalk.yellow(message)
        if level >= logging.INFO:
            return chalk.green(message)
        if level >= logging.DEBUG:
            return chalk.gray(message)
        if level >= TRACE_LEVEL:
            return chalk.blue(message)
        return chalk.dim.red(message)


_LEVEL_NAMES: Final[dict[str, int]] = {
    "TRACE": TRACE_LEVEL,
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
    "FATAL": logging.CRITICAL,
    "NOTSET": logging.NOTSET,
}


def resolve_env_log_level(environ: Mapping[str, str] | None = None) -> int | None:
    """Return a logging level from environment or None if unset.

    Honors FAULTLINE_PY_LOG_LEVEL (e.g., "TRACE", "DEBUG", "INFO", numeric "10").

    Args:
        environ (Mapping[str, str] | None): Environment to read; defaults to ``os.environ``.

    Returns:
        int | None: The level, or ``None`` if unset or unrecognized.
    """
    val: str | None = (os.environ if environ is None else environ).get(ENV_PY_LOG_LEVEL)
    if not val:
        return None
    v: str = val.strip().upper()
    if v.isdigit():
        return int(v)
    return _LEVEL_NAMES.get(v)


def setup_logging(level: int | None = None, *, logger_name: str = ROOT_LOGGER_NAME) -> None:
    """Configure Faultline's logger hierarchy with a level and colored stderr output.

    Only the ``faultline`` logger (and thereby its children) is touched; the host
    application's root logger is left alone. Records still propagate to the root.

    If ``level`` is None, environment variables are consulted via
    [`resolve_env_log_level`][faultline.config.logging.resolve_env_log_level].
    Default is CRITICAL when unspecified.

    Args:
        level (int | None): Logging level for the hierarchy.
        logger_name (str): Top of the hierarchy to configure.
    """
    if level is None:
        level = resolve_env_log_level() or logging.CRITICAL

    package_logger: logging.Logger = logging.getLogger(logger_name)
    package_logger.setLevel(level)

    for handler in package_logger.handlers[:]:
        if getattr(handler, _HANDLER_MARKER, False):
            package_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ChalkFormatter(LOG_FORMAT if level >= logging.INFO else DEBUG_LOG_FORMAT))
    setattr(handler, _HANDLER_MARKER, True)
    package_logger.addHandler(handler)


def get_logger(name: str) -> FaultlineLogger:
    """Retrieve a FaultlineLogger instance with the specified name.

    Args:
        name (str): The name of the logger.

    Returns:
        FaultlineLogger: A FaultlineLogger instance.
    """
    logger = logging.getLogger(name)
    return cast("FaultlineLogger", logger)
