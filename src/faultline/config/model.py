# topmark:header:start
#
#   project      : Faultline
#   file         : model.py
#   file_relpath : src/faultline/config/model.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Process-wide diagnostic configuration.

Faultline keeps its mutable global state (log threshold, assertion strictness,
logging host, node labeler, debugging flag) in one explicit configuration object
that the [`Debug`][faultline.debug.Debug] service is built from.

Immutability:
    - `DebugConfig` is ``frozen=True``; the service binds gated assertions from it
      once, so a running configuration is never mutated in place.
    - Use `DebugConfig.thaw` → edit → `MutableDebugConfig.freeze`, then hand the
      result to [`Debug.configure`][faultline.debug.Debug.configure].

Environment:
    `MutableDebugConfig.from_env` applies ``FAULTLINE_LOG_LEVEL``,
    ``FAULTLINE_ASSERTION_LEVEL`` and ``FAULTLINE_DEBUGGING`` on top of the defaults.
    Unknown tokens are ignored (and logged); they never fail startup.

Out of scope:
    Configuration files and CLI argument parsing. Hosts own those and pass the
    resulting values in.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from faultline.config.logging import FaultlineLogger, get_logger
from faultline.constants import ENV_ASSERTION_LEVEL, ENV_DEBUGGING, ENV_LOG_LEVEL
from faultline.core.levels import AssertionLevel, LogLevel

if TYPE_CHECKING:
    from collections.abc import Callable

    from faultline.logger import LoggingHost

logger: FaultlineLogger = get_logger(__name__)

_TRUTHY: frozenset[str] = frozenset({"1", "true", "yes", "on"})
_FALSY: frozenset[str] = frozenset({"0", "false", "no", "off"})


@dataclass(frozen=True, slots=True)
class DebugConfig:
    """Immutable diagnostic configuration.

    Attributes:
        log_level (LogLevel): Threshold of the leveled logger.
        assertion_level (AssertionLevel): Strictness of gated assertion categories.
        logging_host (LoggingHost | None): Sink for diagnostic messages, or ``None``.
        category_label (Callable[[object], str] | None): Turns domain values (nodes)
            into human-readable labels for assertion messages.
        is_debugging (bool): Whether a debugger session is active.
    """

    log_level: LogLevel = LogLevel.WARNING
    assertion_level: AssertionLevel = AssertionLevel.NONE
    logging_host: LoggingHost | None = None
    category_label: Callable[[object], str] | None = None
    is_debugging: bool = False

    def thaw(self) -> MutableDebugConfig:
        """Return a mutable copy of this frozen config.

        Returns:
            MutableDebugConfig: A mutable builder initialized from this snapshot.
        """
        return MutableDebugConfig(
            log_level=self.log_level,
            assertion_level=self.assertion_level,
            logging_host=self.logging_host,
            category_label=self.category_label,
            is_debugging=self.is_debugging,
        )


@dataclass
class MutableDebugConfig:
    """Mutable builder for `DebugConfig`."""

    log_level: LogLevel = LogLevel.WARNING
    assertion_level: AssertionLevel = AssertionLevel.NONE
    logging_host: LoggingHost | None = None
    category_label: Callable[[object], str] | None = None
    is_debugging: bool = False

    def freeze(self) -> DebugConfig:
        """Freeze this builder into an immutable `DebugConfig`."""
        return DebugConfig(
            log_level=self.log_level,
            assertion_level=self.assertion_level,
            logging_host=self.logging_host,
            category_label=self.category_label,
            is_debugging=self.is_debugging,
        )

    def apply_env(self, environ: Mapping[str, str] | None = None) -> MutableDebugConfig:
        """Apply environment overrides in place.

        Args:
            environ (Mapping[str, str] | None): Environment to read; defaults to ``os.environ``.

        Returns:
            MutableDebugConfig: ``self``, for chaining.
        """
        env: Mapping[str, str] = os.environ if environ is None else environ

        raw: str | None = env.get(ENV_LOG_LEVEL)
        if raw:
            log_level: LogLevel | None = LogLevel.parse(raw)
            if log_level is None:
                logger.warning("Ignoring unknown %s=%r", ENV_LOG_LEVEL, raw)
            else:
                self.log_level = log_level

        raw = env.get(ENV_ASSERTION_LEVEL)
        if raw:
            assertion_level: AssertionLevel | None = AssertionLevel.parse(raw)
            if assertion_level is None:
                logger.warning("Ignoring unknown %s=%r", ENV_ASSERTION_LEVEL, raw)
            else:
                self.assertion_level = assertion_level

        raw = env.get(ENV_DEBUGGING)
        if raw:
            token: str = raw.strip().lower()
            if token in _TRUTHY:
                self.is_debugging = True
            elif token in _FALSY:
                self.is_debugging = False
            else:
                logger.warning("Ignoring unknown %s=%r", ENV_DEBUGGING, raw)

        logger.debug(
            "Resolved debug config: log_level=%s assertion_level=%s is_debugging=%s",
            self.log_level.name,
            self.assertion_level.name,
            self.is_debugging,
        )
        return self

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> MutableDebugConfig:
        """Build a config from defaults plus environment overrides.

        Args:
            environ (Mapping[str, str] | None): Environment to read; defaults to ``os.environ``.

        Returns:
            MutableDebugConfig: The resolved builder.
        """
        return cls().apply_env(environ)
