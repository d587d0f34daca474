# topmark:header:start
#
#   project      : Faultline
#   file         : debug.py
#   file_relpath : src/faultline/debug.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Process-wide diagnostic service.

[`Debug`][faultline.debug.Debug] bundles the leveled logger, the assertion engine and
the deprecation helpers behind one explicitly configured object. The module exposes a
singleton, ``debug``, initialized from the environment at import time (see
[`MutableDebugConfig.from_env`][faultline.config.model.MutableDebugConfig.from_env]).

Initialization:
    Hosts call ``debug.configure(config)`` once at startup. Reconfiguring rebuilds the
    logger and the assertion engine, re-binding the gated node validators; tests use
    it to switch strictness.

Example:
    ```python
    from faultline.config import MutableDebugConfig
    from faultline.core.levels import AssertionLevel, LogLevel
    from faultline.debug import debug
    from faultline.logger import StdlibLoggingHost

    cfg = MutableDebugConfig.from_env()
    cfg.log_level = LogLevel.INFO
    cfg.assertion_level = AssertionLevel.NORMAL
    cfg.logging_host = StdlibLoggingHost()
    debug.configure(cfg.freeze())

    debug.assertions.assert_(x > 0, "x must be positive")
    ```
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

from faultline.assertions import AssertionEngine
from faultline.config import DebugConfig, MutableDebugConfig
from faultline.config.logging import FaultlineLogger, get_logger
from faultline.constants import DEBUG_INFO_PREFIX
from faultline.deprecation import (
    Deprecation,
    DeprecationOptions,
    create_deprecation,
    deprecate_function,
    deprecate_properties,
    deprecate_property,
)
from faultline.logger import DiagnosticLogger
from faultline.stack.filter import FilterStackOptions, filter_stack

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping
    from types import ModuleType

_F = TypeVar("_F", bound="Callable[..., Any]")
_T = TypeVar("_T")

logger: FaultlineLogger = get_logger(__name__)


class Debug:
    """Diagnostic service: logger, assertions and deprecations under one config.

    Attributes:
        config (DebugConfig): The active configuration.
        logger (DiagnosticLogger): Leveled logger routing to ``config.logging_host``.
        assertions (AssertionEngine): Assertion engine bound to ``config.assertion_level``.
    """

    def __init__(self, config: DebugConfig | None = None) -> None:
        self._debug_info_enabled: bool = False
        self.configure(config or DebugConfig())

    def configure(self, config: DebugConfig) -> None:
        """Install ``config``, rebuilding the logger and the assertion engine."""
        self.config: DebugConfig = config
        self.logger: DiagnosticLogger = DiagnosticLogger(config.log_level, config.logging_host)
        self.assertions: AssertionEngine = AssertionEngine(
            config.assertion_level,
            config.category_label,
            diagnostics=self.logger,
        )
        logger.debug(
            "Debug configured: log_level=%s assertion_level=%s host=%s",
            config.log_level.name,
            config.assertion_level.name,
            type(config.logging_host).__name__ if config.logging_host else None,
        )

    @classmethod
    def from_env(cls) -> Debug:
        """Build a service configured from ``FAULTLINE_*`` environment variables."""
        return cls(MutableDebugConfig.from_env().freeze())

    @property
    def is_debugging(self) -> bool:
        """Whether a debugger session is active (host-provided)."""
        return self.config.is_debugging

    # ------------------------------------------------------------ deprecations

    def create_deprecation(
        self, name: str, options: DeprecationOptions | None = None
    ) -> Deprecation:
        """Create a deprecation notice reporting through this service."""
        return create_deprecation(name, options, diagnostics=self.logger, engine=self.assertions)

    def deprecate_function(self, func: _F, options: DeprecationOptions | None = None) -> _F:
        """Deprecate ``func``.

        See [`deprecate_function`][faultline.deprecation.deprecate_function].
        """
        return deprecate_function(func, options, diagnostics=self.logger, engine=self.assertions)

    def deprecate_property(
        self,
        container: type | ModuleType,
        key: str,
        options: DeprecationOptions | None = None,
    ) -> None:
        """Deprecate one attribute.

        See [`deprecate_property`][faultline.deprecation.deprecate_property].
        """
        deprecate_property(container, key, options, diagnostics=self.logger, engine=self.assertions)

    def deprecate_properties(
        self,
        container: type | ModuleType,
        keys: Iterable[str],
        options: DeprecationOptions | None = None,
    ) -> None:
        """Deprecate several attributes of ``container``."""
        deprecate_properties(
            container, keys, options, diagnostics=self.logger, engine=self.assertions
        )

    # -------------------------------------------------------------- stack text

    def filter_stack(self, error: _T, options: FilterStackOptions | None = None) -> _T:
        """Filter stack text or an error-like object.

        See [`filter_stack`][faultline.stack.filter.filter_stack].
        """
        return filter_stack(error, options)  # type: ignore[arg-type, return-value]

    # -------------------------------------------------------------- debug info

    @property
    def is_debug_info_enabled(self) -> bool:
        """Whether `enable_debug_info` has already run."""
        return self._debug_info_enabled

    def enable_debug_info(
        self, targets: Mapping[type, Mapping[str, Callable[[Any], object]]]
    ) -> None:
        """Inject read-only debug properties into frequently inspected host classes.

        Each ``name: getter`` pair becomes a ``_debug_<name>`` property (e.g.
        ``_debug_kind`` returning ``format_enum(self.kind, SyntaxKind)``) so debuggers
        and ``repr`` helpers can show readable labels. Runs once per service; classes
        that already define a property are left alone.

        Args:
            targets (Mapping[type, Mapping[str, Callable[[Any], object]]]): Getters per class.
        """
        if self._debug_info_enabled:
            return
        for cls, getters in targets.items():
            for name, getter in getters.items():
                attr: str = f"{DEBUG_INFO_PREFIX}{name}"
                if attr in vars(cls):
                    continue
                setattr(cls, attr, property(getter))
                logger.trace("Installed %s.%s", cls.__qualname__, attr)
        self._debug_info_enabled = True


debug: Debug = Debug.from_env()
