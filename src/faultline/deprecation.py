# topmark:header:start
#
#   project      : Faultline
#   file         : deprecation.py
#   file_relpath : src/faultline/deprecation.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Deprecation interception for functions, properties and attributes.

A [`Deprecation`][faultline.deprecation.Deprecation] is a stateful callable created
per deprecated member. Calling it either:

* fails on every call with
  [`DeprecatedUsageError`][faultline.errors.DeprecatedUsageError] when the options say
  ``error=True``, or
* emits a single `LogLevel.WARNING` message through the diagnostic logger (the first
  call flips ``has_warned``; later calls are no-ops).

Wrappers:
    - ``deprecate_function(func, options)`` returns a ``functools.wraps`` wrapper that
      triggers the deprecation and then delegates (it also works as a method).
    - ``deprecate_property(container, key, options)`` replaces the attribute ``key`` of
      a class or a module. A ``property`` keeps its getter/setter/deleter, each wrapped.
      A plain value becomes a [`DeprecatedValue`][faultline.deprecation.DeprecatedValue]
      descriptor that holds the value itself.

Modules:
    Module attributes cannot carry descriptors, so the module's class is swapped for a
    private ``ModuleType`` subclass holding them. Code *inside* the module keeps
    reading its own globals and is not intercepted; outside writes still update them.

Defaults:
    Without an explicit ``diagnostics``/``engine``, a deprecation resolves the
    process-wide [`debug`][faultline.debug.debug] service at call time, so it follows
    later reconfiguration.
"""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass
from types import ModuleType
from typing import TYPE_CHECKING, Any, TypeVar, cast

from faultline.config.logging import FaultlineLogger, get_logger
from faultline.errors import DeprecatedUsageError
from faultline.utils.introspection import format_callable_pretty, get_function_name

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from faultline.assertions import AssertionEngine
    from faultline.debug import Debug
    from faultline.logger import DiagnosticLogger

logger: FaultlineLogger = get_logger(__name__)

_F = TypeVar("_F", bound="Callable[..., Any]")

_ARG_PLACEHOLDER_RE: re.Pattern[str] = re.compile(r"\{(\d+)\}")

# Marks the private ModuleType subclass installed by `deprecate_property`.
_MODULE_CLASS_MARKER: str = "_faultline_deprecated_module"


@dataclass(frozen=True)
class DeprecationOptions:
    """How a deprecated member reports its use.

    Attributes:
        message (str | None): Extra text appended to the notice; ``{0}`` is replaced
            with the member name.
        error (bool): Fail on every use instead of warning once.
        since (str | None): Version the member was deprecated in.
        until (str | None): Version after which the member stops working.
    """

    message: str | None = None
    error: bool = False
    since: str | None = None
    until: str | None = None


def format_string_from_args(text: str, args: Sequence[object]) -> str:
    """Replace ``{0}``, ``{1}``, ... in ``text`` with the positional ``args``.

    Placeholders without a matching argument are left as they are.
    """

    def repl(match: re.Match[str]) -> str:
        index: int = int(match.group(1))
        return str(args[index]) if index < len(args) else match.group(0)

    return _ARG_PLACEHOLDER_RE.sub(repl, text)


def format_deprecation_message(name: str, options: DeprecationOptions) -> str:
    """Return the notice emitted (or raised) for a deprecated member.

    Args:
        name (str): Name of the deprecated member.
        options (DeprecationOptions): Deprecation options.

    Returns:
        str: e.g. ``"DeprecationWarning: 'foo' has been deprecated since 2.0 and will
        no longer be usable after 3.0. Use bar instead."``
    """
    text: str = "DeprecationError: " if options.error else "DeprecationWarning: "
    text += f"'{name}' "
    text += f"has been deprecated since {options.since}" if options.since else "is deprecated"
    if options.error:
        text += " and can no longer be used."
    elif options.until:
        text += f" and will no longer be usable after {options.until}."
    else:
        text += "."
    if options.message:
        text += " " + format_string_from_args(options.message, [name])
    return text


class Deprecation:
    """Stateful notice for one deprecated member.

    Attributes:
        name (str): Name of the deprecated member.
        options (DeprecationOptions): Deprecation options.
        message (str): The formatted notice.
        has_warned (bool): Whether the one-shot warning was already emitted.
    """

    def __init__(
        self,
        name: str,
        options: DeprecationOptions | None = None,
        *,
        diagnostics: DiagnosticLogger | None = None,
        engine: AssertionEngine | None = None,
    ) -> None:
        self.name: str = name
        self.options: DeprecationOptions = options or DeprecationOptions()
        self.message: str = format_deprecation_message(name, self.options)
        self.has_warned: bool = False
        self._diagnostics: DiagnosticLogger | None = diagnostics
        self._engine: AssertionEngine | None = engine

    def __repr__(self) -> str:
        return f"Deprecation(name={self.name!r}, has_warned={self.has_warned})"

    def __call__(self, stack_crawl_mark: Callable[..., Any] | None = None) -> None:
        """Report one use of the deprecated member.

        Args:
            stack_crawl_mark (Callable[..., Any] | None): Wrapper that intercepted the
                use; the error is attributed to its caller.

        Raises:
            DeprecatedUsageError: If the deprecation was created with ``error=True``.
        """
        __tracebackhide__ = True
        if self.options.error:
            engine: AssertionEngine = self._engine or _default_service().assertions
            engine.fail(
                self.message,
                stack_crawl_mark or Deprecation.__call__,
                error_cls=DeprecatedUsageError,
            )
        if self.has_warned:
            return
        self.has_warned = True
        diagnostics: DiagnosticLogger = self._diagnostics or _default_service().logger
        diagnostics.warn(self.message)


def _default_service() -> Debug:
    from faultline.debug import debug

    return debug


def create_deprecation(
    name: str,
    options: DeprecationOptions | None = None,
    *,
    diagnostics: DiagnosticLogger | None = None,
    engine: AssertionEngine | None = None,
) -> Deprecation:
    """Create the deprecation notice for ``name``.

    Args:
        name (str): Name of the deprecated member.
        options (DeprecationOptions | None): Deprecation options.
        diagnostics (DiagnosticLogger | None): Logger receiving the warning.
        engine (AssertionEngine | None): Engine raising the error for ``error=True``.

    Returns:
        Deprecation: A callable to invoke on every use of the member.
    """
    return Deprecation(name, options, diagnostics=diagnostics, engine=engine)


def _wrap_function(deprecation: Deprecation, func: _F) -> _F:
    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        __tracebackhide__ = True
        deprecation(wrapper)
        return func(*args, **kwargs)

    wrapper.deprecation = deprecation  # type: ignore[attr-defined]
    return cast("_F", wrapper)


def deprecate_function(
    func: _F,
    options: DeprecationOptions | None = None,
    *,
    diagnostics: DiagnosticLogger | None = None,
    engine: AssertionEngine | None = None,
) -> _F:
    """Return a wrapper of ``func`` that reports its use before delegating.

    The wrapper is a plain function, so it binds like the original when stored on a
    class. Its `Deprecation` is available as ``wrapper.deprecation``.

    Args:
        func (_F): The callable to deprecate.
        options (DeprecationOptions | None): Deprecation options.
        diagnostics (DiagnosticLogger | None): Logger receiving the warning.
        engine (AssertionEngine | None): Engine raising the error for ``error=True``.

    Returns:
        _F: The wrapper.
    """
    deprecation: Deprecation = create_deprecation(
        get_function_name(func), options, diagnostics=diagnostics, engine=engine
    )
    logger.trace("Deprecating function %s", format_callable_pretty(func))
    return _wrap_function(deprecation, func)


class DeprecatedValue:
    """Data descriptor standing in for a deprecated plain attribute.

    Every read reports a use and returns the held value. Writes report a use and
    replace the held value, or raise `AttributeError` when not ``writable``. Writes
    through an instance land in that instance's ``__dict__`` and shadow the held value
    for that instance only, as they would for the plain class attribute.

    Args:
        value (object): The current value.
        deprecation (Deprecation): Notice to trigger on access.
        writable (bool): Whether assignments are allowed.
        bind (bool): Bind descriptor values (functions, ``classmethod``, ...) to the
            instance/owner like a regular class attribute would be.
    """

    def __init__(
        self,
        value: object,
        deprecation: Deprecation,
        *,
        writable: bool = True,
        bind: bool = True,
    ) -> None:
        self.value: object = value
        self.deprecation: Deprecation = deprecation
        self.writable: bool = writable
        self.bind: bool = bind

    def _instance_dict(self, instance: object) -> dict[str, Any] | None:
        if instance is None or isinstance(instance, ModuleType):
            return None
        return getattr(instance, "__dict__", None)

    def __get__(self, instance: object, owner: type | None = None) -> object:
        __tracebackhide__ = True
        self.deprecation(DeprecatedValue.__get__)
        shadow: dict[str, Any] | None = self._instance_dict(instance)
        if shadow is not None and self.deprecation.name in shadow:
            return shadow[self.deprecation.name]
        value: object = self.value
        getter: Any = getattr(type(value), "__get__", None)
        if self.bind and getter is not None:
            return getter(value, instance, owner)
        return value

    def __set__(self, instance: object, value: object) -> None:
        __tracebackhide__ = True
        if not self.writable:
            raise AttributeError(f"'{self.deprecation.name}' is read-only")
        self.deprecation(DeprecatedValue.__set__)
        shadow: dict[str, Any] | None = self._instance_dict(instance)
        if shadow is not None:
            shadow[self.deprecation.name] = value
            return
        self.value = value
        if isinstance(instance, ModuleType):
            # keep the module's own globals in sync
            vars(instance)[self.deprecation.name] = value

    def __delete__(self, instance: object) -> None:
        __tracebackhide__ = True
        shadow: dict[str, Any] | None = self._instance_dict(instance)
        if shadow is None or self.deprecation.name not in shadow:
            raise AttributeError(self.deprecation.name)
        self.deprecation(DeprecatedValue.__delete__)
        del shadow[self.deprecation.name]


def _wrap_accessor(deprecation: Deprecation, prop: property) -> property:
    return property(
        _wrap_function(deprecation, prop.fget) if prop.fget is not None else None,
        _wrap_function(deprecation, prop.fset) if prop.fset is not None else None,
        _wrap_function(deprecation, prop.fdel) if prop.fdel is not None else None,
        prop.__doc__,
    )


def _module_class(module: ModuleType) -> type:
    """Return the private class of ``module``, installing it on first use."""
    cls: type = type(module)
    if vars(cls).get(_MODULE_CLASS_MARKER) is True:
        return cls
    cls = type(f"{cls.__name__}[{module.__name__}]", (cls,), {_MODULE_CLASS_MARKER: True})
    module.__class__ = cls
    return cls


def deprecate_property(
    container: type | ModuleType,
    key: str,
    options: DeprecationOptions | None = None,
    *,
    diagnostics: DiagnosticLogger | None = None,
    engine: AssertionEngine | None = None,
) -> None:
    """Deprecate the attribute ``key`` defined directly on ``container``.

    Attributes inherited from a base class, or missing altogether, are left alone.

    Args:
        container (type | ModuleType): Class or module owning the attribute.
        key (str): Attribute name.
        options (DeprecationOptions | None): Deprecation options.
        diagnostics (DiagnosticLogger | None): Logger receiving the warning.
        engine (AssertionEngine | None): Engine raising the error for ``error=True``.

    Raises:
        TypeError: If ``container`` is neither a class nor a module.
    """
    if not isinstance(container, (type, ModuleType)):
        raise TypeError(f"Cannot deprecate attributes of {type(container).__name__} objects")
    namespace: dict[str, Any] | Any = vars(container)
    if key not in namespace:
        return
    original: object = namespace[key]
    deprecation: Deprecation = create_deprecation(
        key, options, diagnostics=diagnostics, engine=engine
    )
    replacement: object
    if isinstance(original, property):
        replacement = _wrap_accessor(deprecation, original)
    else:
        replacement = DeprecatedValue(
            original, deprecation, bind=not isinstance(container, ModuleType)
        )

    target: type = _module_class(container) if isinstance(container, ModuleType) else container
    setattr(target, key, replacement)
    logger.trace("Deprecated attribute %r on %r", key, container)


def deprecate_properties(
    container: type | ModuleType,
    keys: Iterable[str],
    options: DeprecationOptions | None = None,
    *,
    diagnostics: DiagnosticLogger | None = None,
    engine: AssertionEngine | None = None,
) -> None:
    """Apply `deprecate_property` to each of ``keys`` (each key gets its own notice)."""
    for key in keys:
        deprecate_property(container, key, options, diagnostics=diagnostics, engine=engine)
