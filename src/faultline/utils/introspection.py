# topmark:header:start
#
#   project      : Faultline
#   file         : introspection.py
#   file_relpath : src/faultline/utils/introspection.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Callable introspection helpers used to describe predicates in failure messages."""

from __future__ import annotations

import re
from inspect import getmodule
from typing import Any

from faultline.config.logging import FaultlineLogger, get_logger

logger: FaultlineLogger = get_logger(__name__)

# e.g. "<function is_identifier at 0x...>", "<bound method Parser.is_token of ...>",
# "<built-in function len>"
_REPR_NAME_RE: re.Pattern[str] = re.compile(
    r"^<(?:function|bound method|built-in function|built-in method|method)\s+([\w.<>]+)"
)


def get_function_name(func: object) -> str:
    """Return the declared name of a callable, or ``""``.

    The explicit ``__name__`` wins. Otherwise (e.g. `functools.partial`, callable
    instances) the name is recovered from the callable's textual representation,
    unwrapping ``partial`` objects first.

    Args:
        func (object): The callable to name.

    Returns:
        str: The callable's name, or ``""`` for non-callables and anonymous objects.
    """
    if not callable(func):
        return ""
    name: object = getattr(func, "__name__", None)
    if isinstance(name, str):
        return name
    inner: object = getattr(func, "func", None)
    if inner is not None and inner is not func:
        return get_function_name(inner)
    match: re.Match[str] | None = _REPR_NAME_RE.match(repr(func))
    if match:
        return match.group(1).rsplit(".", 1)[-1]
    logger.trace("No name found for callable %r", func)
    return ""


def format_callable_pretty(obj: Any) -> str:
    """Return a human-friendly (module.qualname) for any callable.

    Handles functions, bound methods, callable instances, and partials. Falls
    back to the callable's class name when needed, and uses ``inspect.getmodule``
    as a last resort to resolve the module name.

    Args:
        obj: The callable object to describe.

    Returns:
        A string like ``"(package.module.QualifiedName)"`` or ``"(QualifiedName)"``
        if the module cannot be resolved.
    """
    mod_name: str | None = getattr(obj, "__module__", None)
    call_name: str | None = getattr(obj, "__qualname__", None)

    if call_name is None:
        call_name = getattr(obj, "__name__", None)
    if call_name is None:
        call_name = type(obj).__name__

    if not mod_name:
        mod = getmodule(obj)
        if mod is not None and getattr(mod, "__name__", None):
            mod_name = mod.__name__

    return f"({mod_name}.{call_name})" if mod_name else f"({call_name})"
