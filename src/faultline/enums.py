# topmark:header:start
#
#   project      : Faultline
#   file         : enums.py
#   file_relpath : src/faultline/enums.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Enumeration and bitmask formatting for debug output.

Provided:
    - ``get_enum_members(enum_obj)``: the ``(value, name)`` table of an enumeration
      container, stably sorted ascending by value.
    - ``format_enum(value, enum_obj, is_flags=False, filter_enum=None)``: render an
      integer as a member name, or as a ``|``-joined flag decomposition.
    - ``enum_labeler(enum_obj)``: build a category labeler for assertion messages
      (a node kind formatted through ``enum_obj``).

Containers:
    An enumeration container is any of:

    - an `enum.Enum` subclass with integer values (`IntEnum`, `IntFlag`, ...). Aliases
      and declared composite flags are part of the table. Tables are cached per class.
    - a ``Mapping[str, int]``.
    - a namespace (class, module, ``SimpleNamespace``) whose public attributes hold ints.

    ``bool`` values are never treated as members. Mappings and namespaces are re-read
    on every call since they can be mutated.

Flag decomposition:
    Members are scanned from the highest value to the lowest; zero-valued members and
    members rejected by ``filter_enum`` are skipped. A member is consumed when all of
    its bits are still present in the remaining value. If bits remain once the scan is
    done, the original value is rendered as a decimal string; partial decompositions
    are never returned.

Example:
    ```python
    from enum import IntFlag

    class Access(IntFlag):
        NONE = 0
        READ = 1
        WRITE = 2
        READ_WRITE = 3
        EXEC = 4

    format_enum(7, Access, is_flags=True)  # 'EXEC|READ_WRITE'
    format_enum(8, Access, is_flags=True)  # '8'
    ```
"""

from __future__ import annotations

import functools
from collections.abc import Mapping
from enum import Enum
from typing import TYPE_CHECKING, Any, NamedTuple

from faultline.config.logging import FaultlineLogger, get_logger

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

logger: FaultlineLogger = get_logger(__name__)


class EnumMember(NamedTuple):
    """One ``(value, name)`` association of an enumeration container."""

    value: int
    name: str


def _is_member_value(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _sorted_members(pairs: Iterable[tuple[str, Any]]) -> tuple[EnumMember, ...]:
    members: list[EnumMember] = [
        EnumMember(int(value), name) for name, value in pairs if _is_member_value(value)
    ]
    # sorted() is stable: ties keep declaration order
    return tuple(sorted(members, key=lambda m: m.value))


@functools.cache
def _enum_class_members(enum_cls: type[Enum]) -> tuple[EnumMember, ...]:
    logger.trace("Deriving member table for %s", enum_cls.__qualname__)
    return _sorted_members((name, member.value) for name, member in enum_cls.__members__.items())


def get_enum_members(enum_obj: object) -> tuple[EnumMember, ...]:
    """Return the member table of ``enum_obj`` sorted ascending by value.

    Args:
        enum_obj (object): An `Enum` subclass, a ``Mapping[str, int]``, or a namespace
            with public integer attributes.

    Returns:
        tuple[EnumMember, ...]: The sorted member table.

    Raises:
        TypeError: If ``enum_obj`` exposes no name/value associations.
    """
    if isinstance(enum_obj, type) and issubclass(enum_obj, Enum):
        return _enum_class_members(enum_obj)
    if isinstance(enum_obj, Mapping):
        return _sorted_members(enum_obj.items())  # pyright: ignore[reportUnknownArgumentType]
    try:
        namespace: Mapping[str, Any] = vars(enum_obj)
    except TypeError as exc:
        raise TypeError(f"Not an enumeration container: {enum_obj!r}") from exc
    return _sorted_members((k, v) for k, v in namespace.items() if not k.startswith("_"))


def format_enum(
    value: int | None,
    enum_obj: object,
    is_flags: bool = False,
    filter_enum: Callable[[int, str], bool] | None = None,
) -> str:
    """Format an enum value (or bitmask) as a string for debugging and debug assertions.

    Args:
        value (int | None): The value to format; ``None`` is treated as ``0``.
        enum_obj (object): The enumeration container (see module docs).
        is_flags (bool): Decompose ``value`` into flag members.
        filter_enum (Callable[[int, str], bool] | None): Optional predicate over
            ``(value, name)``; members it rejects are not used for flag decomposition.

    Returns:
        str: A member name, a ``|``-joined list of flag names (largest first),
        or the decimal string of ``value``.
    """
    value = 0 if value is None else int(value)
    members: tuple[EnumMember, ...] = get_enum_members(enum_obj)

    if value == 0:
        for member in members:
            if member.value == 0:
                return member.name
        return "0"

    if is_flags:
        result: str = ""
        remaining: int = value
        for member_value, member_name in reversed(members):
            if remaining == 0:
                break
            if member_value == 0:
                continue
            if filter_enum is not None and not filter_enum(member_value, member_name):
                continue
            if (remaining & member_value) == member_value:
                remaining &= ~member_value
                result = f"{result}|{member_name}" if result else member_name
        if remaining == 0:
            return result
    else:
        for member_value, member_name in members:
            if member_value == value:
                return member_name

    return str(value)


def enum_labeler(enum_obj: object) -> Callable[[object], str]:
    """Return a labeler that formats a categorical tag through ``enum_obj``.

    Intended as the ``category_label`` of an
    [`AssertionEngine`][faultline.assertions.AssertionEngine], e.g.
    ``enum_labeler(SyntaxKind)`` turns ``node.kind`` into ``"Identifier"``.

    Args:
        enum_obj (object): Enumeration container of the tags.

    Returns:
        Callable[[object], str]: The labeler.
    """

    def label(kind: object) -> str:
        if isinstance(kind, int):
            return format_enum(kind, enum_obj, is_flags=False)
        return str(kind)

    return label
