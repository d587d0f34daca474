# topmark:header:start
#
#   project      : Faultline
#   file         : levels.py
#   file_relpath : src/faultline/core/levels.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Ordered severity and strictness levels.

Both enumerations are ``IntEnum`` so comparisons are total orders on the underlying
integers:

* `LogLevel`: ``OFF < ERROR < WARNING < INFO < VERBOSE``. A message is emitted when
  the current threshold is ``<=`` the message's level.
* `AssertionLevel`: ``NONE < NORMAL < AGGRESSIVE < VERY_AGGRESSIVE``. A category of
  assertions runs when the current level is ``>=`` the category's required level.
"""

from __future__ import annotations

from enum import IntEnum
from typing import TypeVar, cast

_L = TypeVar("_L", bound=IntEnum)


def _norm_token(s: str) -> str:
    """Normalize an identifier-like string to match member names."""
    return s.strip().upper().replace("-", "_").replace(" ", "_")


def parse_level(enum_cls: type[_L], raw: str | int | None) -> _L | None:
    """Parse a level from a member name or its integer value.

    Matching is case-insensitive and normalizes '-', ' ' to '_'.

    Args:
        enum_cls (type[_L]): The level enumeration to search.
        raw (str | int | None): Member name (``"warning"``), integer value (``2``),
            or its string form (``"2"``).

    Returns:
        _L | None: The matching member, or ``None`` if ``raw`` does not name one.
    """
    if raw is None:
        return None
    if isinstance(raw, int):
        try:
            return enum_cls(raw)
        except ValueError:
            return None
    token: str = _norm_token(raw)
    if token.isdigit():
        return parse_level(enum_cls, int(token))
    return cast("_L | None", enum_cls.__members__.get(token))


class LogLevel(IntEnum):
    """Severity of a diagnostic log message."""

    OFF = 0
    ERROR = 1
    WARNING = 2
    INFO = 3
    VERBOSE = 4

    @classmethod
    def parse(cls, raw: str | int | None) -> LogLevel | None:
        """Parse a log level token; see [`parse_level`][faultline.core.levels.parse_level]."""
        return parse_level(cls, raw)


class AssertionLevel(IntEnum):
    """Strictness gate controlling which classes of assertions execute."""

    NONE = 0
    NORMAL = 1
    AGGRESSIVE = 2
    VERY_AGGRESSIVE = 3

    @classmethod
    def parse(cls, raw: str | int | None) -> AssertionLevel | None:
        """Parse an assertion level token.

        See [`parse_level`][faultline.core.levels.parse_level].
        """
        return parse_level(cls, raw)
