# topmark:header:start
#
#   project      : Faultline
#   file         : errors.py
#   file_relpath : src/faultline/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exceptions for Faultline.

Usage:
    Assertion helpers raise `DebugFailure` through a single raise point
    ([`AssertionEngine.fail`][faultline.assertions.AssertionEngine.fail]).
    These are programmer-error guards: they are never caught or retried inside
    Faultline and are expected to propagate to the process boundary.

Attribution:
    A failure carries the frame that *called* the assertion wrapper (``caller``),
    so reports can point at the offending call site rather than at Faultline itself.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from traceback import FrameSummary


class FaultlineError(Exception):
    """Base class for all Faultline errors."""


class DebugFailure(FaultlineError, AssertionError):
    """Fatal failure raised when an assertion or invariant check is violated.

    Attributes:
        caller (FrameSummary | None): The attribution point, i.e. the first frame
            outside the assertion wrapper that triggered the failure.
    """

    def __init__(self, message: str, caller: FrameSummary | None = None) -> None:
        super().__init__(message)
        self.message: str = message
        self.caller: FrameSummary | None = caller


class DeprecatedUsageError(DebugFailure):
    """Failure raised when an API deprecated with ``error=True`` is used."""
