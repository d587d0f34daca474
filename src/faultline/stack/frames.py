# topmark:header:start
#
#   project      : Faultline
#   file         : frames.py
#   file_relpath : src/faultline/stack/frames.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Stack frame model, parser and serializer.

The grammar is the de facto JavaScript-engine convention
(https://v8.dev/docs/stack-trace-api):

```text
frame    := "    at " position
position := "eval at " position
          | ["async "] ["new "] {Type "."} function [" [as " method "]"] " (" location ")"
          | location
location := "eval at " position
          | fileName [":" line [":" column]]
          | "native" | "unknown location" | "<anonymous>"
```

Line and column numbers are 1-based in the text and 0-based on
[`StackFrame`][faultline.stack.frames.StackFrame]. A bare ``location`` position is only
accepted when it is rooted (an absolute path or a URL). Parsing is best-effort:
anything outside the grammar yields ``None`` and callers keep the line verbatim.
Serializing a parsed frame reproduces the original text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final

from faultline.constants import STACK_FRAME_PREFIX

NATIVE: Final[str] = "native"
UNKNOWN_LOCATION: Final[str] = "unknown location"
ANONYMOUS: Final[str] = "<anonymous>"

LOCATION_LITERALS: Final[frozenset[str]] = frozenset({NATIVE, UNKNOWN_LOCATION, ANONYMOUS})

_FRAME_RE: re.Pattern[str] = re.compile(r"^    at (.*)$")
_EVAL_LOCATION_RE: re.Pattern[str] = re.compile(r"^eval at (.*)$")
_FILE_LOCATION_RE: re.Pattern[str] = re.compile(
    r"^(native|unknown location|<anonymous>|(?:file:///[a-zA-Z]:|(?:[a-zA-Z]|file|https?):)?[^:]+)"
    r"(?::(\d+)(?::(\d+))?)?$"
)
_POSITION_RE: re.Pattern[str] = re.compile(
    r"^(async )?(new )?((?:[^.]+\.)+)?((?:(?! [\[(]).)*)(?: \[as ([^\]]+)\])? \((.*)\)$"
)
_ROOTED_RE: re.Pattern[str] = re.compile(r"^(?:[/\\]|[a-zA-Z]:|[a-zA-Z][\w+.-]*://)")


@dataclass(frozen=True)
class StackFrame:
    """One parsed entry of a stack trace.

    A frame is either a *location* frame (``file_name`` and optional function
    identity) or an *eval* frame whose only field is ``eval_origin``.

    Attributes:
        type_name (str | None): Receiver type, e.g. ``"Object"`` or ``"a.b"``.
        function_name (str | None): Function name.
        method_name (str | None): Name from ``[as method]``.
        file_name (str | None): File path/URL or one of `LOCATION_LITERALS`.
        line_number (int | None): 0-based line.
        column_number (int | None): 0-based column.
        eval_origin (StackFrame | None): Position of the code that called ``eval``.
        is_constructor (bool): ``new`` call.
        is_async (bool): ``async`` frame.
    """

    type_name: str | None = None
    function_name: str | None = None
    method_name: str | None = None
    file_name: str | None = None
    line_number: int | None = None
    column_number: int | None = None
    eval_origin: StackFrame | None = None
    is_constructor: bool = False
    is_async: bool = False

    @property
    def has_real_file(self) -> bool:
        """Return True if ``file_name`` is a path or URL rather than a location literal."""
        return bool(self.file_name) and self.file_name not in LOCATION_LITERALS


def is_rooted_disk_path(path: str) -> bool:
    """Return True for absolute POSIX/Windows paths and URLs."""
    return _ROOTED_RE.match(path) is not None


def parse_stack_frame_location(location: str) -> StackFrame | None:
    """Parse the ``location`` part of a frame (the text inside the parentheses)."""
    match: re.Match[str] | None = _EVAL_LOCATION_RE.match(location)
    if match:
        origin: StackFrame | None = parse_stack_frame_position(match.group(1))
        return StackFrame(eval_origin=origin) if origin is not None else None
    match = _FILE_LOCATION_RE.match(location)
    if match:
        file_name, line, column = match.groups()
        return StackFrame(
            file_name=file_name,
            line_number=int(line) - 1 if line is not None else None,
            column_number=int(column) - 1 if column is not None else None,
        )
    return None


def parse_stack_frame_position(position: str) -> StackFrame | None:
    """Parse a frame ``position`` (the text after ``"    at "``)."""
    match: re.Match[str] | None = _EVAL_LOCATION_RE.match(position)
    if match:
        origin: StackFrame | None = parse_stack_frame_position(match.group(1))
        return StackFrame(eval_origin=origin) if origin is not None else None

    match = _POSITION_RE.match(position)
    if match:
        async_modifier, new_modifier, type_name, function_name, method_name, location_part = (
            match.groups()
        )
        location: StackFrame | None = parse_stack_frame_location(location_part)
        if location is None:
            return None
        return StackFrame(
            type_name=type_name[:-1] if type_name else None,
            function_name=function_name,
            method_name=method_name,
            file_name=location.file_name,
            line_number=location.line_number,
            column_number=location.column_number,
            eval_origin=location.eval_origin,
            is_constructor=new_modifier is not None,
            is_async=async_modifier is not None,
        )

    bare: StackFrame | None = parse_stack_frame_location(position)
    if bare is not None and (
        bare.eval_origin is not None or (bare.file_name and is_rooted_disk_path(bare.file_name))
    ):
        return bare
    return None


def parse_stack_frame(line: str) -> StackFrame | None:
    """Parse one line of a stack trace.

    Args:
        line (str): A line such as ``"    at Object.foo (/a/b.js:10:5)"``.

    Returns:
        StackFrame | None: The frame, or ``None`` if the line is not a frame line.
    """
    match: re.Match[str] | None = _FRAME_RE.match(line)
    if not match:
        return None
    return parse_stack_frame_position(match.group(1))


def format_location(frame: StackFrame) -> str:
    """Serialize the location part of ``frame`` (1-based line/column)."""
    if frame.file_name:
        s: str = frame.file_name
        if frame.line_number is not None:
            s += f":{frame.line_number + 1}"
            if frame.column_number is not None:
                s += f":{frame.column_number + 1}"
        return s
    if frame.eval_origin is not None:
        return f"eval at {format_position(frame.eval_origin)}"
    return UNKNOWN_LOCATION


def format_position(frame: StackFrame) -> str:
    """Serialize ``frame`` without the ``"    at "`` prefix."""
    if not frame.function_name:
        return format_location(frame)
    s: str = ""
    if frame.is_async:
        s += "async "
    if frame.is_constructor:
        s += "new "
    if frame.type_name:
        s += f"{frame.type_name}."
    s += frame.function_name
    if frame.method_name:
        s += f" [as {frame.method_name}]"
    return f"{s} ({format_location(frame)})"


def format_stack_frame(frame: StackFrame) -> str:
    """Serialize ``frame`` as a full stack-trace line."""
    return STACK_FRAME_PREFIX + format_position(frame)
