# topmark:header:start
#
#   project      : Faultline
#   file         : filter.py
#   file_relpath : src/faultline/stack/filter.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Stack-trace filtering and rewriting.

[`filter_stack`][faultline.stack.filter.filter_stack] walks a stack trace line by line:

1. Lines that are not frame lines (the error header, summaries, ...) are kept verbatim.
2. Frames with a real file name get ``file:///`` URIs resolved to paths and are then
   passed to the optional ``rewrite_frame`` hook (e.g. source-map remapping).
3. A frame is *excluded* when any enabled category matches: its index reaches
   ``stack_trace_limit``, or it belongs to the runtime internals, the test framework,
   the toolchain's own modules, is a named native/anonymous builtin, or matches the
   caller's ``exclude`` predicate.
4. A run of ``n`` consecutive excluded frames is collapsed into
   ``"    ... skipping n-1 frame(s) ..."`` (omitted when ``n == 1``) followed by the
   run's last frame, so the boundary stays visible.

Filtering is a fixed point: filtering an already-filtered trace with the same options
leaves it unchanged.
"""

from __future__ import annotations

import posixpath
import re
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Final, Protocol, TypeVar, overload
from urllib.parse import unquote

from faultline.config.logging import FaultlineLogger, get_logger
from faultline.stack.frames import (
    ANONYMOUS,
    NATIVE,
    StackFrame,
    format_stack_frame,
    parse_stack_frame,
)

if TYPE_CHECKING:
    from collections.abc import Callable

logger: FaultlineLogger = get_logger(__name__)

_LINE_SPLIT_RE: re.Pattern[str] = re.compile(r"\r\n?|\n")
_FILE_URI_RE: re.Pattern[str] = re.compile(r"\bfile:///(.*?)(?=(?::\d+)*(?:$|\)))")
_WINDOWS_DRIVE_RE: re.Pattern[str] = re.compile(r"^[a-zA-Z]:")

RUNTIME_PATTERN: Final[re.Pattern[str]] = re.compile(r"(timers|events|node|module)\.js$")
TEST_FRAMEWORK_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"[/](node_modules|components)[/]mocha(js)?[/]|[/]mocha\.js$"
)
TOOLCHAIN_PATTERNS: Final[tuple[re.Pattern[str], ...]] = (
    re.compile(
        r"([/]|^)(built[/]local|lib)[/]"
        r"(cancellationToken|tsc|tsserver(library)?|typescript(Services)?|typingsInstaller"
        r"|watchGuard|run)\.js"
    ),
    re.compile(
        r"([/]|^)src[/]"
        r"(compat|compiler|harness|server|services|shims|testRunner|tsc|tsserver"
        r"|tsserverlibrary|typescriptServices|typingsInstaller(Core)?|watchGuard)[/]"
    ),
)


class HasStack(Protocol):
    """Error-like object carrying its stack trace text."""

    stack: str | None


_E = TypeVar("_E", bound=HasStack)


def normalize_slashes(path: str) -> str:
    """Return ``path`` with backslashes turned into forward slashes."""
    return path.replace("\\", "/")


def default_resolve_path(path: str) -> str:
    """Turn the path part of a ``file:///`` URI into a normalized absolute path.

    Args:
        path (str): Text following ``file:///`` (percent-encoded).

    Returns:
        str: ``C:/x/y.js`` for drive paths, ``/x/y.js`` otherwise.
    """
    decoded: str = unquote(path)
    if _WINDOWS_DRIVE_RE.match(decoded):
        return decoded[:2] + posixpath.normpath(decoded[2:] or "/")
    return posixpath.normpath("/" + decoded)


def is_runtime_stack_frame(frame: StackFrame) -> bool:
    """Return True for frames inside the JavaScript runtime's own modules."""
    if not frame.file_name:
        return False
    return RUNTIME_PATTERN.search(frame.file_name) is not None


def is_test_framework_stack_frame(frame: StackFrame) -> bool:
    """Return True for frames inside the test framework (mocha)."""
    if not frame.file_name:
        return False
    return TEST_FRAMEWORK_PATTERN.search(normalize_slashes(frame.file_name)) is not None


def is_toolchain_stack_frame(
    frame: StackFrame,
    patterns: tuple[re.Pattern[str], ...] = TOOLCHAIN_PATTERNS,
) -> bool:
    """Return True for frames inside the toolchain's own modules."""
    if not frame.file_name:
        return False
    file: str = normalize_slashes(frame.file_name)
    return any(pattern.search(file) for pattern in patterns)


def is_builtin_stack_frame(frame: StackFrame) -> bool:
    """Return True for named frames without a source file (``native``/``<anonymous>``)."""
    return frame.file_name in (NATIVE, ANONYMOUS) and bool(frame.function_name)


@dataclass(frozen=True)
class FilterStackOptions:
    """Exclusion and rewrite policy for `filter_stack`.

    Attributes:
        stack_trace_limit (int | None): Frames at this index or beyond are excluded.
        exclude (Callable[[StackFrame], bool] | None): Extra exclusion predicate.
        exclude_runtime (bool): Exclude runtime-internal frames.
        exclude_test_framework (bool): Exclude test framework frames.
        exclude_toolchain (bool): Exclude frames from the toolchain's own modules.
        exclude_builtin (bool): Exclude named ``native``/``<anonymous>`` frames.
        toolchain_patterns (tuple[re.Pattern[str], ...]): Patterns (searched in the
            slash-normalized file name) identifying toolchain frames.
        rewrite_frame (Callable[[StackFrame], StackFrame] | None): Replaces frames that
            have a real file name (e.g. source-map remapping).
        resolve_path (Callable[[str], str] | None): Resolves the path part of
            ``file:///`` URIs; defaults to `default_resolve_path`.
    """

    stack_trace_limit: int | None = None
    exclude: Callable[[StackFrame], bool] | None = None
    exclude_runtime: bool = False
    exclude_test_framework: bool = False
    exclude_toolchain: bool = False
    exclude_builtin: bool = False
    toolchain_patterns: tuple[re.Pattern[str], ...] = TOOLCHAIN_PATTERNS
    rewrite_frame: Callable[[StackFrame], StackFrame] | None = None
    resolve_path: Callable[[str], str] | None = None

    def is_excluded(self, frame: StackFrame, index: int) -> bool:
        """Return True if ``frame`` (the ``index``-th frame of the trace) is excluded."""
        return (
            (self.stack_trace_limit is not None and index >= self.stack_trace_limit)
            or (self.exclude_runtime and is_runtime_stack_frame(frame))
            or (self.exclude_test_framework and is_test_framework_stack_frame(frame))
            or (self.exclude_toolchain and is_toolchain_stack_frame(frame, self.toolchain_patterns))
            or (self.exclude_builtin and is_builtin_stack_frame(frame))
            or (self.exclude is not None and self.exclude(frame))
        )

    def rewrite(self, frame: StackFrame) -> StackFrame:
        """Resolve ``file:///`` URIs and apply ``rewrite_frame`` to frames with real files."""
        if not frame.has_real_file or frame.file_name is None:
            return frame
        resolve: Callable[[str], str] = self.resolve_path or default_resolve_path
        file_name: str = _FILE_URI_RE.sub(lambda m: resolve(m.group(1)), frame.file_name, count=1)
        if file_name != frame.file_name:
            frame = replace(frame, file_name=file_name)
        if self.rewrite_frame is not None:
            frame = self.rewrite_frame(frame)
        return frame


def _skip_line(count: int) -> str:
    return f"    ... skipping {count} frame{'s' if count > 1 else ''} ..."


@dataclass
class _FilterRun:
    """Consecutive excluded frames seen since the last emitted line."""

    length: int = 0
    last_frame: str | None = None
    total_skipped: int = 0

    def add(self, line: str) -> None:
        self.length += 1
        self.last_frame = line

    def flush(self, out: list[str]) -> None:
        if self.length == 0 or self.last_frame is None:
            return
        skipped: int = self.length - 1
        if skipped > 0:
            out.append(_skip_line(skipped))
            self.total_skipped += skipped
        out.append(self.last_frame)
        self.length = 0
        self.last_frame = None


def filter_stack_text(stack: str, options: FilterStackOptions | None = None) -> str:
    """Filter the text of a stack trace; see the module documentation.

    Args:
        stack (str): Stack trace text (``\\n``, ``\\r\\n`` or ``\\r`` line breaks).
        options (FilterStackOptions | None): Exclusion and rewrite policy.

    Returns:
        str: The filtered trace, ``\\n``-joined.
    """
    opts: FilterStackOptions = options or FilterStackOptions()
    filtered: list[str] = []
    run = _FilterRun()
    frame_count: int = 0

    for line in _LINE_SPLIT_RE.split(stack):
        frame: StackFrame | None = parse_stack_frame(line)
        if frame is None:
            run.flush(filtered)
            filtered.append(line)
            continue
        frame = opts.rewrite(frame)
        text: str = format_stack_frame(frame)
        if opts.is_excluded(frame, frame_count):
            run.add(text)
        else:
            run.flush(filtered)
            filtered.append(text)
        frame_count += 1
    run.flush(filtered)

    logger.trace("Filtered %d frame(s); skipped %d", frame_count, run.total_skipped)
    return "\n".join(filtered)


@overload
def filter_stack(error: str, options: FilterStackOptions | None = None) -> str: ...


@overload
def filter_stack(error: _E, options: FilterStackOptions | None = None) -> _E: ...


def filter_stack(error: str | _E, options: FilterStackOptions | None = None) -> str | _E:
    """Filter a stack trace given as text or as an error-like object.

    Args:
        error (str | _E): Stack text, or an object with a ``stack`` attribute.
        options (FilterStackOptions | None): Exclusion and rewrite policy.

    Returns:
        str | _E: Filtered text for text input; otherwise ``error`` itself with its
        ``stack`` replaced. Inputs without stack text are returned unchanged.
    """
    if isinstance(error, str):
        return filter_stack_text(error, options) if error else error
    stack: str | None = getattr(error, "stack", None)
    if stack:
        error.stack = filter_stack_text(stack, options)
    return error
