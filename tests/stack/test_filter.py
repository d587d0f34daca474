# topmark:header:start
#
#   project      : Faultline
#   file         : test_filter.py
#   file_relpath : tests/stack/test_filter.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

# pyright: strict

"""Tests for stack-trace filtering and rewriting."""

from __future__ import annotations

from dataclasses import replace

import pytest
from hypothesis import HealthCheck, given, settings

from faultline.stack.filter import (
    FilterStackOptions,
    default_resolve_path,
    filter_stack,
    filter_stack_text,
)
from faultline.stack.frames import StackFrame, parse_stack_frame
from tests.conftest import parametrize
from tests.strategies_faultline import s_stack_trace

pytestmark: pytest.MarkDecorator = pytest.mark.stack

HEADER = "Error: Debug Failure. False expression."


def _excluded(name: str) -> bool:
    return name.startswith("hidden")


EXCLUDE_HIDDEN = FilterStackOptions(exclude=lambda f: _excluded(f.function_name or ""))


def test_three_excluded_then_kept_collapse() -> None:
    """Three hidden frames become a summary, the last hidden frame, then the kept frame."""
    stack = "\n".join(
        [
            HEADER,
            "    at hidden1 (/a.js:1:1)",
            "    at hidden2 (/a.js:2:1)",
            "    at hidden3 (/a.js:3:1)",
            "    at visible (/b.js:4:1)",
        ]
    )
    assert filter_stack(stack, EXCLUDE_HIDDEN) == "\n".join(
        [
            HEADER,
            "    ... skipping 2 frames ...",
            "    at hidden3 (/a.js:3:1)",
            "    at visible (/b.js:4:1)",
        ]
    )


def test_single_excluded_frame_has_no_summary() -> None:
    """A run of one emits only the frame itself."""
    stack = "\n".join([HEADER, "    at hidden1 (/a.js:1:1)", "    at visible (/b.js:4:1)"])
    assert filter_stack(stack, EXCLUDE_HIDDEN) == stack


def test_two_excluded_frames_use_singular() -> None:
    """The summary for one skipped frame is singular."""
    stack = "\n".join(
        [HEADER, "    at hidden1 (/a.js:1:1)", "    at hidden2 (/a.js:2:1)", "    at v (/b.js:1)"]
    )
    assert filter_stack(stack, EXCLUDE_HIDDEN).splitlines()[1] == "    ... skipping 1 frame ..."


def test_trailing_run_is_flushed() -> None:
    """A run at the end of the trace still emits its summary and last frame."""
    stack = "\n".join(
        [
            HEADER,
            "    at visible (/b.js:4:1)",
            "    at hidden1 (/a.js:1:1)",
            "    at hidden2 (/a.js:2:1)",
            "    at hidden3 (/a.js:3:1)",
        ]
    )
    assert filter_stack(stack, EXCLUDE_HIDDEN).splitlines() == [
        HEADER,
        "    at visible (/b.js:4:1)",
        "    ... skipping 2 frames ...",
        "    at hidden3 (/a.js:3:1)",
    ]


def test_non_frame_line_breaks_a_run() -> None:
    """Non-frame lines are kept in place and end the current run."""
    stack = "\n".join(
        [
            HEADER,
            "    at hidden1 (/a.js:1:1)",
            "    at hidden2 (/a.js:2:1)",
            "Caused by: something",
            "    at hidden3 (/a.js:3:1)",
        ]
    )
    assert filter_stack(stack, EXCLUDE_HIDDEN).splitlines() == [
        HEADER,
        "    ... skipping 1 frame ...",
        "    at hidden2 (/a.js:2:1)",
        "Caused by: something",
        "    at hidden3 (/a.js:3:1)",
    ]


def test_stack_trace_limit_counts_frames_only() -> None:
    """Frames at index >= limit are excluded; the header does not count."""
    frames: list[str] = [f"    at f{i} (/a.js:{i + 1}:1)" for i in range(5)]
    stack = "\n".join([HEADER, *frames])
    out: list[str] = filter_stack(stack, FilterStackOptions(stack_trace_limit=2)).splitlines()
    assert out == [HEADER, frames[0], frames[1], "    ... skipping 2 frames ...", frames[4]]


@parametrize(
    "options, line",
    [
        (
            FilterStackOptions(exclude_runtime=True),
            "    at listOnTimeout (internal/timers.js:549:17)",
        ),
        (
            FilterStackOptions(exclude_test_framework=True),
            "    at Context.<anonymous> (C:\\p\\node_modules\\mocha\\lib\\runnable.js:1:1)",
        ),
        (
            FilterStackOptions(exclude_toolchain=True),
            "    at checkSourceFile (/ts/built/local/tsc.js:100:1)",
        ),
        (
            FilterStackOptions(exclude_toolchain=True),
            "    at createProgram (/ts/src/compiler/program.ts:10:5)",
        ),
        (FilterStackOptions(exclude_builtin=True), "    at Array.forEach (native)"),
        (FilterStackOptions(exclude_builtin=True), "    at Array.map (<anonymous>)"),
    ],
)
def test_exclusion_categories(options: FilterStackOptions, line: str) -> None:
    """Each category recognizes its frames and is off by default."""
    frame: StackFrame | None = parse_stack_frame(line)
    assert frame is not None
    assert options.is_excluded(frame, 0)
    assert FilterStackOptions().is_excluded(frame, 0) is False


def test_user_frames_are_not_in_any_category() -> None:
    """User code is never excluded by the built-in categories."""
    frame: StackFrame | None = parse_stack_frame("    at main (/home/dev/app/src/main.js:1:1)")
    assert frame is not None
    options = FilterStackOptions(
        exclude_runtime=True,
        exclude_test_framework=True,
        exclude_toolchain=True,
        exclude_builtin=True,
    )
    assert options.is_excluded(frame, 0) is False


def test_file_uris_are_resolved() -> None:
    """`file:///` URIs become paths; line and column stay."""
    stack = "\n".join([HEADER, "    at main (file:///home/dev/a%20b/app.js:3:7)"])
    assert filter_stack(stack).splitlines()[1] == "    at main (/home/dev/a b/app.js:3:7)"


def test_windows_file_uris_are_resolved() -> None:
    """Drive-letter URIs keep the drive and are normalized like any other path."""
    stack = "\n".join([HEADER, "    at foo (file:///C:/src/lib/../a.js:10:5)"])
    assert filter_stack(stack).splitlines()[1] == "    at foo (C:/src/a.js:10:5)"


def test_resolve_path_hook_sees_windows_uris() -> None:
    """A custom resolver receives the text after ``file:///``."""
    seen: list[str] = []

    def resolve(path: str) -> str:
        seen.append(path)
        return "D:/mapped.js"

    stack = "    at foo (file:///C:/src/a.js:1:2)"
    assert filter_stack(stack, FilterStackOptions(resolve_path=resolve)) == (
        "    at foo (D:/mapped.js:1:2)"
    )
    assert seen == ["C:/src/a.js"]


@parametrize(
    "path, expected",
    [
        ("home/dev/./x/../app.js", "/home/dev/app.js"),
        ("C:/work/app.js", "C:/work/app.js"),
        ("c:/work/../app.js", "c:/app.js"),
    ],
)
def test_default_resolve_path(path: str, expected: str) -> None:
    """Drive paths keep their drive; everything else becomes absolute."""
    assert default_resolve_path(path) == expected


def test_rewrite_frame_hook_sees_real_files_only() -> None:
    """The hook remaps real files; builtins pass through untouched."""
    seen: list[str] = []

    def remap(frame: StackFrame) -> StackFrame:
        seen.append(frame.file_name or "")
        return replace(frame, file_name="/src/app.ts", line_number=0, column_number=None)

    stack = "\n".join([HEADER, "    at main (/dist/app.js:10:2)", "    at Array.map (native)"])
    out: list[str] = filter_stack(stack, FilterStackOptions(rewrite_frame=remap)).splitlines()
    assert seen == ["/dist/app.js"]
    assert out == [HEADER, "    at main (/src/app.ts:1)", "    at Array.map (native)"]


def test_crlf_input_is_split_and_joined_with_lf() -> None:
    """All line-break styles are accepted; output uses LF."""
    stack = HEADER + "\r\n" + "    at a (/a.js:1:1)" + "\r" + "    at b (/b.js:1:1)"
    expected: str = "\n".join([HEADER, "    at a (/a.js:1:1)", "    at b (/b.js:1:1)"])
    assert filter_stack(stack) == expected


class FakeError(Exception):
    """Error-like object carrying a JavaScript stack."""

    def __init__(self, stack: str | None) -> None:
        super().__init__("fake")
        self.stack: str | None = stack


def test_error_object_stack_is_replaced() -> None:
    """Objects get their `stack` rewritten in place and are returned."""
    error = FakeError(
        "\n".join([HEADER, "    at hidden1 (/a.js:1:1)", "    at hidden2 (/a.js:1:1)"])
    )
    assert filter_stack(error, EXCLUDE_HIDDEN) is error
    assert error.stack is not None
    assert "skipping 1 frame" in error.stack


@parametrize("stack", [None, ""])
def test_missing_stack_is_returned_unchanged(stack: str | None) -> None:
    """Errors without stack text, and empty text, pass through."""
    error = FakeError(stack)
    assert filter_stack(error) is error
    assert error.stack == stack
    assert filter_stack("") == ""


@parametrize(
    "stack",
    [
        "\n".join(
            [
                HEADER,
                "    at hidden1 (/a.js:1:1)",
                "    at hidden2 (/a.js:2:1)",
                "    at hidden3 (/a.js:3:1)",
                "    at visible (/b.js:4:1)",
                "    at listOnTimeout (internal/timers.js:549:17)",
                "    at Array.map (native)",
                "    at main (file:///home/dev/app.js:3:7)",
            ]
        ),
        "\n".join([HEADER, *(f"    at f{i} (/a.js:{i + 1}:1)" for i in range(6))]),
        "\n".join(
            [
                HEADER,
                "    at hidden1 (/a.js:1:1)",
                "Caused by: something",
                "    at hidden2 (/a.js:2:1)",
                "    at hidden3 (/a.js:3:1)",
            ]
        ),
    ],
)
def test_filtering_twice_changes_nothing(stack: str) -> None:
    """A filtered trace is a fixed point of the same filter."""
    options = FilterStackOptions(
        stack_trace_limit=3,
        exclude=lambda f: _excluded(f.function_name or ""),
        exclude_runtime=True,
        exclude_builtin=True,
    )
    once: str = filter_stack_text(stack, options)
    assert filter_stack_text(once, options) == once


@pytest.mark.hypothesis_slow
@settings(suppress_health_check=[HealthCheck.too_slow], deadline=None, max_examples=200)
@given(stack=s_stack_trace())
def test_filtering_is_idempotent(stack: str) -> None:
    """Filtering an already-filtered trace with the same options changes nothing."""
    options = FilterStackOptions(
        stack_trace_limit=10,
        exclude_runtime=True,
        exclude_test_framework=True,
        exclude_toolchain=True,
        exclude_builtin=True,
    )
    once: str = filter_stack_text(stack, options)
    assert filter_stack_text(once, options) == once


@given(stack=s_stack_trace())
def test_filtering_without_exclusions_only_normalizes(stack: str) -> None:
    """With no exclusions nothing is collapsed and the line count is kept."""
    out: str = filter_stack_text(stack)
    assert out.count("\n") == stack.replace("\r\n", "\n").count("\n")
    assert "skipping" not in out
