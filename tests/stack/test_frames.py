# topmark:header:start
#
#   project      : Faultline
#   file         : test_frames.py
#   file_relpath : tests/stack/test_frames.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for stack frame parsing and serialization."""

from __future__ import annotations

import pytest
from hypothesis import given

from faultline.stack.frames import (
    StackFrame,
    format_stack_frame,
    is_rooted_disk_path,
    parse_stack_frame,
)
from tests.conftest import parametrize
from tests.strategies_faultline import s_frame_line

pytestmark: pytest.MarkDecorator = pytest.mark.stack


def test_parse_full_frame() -> None:
    """Every part of the function form lands in its own field, 0-based."""
    frame = parse_stack_frame("    at async new a.b.Foo [as bar] (/src/x.js:10:5)")
    assert frame == StackFrame(
        type_name="a.b",
        function_name="Foo",
        method_name="bar",
        file_name="/src/x.js",
        line_number=9,
        column_number=4,
        is_constructor=True,
        is_async=True,
    )


def test_parse_location_literals() -> None:
    """Location literals are file names without line numbers."""
    frame = parse_stack_frame("    at Array.forEach (native)")
    assert frame is not None
    assert frame.file_name == "native"
    assert frame.line_number is None
    assert frame.has_real_file is False


@parametrize(
    "line, file_name, position",
    [
        ("    at main (file:///home/dev/app.js:3:7)", "file:///home/dev/app.js", (2, 6)),
        ("    at main (file:///C:/src/a.js:10:5)", "file:///C:/src/a.js", (9, 4)),
        ("    at main (C:\\src\\a.js:10:5)", "C:\\src\\a.js", (9, 4)),
    ],
)
def test_parse_file_uris_and_drive_paths(
    line: str, file_name: str, position: tuple[int, int]
) -> None:
    """POSIX and Windows file URIs and drive paths keep their line and column."""
    frame = parse_stack_frame(line)
    assert frame is not None
    assert frame.file_name == file_name
    assert (frame.line_number, frame.column_number) == position
    assert format_stack_frame(frame) == line


def test_parse_eval_origin() -> None:
    """`eval at` positions nest the origin frame."""
    frame = parse_stack_frame("    at eval at run (/src/x.js:3:1)")
    assert frame == StackFrame(
        eval_origin=StackFrame(
            function_name="run", file_name="/src/x.js", line_number=2, column_number=0
        )
    )


def test_parse_eval_inside_location() -> None:
    """An eval origin can also appear as a frame's location."""
    frame = parse_stack_frame("    at foo (eval at bar (/src/x.js:1:2))")
    assert frame is not None
    assert frame.function_name == "foo"
    assert frame.file_name is None
    assert frame.eval_origin is not None
    assert frame.eval_origin.function_name == "bar"


@parametrize(
    "line",
    [
        "Error: Debug Failure. False expression.",
        "    at ",
        "  at foo (/x.js:1:1)",
        "    at relative/path.js:1:2",
        "    at foo (bad:location:here)",
        "",
    ],
)
def test_non_frame_lines(line: str) -> None:
    """Anything outside the grammar is not a frame."""
    assert parse_stack_frame(line) is None


def test_bare_rooted_location_is_a_frame() -> None:
    """A bare location is accepted when it is rooted."""
    frame = parse_stack_frame("    at /abs/path.js:4:2")
    assert frame == StackFrame(file_name="/abs/path.js", line_number=3, column_number=1)


@parametrize(
    "path, expected",
    [
        ("/usr/lib/x.js", True),
        ("C:/work/x.js", True),
        ("C:\\work\\x.js", True),
        ("file:///tmp/x.js", True),
        ("lib/x.js", False),
    ],
)
def test_is_rooted_disk_path(path: str, expected: bool) -> None:
    """Absolute POSIX/Windows paths and URLs are rooted."""
    assert is_rooted_disk_path(path) is expected


@parametrize(
    "line",
    [
        "    at Object.foo [as bar] (/a/b.js:10:5)",
        "    at async run (/a/b.js:1)",
        "    at new Widget (C:/ui/widget.js:7:3)",
        "    at Array.map (<anonymous>)",
        "    at eval at Runner.go (file:///a/b.js:1:2)",
        "    at foo (eval at bar (/a/b.js:1:2))",
        "    at /a/b.js:4:2",
    ],
)
def test_round_trip_examples(line: str) -> None:
    """Parsing then serializing reproduces the line byte for byte."""
    frame = parse_stack_frame(line)
    assert frame is not None
    assert format_stack_frame(frame) == line


def test_format_frame_without_location() -> None:
    """A frame with neither file nor eval origin is at an unknown location."""
    assert format_stack_frame(StackFrame(function_name="f")) == "    at f (unknown location)"


@given(line=s_frame_line())
def test_round_trip_property(line: str) -> None:
    """Every generated frame line survives parse → serialize unchanged."""
    frame = parse_stack_frame(line)
    assert frame is not None
    assert format_stack_frame(frame) == line
