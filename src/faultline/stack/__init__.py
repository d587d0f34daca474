# topmark:header:start
#
#   project      : Faultline
#   file         : __init__.py
#   file_relpath : src/faultline/stack/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Stack-trace parsing, rewriting and filtering."""

from __future__ import annotations

from faultline.stack.filter import FilterStackOptions, filter_stack
from faultline.stack.frames import StackFrame, format_stack_frame, parse_stack_frame

__all__ = [
    "FilterStackOptions",
    "StackFrame",
    "filter_stack",
    "format_stack_frame",
    "parse_stack_frame",
]
