# topmark:header:start
#
#   project      : Faultline
#   file         : __init__.py
#   file_relpath : src/faultline/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Faultline package.

Faultline is the diagnostic instrumentation layer of a larger toolchain. It provides
fail-fast assertions, leveled logging, enum/bitmask formatting, deprecation
interception and a text-based stack-trace filter. The process-wide entry point is
[`faultline.debug.debug`][faultline.debug.debug].
"""

from __future__ import annotations
