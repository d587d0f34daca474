# topmark:header:start
#
#   project      : Faultline
#   file         : __init__.py
#   file_relpath : src/faultline/core/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Core primitives shared by the Faultline components."""

from __future__ import annotations
