# topmark:header:start
#
#   project      : Faultline
#   file         : __init__.py
#   file_relpath : src/faultline/config/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Configuration handling for Faultline.

Re-exports the immutable/mutable configuration pair from
[`faultline.config.model`][faultline.config.model]. Internal Python logging lives in
[`faultline.config.logging`][faultline.config.logging].
"""

from __future__ import annotations

from faultline.config.model import DebugConfig, MutableDebugConfig

__all__ = [
    "DebugConfig",
    "MutableDebugConfig",
]
